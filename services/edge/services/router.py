"""
Edge router.

Classifies each request against the route table and dispatches it to the
static origin or the API frontend, applying the matched rule's policy:

    client -> EdgeRouter -> {StaticOrigin | ApiFrontend -> function} -> client

The route table is read-only after construction, so one router instance is
shared by all concurrent requests.
"""

import asyncio
import logging
from typing import Dict, Optional

from ..config import EdgeConfig
from ..core.cache import cache_key, normalize_path, resolve_ttl
from ..core.exceptions import MethodNotAllowedError, OriginError
from ..core.headers import SECURITY_HEADERS, forward_headers, preflight_headers
from ..models.http import EdgeRequest, EdgeResponse
from ..models.route_rule import (
    CachePolicy,
    ErrorResponseRule,
    HeaderForwardPolicy,
    ResponseHeadersPolicy,
    RouteRule,
    TargetOrigin,
    ViewerProtocolPolicy,
)
from .api_frontend import ApiFrontend
from .route_matcher import RouteMatcher
from .static_origin import StaticObject, StaticOrigin

logger = logging.getLogger("edge.router")


class EdgeRouter:
    def __init__(
        self,
        route_matcher: RouteMatcher,
        static_origin: StaticOrigin,
        api_frontend: ApiFrontend,
        edge_config: EdgeConfig,
    ):
        self.route_matcher = route_matcher
        self.static_origin = static_origin
        self.api_frontend = api_frontend
        self.config = edge_config
        self._error_responses: Dict[int, ErrorResponseRule] = {
            rule.http_status: rule for rule in route_matcher.error_responses
        }

    async def route(self, request: EdgeRequest) -> EdgeResponse:
        """
        Route one request.

        Raises:
            MethodNotAllowedError: method outside the matched rule's allowed set
            OriginError: static lookup failed and no error response applies
        """
        rule = self.route_matcher.match_route(request.path)

        redirect = self._enforce_viewer_protocol(rule, request)
        if redirect is not None:
            return redirect

        if rule.target_origin == TargetOrigin.API and request.method == "OPTIONS":
            return EdgeResponse(
                status_code=204,
                headers=preflight_headers(self.config.CORS_MAX_AGE),
                route=rule.path_pattern,
            )

        if request.method not in rule.allowed_methods:
            logger.info(
                f"Rejected {request.method} {request.path}",
                extra={"route": rule.path_pattern, "allowed": sorted(rule.allowed_methods)},
            )
            raise MethodNotAllowedError(request.method, rule.allowed_methods)

        if rule.target_origin == TargetOrigin.API:
            response = await self._route_api(rule, request)
        else:
            response = await self._route_static(rule, request)

        if rule.response_headers_policy == ResponseHeadersPolicy.SECURITY_HEADERS:
            for name, value in SECURITY_HEADERS.items():
                response.headers.setdefault(name, value)
        response.route = rule.path_pattern
        return response

    def _enforce_viewer_protocol(
        self, rule: RouteRule, request: EdgeRequest
    ) -> Optional[EdgeResponse]:
        if rule.viewer_protocol_policy == ViewerProtocolPolicy.ALLOW_ALL:
            return None
        if request.viewer_scheme == "https":
            return None

        if rule.viewer_protocol_policy == ViewerProtocolPolicy.HTTPS_ONLY:
            return EdgeResponse(
                status_code=403,
                headers={"content-type": "application/json"},
                body=b'{"message": "HTTPS required"}',
                route=rule.path_pattern,
            )

        host = request.header("host", "localhost")
        location = f"https://{host}{request.path}"
        if request.query_string:
            location = f"{location}?{request.query_string}"
        return EdgeResponse(
            status_code=301, headers={"location": location}, route=rule.path_pattern
        )

    # ------------------------------------------------------------------
    # API class
    # ------------------------------------------------------------------

    async def _route_api(self, rule: RouteRule, request: EdgeRequest) -> EdgeResponse:
        forwarded = request.model_copy(
            update={"headers": forward_headers(request.headers, rule.header_forward_policy)}
        )
        if rule.header_forward_policy == HeaderForwardPolicy.NONE:
            forwarded = forwarded.model_copy(update={"query_string": ""})

        response = await self.api_frontend.forward(forwarded)

        if rule.cache_policy == CachePolicy.DISABLED:
            response.cacheable = False
            response.ttl = 0
            response.cache_key = None
            response.headers.setdefault("cache-control", "no-store")
        return response

    # ------------------------------------------------------------------
    # Static class
    # ------------------------------------------------------------------

    def _static_key(self, rule: RouteRule, path: str) -> str:
        path = normalize_path(path)
        prefix = rule.prefix.rstrip("/")
        if prefix and path.startswith(prefix):
            path = path[len(prefix) :]
        key = path.lstrip("/")
        return key or self.route_matcher.default_root_object

    async def _fetch(self, key: str) -> StaticObject:
        return await asyncio.to_thread(self.static_origin.get, key)

    async def _route_static(self, rule: RouteRule, request: EdgeRequest) -> EdgeResponse:
        if request.method == "OPTIONS":
            return EdgeResponse(
                status_code=204, headers={"allow": ", ".join(sorted(rule.allowed_methods))}
            )

        key = self._static_key(rule, request.path)

        try:
            obj = await self._fetch(key)
        except OriginError as e:
            return await self._error_response(rule, request, key, e)

        response = EdgeResponse(
            status_code=200,
            headers={"content-type": obj.content_type},
            body=obj.body,
        )
        response.headers["content-length"] = str(len(obj.body))
        if obj.etag:
            response.headers["etag"] = obj.etag
        if obj.cache_control:
            response.headers["cache-control"] = obj.cache_control

        if rule.cache_policy == CachePolicy.OPTIMIZED_PUBLIC_CACHE:
            ttl = resolve_ttl(
                obj.cache_control, self.config.DEFAULT_TTL, self.config.MIN_TTL, self.config.MAX_TTL
            )
            response.ttl = ttl
            response.cacheable = ttl > 0
            response.cache_key = (
                cache_key(request.path, request.header("accept-encoding")) if ttl > 0 else None
            )
            response.headers.setdefault("cache-control", f"public, max-age={ttl}")
            response.headers["vary"] = "accept-encoding"
        else:
            response.headers.setdefault("cache-control", "no-store")

        if request.method == "HEAD":
            response.body = b""
        return response

    async def _error_response(
        self, rule: RouteRule, request: EdgeRequest, key: str, error: OriginError
    ) -> EdgeResponse:
        """
        SPA fallback: 403/404 become the default document with TTL 0.

        Other statuses, and misses on the fallback document itself, propagate.
        """
        mapping = self._error_responses.get(error.status_code)
        if mapping is None:
            raise error

        page_key = mapping.response_page_path.lstrip("/")
        if key == page_key:
            raise error

        try:
            page = await self._fetch(page_key)
        except OriginError:
            logger.warning(
                f"Fallback document '{page_key}' unavailable",
                extra={"path": request.path, "status": error.status_code},
            )
            raise error

        logger.debug(
            f"SPA fallback for {request.path}",
            extra={"path": request.path, "origin_status": error.status_code},
        )
        response = EdgeResponse(
            status_code=mapping.response_http_status,
            headers={
                "content-type": page.content_type,
                "content-length": str(len(page.body)),
                "cache-control": f"max-age={mapping.ttl}",
            },
            body=b"" if request.method == "HEAD" else page.body,
            cacheable=mapping.ttl > 0,
            ttl=mapping.ttl,
        )
        return response
