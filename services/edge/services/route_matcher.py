"""
Route matching service.

Loads routing.yml and resolves the route rule serving a request path.

Note:
    Provides functionality different from FastAPI's APIRouter.
    FastAPI only sees a single catch-all endpoint; this module decides which
    origin and policy apply to each path.
"""

import logging
from typing import List, Optional

import yaml
from pydantic import ValidationError

from ..config import config
from ..models.route_rule import (
    CachePolicy,
    ErrorResponseRule,
    HeaderForwardPolicy,
    ResponseHeadersPolicy,
    RouteRule,
    RoutingConfig,
    TargetOrigin,
    METHOD_PRESETS,
)

logger = logging.getLogger(__name__)


def default_routing_config(api_prefix: str, default_document: str) -> RoutingConfig:
    """
    Built-in table: the API prefix goes to the function, everything else to
    the static bundle with SPA fallback on 403/404.
    Viewer protocol is left at allow-all for local runs; config/routing.yml
    redirects plain HTTP.
    """
    return RoutingConfig(
        routes=[
            RouteRule(
                path_pattern=f"{api_prefix.rstrip('/')}/*",
                target_origin=TargetOrigin.API,
                allowed_methods=METHOD_PRESETS["ALLOW_ALL"],
                cache_policy=CachePolicy.DISABLED,
                header_forward_policy=HeaderForwardPolicy.ALL_EXCEPT_HOST,
            ),
            RouteRule(
                path_pattern="*",
                target_origin=TargetOrigin.STATIC,
                allowed_methods=METHOD_PRESETS["ALLOW_GET_HEAD_OPTIONS"],
                cache_policy=CachePolicy.OPTIMIZED_PUBLIC_CACHE,
                header_forward_policy=HeaderForwardPolicy.NONE,
                response_headers_policy=ResponseHeadersPolicy.SECURITY_HEADERS,
            ),
        ],
        error_responses=[
            ErrorResponseRule(http_status=403, response_page_path=f"/{default_document}"),
            ErrorResponseRule(http_status=404, response_page_path=f"/{default_document}"),
        ],
        default_root_object=default_document,
    )


def order_rules(rules: List[RouteRule]) -> List[RouteRule]:
    """
    Most specific pattern first; the catch-all static rule always closes the table.
    """
    catch_all = [r for r in rules if r.is_catch_all]
    specific = [r for r in rules if not r.is_catch_all]
    # Exact patterns outrank globs sharing the same literal prefix.
    specific.sort(key=lambda r: (len(r.prefix), not r.path_pattern.endswith("*")), reverse=True)

    if len(catch_all) > 1:
        logger.warning(f"{len(catch_all)} catch-all rules defined, using the first one")
    if not catch_all or catch_all[0].target_origin != TargetOrigin.STATIC:
        if catch_all:
            logger.warning("Catch-all rule does not target the static origin, replacing it")
        catch_all = [
            RouteRule(
                path_pattern="*",
                target_origin=TargetOrigin.STATIC,
                response_headers_policy=ResponseHeadersPolicy.SECURITY_HEADERS,
            )
        ]
    return specific + catch_all[:1]


class RouteMatcher:
    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: routing.yml path (defaults to ROUTING_CONFIG_PATH)
        """
        self.config_path = config_path or config.ROUTING_CONFIG_PATH
        self._routing = default_routing_config(config.API_PREFIX, config.DEFAULT_DOCUMENT)
        self._rules: List[RouteRule] = order_rules(self._routing.routes)

    @classmethod
    def from_config(cls, routing: RoutingConfig) -> "RouteMatcher":
        matcher = cls.__new__(cls)
        matcher.config_path = None
        matcher._routing = routing
        matcher._rules = order_rules(routing.routes)
        return matcher

    @property
    def rules(self) -> List[RouteRule]:
        return list(self._rules)

    @property
    def error_responses(self) -> List[ErrorResponseRule]:
        return list(self._routing.error_responses)

    @property
    def default_root_object(self) -> str:
        return self._routing.default_root_object or config.DEFAULT_DOCUMENT

    def load_routing_config(self) -> List[RouteRule]:
        """
        Load routing.yml. Missing or broken files keep the built-in table.
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            routing = RoutingConfig.model_validate(raw)
        except FileNotFoundError:
            logger.warning(
                f"Routing config not found at {self.config_path}, using built-in routes"
            )
            return self.rules
        except (yaml.YAMLError, ValidationError) as e:
            logger.error(f"Error parsing routing config: {e}")
            return self.rules

        if not routing.routes:
            routing.routes = self._routing.routes
        if not routing.error_responses and "error_responses" not in raw:
            routing.error_responses = self._routing.error_responses

        self._routing = routing
        self._rules = order_rules(routing.routes)
        logger.info(f"Loaded {len(self._rules)} routes from {self.config_path}")
        return self.rules

    def match_route(self, request_path: str) -> RouteRule:
        """
        Resolve the rule for a request path. The catch-all guarantees a match.
        """
        for rule in self._rules:
            if rule.matches(request_path):
                return rule
        # order_rules always appends a catch-all
        raise LookupError(f"No route for {request_path}")
