"""
Custom exception classes.

Represent errors raised while routing a request to an origin.
"""

import logging
from typing import Dict, Iterable, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..models.route_rule import TargetOrigin
from .headers import API_RESPONSE_HEADERS
from .utils import api_error_body

logger = logging.getLogger(__name__)


class EdgeError(Exception):
    """Base exception class for the edge router."""

    pass


class MethodNotAllowedError(EdgeError):
    """Raised when a method is outside the matched rule's allowed set."""

    def __init__(self, method: str, allowed: Iterable[str]):
        self.method = method
        self.allowed = sorted(allowed)
        super().__init__(f"Method {method} not allowed")


class OriginError(EdgeError):
    """Static origin answered with an error status."""

    def __init__(self, status_code: int, key: str, detail: str = ""):
        self.status_code = status_code
        self.key = key
        self.detail = detail or f"Origin error ({status_code})"
        super().__init__(f"Origin error ({status_code}) for {key!r}: {self.detail}")


class ObjectNotFoundError(OriginError):
    """Raised when the key does not exist in the static origin."""

    def __init__(self, key: str):
        super().__init__(404, key, "Not Found")


class ObjectAccessDeniedError(OriginError):
    """Raised when the static origin refuses access to a key."""

    def __init__(self, key: str):
        super().__init__(403, key, "Forbidden")


class BackendUnavailableError(EdgeError):
    """Function backend failed, timed out, or could not be reached."""

    def __init__(self, status_code: int, cause: Exception):
        self.status_code = status_code
        self.cause = cause
        super().__init__(f"Backend unavailable: {cause}")


# ===========================================
# Exception Handlers
# ===========================================


def _is_api_request(request: Request) -> bool:
    """True when the request path is served by an API rule."""
    router = getattr(request.app.state, "edge_router", None)
    if router is None:
        return False
    return router.route_matcher.match_route(request.url.path).target_origin == TargetOrigin.API


def _error_response(
    request: Request, status_code: int, message: str, headers: Optional[Dict[str, str]] = None
) -> Response:
    """
    Edge-synthesized error.

    API paths get the same shape and headers as function errors
    ({"ok": false, "error": ...}, no-store); other paths get {"message": ...}.
    """
    headers = dict(headers or {})
    if _is_api_request(request):
        headers.update(API_RESPONSE_HEADERS)
        return Response(
            content=api_error_body(message.lower()), status_code=status_code, headers=headers
        )
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def method_not_allowed_handler(request: Request, exc: MethodNotAllowedError):
    return _error_response(
        request,
        status.HTTP_405_METHOD_NOT_ALLOWED,
        "Method Not Allowed",
        headers={"Allow": ", ".join(exc.allowed)},
    )


async def origin_error_handler(request: Request, exc: OriginError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.

    The response body never carries exception details.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )
    if _is_api_request(request):
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return _error_response(
        request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for validation errors.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Validation Error", "detail": str(exc.errors())},
    )
