"""
Route rule models.

Declarative per-path policy used by the edge router: which origin serves a
path, which methods are accepted, and how caching and headers are handled.
"""

from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CATCH_ALL_PATTERNS = ("*", "/*", "default")


class CachePolicy(str, Enum):
    DISABLED = "Disabled"
    OPTIMIZED_PUBLIC_CACHE = "OptimizedPublicCache"


class HeaderForwardPolicy(str, Enum):
    NONE = "None"
    ALL_EXCEPT_HOST = "AllExceptHost"


class TargetOrigin(str, Enum):
    STATIC = "static"
    API = "api"


class ViewerProtocolPolicy(str, Enum):
    ALLOW_ALL = "allow-all"
    REDIRECT_TO_HTTPS = "redirect-to-https"
    HTTPS_ONLY = "https-only"


class ResponseHeadersPolicy(str, Enum):
    NONE = "None"
    SECURITY_HEADERS = "SecurityHeaders"


# Named method sets, as accepted in routing.yml.
METHOD_PRESETS = {
    "ALLOW_GET_HEAD": frozenset({"GET", "HEAD"}),
    "ALLOW_GET_HEAD_OPTIONS": frozenset({"GET", "HEAD", "OPTIONS"}),
    "ALLOW_ALL": frozenset({"GET", "HEAD", "OPTIONS", "PUT", "PATCH", "POST", "DELETE"}),
}


class RouteRule(BaseModel):
    """
    A (pattern, methods, cache policy, header policy, target) tuple.

    ``path_pattern`` is either a catch-all (``*`` / ``default``) or a glob whose
    only wildcard is a trailing ``*`` (e.g. ``/api/*``).
    """

    model_config = ConfigDict(frozen=True)

    path_pattern: str
    target_origin: TargetOrigin
    allowed_methods: FrozenSet[str] = METHOD_PRESETS["ALLOW_GET_HEAD_OPTIONS"]
    cache_policy: CachePolicy = CachePolicy.OPTIMIZED_PUBLIC_CACHE
    header_forward_policy: HeaderForwardPolicy = HeaderForwardPolicy.NONE
    viewer_protocol_policy: ViewerProtocolPolicy = ViewerProtocolPolicy.ALLOW_ALL
    response_headers_policy: ResponseHeadersPolicy = ResponseHeadersPolicy.NONE

    @field_validator("allowed_methods", mode="before")
    @classmethod
    def _expand_methods(cls, value):
        if isinstance(value, str):
            if value in METHOD_PRESETS:
                return METHOD_PRESETS[value]
            return frozenset({value.upper()})
        return frozenset(m.upper() for m in value)

    @field_validator("path_pattern")
    @classmethod
    def _normalize_pattern(cls, value: str) -> str:
        value = value.strip()
        if value in CATCH_ALL_PATTERNS:
            return "*"
        if "*" in value[:-1]:
            raise ValueError(f"Only a trailing wildcard is supported: {value!r}")
        if not value.startswith("/"):
            value = "/" + value
        return value

    @property
    def is_catch_all(self) -> bool:
        return self.path_pattern == "*"

    @property
    def prefix(self) -> str:
        """Literal part of the pattern, without the trailing wildcard."""
        if self.is_catch_all:
            return ""
        return self.path_pattern.rstrip("*")

    def matches(self, path: str) -> bool:
        if self.is_catch_all:
            return True
        if self.path_pattern.endswith("*"):
            prefix = self.prefix
            # "/api/*" also covers the bare "/api"
            return path.startswith(prefix) or path == prefix.rstrip("/")
        return path == self.path_pattern


class ErrorResponseRule(BaseModel):
    """Rewrites an origin error status into a document served from the static origin."""

    model_config = ConfigDict(frozen=True)

    http_status: int
    response_http_status: int = 200
    response_page_path: str = "/index.html"
    ttl: int = Field(default=0, ge=0)


class RoutingConfig(BaseModel):
    """Contents of routing.yml."""

    routes: List[RouteRule] = Field(default_factory=list)
    error_responses: List[ErrorResponseRule] = Field(default_factory=list)
    default_root_object: Optional[str] = None
