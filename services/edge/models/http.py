"""
Edge request/response models.

Decouples the routing layer from FastAPI's Request and Response objects.
"""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EdgeRequest(BaseModel):
    """
    An inbound viewer request. Immutable once received.

    Header names are stored lower-cased so lookups are case-insensitive.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    headers: Dict[str, str] = Field(default_factory=dict)
    query_string: str = ""
    body: bytes = b""
    scheme: str = "https"

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    @field_validator("headers", mode="before")
    @classmethod
    def _lower_headers(cls, value):
        return {str(k).lower(): str(v) for k, v in (value or {}).items()}

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    @property
    def viewer_scheme(self) -> str:
        """Scheme the viewer used, honoring a terminating proxy's x-forwarded-proto."""
        forwarded = self.header("x-forwarded-proto")
        if forwarded:
            return forwarded.split(",")[0].strip().lower()
        return self.scheme.lower()


class EdgeResponse(BaseModel):
    """
    Response returned by the router, with the caching decision attached.
    """

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    cacheable: bool = False
    ttl: int = 0
    cache_key: Optional[Tuple[str, str]] = None
    route: Optional[str] = None

    @field_validator("headers", mode="before")
    @classmethod
    def _lower_headers(cls, value):
        return {str(k).lower(): str(v) for k, v in (value or {}).items()}

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)
