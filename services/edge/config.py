"""
Edge router configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from pydantic import Field, field_validator
from services.common.core.config import BaseAppConfig


class EdgeConfig(BaseAppConfig):
    """
    Configuration management for the edge router.
    """

    # Server settings
    UVICORN_BIND_ADDR: str = Field(default="0.0.0.0:8000", description="Listen address")

    # Routing
    ROUTING_CONFIG_PATH: str = Field(
        default="config/routing.yml", description="Route rule definition file path"
    )
    API_PREFIX: str = Field(default="/api", description="Path prefix forwarded to the function")
    DEFAULT_DOCUMENT: str = Field(default="index.html", description="SPA default document")

    # Static origin: a bucket when STATIC_BUCKET is set, otherwise a local directory.
    STATIC_ROOT: str = Field(default="build", description="Local directory of the site bundle")
    STATIC_BUCKET: str = Field(default="", description="S3 bucket holding the site bundle")
    S3_ENDPOINT: str = Field(default="", description="S3-compatible endpoint override")

    # API frontend: remote HTTP API when set, otherwise the in-process function.
    API_BACKEND_URL: str = Field(default="", description="Base URL of a remote HTTP API")

    # Caching (OptimizedPublicCache)
    DEFAULT_TTL: int = Field(default=86400, ge=0, description="TTL when origin sends none")
    MIN_TTL: int = Field(default=1, ge=0, description="Lower TTL bound (seconds)")
    MAX_TTL: int = Field(default=31536000, ge=0, description="Upper TTL bound (seconds)")
    CORS_MAX_AGE: int = Field(default=86400, ge=0, description="Preflight max-age (seconds)")

    # Deployment outputs (informational only)
    STATIC_STORE_ID: str = Field(default="", description="Static store identifier")
    DISTRIBUTION_ID: str = Field(default="", description="Distribution identifier")
    DISTRIBUTION_DOMAIN: str = Field(default="", description="Distribution domain name")

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")

    @field_validator("API_PREFIX")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = "/" + value.strip("/")
        if value == "/":
            raise ValueError("API_PREFIX must not be the site root")
        return value

    # model_config is inherited


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = EdgeConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
