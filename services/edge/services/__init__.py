"""
Services package.

Provides routing decisions and the origin integrations behind them.
"""

from .api_frontend import HttpApiFrontend, LocalFunctionFrontend
from .route_matcher import RouteMatcher
from .router import EdgeRouter
from .static_origin import FileSystemOrigin, S3Origin, StaticObject

__all__ = [
    "EdgeRouter",
    "FileSystemOrigin",
    "HttpApiFrontend",
    "LocalFunctionFrontend",
    "RouteMatcher",
    "S3Origin",
    "StaticObject",
]
