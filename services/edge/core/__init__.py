"""
Core logic package.

Provides shared logic for header policies, caching decisions and event building.
"""

from .cache import cache_key, normalize_path, resolve_ttl
from .event_builder import EventBuilder, V2HttpEventBuilder
from .headers import API_RESPONSE_HEADERS, SECURITY_HEADERS, forward_headers, preflight_headers
from .utils import parse_lambda_response

__all__ = [
    "API_RESPONSE_HEADERS",
    "SECURITY_HEADERS",
    "EventBuilder",
    "V2HttpEventBuilder",
    "cache_key",
    "forward_headers",
    "normalize_path",
    "parse_lambda_response",
    "preflight_headers",
    "resolve_ttl",
]
