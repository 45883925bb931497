"""
Cache key and TTL computation for the OptimizedPublicCache policy.
"""

import posixpath
import re
from typing import Optional, Tuple

_MAX_AGE_RE = re.compile(r"(?:^|,)\s*(s-maxage|max-age)\s*=\s*(\d+)", re.IGNORECASE)
_NO_STORE_RE = re.compile(r"(?:^|,)\s*(no-store|private)\s*(?:,|$)", re.IGNORECASE)


def normalize_path(path: str) -> str:
    """
    Collapse duplicate slashes and dot segments, keeping a leading slash.

    Example: "//assets/./app.js" -> "/assets/app.js"
    """
    if not path:
        return "/"
    trailing = path.endswith("/") and path != "/"
    normalized = posixpath.normpath("/" + path.lstrip("/"))
    # posixpath keeps a leading "//"
    normalized = "/" + normalized.lstrip("/")
    if trailing and normalized != "/":
        normalized += "/"
    return normalized


def normalize_accept_encoding(value: Optional[str]) -> str:
    """Reduce accept-encoding to the variant actually cached: br, gzip, or identity."""
    if not value:
        return "identity"
    encodings = {part.split(";")[0].strip().lower() for part in value.split(",")}
    if "br" in encodings:
        return "br"
    if "gzip" in encodings:
        return "gzip"
    return "identity"


def cache_key(path: str, accept_encoding: Optional[str]) -> Tuple[str, str]:
    return normalize_path(path), normalize_accept_encoding(accept_encoding)


def resolve_ttl(cache_control: Optional[str], default_ttl: int, min_ttl: int, max_ttl: int) -> int:
    """
    TTL honoring the origin's cache-control, clamped into [min_ttl, max_ttl].

    s-maxage wins over max-age; no-store/private mean the response is not shared.
    """
    if not cache_control:
        return default_ttl
    if _NO_STORE_RE.search(cache_control):
        return 0

    directives = {name.lower(): int(value) for name, value in _MAX_AGE_RE.findall(cache_control)}
    ttl = directives.get("s-maxage", directives.get("max-age"))
    if ttl is None:
        return default_ttl
    return max(min_ttl, min(ttl, max_ttl))
