"""
Header policies applied by the edge router.
"""

from typing import Dict, Mapping

from ..models.route_rule import HeaderForwardPolicy

# Headers every API response carries.
API_RESPONSE_HEADERS: Dict[str, str] = {
    "content-type": "application/json",
    "access-control-allow-origin": "*",
    "cache-control": "no-store",
}

# Managed security-headers response policy.
SECURITY_HEADERS: Dict[str, str] = {
    "strict-transport-security": "max-age=31536000",
    "x-content-type-options": "nosniff",
    "x-frame-options": "SAMEORIGIN",
    "referrer-policy": "strict-origin-when-cross-origin",
    "x-xss-protection": "1; mode=block",
}


def preflight_headers(max_age: int) -> Dict[str, str]:
    """CORS preflight grant: any origin, any method, any header."""
    headers = dict(API_RESPONSE_HEADERS)
    headers.update(
        {
            "access-control-allow-methods": "*",
            "access-control-allow-headers": "*",
            "access-control-max-age": str(max_age),
        }
    )
    return headers


def forward_headers(headers: Mapping[str, str], policy: HeaderForwardPolicy) -> Dict[str, str]:
    """
    Select the viewer headers forwarded to an origin.

    AllExceptHost keeps everything but the hop-by-hop Host header.
    """
    if policy == HeaderForwardPolicy.NONE:
        return {}
    return {k.lower(): v for k, v in headers.items() if k.lower() != "host"}
