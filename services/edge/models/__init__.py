"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .aws_v2 import HttpApiEvent
from .http import EdgeRequest, EdgeResponse
from .route_rule import (
    CachePolicy,
    ErrorResponseRule,
    HeaderForwardPolicy,
    ResponseHeadersPolicy,
    RouteRule,
    RoutingConfig,
    TargetOrigin,
    ViewerProtocolPolicy,
)

__all__ = [
    "CachePolicy",
    "EdgeRequest",
    "EdgeResponse",
    "ErrorResponseRule",
    "HeaderForwardPolicy",
    "HttpApiEvent",
    "ResponseHeadersPolicy",
    "RouteRule",
    "RoutingConfig",
    "TargetOrigin",
    "ViewerProtocolPolicy",
]
