"""
Dependency Injection for the edge API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..models.http import EdgeRequest
from ..services.router import EdgeRouter


# ==========================================
# 1. Service Accessors
# ==========================================


def get_edge_router(request: Request) -> EdgeRouter:
    return request.app.state.edge_router


EdgeRouterDep = Annotated[EdgeRouter, Depends(get_edge_router)]


# ==========================================
# 2. Request Conversion
# ==========================================


async def build_edge_request(request: Request) -> EdgeRequest:
    """
    Snapshot the incoming FastAPI request as an immutable EdgeRequest.

    Repeated headers are joined with ", ".
    """
    headers = {}
    for name, value in request.headers.items():
        headers[name] = f"{headers[name]}, {value}" if name in headers else value

    return EdgeRequest(
        method=request.method,
        path=request.url.path,
        headers=headers,
        query_string=request.url.query,
        body=await request.body(),
        scheme=request.url.scheme,
    )


EdgeRequestDep = Annotated[EdgeRequest, Depends(build_edge_request)]
