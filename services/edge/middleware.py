"""
Where: services/edge/middleware.py
What: HTTP middleware for request/trace ID propagation and access logging.
Why: Isolate cross-cutting request concerns from app assembly.
"""

import logging
import time

from fastapi import Request

from services.common.core.request_context import (
    clear_request_context,
    generate_request_id,
    set_trace_id,
)

logger = logging.getLogger("edge.access")

REQUEST_ID_HEADER = "x-edge-request-id"
TRACE_ID_HEADER = "X-Amzn-Trace-Id"


async def request_context_middleware(request: Request, call_next):
    """Assign request/trace IDs, echo them on the response, write one access log line."""
    start_time = time.perf_counter()

    trace_id = set_trace_id(request.headers.get(TRACE_ID_HEADER))
    req_id = generate_request_id()

    try:
        response = await call_next(request)
        response.headers[TRACE_ID_HEADER] = trace_id
        response.headers[REQUEST_ID_HEADER] = req_id

        latency_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
                "status": response.status_code,
                "latency_ms": latency_ms,
                "user_agent": request.headers.get("user-agent"),
                "client_ip": request.client.host if request.client else None,
            },
        )
        return response
    finally:
        clear_request_context()
