"""
API frontend.

Accepts requests under the API prefix and hands them to the function
backend, returning its response unchanged. Two transports:

- LocalFunctionFrontend: invokes the function in-process with an HTTP API
  (payload 2.0) event, bounded by the function timeout.
- HttpApiFrontend: forwards over HTTP to a deployed API base URL.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol

import httpx

from services.common.core.request_context import get_request_id, get_trace_id
from services.function.lambda_function import lambda_handler

from ..config import EdgeConfig
from ..core.event_builder import EventBuilder, V2HttpEventBuilder
from ..core.exceptions import BackendUnavailableError
from ..core.utils import api_error_response, parse_lambda_response
from ..models.http import EdgeRequest, EdgeResponse

logger = logging.getLogger("edge.api_frontend")

# Transport-level headers recomputed by the HTTP client on each hop.
_TRANSPORT_HEADERS = {"content-length", "transfer-encoding", "connection", "content-encoding"}


class ApiFrontend(Protocol):
    async def forward(self, request: EdgeRequest) -> EdgeResponse: ...


@dataclass
class LocalLambdaContext:
    """Subset of the Lambda runtime context object the function reads."""

    function_name: str
    memory_limit_in_mb: int
    invoked_function_arn: str
    aws_request_id: str
    timeout: float
    _started: float = field(default_factory=time.monotonic)

    def get_remaining_time_in_millis(self) -> int:
        remaining = self.timeout - (time.monotonic() - self._started)
        return max(0, int(remaining * 1000))


def _error(status_code: int, error: str) -> EdgeResponse:
    return EdgeResponse(**api_error_response(status_code, error))


class LocalFunctionFrontend:
    def __init__(
        self,
        edge_config: EdgeConfig,
        handler: Callable[[Dict[str, Any], Any], Any] = lambda_handler,
        event_builder: Optional[EventBuilder] = None,
    ):
        """
        Args:
            edge_config: supplies function name, region, memory and timeout
            handler: Lambda-style entrypoint ``(event, context) -> result``
            event_builder: defaults to V2HttpEventBuilder
        """
        self.config = edge_config
        self.handler = handler
        self.event_builder = event_builder or V2HttpEventBuilder()
        self.timeout = edge_config.FUNCTION_TIMEOUT

    def _lambda_context(self) -> LocalLambdaContext:
        name = self.config.FUNCTION_NAME
        return LocalLambdaContext(
            function_name=name,
            memory_limit_in_mb=self.config.FUNCTION_MEMORY_SIZE,
            invoked_function_arn=f"arn:aws:lambda:{self.config.AWS_REGION}:000000000000:function:{name}",
            aws_request_id=get_request_id() or str(uuid.uuid4()),
            timeout=self.timeout,
        )

    async def invoke(self, request: EdgeRequest) -> Any:
        """
        Run the handler in a worker thread.

        Raises:
            BackendUnavailableError: timeout (503) or handler failure (500)
        """
        event = self.event_builder.build(request)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.handler, event, self._lambda_context()),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise BackendUnavailableError(503, e) from e
        except Exception as e:
            raise BackendUnavailableError(500, e) from e

    async def forward(self, request: EdgeRequest) -> EdgeResponse:
        try:
            result = await self.invoke(request)
        except BackendUnavailableError as e:
            logger.error(
                f"Function invocation failed for {self.config.FUNCTION_NAME}",
                extra={
                    "function_name": self.config.FUNCTION_NAME,
                    "timeout": self.timeout,
                    "error_type": type(e.cause).__name__,
                    "error_detail": str(e.cause),
                },
            )
            label = "service unavailable" if e.status_code == 503 else "internal error"
            return _error(e.status_code, label)

        return EdgeResponse(**parse_lambda_response(result))


class HttpApiFrontend:
    def __init__(self, client: httpx.AsyncClient, base_url: str, timeout: float):
        """
        Args:
            client: shared httpx.AsyncClient
            base_url: deployed API base URL, e.g. https://abc.execute-api.region.amazonaws.com
            timeout: per-request bound (seconds)
        """
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, request: EdgeRequest) -> str:
        url = f"{self.base_url}{request.path}"
        if request.query_string:
            url = f"{url}?{request.query_string}"
        return url

    async def forward(self, request: EdgeRequest) -> EdgeResponse:
        url = self._url(request)
        headers = {k: v for k, v in request.headers.items() if k not in _TRANSPORT_HEADERS}
        trace_id = get_trace_id()
        if trace_id:
            headers["x-amzn-trace-id"] = trace_id

        try:
            response = await self.client.request(
                request.method,
                url,
                content=request.body or None,
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.error(
                f"API backend timed out: {request.method} {request.path}",
                extra={"target_url": url, "timeout": self.timeout, "error_detail": str(e)},
            )
            return _error(504, "gateway timeout")
        except httpx.RequestError as e:
            logger.error(
                f"API backend unreachable: {request.method} {request.path}",
                extra={
                    "target_url": url,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            return _error(502, "bad gateway")

        return EdgeResponse(
            status_code=response.status_code,
            headers={
                k: v for k, v in response.headers.items() if k.lower() not in _TRANSPORT_HEADERS
            },
            body=response.content,
        )
