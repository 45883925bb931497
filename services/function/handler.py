"""
API function handler.

Pure (method, path, body, context) -> response mapping behind the API
frontend. Holds no state between invocations.
"""

import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .context import FunctionContext

logger = logging.getLogger("function.handler")

JSON_HEADERS: Dict[str, str] = {
    "content-type": "application/json",
    "access-control-allow-origin": "*",
    "cache-control": "no-store",
}

_SLASHES = re.compile(r"/{2,}")


@dataclass(frozen=True)
class FunctionResponse:
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=lambda: dict(JSON_HEADERS))

    def to_proxy_result(self) -> Dict[str, Any]:
        """HTTP API (payload 2.0) Lambda response."""
        return {"statusCode": self.status_code, "headers": dict(self.headers), "body": self.body}


def json_response(status_code: int, payload: Dict[str, Any]) -> FunctionResponse:
    return FunctionResponse(status_code=status_code, body=json.dumps(payload))


def now_ms() -> float:
    """Epoch milliseconds with sub-millisecond precision."""
    return time.time_ns() / 1_000_000


def normalize_path(path: Optional[str]) -> str:
    path = _SLASHES.sub("/", path or "/")
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def parse_json_body(body: Optional[str]) -> Any:
    """Malformed or absent bodies are treated as no payload."""
    if not body:
        return None
    try:
        return json.loads(body)
    except (TypeError, ValueError):
        logger.info("Ignoring malformed JSON body", extra={"body_length": len(body)})
        return None


def _diagnostics(method: str, path: str, context: FunctionContext, ts: float) -> Dict[str, Any]:
    return {
        "ok": True,
        "method": method,
        "path": path,
        "ts": ts,
        "region": context.region,
        "functionName": context.function_name,
        "memory": context.memory_limit_mb,
    }


def handle(
    method: str,
    path: str,
    body: Optional[str],
    context: FunctionContext,
    now: Callable[[], float] = now_ms,
) -> FunctionResponse:
    """
    Dispatch by path suffix, then method.

    | suffix | method | response                        |
    |--------|--------|---------------------------------|
    | /ping  | GET    | 200 diagnostics                 |
    | /echo  | POST   | 200 diagnostics + parsed body   |
    | other  | any    | 404 {ok: false, error, path}    |

    ``path`` in the payload is the raw path as received.
    """
    method = (method or "GET").upper()
    raw_path = path or "/"
    normalized = normalize_path(raw_path)
    logger.debug(
        f"Dispatching {method} {raw_path}",
        extra={"request_id": context.request_id, "normalized_path": normalized},
    )

    if normalized.endswith("/ping") and method == "GET":
        return json_response(200, _diagnostics(method, raw_path, context, now()))

    if normalized.endswith("/echo") and method == "POST":
        payload = _diagnostics(method, raw_path, context, now())
        payload["echo"] = parse_json_body(body)
        return json_response(200, payload)

    return json_response(
        404, {"ok": False, "error": "not found", "path": raw_path, "method": method}
    )
