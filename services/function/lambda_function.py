"""
Lambda entrypoint for the API function (HTTP API payload format 2.0).
"""

import base64
import binascii
import logging

from .context import FunctionContext
from .handler import handle, json_response

logger = logging.getLogger("function.lambda")


def _decode_body(event: dict):
    body = event.get("body")
    if body is None or not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        # Undecodable bytes are as good as malformed JSON.
        return None


def lambda_handler(event, context):
    event = event or {}
    raw_path = event.get("rawPath") or "/"
    method = ((event.get("requestContext") or {}).get("http") or {}).get("method") or "GET"

    try:
        function_context = FunctionContext.from_lambda_context(context)
        response = handle(method, raw_path, _decode_body(event), function_context)
    except Exception:
        logger.exception("Unhandled error in API function", extra={"path": raw_path})
        response = json_response(500, {"ok": False, "error": "internal error"})

    logger.info(
        f"{method} {raw_path} {response.status_code}",
        extra={
            "method": method,
            "path": raw_path,
            "status": response.status_code,
            "request_id": getattr(context, "aws_request_id", None),
        },
    )
    return response.to_proxy_result()
