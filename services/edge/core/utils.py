"""
Edge Utility Module
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict

from .headers import API_RESPONSE_HEADERS

logger = logging.getLogger("edge.utils")


def api_error_body(error: str) -> bytes:
    return json.dumps({"ok": False, "error": error}).encode("utf-8")


def parse_lambda_response(result: Any) -> Dict[str, Any]:
    """
    Convert a Lambda result into edge response data.

    Payload 2.0 semantics: a dict carrying ``statusCode`` is a proxy response;
    anything else is serialized as a 200 JSON body.

    Returns:
        {"status_code": int, "headers": dict, "body": bytes}
    """
    if isinstance(result, dict) and "statusCode" in result:
        status_code = int(result.get("statusCode") or 200)
        headers = {str(k).lower(): str(v) for k, v in (result.get("headers") or {}).items()}
        body = result.get("body")

        if body is None:
            content = b""
        elif result.get("isBase64Encoded"):
            try:
                content = base64.b64decode(body)
            except (binascii.Error, TypeError):
                logger.warning(
                    "Failed to decode base64 Lambda response body. Returning as text.",
                    extra={"status_code": status_code},
                )
                content = str(body).encode("utf-8")
        elif isinstance(body, str):
            content = body.encode("utf-8")
        else:
            content = json.dumps(body).encode("utf-8")

        return {"status_code": status_code, "headers": headers, "body": content}

    return {
        "status_code": 200,
        "headers": {"content-type": "application/json"},
        "body": json.dumps(result).encode("utf-8"),
    }


def api_error_response(status_code: int, error: str) -> Dict[str, Any]:
    """Structured error produced by the API frontend itself."""
    return {
        "status_code": status_code,
        "headers": dict(API_RESPONSE_HEADERS),
        "body": api_error_body(error),
    }
