import base64
import logging
import time
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict
from urllib.parse import parse_qsl

from services.common.core.request_context import get_request_id
from services.edge.models.aws_v2 import HttpApiEvent, HttpApiRequestContext, HttpApiRequestHttp
from services.edge.models.http import EdgeRequest

logger = logging.getLogger("edge.event_builder")


class EventBuilder(ABC):
    @abstractmethod
    def build(self, request: EdgeRequest) -> Dict[str, Any]:
        """
        Build an event dictionary from a forwarded request.
        """
        pass


class V2HttpEventBuilder(EventBuilder):
    """HTTP API (payload format 2.0) compatible event builder."""

    def build(self, request: EdgeRequest) -> Dict[str, Any]:
        """
        Build an HTTP API Lambda proxy event from the request the router forwards.

        Headers arrive already filtered by the route's forward policy.
        """
        body = request.body
        is_base64 = "gzip" in request.header("content-encoding", "").lower()

        if not body:
            body_content = None
        elif is_base64:
            body_content = base64.b64encode(body).decode("utf-8")
        else:
            try:
                body_content = body.decode("utf-8")
            except UnicodeDecodeError:
                body_content = base64.b64encode(body).decode("utf-8")
                is_base64 = True

        query_params = dict(parse_qsl(request.query_string, keep_blank_values=True))
        cookies = [c.strip() for c in request.header("cookie", "").split(";") if c.strip()]
        headers = {k: v for k, v in request.headers.items() if k != "cookie"}

        now = time.time()
        request_id = get_request_id() or str(uuid.uuid4())
        host = request.header("host", "localhost")

        event_model = HttpApiEvent(
            rawPath=request.path,
            rawQueryString=request.query_string,
            cookies=cookies or None,
            headers=headers,
            queryStringParameters=query_params or None,
            requestContext=HttpApiRequestContext(
                domainName=host,
                domainPrefix=host.split(".")[0],
                http=HttpApiRequestHttp(
                    method=request.method,
                    path=request.path,
                    sourceIp=request.header("x-forwarded-for", "unknown").split(",")[0].strip(),
                    userAgent=request.header("user-agent", ""),
                ),
                requestId=request_id,
                time=datetime.fromtimestamp(now, tz=timezone.utc).strftime("%d/%b/%Y:%H:%M:%S +0000"),
                timeEpoch=int(now * 1000),
            ),
            body=body_content,
            isBase64Encoded=is_base64,
        )

        return event_model.model_dump(exclude_none=True)
