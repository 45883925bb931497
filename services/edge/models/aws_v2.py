# services/edge/models/aws_v2.py

"""
Pydantic models for the AWS HTTP API (payload format 2.0) Lambda event.

Reference: https://docs.aws.amazon.com/apigateway/latest/developerguide/http-api-develop-integrations-lambda.html

Used by the in-process API frontend to hand requests to the function backend
in the same shape the function receives behind a real HTTP API.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class HttpApiRequestHttp(BaseModel):
    """requestContext.http object."""

    method: str
    path: str
    protocol: str = "HTTP/1.1"
    sourceIp: str = "unknown"
    userAgent: str = ""


class HttpApiRequestContext(BaseModel):
    """HTTP API request context."""

    accountId: str = "anonymous"
    apiId: str = "local"
    domainName: str = "localhost"
    domainPrefix: str = "localhost"
    http: HttpApiRequestHttp
    requestId: str
    routeKey: str = "$default"
    stage: str = "$default"
    time: Optional[str] = None
    timeEpoch: int


class HttpApiEvent(BaseModel):
    """
    AWS HTTP API Lambda proxy event (version 2.0).

    Use model_dump(exclude_none=True) to convert to a dict.
    """

    version: str = "2.0"
    routeKey: str = "$default"
    rawPath: str
    rawQueryString: str = ""
    cookies: Optional[List[str]] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    queryStringParameters: Optional[Dict[str, str]] = None
    requestContext: HttpApiRequestContext
    body: Optional[str] = None
    isBase64Encoded: bool = False
