import base64
from unittest.mock import patch

from services.edge.core.event_builder import V2HttpEventBuilder
from services.edge.models.http import EdgeRequest


def test_v2_event_builder_build():
    """V2HttpEventBuilder builds the HTTP API payload 2.0 structure."""
    builder = V2HttpEventBuilder()
    request = EdgeRequest(
        method="post",
        path="/api/echo",
        query_string="foo=bar&empty=",
        headers={
            "Content-Type": "application/json",
            "User-Agent": "test-agent",
            "X-Forwarded-For": "203.0.113.9, 10.0.0.1",
            "Cookie": "a=1; b=2",
            "Host": "d111.cloudfront.net",
        },
        body=b'{"key": "value"}',
    )

    with patch("services.edge.core.event_builder.get_request_id", return_value="test-req-id"):
        event = builder.build(request)

    assert event["version"] == "2.0"
    assert event["routeKey"] == "$default"
    assert event["rawPath"] == "/api/echo"
    assert event["rawQueryString"] == "foo=bar&empty="
    assert event["queryStringParameters"] == {"foo": "bar", "empty": ""}
    assert event["cookies"] == ["a=1", "b=2"]
    assert "cookie" not in event["headers"]
    assert event["headers"]["content-type"] == "application/json"
    assert event["body"] == '{"key": "value"}'
    assert event["isBase64Encoded"] is False

    context = event["requestContext"]
    assert context["requestId"] == "test-req-id"
    assert context["http"]["method"] == "POST"
    assert context["http"]["path"] == "/api/echo"
    assert context["http"]["sourceIp"] == "203.0.113.9"
    assert context["http"]["userAgent"] == "test-agent"
    assert context["domainName"] == "d111.cloudfront.net"
    assert context["domainPrefix"] == "d111"
    assert isinstance(context["timeEpoch"], int)


def test_v2_event_builder_binary_body():
    body = b"\x80\xff"
    event = V2HttpEventBuilder().build(EdgeRequest(method="POST", path="/api/echo", body=body))

    assert event["isBase64Encoded"] is True
    assert base64.b64decode(event["body"]) == body


def test_v2_event_builder_gzip_body_is_base64():
    body = b"compressed-bytes"
    event = V2HttpEventBuilder().build(
        EdgeRequest(
            method="POST", path="/api/echo", headers={"Content-Encoding": "gzip"}, body=body
        )
    )

    assert event["isBase64Encoded"] is True
    assert base64.b64decode(event["body"]) == body


def test_v2_event_builder_omits_empty_optionals():
    event = V2HttpEventBuilder().build(EdgeRequest(method="GET", path="/api/ping"))

    assert "body" not in event
    assert "cookies" not in event
    assert "queryStringParameters" not in event
    assert event["requestContext"]["requestId"]
