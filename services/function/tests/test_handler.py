import json

import pytest

from services.function.context import FunctionContext
from services.function.handler import JSON_HEADERS, handle, normalize_path, parse_json_body


@pytest.fixture
def context():
    return FunctionContext(region="eu-west-1", function_name="ApiFn", memory_limit_mb=128)


def _clock(*values):
    it = iter(values)
    return lambda: next(it)


def test_ping_returns_diagnostics(context):
    response = handle("GET", "/api/ping", None, context, now=_clock(1700000000000.5))

    assert response.status_code == 200
    assert response.headers == JSON_HEADERS
    assert json.loads(response.body) == {
        "ok": True,
        "method": "GET",
        "path": "/api/ping",
        "ts": 1700000000000.5,
        "region": "eu-west-1",
        "functionName": "ApiFn",
        "memory": 128,
    }


def test_echo_includes_parsed_body(context):
    response = handle("POST", "/api/echo", '{"a": [1, 2]}', context)

    body = json.loads(response.body)
    assert response.status_code == 200
    assert body["ok"] is True
    assert body["echo"] == {"a": [1, 2]}


@pytest.mark.parametrize("raw", [None, "", "{", "not json"])
def test_echo_without_valid_json_is_null(context, raw):
    body = json.loads(handle("POST", "/api/echo", raw, context).body)

    assert body["ok"] is True
    assert body["echo"] is None


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/api/unknown"),
        ("POST", "/api/ping"),
        ("GET", "/api/echo"),
        ("DELETE", "/api/ping"),
        ("GET", "/api/pings"),
    ],
)
def test_unmatched_routes_are_404(context, method, path):
    response = handle(method, path, None, context)

    assert response.status_code == 404
    assert json.loads(response.body) == {
        "ok": False,
        "error": "not found",
        "path": path,
        "method": method,
    }
    assert response.headers["cache-control"] == "no-store"


def test_suffix_match_keeps_raw_path(context):
    response = handle("GET", "/api//v1/ping/", None, context)

    assert response.status_code == 200
    assert json.loads(response.body)["path"] == "/api//v1/ping/"


def test_method_is_case_insensitive(context):
    response = handle("get", "/api/ping", None, context)

    assert response.status_code == 200
    assert json.loads(response.body)["method"] == "GET"


def test_missing_context_values_serialize_as_null():
    body = json.loads(handle("GET", "/ping", None, FunctionContext()).body)

    assert body["region"] is None
    assert body["functionName"] is None
    assert body["memory"] == 0


def test_handler_is_stateless(context):
    clock = _clock(1.0, 2.0)

    first = json.loads(handle("GET", "/api/ping", None, context, now=clock).body)
    second = json.loads(handle("GET", "/api/ping", None, context, now=clock).body)

    assert first.pop("ts") < second.pop("ts")
    assert first == second


@pytest.mark.parametrize(
    "raw, expected",
    [("", "/"), ("api/ping", "/api/ping"), ("/a//b/", "/a/b"), ("/", "/")],
)
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


def test_parse_json_body_scalars():
    assert parse_json_body("3") == 3
    assert parse_json_body('"x"') == "x"


def test_dispatch_log_carries_request_id(caplog):
    context = FunctionContext(region="eu-west-1", request_id="req-7")

    with caplog.at_level("DEBUG", logger="function.handler"):
        handle("GET", "/api/ping", None, context)

    assert [r.request_id for r in caplog.records if r.name == "function.handler"] == ["req-7"]
