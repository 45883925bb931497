from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from services.function.context import FunctionContext


def test_from_env():
    ctx = FunctionContext.from_env(
        {
            "AWS_REGION": "us-east-2",
            "AWS_LAMBDA_FUNCTION_NAME": "ApiFn",
            "AWS_LAMBDA_FUNCTION_MEMORY_SIZE": "1024",
        }
    )

    assert ctx.region == "us-east-2"
    assert ctx.function_name == "ApiFn"
    assert ctx.memory_limit_mb == 1024


def test_from_env_bad_memory_is_zero():
    ctx = FunctionContext.from_env({"AWS_LAMBDA_FUNCTION_MEMORY_SIZE": "lots"})

    assert ctx.memory_limit_mb == 0


def test_overrides_win():
    ctx = FunctionContext.from_env({"AWS_REGION": "us-east-2"}, region="local", memory_limit_mb=64)

    assert ctx.region == "local"
    assert ctx.memory_limit_mb == 64


def test_lambda_context_without_arn_keeps_env_region(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "sa-east-1")

    ctx = FunctionContext.from_lambda_context(SimpleNamespace(function_name="Fn"))

    assert ctx.region == "sa-east-1"
    assert ctx.function_name == "Fn"
    assert ctx.request_id is None


def test_context_is_read_only():
    ctx = FunctionContext(region="a")

    with pytest.raises(ValidationError):
        ctx.region = "b"


def test_lambda_context_supplies_request_id():
    ctx = FunctionContext.from_lambda_context(
        SimpleNamespace(function_name="Fn", aws_request_id="req-42", memory_limit_in_mb=256)
    )

    assert ctx.request_id == "req-42"
    assert ctx.memory_limit_mb == 256
