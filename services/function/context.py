"""
Function invocation context.

Backend-environment metadata handed to the handler explicitly at invocation
time instead of being read from ambient globals.
"""

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict


class FunctionContext(BaseModel):
    """Read-only metadata the handler may echo back for diagnostics."""

    model_config = ConfigDict(frozen=True)

    region: Optional[str] = None
    function_name: Optional[str] = None
    memory_limit_mb: int = 0
    request_id: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "FunctionContext":
        """Build from the Lambda runtime environment variables."""
        env = os.environ if environ is None else environ
        try:
            memory = int(env.get("AWS_LAMBDA_FUNCTION_MEMORY_SIZE") or 0)
        except ValueError:
            memory = 0
        values = {
            "region": env.get("AWS_REGION"),
            "function_name": env.get("AWS_LAMBDA_FUNCTION_NAME"),
            "memory_limit_mb": memory,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_lambda_context(cls, lambda_context: Any) -> "FunctionContext":
        """Prefer the runtime's context object, falling back to the environment."""
        base = cls.from_env()
        if lambda_context is None:
            return base

        memory = getattr(lambda_context, "memory_limit_in_mb", None)
        # arn:aws:lambda:<region>:<account>:function:<name>
        arn_parts = str(getattr(lambda_context, "invoked_function_arn", "") or "").split(":")
        region = arn_parts[3] if len(arn_parts) > 3 and arn_parts[3] else base.region
        return base.model_copy(
            update={
                "region": region,
                "function_name": getattr(lambda_context, "function_name", None)
                or base.function_name,
                "memory_limit_mb": int(memory) if memory else base.memory_limit_mb,
                "request_id": getattr(lambda_context, "aws_request_id", None),
            }
        )
