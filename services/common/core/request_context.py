"""
RequestContext management.
Use ContextVar to share request and trace IDs across async execution.
"""

import secrets
import time
import uuid
from contextvars import ContextVar
from typing import Optional


# Context variable for Trace ID (X-Amzn-Trace-Id header format).
_trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
# Context variable for Request ID (UUID).
_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_trace_id() -> Optional[str]:
    """Get the current Trace ID."""
    return _trace_id_var.get()


def get_request_id() -> Optional[str]:
    """Get the current Request ID."""
    return _request_id_var.get()


def generate_request_id() -> str:
    """
    Generate and set a new Request ID (UUID) for the current context.
    """
    new_id = str(uuid.uuid4())
    _request_id_var.set(new_id)
    return new_id


def generate_trace_id() -> str:
    """
    New trace header value: Root=1-<8 hex epoch>-<24 hex random>;Sampled=1
    """
    root = f"1-{int(time.time()):08x}-{secrets.token_hex(12)}"
    return f"Root={root};Sampled=1"


def set_trace_id(trace_id_str: Optional[str]) -> str:
    """
    Set the Trace ID, generating one when the header is missing or has no Root.

    Args:
        trace_id_str: X-Amzn-Trace-Id header string

    Returns:
        The Trace ID string that was set
    """
    value = (trace_id_str or "").strip()
    if "Root=" not in value:
        value = generate_trace_id()
    _trace_id_var.set(value)
    return value


def clear_request_context() -> None:
    """Clear the Trace ID and Request ID context."""
    _trace_id_var.set(None)
    _request_id_var.set(None)
