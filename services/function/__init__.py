"""
API function package.

Stateless compute behind the API prefix: the pure handler and its Lambda
entrypoint.
"""

from .context import FunctionContext
from .handler import FunctionResponse, handle
from .lambda_function import lambda_handler

__all__ = ["FunctionContext", "FunctionResponse", "handle", "lambda_handler"]
