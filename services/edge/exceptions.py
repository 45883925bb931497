"""
Where: services/edge/exceptions.py
What: Exception handler registration for the edge app.
Why: Keep error handling setup isolated from route and lifecycle concerns.
"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import (
    MethodNotAllowedError,
    OriginError,
    global_exception_handler,
    http_exception_handler,
    method_not_allowed_handler,
    origin_error_handler,
    validation_exception_handler,
)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(MethodNotAllowedError, method_not_allowed_handler)
    app.add_exception_handler(OriginError, origin_error_handler)
