"""
Exception Handlers for FastAPI Application.

Application errors (``AppError`` subclasses) are answered with their own
status code and a structured body::

    {"success": false, "error": {"code": ..., "message": ..., "requestId": ...}}

Any other unhandled exception is logged with full request context and
answered with a 500 carrying an error id that clients can quote when
reporting issues.
"""

import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from toolflow_ai.core.errors import AppError
from toolflow_ai.core.logging_config import get_logger
from toolflow_ai.server.schemas import ErrorDetail, ErrorResponse

logger = get_logger(__name__)


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def _error_response(status_code: int, code: str, message: str, request: Request) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, request_id=_request_id(request)))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Answer an application error with its own status code.

    Client errors (4xx) are logged at warning level, server-side failures
    (planning, configuration) at error level.
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(f"[{_request_id(request)}] {type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    return _error_response(exc.status_code, exc.code, exc.message, request)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}" for err in exc.errors()
    )
    logger.warning(f"Invalid request to {request.method} {request.url.path}: {problems}")
    return _error_response(400, "VALIDATION_ERROR", f"Invalid request: {problems}", request)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    return _error_response(500, "INTERNAL_ERROR", f"Internal server error (error id {error_id})", request)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    This function should be called during application initialization to set up
    all custom exception handlers.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
