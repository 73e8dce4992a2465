"""Exception handlers producing the JSON error envelope.

Every error body has the shape ``{"error", "message", "path"}``; request
validation failures add ``details``.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clinic_api.core.exceptions import AppException

logger = structlog.get_logger()


def error_response(
    request: Request, status_code: int, error: str, message, **extra
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "path": str(request.url), **extra},
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Answer with the status carried by a service error."""
    logger.info("request_rejected", error=exc.__class__.__name__, status_code=exc.status_code)
    return error_response(request, exc.status_code, exc.__class__.__name__, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions raised by routing (unknown path, wrong method)."""
    return error_response(request, exc.status_code, "HTTPException", exc.detail)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Stringify error context, which may hold the raised ValueError."""
    errors = []
    for error in exc.errors():
        error = dict(error)
        ctx = error.get("ctx")
        if ctx:
            error["ctx"] = {key: str(value) for key, value in ctx.items()}
        errors.append(error)
    return errors


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle request body and parameter validation errors.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        422 response listing the offending fields
    """
    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "ValidationError",
        "Request validation failed",
        details=jsonable_errors(exc),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected failure and answer with a generic 500."""
    logger.error("unhandled_exception", error=str(exc), exc_info=exc)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalServerError",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every handler to the application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
