"""Exception handlers mapping errors to the API's JSON error envelope."""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cafe_backend.core.exceptions import AppException

logger = structlog.get_logger(__name__)


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: Any,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """
    Build the error envelope shared by every handler.

    The body always carries ``error``, ``message`` and ``path``; ``details``
    is added only when present, and ``requestId`` when the logging
    middleware assigned one.
    """
    content: dict[str, Any] = {"error": error, "message": message, "path": request.url.path}
    if details:
        content["details"] = jsonable_encoder(details)

    request_id = getattr(request.state, "request_id", None)
    if request_id:
        content["requestId"] = request_id

    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Domain errors carry their own status code and optional field details."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("app_error", error=exc.__class__.__name__, message=exc.message)
    return error_response(
        request, exc.status_code, exc.__class__.__name__, exc.message, details=exc.details
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(
        request,
        exc.status_code,
        "HTTPException",
        exc.detail,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies and query parameters rejected by FastAPI itself."""
    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "ValidationError",
        "Request validation failed",
        details=exc.errors(),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database failures are logged in full but reported without driver text."""
    logger.exception("database_error", path=request.url.path, error_type=type(exc).__name__)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "DatabaseError",
        "A database error occurred",
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, error=str(exc))
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalServerError",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers, most specific first."""
    handlers = (
        (AppException, app_exception_handler),
        (StarletteHTTPException, http_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (SQLAlchemyError, database_exception_handler),
        (Exception, general_exception_handler),
    )
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, handler)  # type: ignore[arg-type]
