"""Structured logging setup and the per-request logging middleware."""

import logging
import sys
import time
from collections.abc import Callable
from uuid import uuid4

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.types import Processor

from cafe_backend.config import settings

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"

# Request lines are already logged by LoggingMiddleware
QUIETED_LOGGERS = ("uvicorn.access",)


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Route structlog through the standard library with one renderer.

    Args:
        log_level: Level name; defaults to ``LOG_LEVEL``
        log_format: ``json`` or ``console``; defaults to ``LOG_FORMAT``
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(log_format or settings.log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIETED_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once on arrival and once on completion."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Bind request context for every log line emitted while handling the request.

        The request id is taken from ``X-Request-ID`` or generated, stored on
        ``request.state`` for error bodies, and echoed in the response headers.
        """
        logger = structlog.get_logger("cafe_backend.request")

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        logger.info("request_started", client=request.client.host if request.client else None)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            elapsed = time.perf_counter() - started
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round(elapsed * 1000, 2),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.6f}"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
