"""Structured request logging."""

import logging
import sys
import time
import uuid
from collections.abc import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from clinic_api.config import settings

# Polled by load balancers and the metrics scraper
QUIET_PATHS = frozenset(
    {"/metrics", f"{settings.api_prefix}/health", f"{settings.api_prefix}/ping"}
)


def configure_logging() -> None:
    """Route structlog through stdlib logging, rendered as JSON or for a console."""
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its outcome and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        logger = structlog.get_logger()
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        if request.url.path not in QUIET_PATHS:
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
                client=request.client.host if request.client else None,
            )

        response.headers["X-Request-ID"] = request_id
        return response
