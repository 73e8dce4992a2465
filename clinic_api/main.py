"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from clinic_api.api.endpoints.users import legacy_router
from clinic_api.api.router import api_router
from clinic_api.config import settings
from clinic_api.core.schema import backfill_appointment_mirror, reconcile_schema
from clinic_api.database import Database
from clinic_api.middleware.error_handler import register_exception_handlers
from clinic_api.middleware.logging import LoggingMiddleware, configure_logging

configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the connection pool for the life of the process.

    The schema is reconciled before the first request is served. A partial
    reconciliation is logged and startup continues; handlers touching a
    missing column fail on their own.
    """
    logger.info("application_startup", environment=settings.environment)

    database = Database.from_settings(settings)
    app.state.database = database

    try:
        if settings.reconcile_on_startup:
            report = await reconcile_schema(database.engine)
            if not report.ok:
                logger.warning(
                    "starting_with_incomplete_schema",
                    failed=[step for step, _ in report.failed],
                )
            if settings.backfill_appointment_mirror:
                await backfill_appointment_mirror(database.engine)

        yield
    finally:
        await database.dispose()
        logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Build the application with its middleware, handlers and routes."""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Clinic backend for accounts, appointments, patient records and pharmacy stock",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(LoggingMiddleware)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.api_prefix)
    application.include_router(legacy_router)

    @application.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Service banner."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
        }

    Instrumentator(
        should_group_status_codes=True,
        excluded_handlers=["/docs", "/redoc", "/openapi.json", "/metrics"],
    ).instrument(application).expose(application, endpoint="/metrics", include_in_schema=False)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "clinic_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
