"""Liveness and readiness probes."""

from fastapi import APIRouter
from pydantic import BaseModel

from clinic_api.config import settings
from clinic_api.dependencies import DatabaseHandle

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    database: str | None = None


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    """Answer without touching the database."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get("/health/detailed", response_model=HealthResponse, summary="Readiness probe")
async def detailed_health_check(database: DatabaseHandle) -> HealthResponse:
    """Report ``degraded`` when the database does not answer ``SELECT 1``."""
    db_healthy = await database.check_connection()
    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database="healthy" if db_healthy else "unhealthy",
    )


@router.get("/ping", summary="Simple ping")
async def ping() -> dict[str, str]:
    return {"message": "pong"}
