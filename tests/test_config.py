"""Tests for settings and the application banner."""

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from clinic_api import main
from clinic_api.config import Settings


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("postgresql://u:p@db/clinic", "postgresql+asyncpg://u:p@db/clinic"),
        ("postgres://u:p@db/clinic", "postgresql+asyncpg://u:p@db/clinic"),
        ("postgresql+asyncpg://u:p@db/clinic", "postgresql+asyncpg://u:p@db/clinic"),
        ("sqlite+aiosqlite:///clinic.db", "sqlite+aiosqlite:///clinic.db"),
    ],
)
def test_async_database_url(url: str, expected: str) -> None:
    """The async driver is selected for plain PostgreSQL URLs."""
    assert Settings(DATABASE_URL=url).async_database_url == expected


def test_cors_origins_split() -> None:
    """Test comma separated CORS origins."""
    settings = Settings(CORS_ORIGINS="https://a.test, https://b.test,")
    assert settings.cors_origins == ["https://a.test", "https://b.test"]


def test_backfill_is_opt_in(monkeypatch) -> None:
    """Mirror backfill stays off unless configured."""
    monkeypatch.delenv("BACKFILL_APPOINTMENT_MIRROR", raising=False)
    assert Settings(_env_file=None).backfill_appointment_mirror is False


@pytest.mark.asyncio
async def test_root(client: AsyncClient) -> None:
    """Test the service banner."""
    response = await client.get("/")
    assert response.status_code == 200
    assert "version" in response.json()


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient) -> None:
    """Routing errors use the same error envelope."""
    response = await client.get("/api/nope")
    assert response.status_code == 404
    assert response.json()["error"] == "HTTPException"


class RecordingDatabase:
    """Stands in for the pool handle and records disposal."""

    engine = None

    def __init__(self):
        self.disposed = False

    async def dispose(self) -> None:
        self.disposed = True


@pytest.mark.asyncio
async def test_lifespan_releases_pool_on_error(monkeypatch) -> None:
    """The pool is disposed even when the application exits with an error."""
    database = RecordingDatabase()
    monkeypatch.setattr(main.Database, "from_settings", staticmethod(lambda _: database))
    monkeypatch.setattr(main.settings, "reconcile_on_startup", False)
    application = FastAPI()

    with pytest.raises(RuntimeError):
        async with main.lifespan(application):
            assert application.state.database is database
            raise RuntimeError("crashed while serving")

    assert database.disposed
