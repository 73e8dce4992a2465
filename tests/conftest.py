import os
import sys
from collections.abc import AsyncGenerator

# Cheap hashing for tests; must be set before settings are loaded
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

# Load environment variables from .env file
load_dotenv()

from clinic_api.config import settings
from clinic_api.core.schema import ReconcileReport, reconcile_schema
from clinic_api.database import Database, get_database, get_db
from clinic_api.main import app
from clinic_api.models import metadata

# Optional PostgreSQL test database; a per-test SQLite file otherwise
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

# Tests drop every table: never run them against the application database
if TEST_DATABASE_URL and TEST_DATABASE_URL == settings.database_url:
    print("\n❌ CRITICAL ERROR: Test database URL is same as application database!")
    print("Please set TEST_DATABASE_URL to a separate test database in .env")
    sys.exit(1)

if TEST_DATABASE_URL and TEST_DATABASE_URL.startswith("postgresql://"):
    TEST_DATABASE_URL = TEST_DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)


async def drop_all_tables(engine: AsyncEngine) -> None:
    """Drop every table the application owns."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


@pytest.fixture
def is_postgres() -> bool:
    """Whether tests run against PostgreSQL."""
    return bool(TEST_DATABASE_URL and TEST_DATABASE_URL.startswith("postgresql"))


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Engine on an empty test database."""
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'clinic_test.db'}"

    # NullPool avoids sharing connections across event loops
    test_engine = create_async_engine(url, echo=False, poolclass=NullPool)
    await drop_all_tables(test_engine)

    yield test_engine

    await drop_all_tables(test_engine)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def schema(engine: AsyncEngine) -> ReconcileReport:
    """Schema created by the reconciler, as on application boot."""
    return await reconcile_schema(engine)


@pytest_asyncio.fixture
async def db_session(
    engine: AsyncEngine, schema: ReconcileReport
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(
    engine: AsyncEngine, db_session: AsyncSession
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_database] = lambda: Database(engine)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_appointment_data() -> dict:
    """Sample appointment data for testing."""
    return {
        "patient": "Jane Doe",
        "date": "2024-01-01",
        "time": "09:00",
        "notes": "Follow-up on blood pressure",
        "createdByName": "Dr. Smith",
    }


@pytest.fixture
def sample_inventory_data() -> dict:
    """Sample inventory item for testing."""
    return {
        "category": "Analgesic",
        "brandName": "Advil",
        "genericName": "Ibuprofen",
        "dosageType": "Tablet",
        "strength": "200",
        "unit": "mg",
        "expirationDate": "2026-12-31",
        "stock": 5,
        "description": "Pain and fever relief",
    }


@pytest.fixture
def sample_user_data() -> dict:
    """Sample administrator-created user."""
    return {
        "name": "Maria Santos",
        "email": "maria@clinic.test",
        "role": "doctor",
        "password": "s3cret-pass",
    }


@pytest_asyncio.fixture
async def test_user(client: AsyncClient, sample_user_data: dict) -> dict:
    """Create a user through the API."""
    response = await client.post("/api/users", json=sample_user_data)
    assert response.status_code == 201
    return response.json()
