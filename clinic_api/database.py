"""Database engine and session management."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from clinic_api.config import Settings


class Database:
    """Connection pool handle owned by the application lifespan."""

    def __init__(self, engine: AsyncEngine):
        """Wrap an engine and build its session factory."""
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create a pooled engine from application settings."""
        url = settings.async_database_url
        options: dict = {"echo": settings.debug, "pool_pre_ping": True}

        if url.startswith("postgresql+asyncpg://"):
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=settings.db_pool_recycle,
                connect_args={
                    "server_settings": {
                        "application_name": settings.app_name,
                    },
                },
            )

        return cls(create_async_engine(url, **options))

    async def check_connection(self) -> bool:
        """Check if database connection is healthy."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Return the database handle attached to the running application."""
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    database = get_database(request)
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
