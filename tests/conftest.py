"""Shared pytest fixtures for all test suites."""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from tripgen.config import Settings
from tripgen.db.engine import create_async_engine_from_settings
from tripgen.db.models import Base


@pytest.fixture
def settings() -> Settings:
    """Settings with no provider keys so nothing reaches the network."""
    return Settings(gemini_api_key=None, openai_api_key=None, database_url=None)


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a file-backed SQLite engine with the trip schema."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'trips.db'}",
        poolclass=NullPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_session(sqlite_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session over the SQLite engine."""
    async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url or not database_url.startswith(
        ("postgresql://", "postgresql+asyncpg://")
    ):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    engine = create_async_engine_from_settings(Settings(database_url=database_url))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
