"""Shared fixtures."""

import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from devbytes.db.models import Base
from devbytes.db.store import VideoStore


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def store(db_engine):
    """Create a VideoStore over the in-memory database."""
    return VideoStore(async_sessionmaker(db_engine, expire_on_commit=False))
