"""SQLAlchemy async engine and session management."""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from devbytes.config import get_settings
from devbytes.db.models import Base

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async database engine."""
    global _engine
    if _engine:
        return _engine
    url = get_settings().database_url
    # Ensure SQLite URLs use async driver
    if url.startswith("sqlite:///"):
        url = url.replace("sqlite:///", "sqlite+aiosqlite:///")
    _engine = create_async_engine(url, future=True)
    return _engine


def get_sessionmaker() -> async_sessionmaker:
    """Get or create the async session maker."""
    global _sessionmaker
    if _sessionmaker:
        return _sessionmaker
    _sessionmaker = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _sessionmaker


async def init_models(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine."""
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None
