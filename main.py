"""DevBytes playlist cache - Main application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from devbytes.api import health_router, videos_router
from devbytes.config import get_settings
from devbytes.db.session import (
    dispose_engine,
    get_engine,
    get_sessionmaker,
    init_models,
)
from devbytes.db.store import VideoStore
from devbytes.logging import setup_logging
from devbytes.network.client import DevByteClient
from devbytes.repository import VideosRepository
from devbytes.work.recurring import setup_recurring_work
from devbytes.work.scheduler import WorkScheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire collaborators on startup and release them on shutdown."""
    settings = get_settings()
    setup_logging()

    await init_models(get_engine())
    store = VideoStore(get_sessionmaker())
    client = DevByteClient(settings.playlist_url, timeout=settings.http_timeout_seconds)
    repository = VideosRepository(client, store)

    redis = Redis.from_url(settings.redis_url, decode_responses=False)
    scheduler = WorkScheduler(
        redis,
        retry_backoff_seconds=settings.refresh_retry_backoff_seconds,
        constraint_poll_seconds=settings.constraint_poll_seconds,
    )

    app.state.repository = repository
    app.state.scheduler = scheduler

    # Register the recurring refresh in the background so startup never waits on Redis
    delayed_init = asyncio.create_task(
        setup_recurring_work(scheduler, repository, settings)
    )
    delayed_init.add_done_callback(_log_delayed_init)

    yield

    delayed_init.cancel()
    await scheduler.shutdown()
    await redis.aclose()
    await dispose_engine()


def _log_delayed_init(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    if exc := task.exception():
        logger.error("Failed to register recurring refresh", exc_info=exc)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="DevBytes Playlist Cache",
        description="Offline cache of the DevBytes video playlist, refreshed daily",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure rate limiting
    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

    app.include_router(health_router)
    app.include_router(videos_router)

    return app


app = create_app()


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
