"""Health check endpoints for the DevBytes cache API."""

from fastapi import APIRouter, Depends

from devbytes.api.dependencies import get_repository
from devbytes.repository import VideosRepository

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def health_check():
    """Liveness probe."""
    return {"ok": True}


@router.get("/readyz")
async def readiness_check(repository: VideosRepository = Depends(get_repository)):
    """
    Readiness check endpoint.

    Returns:
        A status object; ``refreshing`` tells whether a refresh is in flight
    """
    return {"ok": True, "refreshing": repository.is_refreshing}
