"""API routers for the DevBytes cache."""

from devbytes.api.routes_health import router as health_router
from devbytes.api.routes_videos import router as videos_router

__all__ = ["health_router", "videos_router"]
