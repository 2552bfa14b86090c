"""FastAPI dependencies for API routers."""

from fastapi import Request

from devbytes.repository import VideosRepository


def get_repository(request: Request) -> VideosRepository:
    """Dependency returning the repository wired up at startup."""
    return request.app.state.repository
