"""Video playlist endpoints for the DevBytes cache API."""

import json
from collections.abc import AsyncIterator
from contextlib import aclosing

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from devbytes.api.dependencies import get_repository
from devbytes.domain import Video
from devbytes.errors import RefreshError
from devbytes.repository import VideosRepository

router = APIRouter(prefix="/api/videos", tags=["videos"])
limiter = Limiter(key_func=get_remote_address)


def _serialize(videos: list[Video]) -> list[dict]:
    return [video.model_dump(mode="json") for video in videos]


@router.get("")
async def list_videos(repository: VideosRepository = Depends(get_repository)):
    """
    Return the cached playlist.

    Serves whatever the last successful refresh stored, so the list stays
    available while the playlist endpoint is unreachable.

    Returns:
        JSON response with:
            - items: List of videos in playlist order
    """
    videos = await repository.get_videos()
    return {"items": _serialize(videos)}


async def video_events(repository: VideosRepository) -> AsyncIterator[str]:
    """Render every emission of the live cache as a server-sent event."""
    async with aclosing(repository.observe_videos()) as snapshots:
        async for videos in snapshots:
            yield f"data: {json.dumps({'items': _serialize(videos)})}\n\n"


@router.get("/stream")
async def stream_videos(repository: VideosRepository = Depends(get_repository)):
    """
    Live playlist as server-sent events.

    The first event carries the current cache; one more event follows every
    successful refresh.
    """
    return StreamingResponse(
        video_events(repository), media_type="text/event-stream"
    )


@router.post("/refresh")
@limiter.limit("30/minute")
async def refresh_videos(
    request: Request,
    repository: VideosRepository = Depends(get_repository),
):
    """
    Run one refresh cycle now.

    Raises:
        HTTPException: 502 if the refresh failed; the cache is unchanged
    """
    try:
        count = await repository.refresh_videos()
    except RefreshError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return {"ok": True, "count": count}
