"""Tests for API endpoints."""

import json
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from devbytes.api import health_router, videos_router
from devbytes.api.routes_videos import video_events
from devbytes.errors import StorageError, TransportError
from devbytes.repository import VideosRepository
from tests.factories import playlist


class QueuedRemoteSource:
    def __init__(self, *responses):
        self.responses = list(responses)

    async def get_playlist(self):
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest_asyncio.fixture
async def remote():
    return QueuedRemoteSource()


@pytest_asyncio.fixture
async def repository(store, remote):
    return VideosRepository(remote, store)


@pytest_asyncio.fixture
async def client(repository):
    """HTTP client for an app wired to the in-memory repository."""
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(videos_router)
    app.state.repository = repository

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_readiness_reports_refresh_state(client):
    response = await client.get("/readyz")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "refreshing": False}


@pytest.mark.asyncio
async def test_list_videos_empty_cache(client):
    response = await client.get("/api/videos")

    assert response.status_code == 200
    assert response.json() == {"items": []}


@pytest.mark.asyncio
async def test_refresh_then_list(client, remote):
    remote.responses.append(playlist("a", "b"))

    response = await client.post("/api/videos/refresh")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "count": 2}

    items = (await client.get("/api/videos")).json()["items"]
    assert [item["url"] for item in items] == [
        "https://www.youtube.com/watch?v=a",
        "https://www.youtube.com/watch?v=b",
    ]
    assert items[0]["short_description"] == "About a"


@pytest.mark.asyncio
async def test_failed_refresh_returns_502_and_keeps_cache(client, remote):
    remote.responses.extend([playlist("a"), TransportError("offline")])
    await client.post("/api/videos/refresh")

    response = await client.post("/api/videos/refresh")

    assert response.status_code == 502
    assert "offline" in response.json()["detail"]
    items = (await client.get("/api/videos")).json()["items"]
    assert len(items) == 1


@pytest.mark.asyncio
async def test_video_events_stream_snapshots(repository, remote):
    remote.responses.append(playlist("a"))
    events = video_events(repository)

    first = await anext(events)
    await repository.refresh_videos()
    second = await anext(events)
    await events.aclose()

    assert first == 'data: {"items": []}\n\n'
    assert second.startswith("data: ") and second.endswith("\n\n")
    payload = json.loads(second[len("data: ") :])
    assert payload["items"][0]["title"] == "Video a"


@pytest.mark.asyncio
async def test_refresh_count_does_not_reread_cache(client, remote, repository):
    remote.responses.append(playlist("a", "b", "c"))
    repository.get_videos = AsyncMock(side_effect=StorageError("locked"))

    response = await client.post("/api/videos/refresh")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "count": 3}
    repository.get_videos.assert_not_called()
