"""HTTP client for the DevBytes playlist endpoint."""

import logging
from typing import Protocol

import httpx
from pydantic import ValidationError

from devbytes.errors import DeserializationError, TransportError
from devbytes.network.models import NetworkVideoContainer

logger = logging.getLogger(__name__)


class RemoteSource(Protocol):
    """Anything that can return the full current playlist."""

    async def get_playlist(self) -> NetworkVideoContainer:
        ...


class DevByteClient:
    """Fetches the DevBytes playlist.

    Always returns the complete playlist; there is no paging and no retry.
    """

    def __init__(self, playlist_url: str, timeout: float = 15):
        """Initialize the client.

        Args:
            playlist_url: Absolute URL of the playlist JSON document
            timeout: Seconds before connect/read operations give up
        """
        self.playlist_url = playlist_url
        self._timeout = timeout

    async def get_playlist(self) -> NetworkVideoContainer:
        """Download and decode the current playlist.

        Returns:
            The decoded playlist

        Raises:
            TransportError: If the request fails or the server answers non-2xx
            DeserializationError: If the body is not a valid playlist document
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self.playlist_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"Playlist request failed: {exc}") from exc

        try:
            container = NetworkVideoContainer.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise DeserializationError("Malformed playlist payload") from exc

        logger.debug("Fetched playlist items=%d", len(container.videos))
        return container
