"""Repository that keeps the local video cache in step with the playlist."""

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

from devbytes.db.store import VideoStore
from devbytes.domain import Video
from devbytes.errors import RefreshError
from devbytes.network.client import RemoteSource

logger = logging.getLogger(__name__)


class VideosRepository:
    """Single authority over the cached playlist.

    Reads go through :meth:`observe_videos`, which only ever reflects fully
    committed refreshes. Writes happen in :meth:`refresh_videos`, which swaps
    the entire cached set for the freshly fetched playlist or leaves it alone.
    """

    def __init__(self, remote: RemoteSource, store: VideoStore):
        self._remote = remote
        self._store = store
        self._in_flight = 0

    @property
    def is_refreshing(self) -> bool:
        """True while at least one refresh cycle is in flight."""
        return self._in_flight > 0

    async def observe_videos(self) -> AsyncIterator[list[Video]]:
        """Yield the cached videos now and again after every successful refresh.

        The first item is the current cache, an empty list if nothing has been
        stored yet.
        """
        async with aclosing(self._store.observe()) as snapshots:
            async for rows in snapshots:
                yield [row.as_domain_model() for row in rows]

    async def get_videos(self) -> list[Video]:
        """Return the cached videos once, without subscribing."""
        return [row.as_domain_model() for row in await self._store.get_videos()]

    async def refresh_videos(self) -> int:
        """Fetch the playlist and replace the cache with it.

        Must be awaited from a context that may wait on network and disk.

        Returns:
            Number of videos now cached

        Raises:
            RefreshError: If fetching, decoding or storing failed. The cache
                still holds its previous contents.
        """
        self._in_flight += 1
        logger.info("Refreshing video cache")
        try:
            playlist = await self._remote.get_playlist()
            rows = playlist.as_database_model()
            count = await self._store.replace_all(rows)
        except RefreshError:
            logger.warning("Video cache refresh failed", exc_info=True)
            raise
        except Exception as exc:
            logger.exception("Video cache refresh failed unexpectedly")
            raise RefreshError("Unexpected error during refresh") from exc
        finally:
            self._in_flight -= 1
        logger.info("Video cache refreshed items=%d", count)
        return count
