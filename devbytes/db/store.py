"""Persisted video cache with atomic set-replace and live snapshots."""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from devbytes.db.models import StoredVideo
from devbytes.errors import StorageError

logger = logging.getLogger(__name__)


def _column_values(video: StoredVideo) -> dict:
    return {c.key: getattr(video, c.key) for c in StoredVideo.__table__.columns}


def _copy_rows(rows: list[StoredVideo]) -> list[StoredVideo]:
    return [StoredVideo(**_column_values(row)) for row in rows]


class VideoStore:
    """The single table of cached videos.

    Writers only ever swap the whole row set. Readers either query the current
    set or subscribe with :meth:`observe`, which yields the current set
    immediately and then once more after every completed :meth:`replace_all`.
    """

    def __init__(self, sessionmaker: async_sessionmaker):
        self._sessionmaker = sessionmaker
        # Serialises writes against subscriber registration
        self._lock = asyncio.Lock()
        self._subscribers: set[asyncio.Queue[list[StoredVideo]]] = set()

    async def get_videos(self) -> list[StoredVideo]:
        """Return all cached rows in playlist order."""
        try:
            async with self._sessionmaker() as session:
                result = await session.execute(
                    select(StoredVideo).order_by(StoredVideo.position)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StorageError("Failed to read cached videos") from exc

    async def replace_all(self, videos: Sequence[StoredVideo]) -> int:
        """Discard every cached row and install ``videos`` in one transaction.

        Subscribers receive the rows as read back inside the transaction, so
        they see exactly what :meth:`get_videos` returns afterwards.

        Args:
            videos: The complete new row set

        Returns:
            Number of rows now cached

        Raises:
            StorageError: If the transaction fails. The previous rows are kept.
        """
        async with self._lock:
            try:
                async with self._sessionmaker() as session:
                    async with session.begin():
                        await session.execute(delete(StoredVideo))
                        if videos:
                            await session.execute(
                                insert(StoredVideo), [_column_values(v) for v in videos]
                            )
                        result = await session.execute(
                            select(StoredVideo).order_by(StoredVideo.position)
                        )
                        snapshot = list(result.scalars().all())
                        # Detached rows keep their loaded state after commit
                        session.expunge_all()
            except SQLAlchemyError as exc:
                raise StorageError("Failed to replace cached videos") from exc

            logger.debug(
                "Replaced cached videos count=%d subscribers=%d",
                len(snapshot),
                len(self._subscribers),
            )
            for queue in self._subscribers:
                queue.put_nowait(_copy_rows(snapshot))
            return len(snapshot)

    async def observe(self) -> AsyncIterator[list[StoredVideo]]:
        """Yield the current rows, then the new rows after each replace.

        The subscription is released when the iterator is closed.
        """
        queue: asyncio.Queue[list[StoredVideo]] = asyncio.Queue()
        async with self._lock:
            snapshot = await self.get_videos()
            self._subscribers.add(queue)
        try:
            yield snapshot
            while True:
                yield await queue.get()
        finally:
            self._subscribers.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
