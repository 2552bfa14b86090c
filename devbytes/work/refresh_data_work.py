"""Background job that refreshes the video cache."""

from devbytes.errors import RefreshError, TransportError
from devbytes.repository import VideosRepository
from devbytes.work.scheduler import WorkResult


class RefreshDataWork:
    """Runs one refresh cycle of the video cache."""

    WORK_NAME = "RefreshDataWorker"

    def __init__(self, repository: VideosRepository):
        self._repository = repository

    async def do_work(self) -> WorkResult:
        """Refresh the cache.

        Returns:
            SUCCESS when the cache was replaced, RETRY when the playlist
            endpoint was unreachable, FAILURE for any other refresh error
        """
        try:
            await self._repository.refresh_videos()
        except TransportError:
            return WorkResult.RETRY
        except RefreshError:
            return WorkResult.FAILURE
        return WorkResult.SUCCESS
