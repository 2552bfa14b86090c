"""Registration of the daily cache refresh."""

from datetime import timedelta

from devbytes.config import Settings
from devbytes.repository import VideosRepository
from devbytes.work.constraints import Constraints, NetworkType, PeriodicWorkRequest
from devbytes.work.refresh_data_work import RefreshDataWork
from devbytes.work.scheduler import ExistingPeriodicWorkPolicy, WorkScheduler

# Unmetered network, battery not low, charging and (where reported) idle
REFRESH_CONSTRAINTS = Constraints(
    required_network_type=NetworkType.UNMETERED,
    requires_battery_not_low=True,
    requires_charging=True,
    requires_device_idle=True,
)


def build_refresh_request(settings: Settings) -> PeriodicWorkRequest:
    """Periodic request that repeats the refresh once per configured interval."""
    return PeriodicWorkRequest(
        repeat_interval=timedelta(seconds=settings.refresh_interval_seconds),
        constraints=REFRESH_CONSTRAINTS,
    )


async def setup_recurring_work(
    scheduler: WorkScheduler, repository: VideosRepository, settings: Settings
) -> bool:
    """Register the refresh job, keeping any registration that already exists.

    Returns:
        True if a new registration was made
    """
    return await scheduler.enqueue_unique_periodic_work(
        RefreshDataWork.WORK_NAME,
        ExistingPeriodicWorkPolicy.KEEP,
        build_refresh_request(settings),
        RefreshDataWork(repository),
    )
