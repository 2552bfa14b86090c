"""Background work: the periodic cache refresh and its scheduler."""

from .constraints import (
    Constraints,
    DeviceState,
    DeviceStateProbe,
    NetworkType,
    PeriodicWorkRequest,
    StaticDeviceStateProbe,
)
from .recurring import REFRESH_CONSTRAINTS, build_refresh_request, setup_recurring_work
from .refresh_data_work import RefreshDataWork
from .scheduler import ExistingPeriodicWorkPolicy, WorkResult, WorkScheduler

__all__ = [
    "REFRESH_CONSTRAINTS",
    "Constraints",
    "DeviceState",
    "DeviceStateProbe",
    "ExistingPeriodicWorkPolicy",
    "NetworkType",
    "PeriodicWorkRequest",
    "RefreshDataWork",
    "StaticDeviceStateProbe",
    "WorkResult",
    "WorkScheduler",
    "build_refresh_request",
    "setup_recurring_work",
]
