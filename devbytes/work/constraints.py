"""Environmental conditions a periodic job waits for."""

from datetime import timedelta
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class NetworkType(str, Enum):
    """Kind of network connection a job requires."""

    NOT_REQUIRED = "not_required"
    CONNECTED = "connected"
    UNMETERED = "unmetered"
    NOT_ROAMING = "not_roaming"
    METERED = "metered"


class DeviceState(BaseModel):
    """Snapshot of the host environment.

    ``idle`` is ``None`` when the host has no notion of device idleness.
    """

    connected: bool = True
    metered: bool = False
    roaming: bool = False
    battery_low: bool = False
    charging: bool = True
    idle: bool | None = True


class Constraints(BaseModel):
    """Requirements that must all hold before a job runs."""

    model_config = ConfigDict(frozen=True)

    required_network_type: NetworkType = NetworkType.NOT_REQUIRED
    requires_battery_not_low: bool = False
    requires_charging: bool = False
    requires_device_idle: bool = False

    def satisfied_by(self, state: DeviceState) -> bool:
        """Check every requirement against ``state``."""
        if not self._network_ok(state):
            return False
        if self.requires_battery_not_low and state.battery_low:
            return False
        if self.requires_charging and not state.charging:
            return False
        # Idle can only be required where the host reports it
        if self.requires_device_idle and state.idle is False:
            return False
        return True

    def _network_ok(self, state: DeviceState) -> bool:
        network = self.required_network_type
        if network is NetworkType.CONNECTED:
            return state.connected
        if network is NetworkType.UNMETERED:
            return state.connected and not state.metered
        if network is NetworkType.METERED:
            return state.connected and state.metered
        if network is NetworkType.NOT_ROAMING:
            return state.connected and not state.roaming
        return True


class PeriodicWorkRequest(BaseModel):
    """How often a job repeats and under which constraints."""

    repeat_interval: timedelta = Field(gt=timedelta(0))
    constraints: Constraints = Constraints()


class DeviceStateProbe(Protocol):
    """Reports the current host environment."""

    async def current_state(self) -> DeviceState:
        ...


class StaticDeviceStateProbe:
    """Probe that always reports the same state.

    The default state is a mains-powered, idle host on an unmetered link,
    which satisfies every constraint.
    """

    def __init__(self, state: DeviceState | None = None):
        self.state = state or DeviceState()

    async def current_state(self) -> DeviceState:
        return self.state
