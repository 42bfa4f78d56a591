"""Offline fleet simulation and heartbeat feed.

While the store is unreachable the dashboard keeps moving: every
simulation tick random-walks each vehicle, drifts its speed, drains its
battery and extends its path. This is a liveliness effect, not a physics
model; only the bounds are guaranteed:

* ``0 <= speed <= max_speed``
* ``0 <= battery <= 100`` and never increasing
* ``len(path) <= max_path_points`` with ``path[-1] == (lat, lng)``
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime

from fleetwatch._constants import (
    HEARTBEAT_MESSAGE,
    MAX_PATH_POINTS,
    SIM_BATTERY_DRAIN,
    SIM_BOOTSTRAP_VEHICLE,
    SIM_MAX_SPEED,
    SIM_POSITION_JITTER,
    SIM_SPEED_JITTER,
)
from fleetwatch.models._base import Severity, utcnow
from fleetwatch.models.log_entry import LogEntry
from fleetwatch.models.vehicle import Vehicle
from fleetwatch.state.store import FleetState

_logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class SimulationEngine:
    """Advance vehicles pseudo-randomly while the state is simulated."""

    def __init__(
        self,
        state: FleetState,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utcnow,
        position_jitter: float = SIM_POSITION_JITTER,
        speed_jitter: float = SIM_SPEED_JITTER,
        battery_drain: float = SIM_BATTERY_DRAIN,
        max_speed: float = SIM_MAX_SPEED,
        max_path_points: int = MAX_PATH_POINTS,
    ) -> None:
        self._state = state
        self._rng = rng or random.Random()
        self._clock = clock
        self._position_jitter = position_jitter
        self._speed_jitter = speed_jitter
        self._battery_drain = battery_drain
        self._max_speed = max_speed
        self._max_path_points = max_path_points

    def tick(self) -> bool:
        """Advance every vehicle once; returns ``False`` when connected (no-op)."""
        if self._state.is_connected:
            return False
        if not self._state.vehicles:
            self.bootstrap()
        self._state.map_vehicles(self.advance)
        return True

    def bootstrap(self) -> Vehicle:
        """Put the offline simulator unit on the map."""
        vehicle = Vehicle.model_validate({**SIM_BOOTSTRAP_VEHICLE, "lastUpdate": self._clock()})
        _logger.info("No fleet data yet, starting offline simulator unit %s", vehicle.reg_number)
        self._state.replace_fleet([vehicle])
        return vehicle

    def advance(self, vehicle: Vehicle) -> Vehicle:
        """Return *vehicle* moved one simulation step."""
        jitter = self._position_jitter
        lat = _clamp(vehicle.lat + self._rng.uniform(-jitter, jitter), -90.0, 90.0)
        lng = _clamp(vehicle.lng + self._rng.uniform(-jitter, jitter), -180.0, 180.0)
        speed = _clamp(
            vehicle.speed + self._rng.uniform(-self._speed_jitter, self._speed_jitter),
            0.0,
            self._max_speed,
        )
        battery = max(0.0, min(vehicle.battery, 100.0) - self._battery_drain)
        path = [*vehicle.path, (lat, lng)][-self._max_path_points :]
        return vehicle.model_copy(
            update={
                "lat": lat,
                "lng": lng,
                "speed": speed,
                "battery": battery,
                "path": path,
                "last_update": self._clock(),
            }
        )


class HeartbeatEmitter:
    """Feed synthetic heartbeat entries into the audit log.

    Picks a random vehicle each tick and records an ``info`` entry
    against its registration number. Vehicles are never modified.
    """

    def __init__(
        self,
        state: FleetState,
        *,
        rng: random.Random | None = None,
        when_connected: bool = True,
    ) -> None:
        self._state = state
        self._rng = rng or random.Random()
        self._when_connected = when_connected

    def tick(self) -> LogEntry | None:
        if self._state.is_connected and not self._when_connected:
            return None
        vehicles = self._state.vehicles
        if not vehicles:
            return None
        vehicle = self._rng.choice(vehicles)
        entry = LogEntry(vehicle_id=vehicle.reg_number, message=HEARTBEAT_MESSAGE, severity=Severity.INFO)
        self._state.prepend_log(entry)
        return entry
