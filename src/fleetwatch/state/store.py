"""In-memory fleet and audit log state.

This is the only component that holds vehicles and log entries. The
sync, simulation and command paths receive the same instance, so tests
can build isolated states without any globals.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict

from fleetwatch._constants import MAX_LOG_ENTRIES
from fleetwatch.models.log_entry import LogEntry
from fleetwatch.models.vehicle import Vehicle
from fleetwatch.state.events import Mode, ModeChange
from fleetwatch.state.keys import matches, resolve_key

_logger = logging.getLogger(__name__)


class FleetSnapshot(BaseModel):
    """Immutable view of the state handed to readers (UI, advisory)."""

    model_config = ConfigDict(frozen=True)

    mode: Mode
    vehicles: tuple[Vehicle, ...]
    logs: tuple[LogEntry, ...]
    selected_key: str | None = None


class FleetState:
    """Owned container for the fleet, the audit feed and the operating mode.

    ``logs`` is kept newest first and never grows past ``max_logs``;
    prepending beyond the cap drops the oldest entries.
    """

    def __init__(
        self,
        vehicles: Iterable[Vehicle] = (),
        *,
        mode: Mode = Mode.SIMULATED,
        max_logs: int = MAX_LOG_ENTRIES,
    ) -> None:
        self._vehicles: list[Vehicle] = list(vehicles)
        self._logs: list[LogEntry] = []
        self._mode = mode
        self._max_logs = max_logs
        self._selected_key: str | None = None
        self._mode_listeners: list[Callable[[ModeChange], None]] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def vehicles(self) -> list[Vehicle]:
        return list(self._vehicles)

    @property
    def logs(self) -> list[LogEntry]:
        return list(self._logs)

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def is_connected(self) -> bool:
        return self._mode == Mode.CONNECTED

    def find(self, ref: str) -> Vehicle | None:
        for vehicle in self._vehicles:
            if matches(vehicle, ref):
                return vehicle
        return None

    def search(self, query: str) -> list[Vehicle]:
        """Vehicles whose registration number or driver name contains *query*."""
        needle = query.strip().lower()
        if not needle:
            return list(self._vehicles)
        return [v for v in self._vehicles if needle in v.reg_number.lower() or needle in v.driver_name.lower()]

    def snapshot(self) -> FleetSnapshot:
        return FleetSnapshot(
            mode=self._mode,
            vehicles=tuple(self._vehicles),
            logs=tuple(self._logs),
            selected_key=self._selected_key,
        )

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, ref: str | None) -> Vehicle | None:
        """Select a vehicle by reference; ``None`` clears the selection."""
        if ref is None:
            self._selected_key = None
            return None
        vehicle = self.find(ref)
        self._selected_key = resolve_key(vehicle) if vehicle is not None else None
        return vehicle

    @property
    def selected_vehicle(self) -> Vehicle | None:
        if self._selected_key is None:
            return None
        return self.find(self._selected_key)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def replace_fleet(self, vehicles: Iterable[Vehicle]) -> None:
        self._vehicles = list(vehicles)

    def replace_vehicle(self, ref: str, vehicle: Vehicle) -> bool:
        """Swap the record matching *ref* for *vehicle* wholesale.

        Returns ``False`` (and leaves the fleet untouched) when nothing matches.
        """
        for index, existing in enumerate(self._vehicles):
            if matches(existing, ref):
                self._vehicles[index] = vehicle
                return True
        return False

    def update_vehicle(self, ref: str, **changes: Any) -> Vehicle | None:
        """Apply field changes to the record matching *ref* and return the new record."""
        current = self.find(ref)
        if current is None:
            return None
        updated = current.model_copy(update=changes)
        self.replace_vehicle(ref, updated)
        return updated

    def map_vehicles(self, fn: Callable[[Vehicle], Vehicle]) -> None:
        """Replace every vehicle with ``fn(vehicle)``, keeping order."""
        self._vehicles = [fn(vehicle) for vehicle in self._vehicles]

    def prepend_log(self, entry: LogEntry) -> None:
        self._logs.insert(0, entry)
        del self._logs[self._max_logs :]

    def replace_logs(self, entries: Iterable[LogEntry]) -> bool:
        """Adopt *entries* as the audit feed unless the list is empty.

        An empty store reply must not wipe a richer local feed.
        """
        incoming = list(entries)[: self._max_logs]
        if not incoming:
            return False
        self._logs = incoming
        return True

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------

    def add_mode_listener(self, listener: Callable[[ModeChange], None]) -> Callable[[], None]:
        """Register *listener*; the returned callable unregisters it."""
        self._mode_listeners.append(listener)

        def _remove() -> None:
            if listener in self._mode_listeners:
                self._mode_listeners.remove(listener)

        return _remove

    def set_mode(self, mode: Mode) -> bool:
        """Set the operating mode; returns ``True`` when it actually changed."""
        previous = self._mode
        if previous == mode:
            return False
        self._mode = mode
        _logger.info("Fleet mode changed: %s -> %s", previous, mode)
        change = ModeChange(previous=previous, current=mode)
        for listener in list(self._mode_listeners):
            try:
                listener(change)
            except Exception:
                _logger.debug("Mode listener failed", exc_info=True)
        return True
