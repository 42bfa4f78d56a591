"""Fleet polling and live/simulated mode selection."""

from __future__ import annotations

import logging

from fleetwatch._constants import LINK_ESTABLISHED_MESSAGE, LINK_VEHICLE_ID
from fleetwatch.client import FleetStore
from fleetwatch.exceptions import FleetError
from fleetwatch.models._base import Severity
from fleetwatch.models.log_entry import LogEntry
from fleetwatch.models.vehicle import Vehicle
from fleetwatch.state.events import Mode
from fleetwatch.state.store import FleetState

_logger = logging.getLogger(__name__)


class FleetSyncEngine:
    """Reconcile the store's fleet into local state, one tick at a time.

    A tick never raises. Any store failure switches the state to
    :attr:`Mode.SIMULATED` and leaves the current vehicles in place so the
    simulation can carry on from the last known positions. The mode is
    re-evaluated on every tick.
    """

    def __init__(self, state: FleetState, store: FleetStore) -> None:
        self._state = state
        self._store = store

    async def tick(self) -> Mode:
        """Run one sync pass and return the mode it settled on."""
        try:
            vehicles = await self._store.get_fleet()
            if not vehicles:
                vehicles = await self._seed_and_refetch()
            if not vehicles:
                _logger.warning("Store still empty after seeding, staying in simulation mode")
                self._state.set_mode(Mode.SIMULATED)
                return self._state.mode
            logs = await self._store.get_logs()
        except FleetError as exc:
            _logger.warning("Backend connection failed, staying in simulation mode: %s", exc)
            self._state.set_mode(Mode.SIMULATED)
            return self._state.mode
        except Exception:
            _logger.exception("Unexpected error during fleet sync, falling back to simulation mode")
            self._state.set_mode(Mode.SIMULATED)
            return self._state.mode

        self._apply(vehicles, logs)
        return self._state.mode

    async def _seed_and_refetch(self) -> list[Vehicle]:
        _logger.info("Store returned no vehicles, seeding")
        try:
            await self._store.seed()
        except FleetError as exc:
            _logger.warning("Seeding failed: %s", exc)
        return await self._store.get_fleet()

    def _apply(self, vehicles: list[Vehicle], logs: list[LogEntry]) -> None:
        self._state.replace_fleet(vehicles)
        self._state.replace_logs(logs)
        if self._state.set_mode(Mode.CONNECTED):
            self._state.prepend_log(
                LogEntry(
                    vehicle_id=LINK_VEHICLE_ID,
                    message=LINK_ESTABLISHED_MESSAGE,
                    severity=Severity.INFO,
                )
            )
