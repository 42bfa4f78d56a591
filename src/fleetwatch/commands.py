"""Operator status commands."""

from __future__ import annotations

import logging

from fleetwatch.client import FleetStore
from fleetwatch.exceptions import FleetError
from fleetwatch.models._base import VehicleStatus, utcnow
from fleetwatch.models.log_entry import LogEntry
from fleetwatch.state.store import FleetState

_logger = logging.getLogger(__name__)


class StatusCommandHandler:
    """Apply operator status changes to the fleet.

    When connected the change is persisted first and the store's copy of
    the vehicle replaces the local record wholesale. If the store is
    unreachable, rejects the change, or the state is simulated, the change
    is applied locally instead. Either way exactly one audit entry is
    prepended and returned; nothing is raised to the caller.
    """

    def __init__(self, state: FleetState, store: FleetStore | None = None) -> None:
        self._state = state
        self._store = store

    async def update_status(self, vehicle_ref: str, new_status: VehicleStatus | str) -> LogEntry:
        status = VehicleStatus(new_status)
        if self._state.is_connected and self._store is not None:
            entry = await self._update_in_store(vehicle_ref, status)
            if entry is not None:
                return entry
        return self._apply_locally(vehicle_ref, status)

    async def toggle_emergency(self, vehicle_ref: str) -> LogEntry:
        """Raise a panic alert, or clear it back to ``active`` if already raised."""
        current = self._state.find(vehicle_ref)
        if current is not None and current.status == VehicleStatus.EMERGENCY:
            return await self.update_status(vehicle_ref, VehicleStatus.ACTIVE)
        return await self.update_status(vehicle_ref, VehicleStatus.EMERGENCY)

    async def _update_in_store(self, vehicle_ref: str, status: VehicleStatus) -> LogEntry | None:
        assert self._store is not None  # noqa: S101
        current = self._state.find(vehicle_ref)
        if current is not None and current.store_id is None:
            _logger.debug("Vehicle %s not persisted yet, applying status locally", vehicle_ref)
            return None
        store_id = current.store_id if current is not None and current.store_id else vehicle_ref

        try:
            result = await self._store.update_status(store_id, status)
        except FleetError as exc:
            _logger.error("API update failed for %s: %s", vehicle_ref, exc)
            return None
        except Exception:
            _logger.exception("Unexpected error updating %s, applying status locally", vehicle_ref)
            return None

        if not self._state.replace_vehicle(vehicle_ref, result.vehicle):
            _logger.debug("Vehicle %s not in local fleet, store copy arrives with next sync", vehicle_ref)
        self._state.prepend_log(result.log)
        return result.log

    def _apply_locally(self, vehicle_ref: str, status: VehicleStatus) -> LogEntry:
        updated = self._state.update_vehicle(vehicle_ref, status=status, last_update=utcnow())
        if updated is None:
            _logger.warning("Status change for unknown vehicle %s recorded without a fleet update", vehicle_ref)
        entry = LogEntry.for_status_change(updated.reg_number if updated is not None else vehicle_ref, status)
        self._state.prepend_log(entry)
        return entry
