"""In-process fleet store.

Keeps the same contract as the HTTP service behind :class:`FleetClient`:
seeding replaces every vehicle with the fixed seed set, status updates
stamp ``last_update`` and persist an audit entry, and logs come back
newest first, capped at 50. Setting :attr:`InMemoryFleetStore.offline`
makes every call fail like an unreachable service.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Iterable

from fleetwatch._constants import MAX_LOG_ENTRIES, SEED_VEHICLES
from fleetwatch.exceptions import FleetNotFoundError, FleetTransportError
from fleetwatch.models._base import VehicleStatus, utcnow
from fleetwatch.models.log_entry import LogEntry, severity_for_status, status_change_message
from fleetwatch.models.responses import SeedResult, StatusUpdateResult
from fleetwatch.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


def _object_id() -> str:
    # Same width as a document-store ObjectId.
    return secrets.token_hex(12)


class InMemoryFleetStore:
    """Dictionary-backed document store for vehicles and audit entries."""

    def __init__(self, vehicles: Iterable[Vehicle] = (), *, offline: bool = False) -> None:
        self.offline = offline
        self._vehicles: dict[str, Vehicle] = {}
        self._logs: list[LogEntry] = []
        self.seed_calls = 0
        for vehicle in vehicles:
            self.insert(vehicle)

    def _check_online(self, endpoint: str) -> None:
        if self.offline:
            raise FleetTransportError(f"Request to {endpoint} failed: store offline", endpoint=endpoint)

    def insert(self, vehicle: Vehicle) -> Vehicle:
        """Persist *vehicle*, assigning a store id when it has none."""
        store_id = vehicle.store_id or _object_id()
        stored = vehicle.model_copy(update={"store_id": store_id})
        self._vehicles[store_id] = stored
        return stored

    async def get_fleet(self) -> list[Vehicle]:
        self._check_online("/fleet")
        return list(self._vehicles.values())

    async def get_logs(self) -> list[LogEntry]:
        self._check_online("/logs")
        ordered = sorted(self._logs, key=lambda entry: entry.timestamp, reverse=True)
        return ordered[:MAX_LOG_ENTRIES]

    async def seed(self) -> SeedResult:
        self._check_online("/seed")
        self.seed_calls += 1
        self._vehicles.clear()
        for record in SEED_VEHICLES:
            store_id = _object_id()
            self._vehicles[store_id] = Vehicle.model_validate({**record, "_id": store_id})
        _logger.info("Seeded in-memory store with %d vehicles", len(self._vehicles))
        return SeedResult(message="Database seeded successfully", count=len(self._vehicles))

    async def update_status(self, store_id: str, status: VehicleStatus | str) -> StatusUpdateResult:
        self._check_online("/fleet/update-status")
        current = self._vehicles.get(store_id)
        if current is None:
            raise FleetNotFoundError(f"Vehicle {store_id} not found", endpoint="/fleet/update-status")
        new_status = VehicleStatus(status)
        vehicle = current.model_copy(update={"status": new_status, "last_update": utcnow()})
        self._vehicles[store_id] = vehicle
        entry = LogEntry.model_validate(
            {
                "_id": _object_id(),
                "vehicleId": vehicle.reg_number,
                "message": status_change_message(new_status),
                "severity": severity_for_status(new_status),
            }
        )
        self._logs.append(entry)
        del self._logs[:-MAX_LOG_ENTRIES]
        return StatusUpdateResult(vehicle=vehicle, log=entry)
