"""Store response envelopes."""

from __future__ import annotations

from pydantic import Field

from fleetwatch.models._base import FleetBaseModel
from fleetwatch.models.log_entry import LogEntry
from fleetwatch.models.vehicle import Vehicle


class SeedResult(FleetBaseModel):
    """Reply of ``POST /api/seed``."""

    message: str = ""
    count: int = Field(default=0, ge=0)


class StatusUpdateResult(FleetBaseModel):
    """Reply of ``POST /api/fleet/update-status``: both records as persisted."""

    vehicle: Vehicle
    log: LogEntry
