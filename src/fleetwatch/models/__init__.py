"""Pydantic models for fleet records."""

from fleetwatch.models._base import RiskLevel, Severity, VehicleStatus
from fleetwatch.models.advisory import FALLBACK_ADVISORY, Advisory
from fleetwatch.models.log_entry import LogEntry, severity_for_status
from fleetwatch.models.responses import SeedResult, StatusUpdateResult
from fleetwatch.models.vehicle import Vehicle

__all__ = [
    "FALLBACK_ADVISORY",
    "Advisory",
    "LogEntry",
    "RiskLevel",
    "SeedResult",
    "Severity",
    "StatusUpdateResult",
    "Vehicle",
    "VehicleStatus",
    "severity_for_status",
]
