"""Audit log entry model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from fleetwatch.models._base import (
    FleetBaseModel,
    FleetTimestamp,
    Severity,
    VehicleStatus,
    new_hash,
    new_local_id,
    utcnow,
)


def severity_for_status(status: VehicleStatus | str) -> Severity:
    """Severity of the audit entry recorded for a status change."""
    if status == VehicleStatus.EMERGENCY:
        return Severity.CRITICAL
    if status == VehicleStatus.WARNING:
        return Severity.WARNING
    return Severity.INFO


def status_change_message(status: VehicleStatus | str) -> str:
    return f"Status updated to {str(status).upper()}"


class LogEntry(FleetBaseModel):
    """An audit feed entry.

    ``vehicle_id`` carries the registration number of the vehicle,
    not its internal id. ``hash`` is display flavour only and is never
    verified.
    """

    id: str = Field(default_factory=lambda: new_local_id("log"))
    store_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("_id", "storeId", "store_id"),
        serialization_alias="_id",
    )
    timestamp: FleetTimestamp = Field(default_factory=utcnow)
    vehicle_id: str = ""
    message: str = ""
    severity: Severity = Severity.INFO
    hash: str = Field(default_factory=new_hash)

    @classmethod
    def for_status_change(cls, vehicle_id: str, status: VehicleStatus | str) -> LogEntry:
        """Build the entry recorded locally when an operator changes a status."""
        return cls(
            vehicle_id=vehicle_id,
            message=status_change_message(status),
            severity=severity_for_status(status),
        )

    @model_validator(mode="before")
    @classmethod
    def _default_local_id(cls, values: Any) -> Any:
        if not isinstance(values, dict) or values.get("id"):
            return values
        store_id = values.get("_id") or values.get("storeId") or values.get("store_id")
        if not store_id:
            return values
        merged = dict(values)
        merged["id"] = str(store_id)
        return merged

    @field_validator("store_id", mode="before")
    @classmethod
    def _coerce_store_id(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _missing_timestamp(cls, value: Any) -> Any:
        return utcnow() if value is None or value == "" else value
