"""Vehicle model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from fleetwatch.models._base import FleetBaseModel, FleetTimestamp, VehicleStatus, new_local_id, utcnow


class Vehicle(FleetBaseModel):
    """A tracked fleet vehicle.

    Fields are mapped from the store's ``/api/fleet`` documents. A
    vehicle always carries a local ``id``; ``store_id`` (``_id`` on the
    wire) is only present once the store has persisted it. Records that
    arrive from the store without a local id reuse the store id.
    """

    id: str = Field(default_factory=lambda: new_local_id("veh"))
    """Locally generated identifier."""
    store_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("_id", "storeId", "store_id"),
        serialization_alias="_id",
    )
    """Store-assigned identifier, authoritative for matching when present."""
    reg_number: str = ""
    """Registration number, the display key (e.g. ``"KHI-LOG-A24"``)."""
    driver_name: str = ""
    status: VehicleStatus = VehicleStatus.ACTIVE
    lat: float = Field(default=0.0, ge=-90.0, le=90.0)
    lng: float = Field(default=0.0, ge=-180.0, le=180.0)
    speed: float = Field(default=0.0, ge=0.0)
    battery: float = Field(default=100.0, ge=0.0, le=100.0)
    cargo: str = ""
    destination: str = ""
    last_update: FleetTimestamp = Field(default_factory=utcnow)
    path: list[tuple[float, float]] = Field(default_factory=list)
    """Chronological ``(lat, lng)`` history, most recent last."""

    @property
    def position(self) -> tuple[float, float]:
        return (self.lat, self.lng)

    @model_validator(mode="before")
    @classmethod
    def _default_local_id(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        if values.get("id"):
            return values
        for key in ("_id", "storeId", "store_id"):
            store_id = values.get(key)
            if store_id:
                merged = dict(values)
                merged["id"] = str(store_id)
                return merged
        return values

    @field_validator("store_id", mode="before")
    @classmethod
    def _coerce_store_id(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("last_update", mode="before")
    @classmethod
    def _missing_last_update(cls, value: Any) -> Any:
        return utcnow() if value is None or value == "" else value
