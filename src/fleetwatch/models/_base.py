"""Base model and enums for fleet records.

Every record model inherits from :class:`FleetBaseModel` which provides:

* ``alias_generator=to_camel`` so the store's camelCase keys map
  automatically to snake_case fields.
* Frozen instances: state changes always produce a new record via
  ``model_copy(update=...)``.
* ``extra="ignore"`` so document-store bookkeeping fields (``__v``)
  are dropped.
"""

from __future__ import annotations

import secrets
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_hash() -> str:
    """Opaque audit hash (32 hex chars), as the store stamps on log entries."""
    return secrets.token_hex(16)


def new_local_id(prefix: str) -> str:
    return f"{prefix}_{secrets.token_hex(6)}"


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce ISO strings or epoch numbers (seconds or ms) to an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    if isinstance(value, str):
        text = value.strip()
        # JavaScript Date.toISOString() ends in "Z".
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    return value  # type: ignore[no-any-return]


FleetTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that accepts ISO strings, epoch numbers and datetimes."""


class VehicleStatus(StrEnum):
    ACTIVE = "active"
    IDLE = "idle"
    WARNING = "warning"
    EMERGENCY = "emergency"


class Severity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class RiskLevel(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class FleetBaseModel(BaseModel):
    """Base for fleet records exchanged with the store."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-compatible dict using the store's key names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
