"""Operating mode and its change notifications."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from fleetwatch.models._base import utcnow


class Mode(StrEnum):
    CONNECTED = "connected"
    SIMULATED = "simulated"


class ModeChange(BaseModel):
    """Emitted to mode listeners whenever the operating mode flips."""

    model_config = ConfigDict(frozen=True)

    previous: Mode
    current: Mode
    changed_at: datetime = Field(default_factory=utcnow)
