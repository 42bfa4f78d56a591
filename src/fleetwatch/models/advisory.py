"""Fleet risk advisory model."""

from __future__ import annotations

from pydantic import Field, field_validator

from fleetwatch.models._base import FleetBaseModel, RiskLevel


class Advisory(FleetBaseModel):
    """AI-generated risk summary for the current fleet.

    Parameters
    ----------
    summary : str
        Short overview of fleet health.
    recommendations : tuple of str
        Ordered, read-only operator recommendations.
    risk_level : RiskLevel
        ``Low``, ``Medium`` or ``High`` (``riskLevel`` on the wire).
    """

    summary: str = Field(min_length=1)
    recommendations: tuple[str, ...]
    risk_level: RiskLevel

    @field_validator("summary")
    @classmethod
    def _strip_summary(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("summary must be non-empty")
        return stripped


FALLBACK_ADVISORY = Advisory(
    summary="AI Engine encountered a synchronization error. Operating on standard protocols.",
    recommendations=(
        "Monitor battery levels manually for units below 20%",
        "Maintain direct radio contact with all units",
        "Verify network link in command dashboard",
        "Check advisory API key permissions",
    ),
    risk_level=RiskLevel.MEDIUM,
)
"""Deterministic advisory returned whenever the advisory service fails."""
