"""Dashboard configuration for fleetwatch."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from fleetwatch._constants import API_BASE
from fleetwatch.exceptions import FleetConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise FleetConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Dashboard configuration.

    Parameters
    ----------
    api_base : str
        Base URL of the store-backed fleet service, including the
        ``/api`` prefix.
    sync_interval : float
        Seconds between fleet sync ticks.
    simulation_interval : float
        Seconds between simulation ticks (only effective while simulated).
    heartbeat_interval : float
        Seconds between synthetic heartbeat log entries.
    heartbeat_when_connected : bool
        Keep emitting heartbeat entries while the store is reachable.
    request_timeout : float
        Total timeout in seconds for a single store request.
    advisory_api_key : str or None
        Gemini API key. Without one every advisory is the fallback.
    advisory_model : str
        Gemini model used for fleet risk advisories.
    advisory_timeout : float
        Seconds to wait for an advisory before using the fallback.
    """

    api_base: str = API_BASE
    sync_interval: float = 5.0
    simulation_interval: float = 2.0
    heartbeat_interval: float = 12.0
    heartbeat_when_connected: bool = True
    request_timeout: float = 10.0
    advisory_api_key: str | None = None
    advisory_model: str = "gemini-3-pro-preview"
    advisory_timeout: float = 30.0

    def __post_init__(self) -> None:
        for name in (
            "sync_interval",
            "simulation_interval",
            "heartbeat_interval",
            "request_timeout",
            "advisory_timeout",
        ):
            if getattr(self, name) <= 0:
                raise FleetConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if not self.api_base:
            raise FleetConfigError("api_base must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads ``FLEET_*`` variables plus ``GEMINI_API_KEY`` (or the
        legacy ``API_KEY``). Explicit keyword arguments override
        environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        api_base = env.get("FLEET_API_BASE")
        if api_base is not None:
            config_kwargs["api_base"] = api_base.rstrip("/")

        _ENV_FLOAT_MAP = {
            "FLEET_SYNC_INTERVAL": "sync_interval",
            "FLEET_SIMULATION_INTERVAL": "simulation_interval",
            "FLEET_HEARTBEAT_INTERVAL": "heartbeat_interval",
            "FLEET_REQUEST_TIMEOUT": "request_timeout",
            "FLEET_ADVISORY_TIMEOUT": "advisory_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "heartbeat_when_connected" not in overrides:
            config_kwargs["heartbeat_when_connected"] = _env_bool(env.get("FLEET_HEARTBEAT_WHEN_CONNECTED"), True)

        model = env.get("FLEET_ADVISORY_MODEL")
        if model:
            config_kwargs["advisory_model"] = model

        api_key = env.get("GEMINI_API_KEY") or env.get("API_KEY")
        if api_key:
            config_kwargs["advisory_api_key"] = api_key

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
