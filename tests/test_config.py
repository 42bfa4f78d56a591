from __future__ import annotations

import pytest

from fleetwatch.config import FleetConfig
from fleetwatch.exceptions import FleetConfigError

_ENV_KEYS = (
    "FLEET_API_BASE",
    "FLEET_SYNC_INTERVAL",
    "FLEET_SIMULATION_INTERVAL",
    "FLEET_HEARTBEAT_INTERVAL",
    "FLEET_REQUEST_TIMEOUT",
    "FLEET_ADVISORY_TIMEOUT",
    "FLEET_HEARTBEAT_WHEN_CONNECTED",
    "FLEET_ADVISORY_MODEL",
    "GEMINI_API_KEY",
    "API_KEY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = FleetConfig.from_env()
    assert config.api_base == "http://localhost:5000/api"
    assert config.sync_interval == 5.0
    assert config.simulation_interval == 2.0
    assert config.heartbeat_interval == 12.0
    assert config.heartbeat_when_connected is True
    assert config.advisory_api_key is None


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_API_BASE", "http://fleet.internal:8080/api/")
    monkeypatch.setenv("FLEET_SYNC_INTERVAL", "7.5")
    monkeypatch.setenv("FLEET_HEARTBEAT_WHEN_CONNECTED", "off")
    monkeypatch.setenv("FLEET_ADVISORY_MODEL", "gemini-2.5-flash")
    monkeypatch.setenv("GEMINI_API_KEY", "gem-key")

    config = FleetConfig.from_env()

    assert config.api_base == "http://fleet.internal:8080/api"
    assert config.sync_interval == 7.5
    assert config.heartbeat_when_connected is False
    assert config.advisory_model == "gemini-2.5-flash"
    assert config.advisory_api_key == "gem-key"


def test_legacy_api_key_is_used_when_gemini_key_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_KEY", "legacy-key")
    assert FleetConfig.from_env().advisory_api_key == "legacy-key"


def test_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_SYNC_INTERVAL", "9")
    monkeypatch.setenv("FLEET_HEARTBEAT_WHEN_CONNECTED", "false")

    config = FleetConfig.from_env(sync_interval=1.0, heartbeat_when_connected=True)

    assert config.sync_interval == 1.0
    assert config.heartbeat_when_connected is True


def test_invalid_number_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_HEARTBEAT_INTERVAL", "soon")
    with pytest.raises(FleetConfigError, match="FLEET_HEARTBEAT_INTERVAL"):
        FleetConfig.from_env()


@pytest.mark.parametrize(
    "field_name",
    ["sync_interval", "simulation_interval", "heartbeat_interval", "request_timeout", "advisory_timeout"],
)
def test_non_positive_interval_rejected(field_name: str) -> None:
    with pytest.raises(FleetConfigError, match=field_name):
        FleetConfig(**{field_name: 0})


def test_empty_api_base_rejected() -> None:
    with pytest.raises(FleetConfigError):
        FleetConfig(api_base="")


def test_zero_advisory_timeout_from_env_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_ADVISORY_TIMEOUT", "0")
    with pytest.raises(FleetConfigError, match="advisory_timeout"):
        FleetConfig.from_env()
