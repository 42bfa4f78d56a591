from __future__ import annotations

import asyncio
import random
from collections.abc import Sequence

import pytest

from fleetwatch._constants import LINK_ESTABLISHED_MESSAGE
from fleetwatch.config import FleetConfig
from fleetwatch.dashboard import FleetDashboard
from fleetwatch.memory_store import InMemoryFleetStore
from fleetwatch.models import FALLBACK_ADVISORY, Advisory, RiskLevel, Severity, Vehicle, VehicleStatus
from fleetwatch.state import Mode, ModeChange, resolve_key


class _FakeAdvisor:
    def __init__(self) -> None:
        self.gate = asyncio.Event()
        self.gate.set()
        self.calls = 0

    async def analyze(self, vehicles: Sequence[Vehicle]) -> Advisory:
        self.calls += 1
        await self.gate.wait()
        return Advisory(summary=f"{len(vehicles)} units tracked", recommendations=("Hold",), risk_level=RiskLevel.LOW)


def _dashboard(store: InMemoryFleetStore, **config: float) -> FleetDashboard:
    return FleetDashboard(
        FleetConfig(**config),
        store,
        advisor=_FakeAdvisor(),
        rng=random.Random(7),
    )


@pytest.mark.asyncio
async def test_sync_seeds_empty_store_and_connects() -> None:
    store = InMemoryFleetStore()
    dashboard = _dashboard(store)

    assert await dashboard.sync_now() is True

    assert dashboard.mode == Mode.CONNECTED
    assert store.seed_calls == 1
    snapshot = dashboard.snapshot()
    assert [v.reg_number for v in snapshot.vehicles] == ["KHI-LOG-A24", "KHI-LOG-B92", "KHI-LOG-E99"]
    assert all(v.store_id for v in snapshot.vehicles)
    assert snapshot.logs[0].message == LINK_ESTABLISHED_MESSAGE


@pytest.mark.asyncio
async def test_connected_status_update_is_persisted() -> None:
    store = InMemoryFleetStore()
    dashboard = _dashboard(store)
    await dashboard.sync_now()
    target = dashboard.snapshot().vehicles[1]

    entry = await dashboard.update_status(resolve_key(target), "emergency")

    assert entry.severity == Severity.CRITICAL
    assert dashboard.state.find(resolve_key(target)).status == VehicleStatus.EMERGENCY  # type: ignore[union-attr]
    stored = {v.store_id: v for v in await store.get_fleet()}
    assert stored[target.store_id].status == VehicleStatus.EMERGENCY

    await dashboard.sync_now()
    assert dashboard.snapshot().logs[0].message == "Status updated to EMERGENCY"


@pytest.mark.asyncio
async def test_unreachable_store_runs_simulated_fleet() -> None:
    store = InMemoryFleetStore(offline=True)
    dashboard = _dashboard(store)

    await dashboard.sync_now()
    assert dashboard.mode == Mode.SIMULATED

    assert dashboard.simulation.tick() is True
    vehicle = dashboard.state.find("sim_1")
    assert vehicle is not None
    assert len(vehicle.path) == 2

    entry = await dashboard.toggle_emergency("sim_1")
    assert entry.severity == Severity.CRITICAL
    assert dashboard.state.find("sim_1").status == VehicleStatus.EMERGENCY  # type: ignore[union-attr]
    assert store.seed_calls == 0


@pytest.mark.asyncio
async def test_mode_listener_sees_link_drop_and_recovery() -> None:
    store = InMemoryFleetStore()
    dashboard = _dashboard(store)
    changes: list[ModeChange] = []
    dashboard.on_mode_change(changes.append)

    await dashboard.sync_now()
    store.offline = True
    await dashboard.sync_now()
    store.offline = False
    await dashboard.sync_now()

    assert [(c.previous, c.current) for c in changes] == [
        (Mode.SIMULATED, Mode.CONNECTED),
        (Mode.CONNECTED, Mode.SIMULATED),
        (Mode.SIMULATED, Mode.CONNECTED),
    ]


@pytest.mark.asyncio
async def test_search_and_select() -> None:
    dashboard = _dashboard(InMemoryFleetStore())
    await dashboard.sync_now()

    hits = dashboard.search("zeeshan")
    assert [v.reg_number for v in hits] == ["KHI-LOG-B92"]
    selected = dashboard.select(resolve_key(hits[0]))
    assert selected == hits[0]
    assert dashboard.snapshot().selected_key == resolve_key(hits[0])


@pytest.mark.asyncio
async def test_refresh_advisory_ignores_overlapping_requests() -> None:
    dashboard = _dashboard(InMemoryFleetStore())
    advisor = dashboard._advisor
    assert isinstance(advisor, _FakeAdvisor)
    await dashboard.sync_now()
    advisor.gate.clear()

    first = asyncio.create_task(dashboard.refresh_advisory())
    await asyncio.sleep(0)
    assert dashboard.advisory_loading is True

    assert await dashboard.refresh_advisory() is None
    advisor.gate.set()
    advisory = await first

    assert advisor.calls == 1
    assert advisory is not None
    assert advisory.summary == "3 units tracked"
    assert dashboard.advisory == advisory
    assert dashboard.advisory_loading is False


@pytest.mark.asyncio
async def test_default_advisor_without_key_returns_fallback() -> None:
    dashboard = FleetDashboard(FleetConfig(advisory_api_key=None), InMemoryFleetStore(offline=True))
    assert await dashboard.refresh_advisory() == FALLBACK_ADVISORY


@pytest.mark.asyncio
async def test_running_dashboard_connects_and_stops() -> None:
    store = InMemoryFleetStore()
    dashboard = _dashboard(store, sync_interval=0.02, simulation_interval=0.01, heartbeat_interval=0.01)

    async with dashboard:
        await asyncio.sleep(0.1)
        assert dashboard.mode == Mode.CONNECTED

    assert dashboard.scheduler.stats("sync")["runs"] >= 1
    assert dashboard.scheduler.stats("sync")["failures"] == 0
    assert not dashboard.scheduler.running
    # Simulation is a no-op while connected.
    assert all(len(v.path) == 1 for v in dashboard.state.vehicles)
