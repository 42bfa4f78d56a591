"""Dashboard runtime: one fleet state, its engines and their timers."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from typing import Any

from fleetwatch.advisory import Advisor, AdvisoryClient
from fleetwatch.client import FleetStore
from fleetwatch.commands import StatusCommandHandler
from fleetwatch.config import FleetConfig
from fleetwatch.ingestion.sync import FleetSyncEngine
from fleetwatch.models._base import VehicleStatus
from fleetwatch.models.advisory import Advisory
from fleetwatch.models.log_entry import LogEntry
from fleetwatch.models.vehicle import Vehicle
from fleetwatch.scheduler import TickScheduler
from fleetwatch.simulation import HeartbeatEmitter, SimulationEngine
from fleetwatch.state.events import Mode, ModeChange
from fleetwatch.state.store import FleetSnapshot, FleetState

_logger = logging.getLogger(__name__)

SYNC_JOB = "sync"
SIMULATION_JOB = "simulation"
HEARTBEAT_JOB = "heartbeat"


class FleetDashboard:
    """Owns the fleet state and drives the sync, simulation and heartbeat ticks.

    Usage::

        async with FleetClient(config) as client:
            async with FleetDashboard(config, client) as dashboard:
                await dashboard.update_status("sim_1", "warning")
                advisory = await dashboard.refresh_advisory()
    """

    def __init__(
        self,
        config: FleetConfig,
        store: FleetStore,
        *,
        advisor: Advisor | None = None,
        state: FleetState | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self.state = state if state is not None else FleetState()
        rng = rng or random.Random()
        self.sync = FleetSyncEngine(self.state, store)
        self.simulation = SimulationEngine(self.state, rng=rng)
        self.heartbeat = HeartbeatEmitter(
            self.state,
            rng=rng,
            when_connected=config.heartbeat_when_connected,
        )
        self.commands = StatusCommandHandler(self.state, store)
        self._advisor: Advisor = advisor if advisor is not None else AdvisoryClient(config)
        self.advisory: Advisory | None = None
        self.advisory_loading = False

        self._scheduler = TickScheduler()
        self._scheduler.add(SYNC_JOB, config.sync_interval, self.sync.tick)
        self._scheduler.add(SIMULATION_JOB, config.simulation_interval, self.simulation.tick, run_immediately=False)
        self._scheduler.add(HEARTBEAT_JOB, config.heartbeat_interval, self.heartbeat.tick, run_immediately=False)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetDashboard:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    def start(self) -> None:
        _logger.info(
            "Starting dashboard (sync every %ss, simulation every %ss, heartbeat every %ss)",
            self._config.sync_interval,
            self._config.simulation_interval,
            self._config.heartbeat_interval,
        )
        self._scheduler.start()

    async def stop(self) -> None:
        await self._scheduler.stop()

    @property
    def scheduler(self) -> TickScheduler:
        return self._scheduler

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self.state.mode

    def snapshot(self) -> FleetSnapshot:
        return self.state.snapshot()

    def search(self, query: str) -> list[Vehicle]:
        return self.state.search(query)

    def select(self, ref: str | None) -> Vehicle | None:
        return self.state.select(ref)

    def on_mode_change(self, listener: Callable[[ModeChange], None]) -> Callable[[], None]:
        return self.state.add_mode_listener(listener)

    # ------------------------------------------------------------------
    # Operator actions
    # ------------------------------------------------------------------

    async def sync_now(self) -> bool:
        """Run a sync tick immediately unless one is already in flight."""
        return await self._scheduler.run_once(SYNC_JOB)

    async def update_status(self, vehicle_ref: str, status: VehicleStatus | str) -> LogEntry:
        return await self.commands.update_status(vehicle_ref, status)

    async def toggle_emergency(self, vehicle_ref: str) -> LogEntry:
        return await self.commands.toggle_emergency(vehicle_ref)

    async def refresh_advisory(self) -> Advisory | None:
        """Request a fresh advisory for the current fleet.

        Returns the previous advisory unchanged when a request is already
        loading.
        """
        if self.advisory_loading:
            return self.advisory
        self.advisory_loading = True
        try:
            self.advisory = await self._advisor.analyze(self.state.vehicles)
        finally:
            self.advisory_loading = False
        return self.advisory
