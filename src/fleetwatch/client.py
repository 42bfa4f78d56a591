"""High-level async client for the fleet store service."""

from __future__ import annotations

from typing import Any, Protocol

import aiohttp

from fleetwatch._api import fleet as _fleet_api
from fleetwatch._transport import JsonTransport
from fleetwatch.config import FleetConfig
from fleetwatch.exceptions import FleetError
from fleetwatch.models._base import VehicleStatus
from fleetwatch.models.log_entry import LogEntry
from fleetwatch.models.responses import SeedResult, StatusUpdateResult
from fleetwatch.models.vehicle import Vehicle


class FleetStore(Protocol):
    """The store collaborator the sync engine and command handler talk to.

    :class:`FleetClient` reaches the HTTP service;
    :class:`fleetwatch.memory_store.InMemoryFleetStore` keeps the same
    contract in process.
    """

    async def get_fleet(self) -> list[Vehicle]: ...

    async def get_logs(self) -> list[LogEntry]: ...

    async def seed(self) -> SeedResult: ...

    async def update_status(self, store_id: str, status: VehicleStatus | str) -> StatusUpdateResult: ...


class FleetClient:
    """Async client for the fleet store HTTP API.

    Usage::

        async with FleetClient(config) as client:
            vehicles = await client.get_fleet()
    """

    def __init__(
        self,
        config: FleetConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: JsonTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = JsonTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> JsonTransport:
        if self._transport is None:
            raise FleetError("Client not initialized. Use 'async with FleetClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Store operations
    # ------------------------------------------------------------------

    async def get_fleet(self) -> list[Vehicle]:
        return await _fleet_api.fetch_fleet(self._require_transport())

    async def get_logs(self) -> list[LogEntry]:
        return await _fleet_api.fetch_logs(self._require_transport())

    async def seed(self) -> SeedResult:
        return await _fleet_api.seed_fleet(self._require_transport())

    async def update_status(self, store_id: str, status: VehicleStatus | str) -> StatusUpdateResult:
        return await _fleet_api.update_vehicle_status(self._require_transport(), store_id, status)
