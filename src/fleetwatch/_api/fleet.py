"""Fleet store endpoints.

Endpoints:
  - GET  /fleet
  - GET  /logs
  - POST /seed
  - POST /fleet/update-status
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fleetwatch._constants import FLEET_ENDPOINT, LOGS_ENDPOINT, SEED_ENDPOINT, UPDATE_STATUS_ENDPOINT
from fleetwatch._transport import Transport
from fleetwatch.exceptions import FleetApiError, FleetNotFoundError, FleetTransportError
from fleetwatch.models._base import VehicleStatus
from fleetwatch.models.log_entry import LogEntry
from fleetwatch.models.responses import SeedResult, StatusUpdateResult
from fleetwatch.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _raise_for_error_body(endpoint: str, decoded: Any) -> None:
    if isinstance(decoded, dict) and "error" in decoded:
        raise FleetApiError(f"{endpoint} failed: {decoded.get('error')}", endpoint=endpoint)


def _parse_list(endpoint: str, decoded: Any, model: type[M]) -> list[M]:
    _raise_for_error_body(endpoint, decoded)
    if not isinstance(decoded, list):
        raise FleetApiError(f"{endpoint} returned {type(decoded).__name__}, expected a list", endpoint=endpoint)
    try:
        return [model.model_validate(item) for item in decoded]
    except ValidationError as exc:
        raise FleetApiError(f"{endpoint} returned an invalid record: {exc}", endpoint=endpoint) from exc


def _parse_object(endpoint: str, decoded: Any, model: type[M]) -> M:
    _raise_for_error_body(endpoint, decoded)
    if not isinstance(decoded, dict):
        raise FleetApiError(f"{endpoint} returned {type(decoded).__name__}, expected an object", endpoint=endpoint)
    try:
        return model.model_validate(decoded)
    except ValidationError as exc:
        raise FleetApiError(f"{endpoint} returned an invalid payload: {exc}", endpoint=endpoint) from exc


async def fetch_fleet(transport: Transport) -> list[Vehicle]:
    """Fetch every stored vehicle."""
    decoded = await transport.get_json(FLEET_ENDPOINT)
    return _parse_list(FLEET_ENDPOINT, decoded, Vehicle)


async def fetch_logs(transport: Transport) -> list[LogEntry]:
    """Fetch the newest audit entries (the store caps and orders them)."""
    decoded = await transport.get_json(LOGS_ENDPOINT)
    return _parse_list(LOGS_ENDPOINT, decoded, LogEntry)


async def seed_fleet(transport: Transport) -> SeedResult:
    """Replace all stored vehicles with the fixed seed set."""
    decoded = await transport.post_json(SEED_ENDPOINT)
    result = _parse_object(SEED_ENDPOINT, decoded, SeedResult)
    _logger.info("Store seeded: %s (%d vehicles)", result.message, result.count)
    return result


async def update_vehicle_status(
    transport: Transport,
    store_id: str,
    status: VehicleStatus | str,
) -> StatusUpdateResult:
    """Persist a status change; returns the stored vehicle and its audit entry."""
    payload = {"id": store_id, "status": str(VehicleStatus(status))}
    try:
        decoded = await transport.post_json(UPDATE_STATUS_ENDPOINT, payload)
    except FleetTransportError as exc:
        if exc.status_code == 404:
            raise FleetNotFoundError(
                f"Vehicle {store_id} not found",
                endpoint=UPDATE_STATUS_ENDPOINT,
            ) from exc
        raise
    return _parse_object(UPDATE_STATUS_ENDPOINT, decoded, StatusUpdateResult)
