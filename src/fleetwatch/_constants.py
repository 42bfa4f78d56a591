"""Internal constants shared across the library."""

from __future__ import annotations

from typing import Any

API_BASE = "http://localhost:5000/api"
USER_AGENT = "fleetwatch/1.0"

# ------------------------------------------------------------------
# Store endpoints (relative to the API base)
# ------------------------------------------------------------------

FLEET_ENDPOINT = "/fleet"
LOGS_ENDPOINT = "/logs"
SEED_ENDPOINT = "/seed"
UPDATE_STATUS_ENDPOINT = "/fleet/update-status"

# ------------------------------------------------------------------
# State bounds
# ------------------------------------------------------------------

MAX_PATH_POINTS = 30
MAX_LOG_ENTRIES = 50

# ------------------------------------------------------------------
# Simulation tuning
# ------------------------------------------------------------------

SIM_MAX_SPEED = 80.0
SIM_POSITION_JITTER = 0.002
SIM_SPEED_JITTER = 5.0
SIM_BATTERY_DRAIN = 0.1

HEARTBEAT_MESSAGE = "Telemetry heartbeat acknowledged"
LINK_ESTABLISHED_MESSAGE = "Secure link established with central ledger"
LINK_VEHICLE_ID = "SYSTEM"

# ------------------------------------------------------------------
# Karachi operating area
# ------------------------------------------------------------------

VEHICLE_ID_PREFIX = "KHI-LOG-"
KARACHI_CENTER: tuple[float, float] = (24.8607, 67.0011)

KARACHI_LOCATIONS: tuple[dict[str, Any], ...] = (
    {"id": "h1", "name": "Port Qasim Industrial Area", "lat": 24.7758, "lng": 67.3340, "type": "hub"},
    {"id": "h2", "name": "S.I.T.E Area", "lat": 24.8981, "lng": 67.0142, "type": "hub"},
    {"id": "h3", "name": "Korangi Creek Industrial Park", "lat": 24.8089, "lng": 67.1147, "type": "hub"},
    {"id": "d1", "name": "DHA Phase 8", "lat": 24.7954, "lng": 67.0543, "type": "delivery"},
    {"id": "d2", "name": "North Nazimabad Block L", "lat": 24.9392, "lng": 67.0347, "type": "delivery"},
    {"id": "d3", "name": "Gulshan-e-Iqbal Block 13D", "lat": 24.9124, "lng": 67.0864, "type": "delivery"},
    {"id": "w1", "name": "Super Highway Warehouse", "lat": 24.9824, "lng": 67.1423, "type": "warehouse"},
    {"id": "w2", "name": "Malir Cantt Warehouse", "lat": 24.9174, "lng": 67.2023, "type": "warehouse"},
)

# Vehicle used when the dashboard starts offline with nothing to show.
SIM_BOOTSTRAP_VEHICLE: dict[str, Any] = {
    "id": "sim_1",
    "regNumber": f"{VEHICLE_ID_PREFIX}SIM-01",
    "driverName": "Offline Simulator",
    "status": "active",
    "lat": KARACHI_CENTER[0],
    "lng": KARACHI_CENTER[1],
    "speed": 40,
    "battery": 90,
    "cargo": "Simulation Data",
    "destination": "Site Area",
    "path": [list(KARACHI_CENTER)],
}

# Records written by the seed endpoint. Replaces every stored vehicle.
SEED_VEHICLES: tuple[dict[str, Any], ...] = (
    {
        "regNumber": "KHI-LOG-A24",
        "driverName": "Mohammad Ali",
        "status": "active",
        "lat": 24.8607,
        "lng": 67.0011,
        "speed": 45,
        "battery": 88,
        "cargo": "Medical Supplies",
        "destination": "North Nazimabad",
        "path": [[24.8607, 67.0011]],
    },
    {
        "regNumber": "KHI-LOG-B92",
        "driverName": "Zeeshan Khan",
        "status": "active",
        "lat": 24.8100,
        "lng": 67.0500,
        "speed": 32,
        "battery": 42,
        "cargo": "FMCG Goods",
        "destination": "DHA Phase 8",
        "path": [[24.8100, 67.0500]],
    },
    {
        "regNumber": "KHI-LOG-E99",
        "driverName": "Imran Ahmed",
        "status": "emergency",
        "lat": 24.7800,
        "lng": 67.3300,
        "speed": 0,
        "battery": 5,
        "cargo": "Heavy Machinery",
        "destination": "Port Qasim Hub",
        "path": [[24.7800, 67.3300]],
    },
)
