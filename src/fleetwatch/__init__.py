"""fleetwatch - Async fleet tracking dashboard core with offline simulation."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetwatch")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetwatch.advisory import AdvisoryClient
from fleetwatch.client import FleetClient, FleetStore
from fleetwatch.commands import StatusCommandHandler
from fleetwatch.config import FleetConfig
from fleetwatch.dashboard import FleetDashboard
from fleetwatch.exceptions import (
    FleetAdvisoryError,
    FleetApiError,
    FleetConfigError,
    FleetError,
    FleetNotFoundError,
    FleetTransportError,
)
from fleetwatch.ingestion.sync import FleetSyncEngine
from fleetwatch.memory_store import InMemoryFleetStore
from fleetwatch.models import (
    FALLBACK_ADVISORY,
    Advisory,
    LogEntry,
    RiskLevel,
    SeedResult,
    Severity,
    StatusUpdateResult,
    Vehicle,
    VehicleStatus,
)
from fleetwatch.scheduler import TickScheduler
from fleetwatch.simulation import HeartbeatEmitter, SimulationEngine
from fleetwatch.state import FleetSnapshot, FleetState, Mode, ModeChange, matches, resolve_key

__all__ = [
    "__version__",
    "FALLBACK_ADVISORY",
    "Advisory",
    "AdvisoryClient",
    "FleetAdvisoryError",
    "FleetApiError",
    "FleetClient",
    "FleetConfig",
    "FleetConfigError",
    "FleetDashboard",
    "FleetError",
    "FleetNotFoundError",
    "FleetSnapshot",
    "FleetState",
    "FleetStore",
    "FleetSyncEngine",
    "FleetTransportError",
    "HeartbeatEmitter",
    "InMemoryFleetStore",
    "LogEntry",
    "Mode",
    "ModeChange",
    "RiskLevel",
    "SeedResult",
    "Severity",
    "SimulationEngine",
    "StatusCommandHandler",
    "StatusUpdateResult",
    "TickScheduler",
    "Vehicle",
    "VehicleStatus",
    "matches",
    "resolve_key",
]
