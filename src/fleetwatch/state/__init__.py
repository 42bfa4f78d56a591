"""State layer.

This package is the single owner of the in-memory fleet: the sync,
simulation and command paths all mutate vehicles and logs through
:class:`~fleetwatch.state.store.FleetState`.
"""

from fleetwatch.state.events import Mode, ModeChange
from fleetwatch.state.keys import matches, resolve_key
from fleetwatch.state.store import FleetSnapshot, FleetState

__all__ = [
    "FleetSnapshot",
    "FleetState",
    "Mode",
    "ModeChange",
    "matches",
    "resolve_key",
]
