"""Ingestion layer.

Adapters that pull fleet data from the store and reconcile it into
:class:`~fleetwatch.state.store.FleetState`.
"""

from fleetwatch.ingestion.sync import FleetSyncEngine

__all__ = ["FleetSyncEngine"]
