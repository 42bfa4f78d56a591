from __future__ import annotations

from fleetwatch.models import LogEntry, Vehicle, VehicleStatus
from fleetwatch.state import FleetState, Mode, ModeChange, matches, resolve_key


def _fleet() -> list[Vehicle]:
    return [
        Vehicle(id="v1", store_id="db-1", reg_number="KHI-LOG-A24", driver_name="Mohammad Ali"),
        Vehicle(id="v2", reg_number="KHI-LOG-B92", driver_name="Zeeshan Khan"),
        Vehicle(id="v3", store_id="db-3", reg_number="KHI-LOG-E99", driver_name="Imran Ahmed"),
    ]


def _log(n: int) -> LogEntry:
    return LogEntry(id=f"log-{n}", vehicle_id="KHI-LOG-A24", message=f"entry {n}")


def test_resolve_key_prefers_store_id() -> None:
    assert resolve_key(Vehicle(id="v1", store_id="db-1")) == "db-1"
    assert resolve_key(Vehicle(id="v2")) == "v2"


def test_matches_accepts_store_id_and_local_id() -> None:
    vehicle = Vehicle(id="v1", store_id="db-1")
    assert matches(vehicle, "db-1")
    assert matches(vehicle, "v1")
    assert not matches(vehicle, "v2")


def test_find_uses_dual_key_matching() -> None:
    state = FleetState(_fleet())
    assert state.find("db-1") is not None
    assert state.find("v1") is state.find("db-1")
    assert state.find("v2") is not None
    assert state.find("missing") is None


def test_replace_vehicle_by_local_id_after_persistence() -> None:
    state = FleetState(_fleet())
    replacement = Vehicle(id="v1", store_id="db-1", reg_number="KHI-LOG-A24", status=VehicleStatus.IDLE)

    assert state.replace_vehicle("v1", replacement)
    assert state.vehicles[0] is replacement
    assert [v.id for v in state.vehicles] == ["v1", "v2", "v3"]


def test_replace_vehicle_unknown_ref_leaves_fleet_untouched() -> None:
    state = FleetState(_fleet())
    before = state.vehicles
    assert not state.replace_vehicle("nope", Vehicle(id="x"))
    assert state.vehicles == before


def test_update_vehicle_returns_new_record() -> None:
    state = FleetState(_fleet())
    updated = state.update_vehicle("v2", status=VehicleStatus.WARNING)

    assert updated is not None
    assert updated.status == VehicleStatus.WARNING
    assert state.find("v2") is updated


def test_log_buffer_capped_oldest_evicted() -> None:
    state = FleetState()
    for n in range(60):
        state.prepend_log(_log(n))

    logs = state.logs
    assert len(logs) == 50
    assert logs[0].id == "log-59"
    assert logs[-1].id == "log-10"


def test_replace_logs_ignores_empty_list() -> None:
    state = FleetState()
    state.prepend_log(_log(1))

    assert not state.replace_logs([])
    assert [entry.id for entry in state.logs] == ["log-1"]

    assert state.replace_logs([_log(7), _log(6)])
    assert [entry.id for entry in state.logs] == ["log-7", "log-6"]


def test_replace_logs_respects_cap() -> None:
    state = FleetState()
    state.replace_logs([_log(n) for n in range(80)])
    assert len(state.logs) == 50


def test_search_matches_reg_number_or_driver_case_insensitive() -> None:
    state = FleetState(_fleet())
    assert [v.id for v in state.search("b92")] == ["v2"]
    assert [v.id for v in state.search("IMRAN")] == ["v3"]
    assert len(state.search("  ")) == 3
    assert state.search("nobody") == []


def test_selection_survives_fleet_replacement() -> None:
    state = FleetState(_fleet())
    assert state.select("v1") is not None

    state.replace_fleet([Vehicle(id="db-1", store_id="db-1", reg_number="KHI-LOG-A24", speed=12)])

    selected = state.selected_vehicle
    assert selected is not None
    assert selected.speed == 12

    state.select(None)
    assert state.selected_vehicle is None


def test_set_mode_notifies_only_on_change() -> None:
    state = FleetState()
    changes: list[ModeChange] = []
    remove = state.add_mode_listener(changes.append)

    assert state.mode == Mode.SIMULATED
    assert not state.set_mode(Mode.SIMULATED)
    assert state.set_mode(Mode.CONNECTED)
    assert state.is_connected

    assert len(changes) == 1
    assert changes[0].previous == Mode.SIMULATED
    assert changes[0].current == Mode.CONNECTED

    remove()
    state.set_mode(Mode.SIMULATED)
    assert len(changes) == 1


def test_failing_mode_listener_does_not_block_others() -> None:
    state = FleetState()
    seen: list[Mode] = []

    def _boom(_change: ModeChange) -> None:
        raise RuntimeError("listener bug")

    state.add_mode_listener(_boom)
    state.add_mode_listener(lambda change: seen.append(change.current))

    state.set_mode(Mode.CONNECTED)
    assert seen == [Mode.CONNECTED]


def test_snapshot_is_immutable_copy() -> None:
    state = FleetState(_fleet(), mode=Mode.CONNECTED)
    state.prepend_log(_log(1))
    snapshot = state.snapshot()

    state.replace_fleet([])
    assert len(snapshot.vehicles) == 3
    assert snapshot.mode == Mode.CONNECTED
    assert snapshot.logs[0].id == "log-1"
