#!/usr/bin/env python3
"""Drive the fleet dashboard from a terminal.

Runs the same sync/simulation/heartbeat loop the UI uses and prints the
fleet and audit feed, so the live/simulated behaviour can be checked
without a browser.

Usage
-----
Point it at a running fleet service (or use ``--memory``)::

    export FLEET_API_BASE="http://localhost:5000/api"
    python scripts/fleet_console.py watch --seconds 30

Commands::

    watch               Run the dashboard loop and print snapshots
    status REF STATUS   Change a vehicle's status (active/idle/warning/emergency)
    panic REF           Toggle the emergency alarm on a vehicle
    advise              Request a fleet risk advisory (needs GEMINI_API_KEY)

Options::

    --memory            Use the in-process store instead of HTTP
    --offline           With --memory: start with the store unreachable
    --json              Print snapshots as JSON
    -v                  Enable DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetwatch import (  # noqa: E402
    FleetClient,
    FleetConfig,
    FleetDashboard,
    FleetSnapshot,
    InMemoryFleetStore,
    resolve_key,
)

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_snapshot(snapshot: FleetSnapshot, *, max_logs: int = 5) -> str:
    badge = "DB::SYNCED" if snapshot.mode == "connected" else "LOCAL::MODE"
    lines = [_section(f"{badge}  ({len(snapshot.vehicles)} units)")]
    for v in snapshot.vehicles:
        lines.append(
            f"  {v.reg_number:<16} {v.status.value:<10} "
            f"{v.lat:9.5f},{v.lng:9.5f}  {v.speed:5.1f} km/h  {v.battery:5.1f}%  "
            f"[{resolve_key(v)}]"
        )
    lines.append("  -- audit --")
    for entry in snapshot.logs[:max_logs]:
        lines.append(
            f"  {entry.timestamp:%H:%M:%S} {entry.severity.value:<8} {entry.vehicle_id:<16} {entry.message}"
        )
    return "\n".join(lines)


def _print_snapshot(snapshot: FleetSnapshot, as_json: bool) -> None:
    if as_json:
        payload: dict[str, Any] = {
            "mode": snapshot.mode.value,
            "vehicles": [v.to_wire() for v in snapshot.vehicles],
            "logs": [entry.to_wire() for entry in snapshot.logs],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(_format_snapshot(snapshot))


@contextlib.asynccontextmanager
async def _open_store(args: argparse.Namespace, config: FleetConfig) -> Any:
    if args.memory:
        yield InMemoryFleetStore(offline=args.offline)
        return
    async with FleetClient(config) as client:
        yield client


# ── commands ─────────────────────────────────────────────────


async def _watch(dashboard: FleetDashboard, args: argparse.Namespace) -> None:
    dashboard.on_mode_change(lambda change: print(f"\n*** mode: {change.previous} -> {change.current}"))
    async with dashboard:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + args.seconds
        while loop.time() < deadline:
            await asyncio.sleep(args.every)
            _print_snapshot(dashboard.snapshot(), args.json)


async def _status(dashboard: FleetDashboard, args: argparse.Namespace) -> None:
    await dashboard.sync_now()
    entry = await dashboard.update_status(args.ref, args.status)
    print(f"[{dashboard.mode}] {entry.vehicle_id}: {entry.message} ({entry.severity})")
    _print_snapshot(dashboard.snapshot(), args.json)


async def _panic(dashboard: FleetDashboard, args: argparse.Namespace) -> None:
    await dashboard.sync_now()
    entry = await dashboard.toggle_emergency(args.ref)
    print(f"[{dashboard.mode}] {entry.vehicle_id}: {entry.message} ({entry.severity})")


async def _advise(dashboard: FleetDashboard, args: argparse.Namespace) -> None:
    await dashboard.sync_now()
    advisory = await dashboard.refresh_advisory()
    if advisory is None:
        return
    if args.json:
        print(json.dumps(advisory.to_wire(), indent=2, ensure_ascii=False))
        return
    print(_section(f"Risk: {advisory.risk_level}"))
    print(f"  {advisory.summary}")
    for i, rec in enumerate(advisory.recommendations, 1):
        print(f"  {i}. {rec}")


_COMMANDS = {
    "watch": _watch,
    "status": _status,
    "panic": _panic,
    "advise": _advise,
}


async def _main(args: argparse.Namespace) -> int:
    config = FleetConfig.from_env()
    async with _open_store(args, config) as store:
        dashboard = FleetDashboard(config, store)
        await _COMMANDS[args.command](dashboard, args)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Fleet dashboard console")
    parser.add_argument("--memory", action="store_true", help="Use the in-process store")
    parser.add_argument("--offline", action="store_true", help="With --memory: store unreachable")
    parser.add_argument("--json", action="store_true", help="JSON output")
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG logging")
    sub = parser.add_subparsers(dest="command", required=True)

    watch = sub.add_parser("watch", help="Run the dashboard loop")
    watch.add_argument("--seconds", type=float, default=30.0, help="How long to run")
    watch.add_argument("--every", type=float, default=5.0, help="Print interval")

    status = sub.add_parser("status", help="Change a vehicle's status")
    status.add_argument("ref", help="Vehicle id or store id")
    status.add_argument("status", choices=["active", "idle", "warning", "emergency"])

    panic = sub.add_parser("panic", help="Toggle the emergency alarm")
    panic.add_argument("ref", help="Vehicle id or store id")

    sub.add_parser("advise", help="Request a fleet risk advisory")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    try:
        sys.exit(asyncio.run(_main(args)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
