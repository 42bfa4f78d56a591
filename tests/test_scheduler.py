from __future__ import annotations

import asyncio

import pytest

from fleetwatch.scheduler import TickScheduler


@pytest.mark.asyncio
async def test_run_once_skips_while_previous_run_in_flight() -> None:
    gate = asyncio.Event()
    calls = 0

    async def slow_tick() -> None:
        nonlocal calls
        calls += 1
        await gate.wait()

    scheduler = TickScheduler()
    scheduler.add("sync", 60.0, slow_tick)

    first = asyncio.create_task(scheduler.run_once("sync"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert await scheduler.run_once("sync") is False
    assert scheduler.stats("sync")["skipped"] == 1

    gate.set()
    assert await first is True
    assert calls == 1
    assert scheduler.stats("sync") == {"runs": 1, "skipped": 1, "failures": 0}


@pytest.mark.asyncio
async def test_failing_tick_is_counted_and_does_not_raise() -> None:
    def broken() -> None:
        raise RuntimeError("boom")

    scheduler = TickScheduler()
    scheduler.add("heartbeat", 60.0, broken)

    assert await scheduler.run_once("heartbeat") is True
    assert scheduler.stats("heartbeat") == {"runs": 0, "skipped": 0, "failures": 1}


@pytest.mark.asyncio
async def test_timers_fire_until_stopped() -> None:
    counts = {"fast": 0, "delayed": 0}

    def fast() -> None:
        counts["fast"] += 1

    async def delayed() -> None:
        counts["delayed"] += 1

    scheduler = TickScheduler()
    scheduler.add("fast", 0.01, fast)
    scheduler.add("delayed", 10.0, delayed, run_immediately=False)
    scheduler.start()
    assert scheduler.running
    await asyncio.sleep(0.08)
    await scheduler.stop()

    assert not scheduler.running
    assert counts["fast"] >= 2
    assert counts["delayed"] == 0

    frozen = counts["fast"]
    await asyncio.sleep(0.03)
    assert counts["fast"] == frozen


@pytest.mark.asyncio
async def test_stop_cancels_in_flight_runs() -> None:
    started = asyncio.Event()

    async def hangs() -> None:
        started.set()
        await asyncio.Event().wait()

    scheduler = TickScheduler()
    scheduler.add("sync", 60.0, hangs)
    scheduler.start()
    await asyncio.wait_for(started.wait(), timeout=1.0)

    await scheduler.stop()

    assert scheduler.stats("sync") == {"runs": 0, "skipped": 0, "failures": 0}


def test_add_rejects_duplicates_and_bad_intervals() -> None:
    scheduler = TickScheduler()
    scheduler.add("sync", 5.0, lambda: None)
    with pytest.raises(ValueError):
        scheduler.add("sync", 5.0, lambda: None)
    with pytest.raises(ValueError):
        scheduler.add("simulation", 0, lambda: None)
