"""Interval timers for dashboard ticks.

Each registered job gets its own timer task. When a timer fires while
the job's previous run is still in flight the run is skipped, not
queued, so a slow store call never stacks up ticks and never holds back
the other timers.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

_logger = logging.getLogger(__name__)

TickFn = Callable[[], Any]
"""A tick callable; coroutine functions are awaited."""


@dataclass(slots=True)
class _Job:
    name: str
    interval: float
    fn: TickFn
    run_immediately: bool = True
    timer: asyncio.Task[None] | None = None
    in_flight: asyncio.Task[None] | None = None
    runs: int = 0
    skipped: int = 0
    failures: int = 0

    @property
    def busy(self) -> bool:
        return self.in_flight is not None and not self.in_flight.done()


class TickScheduler:
    """Run named tick callables on independent intervals with skip-if-busy guards."""

    def __init__(self) -> None:
        self._jobs: dict[str, _Job] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def add(self, name: str, interval: float, fn: TickFn, *, run_immediately: bool = True) -> None:
        if name in self._jobs:
            raise ValueError(f"job {name!r} already registered")
        if interval <= 0:
            raise ValueError(f"interval for {name!r} must be positive, got {interval}")
        self._jobs[name] = _Job(name=name, interval=interval, fn=fn, run_immediately=run_immediately)
        if self._running:
            self._start_job(self._jobs[name])

    def stats(self, name: str) -> dict[str, int]:
        job = self._jobs[name]
        return {"runs": job.runs, "skipped": job.skipped, "failures": job.failures}

    def start(self) -> None:
        """Start every timer. Must be called from a running event loop."""
        if self._running:
            return
        self._running = True
        for job in self._jobs.values():
            self._start_job(job)

    async def stop(self) -> None:
        """Cancel all timers and in-flight runs and wait for them to finish."""
        self._running = False
        tasks: list[asyncio.Task[None]] = []
        for job in self._jobs.values():
            if job.timer is not None:
                tasks.append(job.timer)
                job.timer = None
            if job.in_flight is not None:
                tasks.append(job.in_flight)
                job.in_flight = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def run_once(self, name: str) -> bool:
        """Run *name* now and wait for it; returns ``False`` if it was already busy."""
        job = self._jobs[name]
        task = self._fire(job)
        if task is None:
            return False
        await asyncio.shield(task)
        return True

    def _start_job(self, job: _Job) -> None:
        job.timer = asyncio.create_task(self._timer(job), name=f"tick-timer:{job.name}")

    async def _timer(self, job: _Job) -> None:
        if not job.run_immediately:
            await asyncio.sleep(job.interval)
        while True:
            self._fire(job)
            await asyncio.sleep(job.interval)

    def _fire(self, job: _Job) -> asyncio.Task[None] | None:
        if job.busy:
            job.skipped += 1
            _logger.debug("Skipping %s tick, previous run still in flight", job.name)
            return None
        job.in_flight = asyncio.create_task(self._run(job), name=f"tick:{job.name}")
        return job.in_flight

    async def _run(self, job: _Job) -> None:
        try:
            result = job.fn()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:
            job.failures += 1
            _logger.exception("%s tick failed", job.name)
        else:
            job.runs += 1
