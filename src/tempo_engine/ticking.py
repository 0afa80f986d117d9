"""Periodic tick sources that drive the workout engine.

The engine owns at most one live ``TickHandle`` at a time and cancels it on
every state-exiting transition. Two sources are provided:

* ``SchedulerTickSource`` — an APScheduler interval job on a background
  thread, for real-time hosts.
* ``ManualTickSource`` — fires only when ``advance()`` is called; used by
  tests and by hosts that already own a clock.
"""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

from tempo_engine.config import TICK_INTERVAL_S

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickHandle(ABC):
    """A cancellable reference to one scheduled periodic task."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the task. Safe to call more than once."""
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class TickSource(ABC):
    @abstractmethod
    def schedule(self, callback: TickCallback, interval_s: float = TICK_INTERVAL_S) -> TickHandle:
        """Start calling *callback* every *interval_s* seconds."""
        ...


# ---------------------------------------------------------------------------
# Manual source
# ---------------------------------------------------------------------------


class _ManualHandle(TickHandle):
    def __init__(self, source: ManualTickSource, callback: TickCallback) -> None:
        self._source = source
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._source._live.remove(self)

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualTickSource(TickSource):
    """Deterministic tick source: time only passes when ``advance()`` is called."""

    def __init__(self) -> None:
        self._live: list[_ManualHandle] = []
        self.schedule_count = 0

    def schedule(self, callback: TickCallback, interval_s: float = TICK_INTERVAL_S) -> TickHandle:
        handle = _ManualHandle(self, callback)
        self._live.append(handle)
        self.schedule_count += 1
        return handle

    @property
    def live_count(self) -> int:
        """Number of scheduled tasks that have not been cancelled."""
        return len(self._live)

    def advance(self, ticks: int = 1) -> int:
        """Fire every live task *ticks* times. Returns the number of callbacks run.

        Handles scheduled or cancelled by a callback take effect on the next
        tick, mirroring a real timer.
        """
        fired = 0
        for _ in range(ticks):
            for handle in list(self._live):
                if not handle.cancelled:
                    handle.callback()
                    fired += 1
        return fired


# ---------------------------------------------------------------------------
# APScheduler source
# ---------------------------------------------------------------------------


class _JobHandle(TickHandle):
    def __init__(self, scheduler: BackgroundScheduler, job_id: str) -> None:
        self._scheduler = scheduler
        self.job_id = job_id
        self._cancelled = False

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        try:
            self._scheduler.remove_job(self.job_id)
        except JobLookupError:
            logger.debug("Tick job %s already gone", self.job_id)

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class SchedulerTickSource(TickSource):
    """Runs ticks as APScheduler interval jobs on a background thread.

    A single ``BackgroundScheduler`` may be shared by several engines; each
    schedule gets its own job id.
    """

    _ids = itertools.count(1)

    def __init__(self, scheduler: BackgroundScheduler | None = None) -> None:
        self._scheduler = scheduler or BackgroundScheduler()
        self._owns_scheduler = scheduler is None

    def schedule(self, callback: TickCallback, interval_s: float = TICK_INTERVAL_S) -> TickHandle:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Tick scheduler started")
        job_id = f"tempo-tick-{next(self._ids)}"
        self._scheduler.add_job(
            callback,
            "interval",
            seconds=interval_s,
            id=job_id,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=max(1, int(interval_s)),
        )
        return _JobHandle(self._scheduler, job_id)

    def shutdown(self) -> None:
        """Stop the scheduler if this source created it."""
        if self._owns_scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Tick scheduler stopped")
