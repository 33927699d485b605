"""Periodic plan synthesis ("the brain").

The scheduler owns one asyncio ticker task.  Every ``interval_sec`` seconds it
synthesizes a plan from the store's current snapshot and records a
:class:`BrainRun`.  Whenever the command log or dictionary is replaced the
ticker is restarted from zero, so the next timed run is always a full interval
after the most recent change.  Manual runs share the exact same code path and
do not touch the timer.

Outside a running event loop (CLI use) the scheduler is inert and only
:meth:`BrainScheduler.run_now` does anything.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from loguru import logger

from .core.plan import synthesize_plan
from .schemas import BrainRun
from .store import BrainStore

DEFAULT_INTERVAL_SEC = 9 * 60
REARM_ON = ("commands", "dictionary")


class BrainScheduler:
    def __init__(self, store: BrainStore, interval_sec: float = DEFAULT_INTERVAL_SEC):
        self.store = store
        self.interval_sec = float(interval_sec)
        self.last_plan: str = ""
        self.rearms = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None
        for name in REARM_ON:
            store.subscribe(name, self._on_store_change)

    @property
    def running(self) -> bool:
        return self._loop is not None

    # ---- runs ----------------------------------------------------------------

    def run_now(self, trigger: str = "manual") -> BrainRun:
        """Synthesize a plan from the current snapshot and record it."""
        snap = self.store.snapshot()
        plan = synthesize_plan(snap.commands, snap.dictionary)
        run = BrainRun(plan=plan, trigger=trigger)
        self.store.record_run(run)
        self.last_plan = plan
        logger.info(f"[brain] {trigger} run {run.id} over {len(snap.commands)} command(s)")
        return run

    async def _ticker(self):
        while True:
            await asyncio.sleep(self.interval_sec)
            try:
                self.run_now(trigger="timer")
            except Exception as ex:
                logger.exception(f"[brain] timed run failed: {ex}")

    # ---- timer lifecycle -----------------------------------------------------

    def start(self) -> None:
        """Arm the ticker on the running loop."""
        if self._loop is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._arm()
        logger.info(f"[brain] scheduler started, every {self.interval_sec:.0f}s")

    def _arm(self) -> None:
        self._task = self._loop.create_task(self._ticker())

    def _restart(self) -> None:
        if self._loop is None:
            return
        if self._task is not None:
            self._task.cancel()
        self._arm()
        self.rearms += 1
        logger.debug(f"[brain] ticker re-armed ({self.rearms})")

    def rearm(self) -> None:
        """Restart the ticker from zero; a no-op while stopped."""
        loop = self._loop
        if loop is None:
            return
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None
        if current is loop:
            self._restart()
        else:
            loop.call_soon_threadsafe(self._restart)

    def _on_store_change(self, name: str) -> None:
        self.rearm()

    async def stop(self) -> None:
        task, self._task = self._task, None
        self._loop = None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("[brain] scheduler stopped")
