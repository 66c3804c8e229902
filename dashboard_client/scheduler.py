"""Shared refresh clock (one timer for every registered resource)."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from .models.scheduler import RefreshClock, SchedulerTask
from .models.settings import RefreshSetting

logger = logging.getLogger(__name__)

_DEFAULT_TICK_S = 0.1

ProgressListener = Callable[[float], None]


class RefreshScheduler:
    """Fires every registered refresh callback once per interval.

    The timer ticks every ``tick_s`` while running. The interval itself is
    read from ``setting`` on each tick, so changing it does not require a
    restart.
    """

    def __init__(
        self,
        setting: RefreshSetting | None = None,
        tick_s: float = _DEFAULT_TICK_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.setting = setting if setting is not None else RefreshSetting()
        self.tick_s = tick_s
        self._clock = clock
        self._state = RefreshClock(start_time=clock())
        self._tasks: dict[str, SchedulerTask] = {}
        self._timer: asyncio.Task | None = None
        self._progress_listeners: list[ProgressListener] = []

    @property
    def interval_s(self) -> float:
        return self.setting.interval_s

    @property
    def progress(self) -> float:
        return self._state.progress

    @property
    def cycles(self) -> int:
        return self._state.cycles

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def tasks(self) -> list[str]:
        return list(self._tasks)

    def register(self, key: str, callback: Callable[[], object]) -> None:
        self._tasks[key] = SchedulerTask(key=key, callback=callback)
        logger.debug("Registered refresh task %s", key)

    def deregister(self, key: str) -> None:
        if self._tasks.pop(key, None) is not None:
            logger.debug("Deregistered refresh task %s", key)

    def subscribe_progress(self, listener: ProgressListener) -> Callable[[], None]:
        self._progress_listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._progress_listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def start(self) -> None:
        if self.is_running:
            return
        self._state.start_time = self._clock()
        self._set_progress(0.0)
        self._timer = asyncio.create_task(self._loop())
        logger.info("Refresh scheduler started (tick=%ss)", self.tick_s)

    def stop(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None:
            return
        if not timer.done():
            timer.cancel()
        logger.info("Refresh scheduler stopped")

    def tick(self) -> None:
        """Advance the clock once; fires all callbacks when the interval elapsed."""
        self._state.ticks += 1
        interval = self.interval_s
        now = self._clock()
        if interval <= 0:
            self._state.start_time = now
            self._set_progress(0.0)
            return

        elapsed = now - self._state.start_time
        self._set_progress(min(elapsed / interval, 1.0) * 100.0)
        if elapsed < interval:
            return

        # Callbacks may deregister tasks (including their own).
        for task in list(self._tasks.values()):
            try:
                task.callback()
            except Exception:
                logger.exception("Refresh callback failed for %s", task.key)
        self._state.cycles += 1
        self._state.start_time = self._clock()
        self._set_progress(0.0)

    def _set_progress(self, value: float) -> None:
        if value == self._state.progress:
            return
        self._state.progress = value
        for listener in list(self._progress_listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("Progress listener failed")

    async def _loop(self) -> None:
        while True:
            try:
                await asyncio.sleep(self.tick_s)
                self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Refresh scheduler tick error")
