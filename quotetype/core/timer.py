"""Periodic re-evaluation of elapsed time and WPM."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QTimer

from quotetype.core.stats import TypingStats, calculate_wpm

logger = logging.getLogger(__name__)

DEFAULT_TICK_MS = 200


class Scheduler(Protocol):
    """Something that can call back periodically and be cancelled synchronously."""

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...

    def is_active(self) -> bool: ...


class QtScheduler:
    """Scheduler backed by a ``QTimer`` on the running Qt event loop."""

    def __init__(self) -> None:
        self._timer: Optional[QTimer] = None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.stop()
        self._timer = QTimer()
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(callback)
        self._timer.start()

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def is_active(self) -> bool:
        return self._timer is not None and self._timer.isActive()


class StatsTimer:
    """Drives ``elapsed_time`` and ``wpm`` of one :class:`TypingStats` while running.

    ``start`` while already running is a no-op. ``stop`` cancels further ticks
    and leaves the last computed values in place.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        interval_ms: int = DEFAULT_TICK_MS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._scheduler = scheduler
        self._interval_ms = interval_ms
        self._clock = clock
        self._start_time: Optional[float] = None
        self._stats: Optional[TypingStats] = None

    @property
    def running(self) -> bool:
        return self._start_time is not None

    @property
    def start_time(self) -> Optional[float]:
        return self._start_time

    def start(self, stats: TypingStats) -> None:
        if self.running:
            return
        self._stats = stats
        self._start_time = self._clock()
        self._scheduler.start(self._interval_ms, self.tick)
        logger.debug("Timer started (tick %d ms)", self._interval_ms)

    def stop(self) -> None:
        if not self.running:
            return
        self._scheduler.stop()
        self._start_time = None
        self._stats = None
        logger.debug("Timer stopped")

    def tick(self) -> None:
        """Recompute elapsed time and WPM; never touches cursor or characters."""
        if self._start_time is None or self._stats is None:
            return
        elapsed = max(0.0, self._clock() - self._start_time)
        self._stats.elapsed_time = elapsed
        self._stats.wpm = calculate_wpm(self._stats.correct_chars, elapsed)
