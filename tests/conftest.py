"""Shared fakes for driving the stats timer deterministically."""

from __future__ import annotations

from typing import Callable, Optional

import pytest


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeScheduler:
    """Records start/stop calls; ticks are fired manually with :meth:`fire`."""

    def __init__(self) -> None:
        self.callback: Optional[Callable[[], None]] = None
        self.interval_ms: Optional[int] = None
        self.starts = 0
        self.stops = 0

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.starts += 1
        self.interval_ms = interval_ms
        self.callback = callback

    def stop(self) -> None:
        self.stops += 1
        self.callback = None

    def is_active(self) -> bool:
        return self.callback is not None

    def fire(self) -> None:
        if self.callback is not None:
            self.callback()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()
