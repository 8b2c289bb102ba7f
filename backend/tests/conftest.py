"""
Shared fixtures: a hand-driven clock and ticker so engine tests never
depend on wall-clock timing.
"""

import os
import sys

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.ticker import Ticker  # noqa: E402


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualTicker(Ticker):
    """Ticker whose callbacks run only when fire() is called."""

    def __init__(self):
        self.jobs = {}
        self.intervals = []
        self._next_handle = 0

    def schedule(self, interval_ms, callback):
        handle = self._next_handle
        self._next_handle += 1
        self.jobs[handle] = callback
        self.intervals.append(interval_ms)
        return handle

    def cancel(self, handle):
        self.jobs.pop(handle, None)

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for callback in list(self.jobs.values()):
                callback()

    def run_until(self, predicate, limit: int = 10_000) -> None:
        fired = 0
        while not predicate():
            if not self.jobs:
                raise RuntimeError("run_until would never finish: nothing is scheduled")
            if fired >= limit:
                raise RuntimeError(f"predicate still false after {limit} ticks")
            self.fire()
            fired += 1


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def manual_ticker():
    return ManualTicker()
