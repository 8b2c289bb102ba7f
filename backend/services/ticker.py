"""
Repeating-callback scheduling for the simulation loop.

The engine only needs three things from a ticker: schedule a callback every
N milliseconds, cancel it, and drive pending callbacks until some condition
holds. ScheduleTicker does this with the `schedule` library; tests swap in a
manual ticker.
"""

import logging
import time
from typing import Any, Callable, Optional

import schedule as schedule_lib


logger = logging.getLogger(__name__)

DEFAULT_POLL_SECONDS = 0.005


class Ticker:
    """Base interface for repeating-callback schedulers."""

    def schedule(self, interval_ms: float, callback: Callable[[], Any]) -> Any:
        """Run *callback* every *interval_ms*; returns a handle for cancel()."""
        raise NotImplementedError

    def cancel(self, handle: Any) -> None:
        raise NotImplementedError

    def run_until(self, predicate: Callable[[], bool]) -> None:
        """Fire due callbacks until *predicate* returns True."""
        raise NotImplementedError


class ScheduleTicker(Ticker):
    """
    Ticker backed by a private schedule.Scheduler.

    A private scheduler keeps game ticks off the module-level default
    scheduler other code may be using.
    """

    def __init__(
        self,
        scheduler: Optional[schedule_lib.Scheduler] = None,
        poll_seconds: float = DEFAULT_POLL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if poll_seconds <= 0:
            raise ValueError(f"poll_seconds must be positive, got {poll_seconds}.")
        self.scheduler = scheduler or schedule_lib.Scheduler()
        self.poll_seconds = poll_seconds
        self._sleep = sleep

    def schedule(self, interval_ms: float, callback: Callable[[], Any]) -> schedule_lib.Job:
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}ms.")
        job = self.scheduler.every(interval_ms / 1000.0).seconds.do(callback)
        logger.debug(f"Scheduled tick every {interval_ms}ms")
        return job

    def cancel(self, handle: schedule_lib.Job) -> None:
        self.scheduler.cancel_job(handle)

    def run_until(self, predicate: Callable[[], bool]) -> None:
        while not predicate():
            self.scheduler.run_pending()
            idle = self.scheduler.idle_seconds
            if idle is None:
                wait = self.poll_seconds
            else:
                wait = min(max(idle, 0.0), self.poll_seconds)
            self._sleep(wait)
