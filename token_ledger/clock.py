"""
Clock Module

The ledger never reads ambient time; it asks an injected clock. SystemClock
is used in production, ManualClock in tests and simulations.
"""

import threading
import time
from typing import Optional, Protocol

from .errors import ClockRegression


class Clock(Protocol):
    """Source of the current time in whole seconds since the epoch"""

    def now(self) -> int:
        ...


class SystemClock:
    """Wall clock that never reports a value lower than one it already reported"""

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, int(time.time()))
            return self._last


class ManualClock:
    """
    Controllable clock for deterministic tests

    Time only moves when advance() or set() is called, and never backwards.
    """

    def __init__(self, start: Optional[int] = None):
        self._now = int(time.time()) if start is None else int(start)

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move the clock forward by the given number of seconds"""
        if seconds < 0:
            raise ClockRegression(f"Cannot advance clock by negative {seconds}s")
        self._now += int(seconds)
        return self._now

    def set(self, timestamp: int) -> int:
        """Jump to an absolute timestamp that is not earlier than now"""
        if timestamp < self._now:
            raise ClockRegression(
                f"Cannot move clock back from {self._now} to {timestamp}"
            )
        self._now = int(timestamp)
        return self._now
