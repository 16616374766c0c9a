"""
Test suite for clock module
"""

import pytest

from token_ledger.clock import ManualClock, SystemClock
from token_ledger.errors import ClockRegression


class TestManualClock:

    def test_advance_and_set(self):
        clock = ManualClock(1000)

        assert clock.now() == 1000
        assert clock.advance(300) == 1300
        assert clock.set(2000) == 2000
        assert clock.now() == 2000

    def test_never_moves_backwards(self):
        clock = ManualClock(1000)

        with pytest.raises(ClockRegression):
            clock.set(999)
        with pytest.raises(ClockRegression):
            clock.advance(-1)

        assert clock.now() == 1000


class TestSystemClock:

    def test_non_decreasing(self):
        clock = SystemClock()
        readings = [clock.now() for _ in range(100)]

        assert readings == sorted(readings)
        assert all(isinstance(r, int) for r in readings)
