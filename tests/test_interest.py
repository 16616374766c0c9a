"""
Test suite for interest calculator module

Tests whole-interval accrual with truncating integer arithmetic. Every
figure here is exact; no floating point is involved.
"""

import pytest

from token_ledger.accounts import MAX_UINT
from token_ledger.deposits import DepositRecord, EMPTY_DEPOSIT
from token_ledger.errors import ClockRegression, NoDeposit, Overflow
from token_ledger.interest import (
    Accrual, InterestCalculator, RATE_BPS, BPS_DENOMINATOR, INTERVAL_SECONDS
)


T0 = 1_700_000_000


class TestConstants:

    def test_fixed_schedule(self):
        assert RATE_BPS == 200
        assert BPS_DENOMINATOR == 10000
        assert INTERVAL_SECONDS == 300

        calculator = InterestCalculator()
        assert calculator.rate_bps == RATE_BPS
        assert calculator.interval_seconds == INTERVAL_SECONDS
        assert calculator.bps_denominator == BPS_DENOMINATOR


class TestAccrued:
    """Test accrued interest figures"""

    def setup_method(self):
        self.calculator = InterestCalculator()
        self.record = DepositRecord(amount=500, timestamp=T0, exists=True)

    def test_no_time_elapsed(self):
        """Test that a fresh deposit has earned nothing"""
        assert self.calculator.accrued(self.record, T0) == Accrual(500, 0, 500)

    def test_partial_interval_earns_nothing(self):
        """Test that only completed intervals count"""
        assert self.calculator.accrued(self.record, T0 + 299).interest == 0

    def test_one_interval(self):
        """Test 500 at 2% for one interval"""
        accrual = self.calculator.accrued(self.record, T0 + 300)

        assert accrual.principal == 500
        assert accrual.interest == 10
        assert accrual.total == 510

    def test_three_intervals(self):
        """Test 500 at 2% for three intervals"""
        principal, interest, total = self.calculator.accrued(self.record, T0 + 900)

        assert (principal, interest, total) == (500, 30, 530)

    def test_interest_truncates(self):
        """Test that fractional interest is dropped, never rounded up"""
        record = DepositRecord(amount=49, timestamp=T0, exists=True)

        # 49 * 200 / 10000 = 0.98
        assert self.calculator.accrued(record, T0 + 300).interest == 0
        # 49 * 200 * 2 / 10000 = 1.96
        assert self.calculator.accrued(record, T0 + 600).interest == 1

    def test_truncation_applies_to_whole_product(self):
        """Test that truncation happens once, not per interval"""
        record = DepositRecord(amount=75, timestamp=T0, exists=True)

        # 75 * 200 * 4 / 10000 = 6, per-interval truncation would give 4
        assert self.calculator.accrued(record, T0 + 1200).interest == 6

    def test_clock_regression(self):
        """Test that a time before the deposit is rejected"""
        with pytest.raises(ClockRegression, match="precedes deposit timestamp"):
            self.calculator.accrued(self.record, T0 - 1)

    def test_empty_record(self):
        with pytest.raises(NoDeposit):
            self.calculator.accrued(EMPTY_DEPOSIT, T0)

    def test_overflow(self):
        """Test that an oversized intermediate product raises instead of wrapping"""
        record = DepositRecord(amount=MAX_UINT // 100, timestamp=0, exists=True)

        with pytest.raises(Overflow):
            self.calculator.accrued(record, 300)

    def test_idempotent(self):
        """Test that identical inputs give identical results"""
        first = self.calculator.accrued(self.record, T0 + 1234)
        second = self.calculator.accrued(self.record, T0 + 1234)

        assert first == second

    def test_monotonic_in_time(self):
        """Test that interest never decreases as time moves forward"""
        previous = 0
        for elapsed in range(0, 10 * INTERVAL_SECONDS, 37):
            interest = self.calculator.accrued(self.record, T0 + elapsed).interest
            assert interest >= previous
            previous = interest

    def test_accrual_to_dict(self):
        accrual = self.calculator.accrued(self.record, T0 + 300)
        assert accrual.to_dict() == {"principal": 500, "interest": 10, "total": 510}


class TestCustomSchedule:

    def test_custom_rate_and_interval(self):
        calculator = InterestCalculator(rate_bps=100, interval_seconds=60)
        record = DepositRecord(amount=1000, timestamp=T0, exists=True)

        assert calculator.accrued(record, T0 + 180).interest == 30

    def test_invalid_schedule(self):
        with pytest.raises(ValueError, match="Interval must be a positive"):
            InterestCalculator(interval_seconds=0)
        with pytest.raises(ValueError, match="Rate must be non-negative"):
            InterestCalculator(rate_bps=-1)
