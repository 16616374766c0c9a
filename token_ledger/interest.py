"""
Interest Calculator Module

Computes simple interest on a deposit in whole elapsed intervals. The rate is
expressed in basis points and every step uses integer arithmetic that
truncates, so interest is never rounded up.
"""

from typing import Any, Dict, NamedTuple

from .accounts import MAX_UINT
from .deposits import DepositRecord
from .errors import ClockRegression, NoDeposit, Overflow


RATE_BPS = 200               # 2% per interval
BPS_DENOMINATOR = 10000      # 10,000 bps = 100%
INTERVAL_SECONDS = 300       # 5 minutes


class Accrual(NamedTuple):
    """Principal, interest and their sum for a deposit at a point in time"""
    principal: int
    interest: int
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return self._asdict()


class InterestCalculator:
    """
    Pure accrued-interest function over a deposit record

    Holds no ledger state; the same record and time always give the same
    result.
    """

    def __init__(
        self,
        rate_bps: int = RATE_BPS,
        interval_seconds: int = INTERVAL_SECONDS,
        bps_denominator: int = BPS_DENOMINATOR
    ):
        if interval_seconds <= 0:
            raise ValueError("Interval must be a positive number of seconds")
        if rate_bps < 0 or bps_denominator <= 0:
            raise ValueError("Rate must be non-negative with a positive denominator")

        self.rate_bps = rate_bps
        self.interval_seconds = interval_seconds
        self.bps_denominator = bps_denominator

    def intervals(self, record: DepositRecord, now: int) -> int:
        """Number of whole intervals elapsed since the deposit was opened"""
        elapsed = now - record.timestamp
        if elapsed < 0:
            raise ClockRegression(
                f"Current time {now} precedes deposit timestamp {record.timestamp}"
            )
        return elapsed // self.interval_seconds

    def accrued(self, record: DepositRecord, now: int) -> Accrual:
        """
        Calculate accrued interest for a deposit at time now

        Args:
            record: Active deposit record
            now: Current time in seconds since the epoch

        Returns:
            Accrual(principal, interest, total)

        Raises:
            NoDeposit: If the record is the empty record
            ClockRegression: If now is before the deposit timestamp
            Overflow: If an intermediate product leaves the unsigned range
        """
        if not record.exists:
            raise NoDeposit("Cannot accrue interest on an empty deposit record")

        intervals = self.intervals(record, now)

        scaled = record.amount * self.rate_bps * intervals
        if scaled > MAX_UINT:
            raise Overflow(
                f"Interest on {record.amount} over {intervals} intervals overflows"
            )
        interest = scaled // self.bps_denominator

        total = record.amount + interest
        if total > MAX_UINT:
            raise Overflow(f"Withdrawal total {total} overflows")

        return Accrual(principal=record.amount, interest=interest, total=total)
