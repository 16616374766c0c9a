"""
Deposit Registry Module

Tracks the single active deposit an account may hold. The one-deposit rule
is enforced here rather than by callers.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from .errors import DuplicateDeposit, InvalidAmount, NoDeposit


@dataclass(frozen=True)
class DepositRecord:
    """
    Locked principal and the time it was locked

    A record with exists=False is the empty record: amount and timestamp
    are zero and it is equal to the record of an account that never
    deposited.
    """
    amount: int = 0
    timestamp: int = 0
    exists: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return asdict(self)


EMPTY_DEPOSIT = DepositRecord()


class DepositRegistry:
    """Active deposit records keyed by account, journaled like AccountStore"""

    def __init__(self):
        self._records: Dict[str, DepositRecord] = {}
        self._total = 0
        self._undo: Optional[Dict[str, Optional[DepositRecord]]] = None

    def has(self, account: str) -> bool:
        """Check if an account holds an active deposit"""
        return account in self._records

    def get(self, account: str) -> DepositRecord:
        """Get the active record, or the empty record if there is none"""
        return self._records.get(account, EMPTY_DEPOSIT)

    def open(self, account: str, amount: int, timestamp: int) -> DepositRecord:
        """
        Open a deposit for an account

        Raises:
            DuplicateDeposit: If the account already has an active deposit
            InvalidAmount: If amount is not positive
        """
        if self.has(account):
            raise DuplicateDeposit(f"Account {account} already has an active deposit")
        if amount <= 0:
            raise InvalidAmount(f"Deposit amount must be positive, got {amount}")

        record = DepositRecord(amount=amount, timestamp=timestamp, exists=True)
        self._put(account, record)
        return record

    def close(self, account: str) -> DepositRecord:
        """
        Remove and return the active deposit for an account

        Raises:
            NoDeposit: If the account has no active deposit
        """
        if not self.has(account):
            raise NoDeposit(f"Account {account} has no active deposit")
        record = self._records[account]
        self._put(account, None)
        return record

    def active(self) -> List[str]:
        """Accounts that currently hold a deposit"""
        return list(self._records)

    def total(self) -> int:
        """Sum of all active deposit amounts"""
        return self._total

    def recount(self) -> int:
        """Sum of all active deposit amounts, recomputed from scratch"""
        return sum(record.amount for record in self._records.values())

    def begin(self) -> None:
        self._undo = {}

    def commit(self) -> None:
        self._undo = None

    def rollback(self) -> None:
        """Reinstate the records journaled since begin()"""
        undo, self._undo = self._undo or {}, None
        for account, record in undo.items():
            self._put(account, record)

    def _put(self, account: str, record: Optional[DepositRecord]) -> None:
        previous = self._records.get(account)
        if self._undo is not None and account not in self._undo:
            self._undo[account] = previous
        if previous is not None:
            self._total -= previous.amount
        if record is None:
            self._records.pop(account, None)
        else:
            self._records[account] = record
            self._total += record.amount
