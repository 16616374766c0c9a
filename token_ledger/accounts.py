"""
Account Store Module

Maps account identities to token balances. Unknown accounts read as zero;
there is no explicit account creation and accounts are never removed.
"""

from typing import Dict, Optional

from .errors import InsufficientBalance, InvalidAmount, Overflow


# Largest amount any balance or counter may hold
MAX_UINT = 2 ** 256 - 1


def check_uint(value: int, what: str = "amount") -> int:
    """Ensure a value fits the unsigned range the ledger works in"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{what} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidAmount(f"{what} must not be negative, got {value}")
    if value > MAX_UINT:
        raise Overflow(f"{what} {value} exceeds the maximum of {MAX_UINT}")
    return value


class AccountStore:
    """
    Per-account token balances

    Only non-zero balances are kept in the underlying dict; reading any
    other account yields zero, which is not an error. The sum of all
    balances is maintained as a running total.

    Between begin() and commit() every balance change is journaled, so
    rollback() restores exactly the accounts that were touched.
    """

    def __init__(self):
        self._balances: Dict[str, int] = {}
        self._total = 0
        self._undo: Optional[Dict[str, int]] = None

    def get(self, account: str) -> int:
        """Get balance for an account (zero if never seen)"""
        return self._balances.get(account, 0)

    def credit(self, account: str, amount: int) -> int:
        """
        Add tokens to an account

        Raises:
            Overflow: If the new balance would exceed MAX_UINT
        """
        check_uint(amount)
        new_balance = self.get(account) + amount
        if new_balance > MAX_UINT:
            raise Overflow(f"Crediting {amount} to {account} overflows its balance")
        self._set(account, new_balance)
        return new_balance

    def debit(self, account: str, amount: int) -> int:
        """
        Remove tokens from an account

        Raises:
            InsufficientBalance: If the account holds less than amount
        """
        check_uint(amount)
        current = self.get(account)
        if amount > current:
            raise InsufficientBalance(
                f"Account {account} has balance {current}, needs {amount}"
            )
        new_balance = current - amount
        self._set(account, new_balance)
        return new_balance

    def total(self) -> int:
        """Sum of every balance"""
        return self._total

    def recount(self) -> int:
        """Sum of every balance, recomputed from scratch"""
        return sum(self._balances.values())

    def holders(self) -> Dict[str, int]:
        """Copy of all accounts with a non-zero balance"""
        return dict(self._balances)

    def begin(self) -> None:
        """Start journaling balance changes"""
        self._undo = {}

    def commit(self) -> None:
        """Keep journaled changes and stop journaling"""
        self._undo = None

    def rollback(self) -> None:
        """Put every journaled account back to its balance at begin()"""
        undo, self._undo = self._undo or {}, None
        for account, balance in undo.items():
            self._set(account, balance)

    def _set(self, account: str, balance: int) -> None:
        previous = self.get(account)
        if self._undo is not None and account not in self._undo:
            self._undo[account] = previous
        if balance:
            self._balances[account] = balance
        else:
            self._balances.pop(account, None)
        self._total += balance - previous
