"""
Ledger Error Module

Every rejection raised by the ledger is a LedgerError subclass carrying a
stable code. All of them are deterministic and leave no partial state behind.
"""


class LedgerError(ValueError):
    """Base class for all ledger rejections"""
    code = "ledger_error"


class InvalidConfiguration(LedgerError):
    """Ledger set up with inconsistent parameters, or not set up at all"""
    code = "invalid_configuration"


class InvalidAmount(LedgerError):
    """Zero or otherwise disallowed amount"""
    code = "invalid_amount"


class InsufficientBalance(LedgerError):
    code = "insufficient_balance"


class DuplicateDeposit(LedgerError):
    """Account already holds an active deposit"""
    code = "duplicate_deposit"


class NoDeposit(LedgerError):
    code = "no_deposit"


class InsufficientInterestPool(LedgerError):
    """Accrued interest exceeds what remains in the interest pool"""
    code = "insufficient_interest_pool"


class ClockRegression(LedgerError):
    """Clock reading precedes a recorded timestamp"""
    code = "clock_regression"


class Overflow(LedgerError):
    """Amount exceeds the representable unsigned range"""
    code = "overflow"
