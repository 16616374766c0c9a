"""
Ledger Engine

Public entry point for every ledger operation. Each operation runs inside a
single critical section: it either commits all of its balance and counter
changes and emits exactly one notification, or raises and leaves the ledger
exactly as it was.

Conservation holds after every committed operation:
    sum(balances) + total_deposited + interest_pool == total_supply
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .accounts import AccountStore, check_uint
from .audit import AuditTrail, AuditEventType
from .clock import Clock, SystemClock
from .deposits import DepositRecord, DepositRegistry
from .errors import (
    LedgerError, InvalidConfiguration, InvalidAmount, InsufficientInterestPool,
    NoDeposit
)
from .events import (
    EventDispatcher, EventPayload, ZERO_ACCOUNT,
    create_transfer_event, create_deposit_event, create_withdrawal_event
)
from .interest import Accrual, InterestCalculator
from .logging_config import log_action


logger = logging.getLogger("token_ledger.ledger")


@dataclass
class LedgerState:
    """All mutable state of one ledger, owned by a single engine"""
    accounts: AccountStore = field(default_factory=AccountStore)
    deposits: DepositRegistry = field(default_factory=DepositRegistry)
    total_supply: int = 0
    total_deposited: int = 0
    interest_pool: int = 0
    owner: Optional[str] = None
    initialized: bool = False


class LedgerEngine:
    """
    Token ledger with an interest-bearing deposit facility

    Tokens live in one of three places: an account balance, an active
    deposit, or the interest pool. Transfers move tokens between balances,
    deposits move them from a balance into the deposit total, and
    withdrawals return principal plus interest, the interest coming out of
    the pool.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        calculator: Optional[InterestCalculator] = None,
        dispatcher: Optional[EventDispatcher] = None,
        audit_trail: Optional[AuditTrail] = None,
        name: str = "My Hardhat Token",
        symbol: str = "MHT"
    ):
        self.clock = clock or SystemClock()
        self.calculator = calculator or InterestCalculator()
        self.dispatcher = dispatcher or EventDispatcher()
        self.audit_trail = audit_trail
        self._name = name
        self._symbol = symbol
        self._state = LedgerState()
        self._events: List[EventPayload] = []
        self._pending: List[EventPayload] = []
        self._pending_audit: List[tuple] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Mutating operations

    def initialize(self, owner: str, total_supply: int, reserved_interest_pool: int) -> None:
        """
        One-time setup of supply and interest pool

        The owner receives everything that is not reserved for interest.

        Raises:
            InvalidConfiguration: If already initialized, or the reserve
                does not fit inside the supply
        """
        with self._operation("initialize", owner) as state:
            if state.initialized:
                raise InvalidConfiguration("Ledger is already initialized")
            try:
                check_uint(total_supply, "total supply")
                check_uint(reserved_interest_pool, "reserved interest pool")
            except LedgerError as e:
                raise InvalidConfiguration(str(e)) from e
            if reserved_interest_pool > total_supply:
                raise InvalidConfiguration(
                    f"Reserved interest pool {reserved_interest_pool} exceeds "
                    f"total supply {total_supply}"
                )

            circulating = total_supply - reserved_interest_pool
            state.total_supply = total_supply
            state.interest_pool = reserved_interest_pool
            state.total_deposited = 0
            state.owner = owner
            state.initialized = True
            self._audit(AuditEventType.LEDGER_INITIALIZED, owner, {
                "total_supply": total_supply,
                "interest_pool": reserved_interest_pool
            })
            if circulating:
                state.accounts.credit(owner, circulating)
                self._emit(create_transfer_event(ZERO_ACCOUNT, owner, circulating))

    def transfer(self, caller: str, to: str, amount: int) -> None:
        """
        Move tokens from the caller's balance to another account

        Raises:
            InvalidAmount: If amount is zero
            InsufficientBalance: If the caller holds less than amount
        """
        with self._operation("transfer", caller) as state:
            self._require_initialized(state)
            self._require_positive(amount)

            state.accounts.debit(caller, amount)
            state.accounts.credit(to, amount)

            self._audit(AuditEventType.TRANSFER_COMMITTED, caller, {
                "to": to,
                "amount": amount
            })
            self._emit(create_transfer_event(caller, to, amount))

    def deposit(self, caller: str, amount: int) -> None:
        """
        Lock tokens from the caller's balance into an interest-bearing deposit

        Raises:
            InvalidAmount: If amount is zero
            InsufficientBalance: If the caller holds less than amount
            DuplicateDeposit: If the caller already has an active deposit
        """
        with self._operation("deposit", caller) as state:
            self._require_initialized(state)
            self._require_positive(amount)

            timestamp = self.clock.now()
            state.accounts.debit(caller, amount)
            state.deposits.open(caller, amount, timestamp)
            state.total_deposited += amount

            self._audit(AuditEventType.DEPOSIT_OPENED, caller, {
                "amount": amount,
                "timestamp": timestamp
            })
            self._emit(create_deposit_event(caller, amount, timestamp))

    def withdraw(self, caller: str) -> Accrual:
        """
        Close the caller's deposit and pay out principal plus interest

        A withdrawal whose interest exceeds what is left in the pool is
        rejected outright; interest is never partially paid.

        Returns:
            Accrual that was paid out

        Raises:
            NoDeposit: If the caller has no active deposit
            InsufficientInterestPool: If interest exceeds the pool
        """
        with self._operation("withdraw", caller) as state:
            self._require_initialized(state)
            record = self._active_deposit(state, caller)

            accrual = self.calculator.accrued(record, self.clock.now())
            if accrual.interest > state.interest_pool:
                raise InsufficientInterestPool(
                    f"Interest {accrual.interest} exceeds interest pool {state.interest_pool}"
                )

            state.deposits.close(caller)
            state.total_deposited -= accrual.principal
            state.interest_pool -= accrual.interest
            state.accounts.credit(caller, accrual.total)

            self._audit(AuditEventType.DEPOSIT_WITHDRAWN, caller, accrual.to_dict())
            self._emit(create_withdrawal_event(caller, *accrual))
            return accrual

    # ------------------------------------------------------------------
    # Queries

    def calculate_interest(self, account: str) -> Accrual:
        """
        Principal, interest and total the account would receive now

        Raises:
            NoDeposit: If the account has no active deposit
        """
        with self._lock:
            record = self._active_deposit(self._state, account)
            return self.calculator.accrued(record, self.clock.now())

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self._state.accounts.get(account)

    def deposits(self, account: str) -> DepositRecord:
        """Deposit record of an account; the empty record if none is active"""
        with self._lock:
            return self._state.deposits.get(account)

    def total_deposited(self) -> int:
        return self._state.total_deposited

    def interest_pool(self) -> int:
        return self._state.interest_pool

    def total_supply(self) -> int:
        return self._state.total_supply

    def owner(self) -> Optional[str]:
        return self._state.owner

    def name(self) -> str:
        return self._name

    def symbol(self) -> str:
        return self._symbol

    @property
    def events(self) -> List[EventPayload]:
        """Notifications of committed operations, oldest first"""
        with self._lock:
            return list(self._events)

    def verify_invariants(self) -> Dict[str, Any]:
        """
        Check conservation of supply and the deposit record rules

        Returns:
            Dictionary with the check results, 'valid' False on any breach
        """
        with self._lock:
            state = self._state
            balances = state.accounts.recount()
            result = {
                'valid': True,
                'total_supply': state.total_supply,
                'balances': balances,
                'total_deposited': state.total_deposited,
                'interest_pool': state.interest_pool,
                'errors': []
            }

            accounted = balances + state.total_deposited + state.interest_pool
            if accounted != state.total_supply:
                result['errors'].append(
                    f"Accounted tokens {accounted} != total supply {state.total_supply}"
                )

            if balances != state.accounts.total():
                result['errors'].append(
                    f"Balances sum to {balances}, running total says {state.accounts.total()}"
                )

            deposited = state.deposits.recount()
            if deposited != state.total_deposited or deposited != state.deposits.total():
                result['errors'].append(
                    f"Active deposits sum to {deposited}, counter says {state.total_deposited}"
                )

            for account in state.deposits.active():
                record = state.deposits.get(account)
                if not record.exists or record.amount <= 0:
                    result['errors'].append(f"Deposit of {account} has no positive amount")

            result['valid'] = not result['errors']
            return result

    # ------------------------------------------------------------------
    # Internals

    @contextmanager
    def _operation(self, action: str, caller: str):
        """
        Critical section for one mutating operation

        The account and deposit stores journal only the keys this operation
        touches, and the counters are saved as plain values, so rolling back
        costs no more than the operation itself. Notifications collected
        during the operation are only recorded and published once it commits.
        """
        with self._lock:
            state = self._state
            counters = (
                state.total_supply,
                state.total_deposited,
                state.interest_pool,
                state.owner,
                state.initialized
            )
            state.accounts.begin()
            state.deposits.begin()
            self._pending = []
            self._pending_audit = []
            try:
                yield state
                self._check_conservation(state)
            except LedgerError as e:
                self._rollback(counters)
                log_action(logger, "warning", f"{action} rejected: {e}",
                           account=caller, action=action, extra={"error": e.code})
                raise
            except Exception:
                self._rollback(counters)
                logger.exception(f"{action} failed unexpectedly")
                raise

            state.accounts.commit()
            state.deposits.commit()
            committed = self._pending
            self._pending = []
            if self.audit_trail is not None:
                for event_type, account, metadata in self._pending_audit:
                    self.audit_trail.log_event(event_type, account, metadata)
            self._pending_audit = []
            for event in committed:
                event.sequence = len(self._events) + 1
                self._events.append(event)
                log_action(logger, "info", f"{action} committed",
                           account=caller, action=action,
                           extra={"event": event.name, **event.data})
            for event in committed:
                self.dispatcher.publish(event)

    def _rollback(self, counters) -> None:
        state = self._state
        state.accounts.rollback()
        state.deposits.rollback()
        (state.total_supply, state.total_deposited, state.interest_pool,
         state.owner, state.initialized) = counters
        self._pending = []
        self._pending_audit = []

    def _check_conservation(self, state: LedgerState) -> None:
        # Running totals, so this is constant time
        accounted = state.accounts.total() + state.total_deposited + state.interest_pool
        if accounted != state.total_supply:
            raise AssertionError(
                f"Conservation broken: {accounted} accounted vs supply {state.total_supply}"
            )

    def _emit(self, event: EventPayload) -> None:
        self._pending.append(event)

    def _audit(self, event_type: AuditEventType, account: str, metadata: Dict[str, Any]) -> None:
        self._pending_audit.append((event_type, account, metadata))

    @staticmethod
    def _require_initialized(state: LedgerState) -> None:
        if not state.initialized:
            raise InvalidConfiguration("Ledger has not been initialized")

    @staticmethod
    def _require_positive(amount: int) -> None:
        check_uint(amount)
        if amount == 0:
            raise InvalidAmount("Amount must be greater than zero")

    @staticmethod
    def _active_deposit(state: LedgerState, account: str) -> DepositRecord:
        if not state.deposits.has(account):
            raise NoDeposit(f"Account {account} has no active deposit")
        return state.deposits.get(account)


def build_engine(config=None, clock: Optional[Clock] = None) -> LedgerEngine:
    """
    Create a ledger wired and initialized from configuration

    Args:
        config: LedgerConfig to use; the global configuration if omitted
        clock: Clock to inject; the system clock if omitted
    """
    from .config import get_config
    from .storage import InMemoryAuditStore

    config = config or get_config()
    audit_trail = AuditTrail(InMemoryAuditStore()) if config.enable_audit_logging else None

    engine = LedgerEngine(
        clock=clock,
        audit_trail=audit_trail,
        name=config.token_name,
        symbol=config.token_symbol
    )
    engine.initialize(config.owner, config.total_supply, config.reserved_interest_pool)
    return engine
