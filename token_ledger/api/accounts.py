"""
Account query endpoints
"""

from fastapi import APIRouter, Depends

from ..ledger import LedgerEngine
from .dependencies import get_engine
from .schemas import AccrualModel, BalanceModel, DepositModel


router = APIRouter()


@router.get("/{account}/balance", response_model=BalanceModel)
def get_balance(account: str, engine: LedgerEngine = Depends(get_engine)):
    """Get token balance (zero for unseen accounts)"""
    return BalanceModel(account=account, balance=engine.balance_of(account))


@router.get("/{account}/deposit", response_model=DepositModel)
def get_deposit(account: str, engine: LedgerEngine = Depends(get_engine)):
    """Get the deposit record; exists is false when none is active"""
    return DepositModel.from_record(account, engine.deposits(account))


@router.get("/{account}/interest", response_model=AccrualModel)
def get_interest(account: str, engine: LedgerEngine = Depends(get_engine)):
    """Principal, interest and total the account would withdraw now"""
    return AccrualModel.from_accrual(engine.calculate_interest(account))
