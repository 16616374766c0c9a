"""
Transfer, deposit and withdrawal endpoints
"""

from fastapi import APIRouter, Depends, status

from ..ledger import LedgerEngine
from .dependencies import get_engine
from .schemas import (
    AccrualModel, DepositModel, DepositRequest, TransferRequest, WithdrawRequest
)


router = APIRouter()


@router.post("/transfers", status_code=status.HTTP_201_CREATED)
def create_transfer(request: TransferRequest, engine: LedgerEngine = Depends(get_engine)):
    """Transfer tokens between accounts"""
    engine.transfer(request.caller, request.to, request.amount)
    return {
        "from": request.caller,
        "to": request.to,
        "amount": request.amount,
        "message": "Transfer committed"
    }


@router.post("/deposits", status_code=status.HTTP_201_CREATED, response_model=DepositModel)
def create_deposit(request: DepositRequest, engine: LedgerEngine = Depends(get_engine)):
    """Lock tokens into an interest-bearing deposit"""
    engine.deposit(request.caller, request.amount)
    return DepositModel.from_record(request.caller, engine.deposits(request.caller))


@router.post("/withdrawals", response_model=AccrualModel)
def create_withdrawal(request: WithdrawRequest, engine: LedgerEngine = Depends(get_engine)):
    """Close the caller's deposit and pay out principal plus interest"""
    return AccrualModel.from_accrual(engine.withdraw(request.caller))
