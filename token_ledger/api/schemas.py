"""
Pydantic schemas for API requests and responses
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from ..deposits import DepositRecord
from ..interest import Accrual


class TransferRequest(BaseModel):
    caller: str = Field(..., min_length=1, description="Account sending the tokens")
    to: str = Field(..., min_length=1, description="Account receiving the tokens")
    amount: int = Field(..., ge=0, description="Whole token amount")


class DepositRequest(BaseModel):
    caller: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)


class WithdrawRequest(BaseModel):
    caller: str = Field(..., min_length=1)


class BalanceModel(BaseModel):
    account: str
    balance: int


class AccrualModel(BaseModel):
    principal: int
    interest: int
    total: int

    @classmethod
    def from_accrual(cls, accrual: Accrual) -> 'AccrualModel':
        return cls(**accrual.to_dict())


class DepositModel(BaseModel):
    account: str
    amount: int
    timestamp: int
    exists: bool

    @classmethod
    def from_record(cls, account: str, record: DepositRecord) -> 'DepositModel':
        return cls(account=account, **record.to_dict())


class EventModel(BaseModel):
    sequence: int
    event_type: str
    data: Dict[str, Any]


class EventListModel(BaseModel):
    events: List[EventModel]
