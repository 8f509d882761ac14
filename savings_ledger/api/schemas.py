"""
Pydantic schemas for API requests and responses
"""

from typing import Optional
from pydantic import BaseModel, Field, StrictInt

from ..accounts import BalanceView
from ..interest import LedgerParameters


class AmountRequest(BaseModel):
    # Strict so JSON true, "7" and 3.0 are refused rather than coerced
    amount: StrictInt = Field(..., description="Amount in base units of the asset")


class BalanceResponse(BaseModel):
    user: str
    principal: int
    interest_pending: int
    total: int
    unlock_time: int
    state: str

    @classmethod
    def from_view(cls, user: str, view: BalanceView) -> 'BalanceResponse':
        return cls(user=user, **view.to_dict())


class ClaimResponse(BaseModel):
    user: str
    amount: int


class ParametersModel(BaseModel):
    annual_rate_bps: int
    lock_period: int = Field(..., description="Lock period in seconds")

    @classmethod
    def from_parameters(cls, parameters: LedgerParameters) -> 'ParametersModel':
        return cls(
            annual_rate_bps=parameters.annual_rate_bps,
            lock_period=parameters.lock_period
        )


class UpdateParametersRequest(BaseModel):
    annual_rate_bps: Optional[StrictInt] = None
    lock_period: Optional[StrictInt] = None
