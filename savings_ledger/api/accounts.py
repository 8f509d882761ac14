"""
Savings account endpoints
"""

from fastapi import APIRouter, Depends

from .deps import LedgerSystem, get_ledger_system
from .errors import to_http_exception
from .schemas import AmountRequest, BalanceResponse, ClaimResponse
from ..exceptions import LedgerError


router = APIRouter()


@router.post("/{user}/deposit", response_model=BalanceResponse)
async def deposit(
    user: str,
    request: AmountRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Deposit into a savings account"""
    try:
        view = system.ledger.deposit(user, request.amount)
    except LedgerError as e:
        raise to_http_exception(e)
    return BalanceResponse.from_view(user, view)


@router.post("/{user}/withdraw", response_model=BalanceResponse)
async def withdraw(
    user: str,
    request: AmountRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Withdraw principal from a savings account"""
    try:
        view = system.ledger.withdraw(user, request.amount)
    except LedgerError as e:
        raise to_http_exception(e)
    return BalanceResponse.from_view(user, view)


@router.post("/{user}/claim-interest", response_model=ClaimResponse)
async def claim_interest(
    user: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Pay out accrued interest"""
    try:
        amount = system.ledger.claim_interest(user)
    except LedgerError as e:
        raise to_http_exception(e)
    return ClaimResponse(user=user, amount=amount)


@router.get("/{user}/balance", response_model=BalanceResponse)
async def get_balance(
    user: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get the balance of any account"""
    return BalanceResponse.from_view(user, system.ledger.view_balance(user))
