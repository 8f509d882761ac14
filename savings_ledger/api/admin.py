"""
Admin endpoints (ledger parameters, simulator funding)
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from .deps import LedgerSystem, get_ledger_system, require_admin
from .schemas import AmountRequest, ParametersModel, UpdateParametersRequest
from ..transfers import InMemoryAssetTransfer


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/parameters", response_model=ParametersModel)
async def get_parameters(system: LedgerSystem = Depends(get_ledger_system)):
    """Get the rate and lock period in force"""
    return ParametersModel.from_parameters(system.ledger.parameters)


@router.put("/parameters", response_model=ParametersModel)
async def update_parameters(
    request: UpdateParametersRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Change the rate and/or lock period for future accrual"""
    try:
        parameters = system.administrator.update(
            annual_rate_bps=request.annual_rate_bps,
            lock_period=request.lock_period
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ParametersModel.from_parameters(parameters)


@router.get("/summary")
async def get_summary(system: LedgerSystem = Depends(get_ledger_system)) -> Dict[str, Any]:
    """Ledger-wide totals"""
    return {
        "account_count": system.ledger.account_count(),
        "total_principal": system.ledger.total_principal(),
        "parameters": ParametersModel.from_parameters(system.ledger.parameters).model_dump()
    }


def _simulator(system: LedgerSystem) -> InMemoryAssetTransfer:
    if not isinstance(system.transfers, InMemoryAssetTransfer):
        raise HTTPException(status_code=400, detail="Asset transfer is not the in-memory simulator")
    return system.transfers


@router.post("/wallets/{user}/mint")
async def mint(
    user: str,
    request: AmountRequest,
    system: LedgerSystem = Depends(get_ledger_system)
) -> Dict[str, Any]:
    """Credit a simulated wallet"""
    transfers = _simulator(system)
    try:
        transfers.mint(user, request.amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"user": user, "wallet_balance": transfers.wallet_balance(user)}


@router.post("/custody/fund")
async def fund_custody(
    request: AmountRequest,
    system: LedgerSystem = Depends(get_ledger_system)
) -> Dict[str, Any]:
    """Add interest reserves to simulated custody"""
    transfers = _simulator(system)
    try:
        transfers.fund_custody(request.amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"custody_balance": transfers.custody_balance}
