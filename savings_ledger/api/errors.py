"""
Translation of ledger failures into HTTP errors
"""

from fastapi import HTTPException, status

from ..exceptions import (
    InsufficientBalanceError, InvalidAmountError, LedgerError,
    LockPeriodActiveError, ReentrantCallError, TransferFailedError
)


def to_http_exception(error: LedgerError) -> HTTPException:
    if isinstance(error, InvalidAmountError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, InsufficientBalanceError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, LockPeriodActiveError):
        return HTTPException(
            status_code=status.HTTP_423_LOCKED,
            detail={"message": str(error), "unlock_time": error.unlock_time}
        )
    if isinstance(error, TransferFailedError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    if isinstance(error, ReentrantCallError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
