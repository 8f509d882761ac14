"""
Ledger wiring and request dependencies
"""

import hmac
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from ..config import LedgerConfig, get_config
from ..ledger import SavingsLedger
from ..transfers import AssetTransfer, InMemoryAssetTransfer


class LedgerSystem:
    """Savings ledger with its collaborators and administrator"""

    def __init__(
        self,
        transfers: Optional[AssetTransfer] = None,
        config: Optional[LedgerConfig] = None,
        ledger: Optional[SavingsLedger] = None
    ):
        self.config = config or get_config()
        if ledger is not None:
            self.ledger = ledger
            self.transfers = ledger.transfers
        else:
            self.transfers = transfers or InMemoryAssetTransfer()
            self.ledger = SavingsLedger.from_config(self.transfers, self.config)
        self.administrator = self.ledger.issue_administrator()


def get_ledger_system(request: Request) -> LedgerSystem:
    return request.app.state.ledger_system


def require_admin(
    request: Request,
    x_admin_token: Optional[str] = Header(default=None)
) -> None:
    """Reject requests without the configured admin token"""
    expected = request.app.state.ledger_system.config.admin_token
    if not x_admin_token or not hmac.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin token required")
