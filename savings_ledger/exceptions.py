"""
Ledger Error Taxonomy

Every failure of a ledger operation is surfaced as one of these types so
callers can tell them apart. Nothing here is retried internally.
"""

from typing import Optional


class LedgerError(Exception):
    """Base class for all savings ledger failures"""


class InvalidAmountError(LedgerError, ValueError):
    """Amount is not a positive integer"""

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Amount must be a positive integer, got {amount!r}")


class InsufficientBalanceError(LedgerError):
    """Request exceeds the withdrawable balance"""

    def __init__(self, requested: Optional[int], available: int, balance_kind: str = "principal"):
        self.requested = requested
        self.available = available
        self.balance_kind = balance_kind
        if requested is None:
            message = f"No {balance_kind} available"
        else:
            message = f"Insufficient {balance_kind}: available {available}, requested {requested}"
        super().__init__(message)


class LockPeriodActiveError(LedgerError):
    """Withdrawal attempted before the account unlocks"""

    def __init__(self, unlock_time: int):
        self.unlock_time = unlock_time
        super().__init__(f"Funds are locked until {unlock_time}")


class TransferFailedError(LedgerError):
    """The asset transfer collaborator declined or errored"""

    def __init__(self, direction: str, user: str, amount: int, reason: Optional[str] = None):
        self.direction = direction
        self.user = user
        self.amount = amount
        self.reason = reason
        message = f"Transfer {direction} of {amount} for {user} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ReentrantCallError(LedgerError):
    """A second operation on an account was started while one is in flight on the same thread"""

    def __init__(self, user: str):
        self.user = user
        super().__init__(f"Operation already in progress for account {user}")


class TransferError(Exception):
    """Raised by asset transfer implementations when a movement cannot complete"""
