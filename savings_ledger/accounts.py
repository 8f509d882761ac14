"""
Savings Account Module

Per-user account record, its derived lifecycle state and the read-only
balance view. Accounts are immutable values: every transition produces a new
record, so a ledger operation can stage changes and commit them only once
the external transfer has succeeded.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple
from enum import Enum

from .interest import LedgerParameters, prorate


class AccountState(Enum):
    """Account lifecycle states (derived, never stored)"""
    EMPTY = "empty"        # No principal
    ACTIVE = "active"      # Principal held, still within lock period
    UNLOCKED = "unlocked"  # Principal held, lock period elapsed


@dataclass(frozen=True)
class SavingsAccount:
    """
    Savings balance of one user identity

    Interest for the open interval starting at ``last_accrual_time`` is never
    stored; it is computed on demand from the current principal.
    """
    user: str
    principal: int = 0
    last_accrual_time: int = 0
    accrued_interest: int = 0

    def __post_init__(self):
        if self.principal < 0:
            raise ValueError("Principal cannot be negative")
        if self.accrued_interest < 0:
            raise ValueError("Accrued interest cannot be negative")

    @property
    def is_empty(self) -> bool:
        return self.principal == 0

    def pending_interest(self, parameters: LedgerParameters, now: int) -> int:
        """Interest earned since ``last_accrual_time`` and not yet settled"""
        return prorate(
            self.principal,
            parameters.annual_rate_bps,
            now - self.last_accrual_time
        )

    def unlock_time(self, parameters: LedgerParameters) -> int:
        """First instant at which principal may be withdrawn"""
        return self.last_accrual_time + parameters.lock_period

    def is_locked(self, parameters: LedgerParameters, now: int) -> bool:
        return now < self.unlock_time(parameters)

    def state(self, parameters: LedgerParameters, now: int) -> AccountState:
        if self.is_empty:
            return AccountState.EMPTY
        if self.is_locked(parameters, now):
            return AccountState.ACTIVE
        return AccountState.UNLOCKED

    def settle(self, parameters: LedgerParameters, now: int) -> Tuple['SavingsAccount', int]:
        """
        Fold pending interest into ``accrued_interest`` and restart the clock.

        The clock never moves backwards: if ``now`` precedes the last accrual
        time no interest is earned and the clock stays where it is.

        Returns:
            The settled account and the amount of interest that was settled
        """
        interest = self.pending_interest(parameters, now)
        settled = replace(
            self,
            accrued_interest=self.accrued_interest + interest,
            last_accrual_time=max(self.last_accrual_time, now)
        )
        return settled, interest

    def credit(self, amount: int, now: int) -> 'SavingsAccount':
        """Add principal and reset the accrual clock for the whole balance"""
        return replace(
            self,
            principal=self.principal + amount,
            last_accrual_time=max(self.last_accrual_time, now)
        )

    def debit(self, amount: int) -> 'SavingsAccount':
        """Remove principal (raises ValueError if that would go negative)"""
        return replace(self, principal=self.principal - amount)

    def clear_interest(self) -> 'SavingsAccount':
        return replace(self, accrued_interest=0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return {
            "user": self.user,
            "principal": self.principal,
            "last_accrual_time": self.last_accrual_time,
            "accrued_interest": self.accrued_interest
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SavingsAccount':
        """Create instance from dictionary"""
        return cls(
            user=data["user"],
            principal=int(data["principal"]),
            last_accrual_time=int(data["last_accrual_time"]),
            accrued_interest=int(data["accrued_interest"])
        )


@dataclass(frozen=True)
class BalanceView:
    """Point-in-time balance of an account"""
    principal: int
    interest_pending: int   # Settled interest plus interest of the open interval
    total: int
    unlock_time: int
    state: AccountState

    @classmethod
    def of(cls, account: SavingsAccount, parameters: LedgerParameters, now: int) -> 'BalanceView':
        interest_pending = account.accrued_interest + account.pending_interest(parameters, now)
        return cls(
            principal=account.principal,
            interest_pending=interest_pending,
            total=account.principal + interest_pending,
            unlock_time=account.unlock_time(parameters),
            state=account.state(parameters, now)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "principal": self.principal,
            "interest_pending": self.interest_pending,
            "total": self.total,
            "unlock_time": self.unlock_time,
            "state": self.state.value
        }
