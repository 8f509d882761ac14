"""
Interest Engine Module

Simple (non-compounding) interest prorated by the second over a fixed
365-day year. All arithmetic is integer: any fractional unit of interest is
truncated and forgone, never carried into the next interval. NEVER uses float.
"""

from dataclasses import dataclass, replace
from typing import Optional


SECONDS_PER_DAY = 24 * 60 * 60
SECONDS_PER_YEAR = 365 * SECONDS_PER_DAY  # No leap-year adjustment
BPS_DENOMINATOR = 10_000
MAX_ANNUAL_RATE_BPS = BPS_DENOMINATOR  # 100%


def _require_int(name: str, value) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class LedgerParameters:
    """Ledger-wide interest rate and lock period"""
    annual_rate_bps: int   # Basis points per 365-day year (500 = 5%)
    lock_period: int       # Seconds after the last accrual reset before withdrawal

    def __post_init__(self):
        _require_int("annual_rate_bps", self.annual_rate_bps)
        _require_int("lock_period", self.lock_period)

        if self.annual_rate_bps < 0 or self.annual_rate_bps > MAX_ANNUAL_RATE_BPS:
            raise ValueError(
                f"Annual rate must be between 0 and {MAX_ANNUAL_RATE_BPS} bps"
            )

        if self.lock_period < 0:
            raise ValueError("Lock period must not be negative")

    def with_changes(self, annual_rate_bps: Optional[int] = None,
                     lock_period: Optional[int] = None) -> 'LedgerParameters':
        """Copy with the given fields replaced (validated again)"""
        changes = {}
        if annual_rate_bps is not None:
            changes["annual_rate_bps"] = annual_rate_bps
        if lock_period is not None:
            changes["lock_period"] = lock_period
        return replace(self, **changes)


def prorate(principal: int, annual_rate_bps: int, elapsed_seconds: int) -> int:
    """
    Interest earned on ``principal`` over ``elapsed_seconds``.

    floor(principal * annual_rate_bps * elapsed_seconds / (SECONDS_PER_YEAR * 10000))

    Args:
        principal: Balance in base units
        annual_rate_bps: Annual rate in basis points
        elapsed_seconds: Length of the interval; non-positive yields zero

    Returns:
        Whole units of interest, rounded down
    """
    if principal <= 0 or annual_rate_bps <= 0 or elapsed_seconds <= 0:
        return 0
    return (principal * annual_rate_bps * elapsed_seconds) // (SECONDS_PER_YEAR * BPS_DENOMINATOR)
