"""
Ledger Administration

The rate and lock period can only be changed through the administrator
capability a ledger issues once. New values apply from the moment they are
set; intervals already settled are never recomputed, and the open interval
of every account is prorated at whatever rate is current when it settles.
"""

from typing import Optional

from .interest import LedgerParameters


class LedgerAdministrator:
    """Capability to update the parameters of one ledger"""

    def __init__(self, ledger):
        self._ledger = ledger

    @property
    def parameters(self) -> LedgerParameters:
        return self._ledger.parameters

    def update(self, annual_rate_bps: Optional[int] = None,
               lock_period: Optional[int] = None) -> LedgerParameters:
        """
        Change one or both parameters

        Args:
            annual_rate_bps: New annual rate in basis points
            lock_period: New lock period in seconds

        Returns:
            The parameters now in force

        Raises:
            ValueError: a value is out of range
        """
        return self._ledger._apply_parameters(
            self,
            annual_rate_bps=annual_rate_bps,
            lock_period=lock_period
        )

    def set_annual_rate_bps(self, annual_rate_bps: int) -> LedgerParameters:
        return self.update(annual_rate_bps=annual_rate_bps)

    def set_lock_period(self, lock_period: int) -> LedgerParameters:
        return self.update(lock_period=lock_period)
