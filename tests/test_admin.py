"""
Tests for the ledger administrator capability
"""

import pytest

from savings_ledger.clock import ManualClock
from savings_ledger.events import EventRecorder, LedgerEvent
from savings_ledger.interest import LedgerParameters, SECONDS_PER_DAY, SECONDS_PER_YEAR
from savings_ledger.ledger import SavingsLedger
from savings_ledger.admin import LedgerAdministrator
from savings_ledger.transfers import InMemoryAssetTransfer


class TestLedgerAdministrator:
    """Test parameter administration"""

    def setup_method(self):
        self.clock = ManualClock(0)
        self.transfers = InMemoryAssetTransfer(wallets={"alice": 1_000_000})
        self.ledger = SavingsLedger(
            self.transfers,
            LedgerParameters(annual_rate_bps=500, lock_period=30 * SECONDS_PER_DAY),
            clock=self.clock
        )
        self.admin = self.ledger.issue_administrator()

    def test_issued_only_once(self):
        """A ledger has exactly one administrator"""
        with pytest.raises(PermissionError):
            self.ledger.issue_administrator()

    def test_foreign_administrator_rejected(self):
        """An administrator of another ledger cannot change this one"""
        impostor = LedgerAdministrator(self.ledger)

        with pytest.raises(PermissionError):
            impostor.set_annual_rate_bps(9_000)

        assert self.ledger.parameters.annual_rate_bps == 500

    def test_update_rate(self):
        parameters = self.admin.set_annual_rate_bps(750)

        assert parameters == LedgerParameters(annual_rate_bps=750, lock_period=30 * SECONDS_PER_DAY)
        assert self.ledger.parameters == parameters
        assert self.admin.parameters == parameters

    def test_update_lock_period(self):
        """A shorter lock applies to existing deposits immediately"""
        self.ledger.deposit("alice", 1000)

        self.admin.set_lock_period(0)

        self.ledger.withdraw("alice", 1000)
        assert self.ledger.get_account("alice").principal == 0

    def test_invalid_update_leaves_parameters(self):
        with pytest.raises(ValueError):
            self.admin.update(annual_rate_bps=20_000)

        with pytest.raises(ValueError):
            self.admin.update(lock_period=-1)

        assert self.ledger.parameters == LedgerParameters(annual_rate_bps=500, lock_period=30 * SECONDS_PER_DAY)

    def test_rate_change_is_not_retroactive_for_settled_interest(self):
        """Settled intervals keep the rate they were settled at"""
        self.ledger.deposit("alice", 10_000)
        self.clock.set(SECONDS_PER_YEAR)
        self.ledger.deposit("alice", 1)  # settles 500 at 5%

        self.admin.set_annual_rate_bps(1_000)
        self.clock.set(2 * SECONDS_PER_YEAR)

        view = self.ledger.view_balance("alice")
        # 500 settled at 5% plus one year of 10001 at 10%
        assert view.interest_pending == 500 + 1000

    def test_open_interval_uses_rate_at_settlement(self):
        """Unsettled time is prorated at the rate in force when it settles"""
        self.ledger.deposit("alice", 10_000)
        self.clock.set(SECONDS_PER_YEAR)

        self.admin.set_annual_rate_bps(0)

        assert self.ledger.view_balance("alice").interest_pending == 0

    def test_update_publishes_event(self):
        recorder = EventRecorder()
        self.ledger.event_dispatcher.subscribe_all(recorder)

        self.admin.update(annual_rate_bps=600, lock_period=60)

        events = recorder.of_type(LedgerEvent.PARAMETERS_UPDATED)
        assert len(events) == 1
        assert events[0].user is None
        assert events[0].data["annual_rate_bps"] == 600
        assert events[0].data["lock_period"] == 60
