"""
Test suite for savings account records

Tests settlement, state derivation and the balance view.
"""

import pytest

from savings_ledger.accounts import SavingsAccount, AccountState, BalanceView
from savings_ledger.interest import LedgerParameters, SECONDS_PER_DAY, SECONDS_PER_YEAR


PARAMETERS = LedgerParameters(annual_rate_bps=500, lock_period=30 * SECONDS_PER_DAY)


class TestSavingsAccount:
    """Test account values"""

    def test_new_account_is_empty(self):
        account = SavingsAccount(user="alice")

        assert account.principal == 0
        assert account.accrued_interest == 0
        assert account.last_accrual_time == 0
        assert account.is_empty
        assert account.state(PARAMETERS, 0) == AccountState.EMPTY

    def test_negative_values_rejected(self):
        """Balances can never go negative"""
        with pytest.raises(ValueError, match="Principal cannot be negative"):
            SavingsAccount(user="alice", principal=-1)

        with pytest.raises(ValueError, match="Accrued interest cannot be negative"):
            SavingsAccount(user="alice", accrued_interest=-1)

    def test_debit_below_zero_rejected(self):
        account = SavingsAccount(user="alice", principal=100)

        with pytest.raises(ValueError):
            account.debit(101)

    def test_credit_resets_clock(self):
        account = SavingsAccount(user="alice", principal=100, last_accrual_time=10)

        credited = account.credit(50, 500)

        assert credited.principal == 150
        assert credited.last_accrual_time == 500
        assert account.principal == 100  # original untouched

    def test_settle_moves_interest(self):
        """Settlement locks in interest and restarts the clock"""
        account = SavingsAccount(user="alice", principal=10_000, accrued_interest=7)

        settled, interest = account.settle(PARAMETERS, SECONDS_PER_YEAR)

        assert interest == 500
        assert settled.accrued_interest == 507
        assert settled.last_accrual_time == SECONDS_PER_YEAR
        assert settled.principal == 10_000

    def test_settle_never_moves_clock_backwards(self):
        account = SavingsAccount(user="alice", principal=10_000, last_accrual_time=1000)

        settled, interest = account.settle(PARAMETERS, 400)

        assert interest == 0
        assert settled.last_accrual_time == 1000

    def test_state_transitions_with_time(self):
        """Active until the lock elapses, unlocked from that instant"""
        account = SavingsAccount(user="alice", principal=1000, last_accrual_time=0)
        unlock = 30 * SECONDS_PER_DAY

        assert account.unlock_time(PARAMETERS) == unlock
        assert account.state(PARAMETERS, unlock - 1) == AccountState.ACTIVE
        assert account.state(PARAMETERS, unlock) == AccountState.UNLOCKED

    def test_dict_round_trip(self):
        account = SavingsAccount(user="alice", principal=5, last_accrual_time=6, accrued_interest=7)

        data = account.to_dict()
        assert data == {
            "user": "alice",
            "principal": 5,
            "last_accrual_time": 6,
            "accrued_interest": 7
        }
        assert SavingsAccount.from_dict(data) == account


class TestBalanceView:
    """Test the read-only balance computation"""

    def test_view_includes_settled_and_pending_interest(self):
        account = SavingsAccount(user="alice", principal=10_000, last_accrual_time=0, accrued_interest=3)

        view = BalanceView.of(account, PARAMETERS, SECONDS_PER_YEAR)

        assert view.principal == 10_000
        assert view.interest_pending == 503
        assert view.total == 10_503
        assert view.unlock_time == 30 * SECONDS_PER_DAY

    def test_view_matches_settlement(self):
        """Pending interest in the view equals what settlement would lock in"""
        account = SavingsAccount(user="alice", principal=123_457, last_accrual_time=17, accrued_interest=11)
        now = 17 + 45 * SECONDS_PER_DAY + 123

        view = BalanceView.of(account, PARAMETERS, now)
        settled, _ = account.settle(PARAMETERS, now)

        assert view.interest_pending == settled.accrued_interest

    def test_to_dict(self):
        view = BalanceView(principal=1, interest_pending=2, total=3, unlock_time=4, state=AccountState.ACTIVE)

        assert view.to_dict() == {
            "principal": 1, "interest_pending": 2, "total": 3, "unlock_time": 4, "state": "active"
        }

    def test_view_state_uses_same_instant(self):
        """State and unlock time come from one clock reading and one parameter set"""
        account = SavingsAccount(user="alice", principal=1000, last_accrual_time=0)
        unlock = 30 * SECONDS_PER_DAY

        assert BalanceView.of(account, PARAMETERS, unlock - 1).state == AccountState.ACTIVE
        assert BalanceView.of(account, PARAMETERS, unlock).state == AccountState.UNLOCKED

        longer = PARAMETERS.with_changes(lock_period=60 * SECONDS_PER_DAY)
        view = BalanceView.of(account, longer, unlock)
        assert view.unlock_time == 60 * SECONDS_PER_DAY
        assert view.state == AccountState.ACTIVE

        assert BalanceView.of(SavingsAccount(user="bob"), PARAMETERS, unlock).state == AccountState.EMPTY
