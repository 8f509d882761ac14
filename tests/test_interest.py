"""
Test suite for interest module

Tests integer proration, truncation of fractional interest and ledger
parameter validation. All calculations must be exact.
"""

import pytest
from dataclasses import FrozenInstanceError

from savings_ledger.interest import (
    LedgerParameters, prorate, SECONDS_PER_YEAR, SECONDS_PER_DAY,
    BPS_DENOMINATOR, MAX_ANNUAL_RATE_BPS
)


class TestConstants:
    """Test fixed calendar constants"""

    def test_seconds_per_year_has_no_leap_day(self):
        """A year is exactly 365 days"""
        assert SECONDS_PER_YEAR == 31_536_000
        assert SECONDS_PER_YEAR == 365 * SECONDS_PER_DAY

    def test_bps_denominator(self):
        assert BPS_DENOMINATOR == 10_000
        assert MAX_ANNUAL_RATE_BPS == 10_000


class TestProrate:
    """Test interest proration"""

    def test_reference_scenario(self):
        """1000 units at 5% for 30 days earns 4 units"""
        elapsed = 30 * SECONDS_PER_DAY
        assert prorate(1000, 500, elapsed) == 4
        assert prorate(1000, 500, elapsed) == (1000 * 500 * elapsed) // (31_536_000 * 10_000)

    def test_zero_elapsed(self):
        """No time, no interest"""
        assert prorate(1_000_000, 500, 0) == 0

    def test_negative_elapsed(self):
        """Clock skew never produces negative interest"""
        assert prorate(1_000_000, 500, -3600) == 0

    def test_zero_principal(self):
        assert prorate(0, 500, SECONDS_PER_YEAR) == 0

    def test_zero_rate(self):
        assert prorate(1_000_000, 0, SECONDS_PER_YEAR) == 0

    def test_full_year(self):
        """One full year at the annual rate"""
        assert prorate(10_000, 500, SECONDS_PER_YEAR) == 500
        assert prorate(10_000, 10_000, SECONDS_PER_YEAR) == 10_000

    def test_fraction_is_truncated(self):
        """Fractional units are dropped, never rounded up"""
        # 1 * 5% for a year is 0.05
        assert prorate(1, 500, SECONDS_PER_YEAR) == 0
        # 39 * 5% for a year is 1.95
        assert prorate(39, 500, SECONDS_PER_YEAR) == 1
        assert prorate(40, 500, SECONDS_PER_YEAR) == 2

    def test_truncation_is_not_carried_forward(self):
        """Splitting an interval into pieces can only lose interest"""
        whole = prorate(1000, 500, 30 * SECONDS_PER_DAY)
        pieces = sum(prorate(1000, 500, SECONDS_PER_DAY) for _ in range(30))
        assert pieces == 0  # 1000 * 5% / 365 < 1 per day
        assert whole == 4

    def test_large_values_do_not_overflow(self):
        """Token-sized principals over long horizons stay exact"""
        principal = 10 ** 30
        elapsed = 100 * SECONDS_PER_YEAR
        assert prorate(principal, 10_000, elapsed) == 10 ** 32

        # 18-decimal token amounts, one second at a time
        wei = 123_456_789 * 10 ** 18
        assert prorate(wei, 500, 1) == (wei * 500) // (SECONDS_PER_YEAR * 10_000)

    def test_result_is_int(self):
        assert isinstance(prorate(1000, 500, 12345), int)

    def test_monotonic_in_elapsed(self):
        """More time never earns less interest"""
        previous = 0
        for days in range(0, 400, 7):
            current = prorate(987_654, 725, days * SECONDS_PER_DAY)
            assert current >= previous
            previous = current


class TestLedgerParameters:
    """Test ledger parameter validation"""

    def test_valid_parameters(self):
        parameters = LedgerParameters(annual_rate_bps=500, lock_period=30 * SECONDS_PER_DAY)

        assert parameters.annual_rate_bps == 500
        assert parameters.lock_period == 2_592_000

    def test_rate_bounds(self):
        """Rate must be between 0 and 10000 bps"""
        LedgerParameters(annual_rate_bps=0, lock_period=0)
        LedgerParameters(annual_rate_bps=10_000, lock_period=0)

        with pytest.raises(ValueError, match="between 0 and 10000"):
            LedgerParameters(annual_rate_bps=-1, lock_period=0)

        with pytest.raises(ValueError, match="between 0 and 10000"):
            LedgerParameters(annual_rate_bps=10_001, lock_period=0)

    def test_negative_lock_period(self):
        with pytest.raises(ValueError, match="must not be negative"):
            LedgerParameters(annual_rate_bps=500, lock_period=-1)

    def test_non_integer_values_rejected(self):
        """Floats and bools are not accepted"""
        with pytest.raises(ValueError, match="must be an integer"):
            LedgerParameters(annual_rate_bps=5.0, lock_period=0)

        with pytest.raises(ValueError, match="must be an integer"):
            LedgerParameters(annual_rate_bps=500, lock_period=True)

    def test_with_changes(self):
        """Copies validate and leave the original untouched"""
        original = LedgerParameters(annual_rate_bps=500, lock_period=100)

        changed = original.with_changes(annual_rate_bps=750)
        assert changed == LedgerParameters(annual_rate_bps=750, lock_period=100)
        assert original.annual_rate_bps == 500

        assert original.with_changes() == original

        with pytest.raises(ValueError):
            original.with_changes(lock_period=-5)

    def test_immutable(self):
        parameters = LedgerParameters(annual_rate_bps=500, lock_period=100)

        with pytest.raises(FrozenInstanceError):
            parameters.annual_rate_bps = 600
