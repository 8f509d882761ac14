"""
Savings Ledger

A per-user interest-bearing balance ledger with fixed-rate, time-prorated
interest, integer-exact accrual math and lock-period enforced withdrawals.
"""

__version__ = "1.0.0"
