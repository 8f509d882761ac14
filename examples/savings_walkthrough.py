#!/usr/bin/env python3
"""
Example: One savings account through a full lock cycle

Deposits at 5% with a 30 day lock, shows the withdrawal being refused while
locked, then withdraws and claims interest once the lock has elapsed.
"""

from savings_ledger.clock import ManualClock
from savings_ledger.events import EventRecorder
from savings_ledger.exceptions import LockPeriodActiveError
from savings_ledger.interest import LedgerParameters, SECONDS_PER_DAY
from savings_ledger.ledger import SavingsLedger
from savings_ledger.logging_config import setup_logging
from savings_ledger.transfers import InMemoryAssetTransfer


def main():
    setup_logging("INFO", log_format="text")

    clock = ManualClock(0)
    transfers = InMemoryAssetTransfer(wallets={"alice": 10_000})
    transfers.fund_custody(1_000)  # interest reserves
    ledger = SavingsLedger(
        transfers,
        LedgerParameters(annual_rate_bps=500, lock_period=30 * SECONDS_PER_DAY),
        clock=clock
    )
    recorder = EventRecorder()
    ledger.event_dispatcher.subscribe_all(recorder)

    print("1. Deposit 1000 at day 0")
    ledger.deposit("alice", 1000)
    print(f"   {ledger.view_balance('alice')}")

    print("\n2. Try to withdraw at day 29")
    clock.set(29 * SECONDS_PER_DAY)
    try:
        ledger.withdraw("alice", 500)
    except LockPeriodActiveError as e:
        print(f"   Refused: {e}")

    print("\n3. Withdraw 500 at day 30")
    clock.set(30 * SECONDS_PER_DAY)
    print(f"   {ledger.withdraw('alice', 500)}")

    print("\n4. Claim interest at day 60")
    clock.set(60 * SECONDS_PER_DAY)
    print(f"   Paid {ledger.claim_interest('alice')}")
    print(f"   Wallet: {transfers.wallet_balance('alice')}")

    print("\nEvents:")
    for event in recorder.events:
        print(f"   {event.event_type.value} {event.data}")


if __name__ == "__main__":
    main()
