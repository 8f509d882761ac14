"""
Tests for the in-memory asset transfer simulator
"""

import pytest

from savings_ledger.exceptions import TransferError
from savings_ledger.transfers import InMemoryAssetTransfer


class TestInMemoryAssetTransfer:

    def test_transfer_in_moves_to_custody(self):
        transfers = InMemoryAssetTransfer(wallets={"alice": 100})

        transfers.transfer_in("alice", 60)

        assert transfers.wallet_balance("alice") == 40
        assert transfers.custody_balance == 60

    def test_transfer_in_refused_without_funds(self):
        transfers = InMemoryAssetTransfer(wallets={"alice": 10})

        with pytest.raises(TransferError):
            transfers.transfer_in("alice", 11)

        assert transfers.wallet_balance("alice") == 10
        assert transfers.custody_balance == 0

    def test_transfer_out_refused_beyond_custody(self):
        transfers = InMemoryAssetTransfer(custody=5)

        with pytest.raises(TransferError):
            transfers.transfer_out("alice", 6)

        transfers.transfer_out("alice", 5)
        assert transfers.wallet_balance("alice") == 5
        assert transfers.custody_balance == 0

    def test_mint_and_fund(self):
        transfers = InMemoryAssetTransfer()

        transfers.mint("bob", 7)
        transfers.fund_custody(3)

        assert transfers.wallet_balance("bob") == 7
        assert transfers.custody_balance == 3

    def test_mint_and_fund_require_positive_amounts(self):
        transfers = InMemoryAssetTransfer()

        with pytest.raises(ValueError):
            transfers.mint("bob", 0)
        with pytest.raises(ValueError):
            transfers.fund_custody(-1)
