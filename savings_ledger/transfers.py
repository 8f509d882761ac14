"""
Asset Transfer Module

The ledger never moves value itself; it asks an asset transfer collaborator
to pull funds from a user into custody or push them back out. Implementations
signal refusal by raising ``TransferError``.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
import threading

from .exceptions import TransferError


class AssetTransfer(ABC):
    """Abstract interface for moving the deposited asset"""

    @abstractmethod
    def transfer_in(self, user: str, amount: int) -> None:
        """Move ``amount`` from ``user`` into ledger custody"""
        pass

    @abstractmethod
    def transfer_out(self, user: str, amount: int) -> None:
        """Move ``amount`` from ledger custody to ``user``"""
        pass


class InMemoryAssetTransfer(AssetTransfer):
    """
    Custody simulator for testing and local runs

    Keeps a wallet balance per user plus the ledger's custody balance, and
    refuses any movement the paying side cannot cover.
    """

    def __init__(self, wallets: Optional[Dict[str, int]] = None, custody: int = 0):
        self._wallets: Dict[str, int] = dict(wallets or {})
        self._custody = custody
        self._lock = threading.RLock()

    def mint(self, user: str, amount: int) -> None:
        """Credit a user's wallet from outside the system"""
        if amount <= 0:
            raise ValueError("Mint amount must be positive")
        with self._lock:
            self._wallets[user] = self._wallets.get(user, 0) + amount

    def fund_custody(self, amount: int) -> None:
        """Add reserves to custody (used to pay out interest)"""
        if amount <= 0:
            raise ValueError("Funding amount must be positive")
        with self._lock:
            self._custody += amount

    def wallet_balance(self, user: str) -> int:
        with self._lock:
            return self._wallets.get(user, 0)

    @property
    def custody_balance(self) -> int:
        with self._lock:
            return self._custody

    def transfer_in(self, user: str, amount: int) -> None:
        with self._lock:
            available = self._wallets.get(user, 0)
            if available < amount:
                raise TransferError(f"wallet of {user} holds {available}, needs {amount}")
            self._wallets[user] = available - amount
            self._custody += amount

    def transfer_out(self, user: str, amount: int) -> None:
        with self._lock:
            if self._custody < amount:
                raise TransferError(f"custody holds {self._custody}, needs {amount}")
            self._custody -= amount
            self._wallets[user] = self._wallets.get(user, 0) + amount
