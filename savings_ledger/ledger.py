"""
Savings Ledger Engine

Per-user state machine for deposits, withdrawals and interest settlement.
Every mutating operation runs under the account's lock for its full
duration, the external asset transfer included, and changes are staged on
immutable account values so nothing is persisted unless the transfer
succeeds.
"""

from contextlib import contextmanager
from typing import Callable, Dict, List, Optional, Set
import threading

from .accounts import AccountState, BalanceView, SavingsAccount
from .admin import LedgerAdministrator
from .clock import SystemClock
from .config import LedgerConfig, get_config
from .events import EventDispatcher, LedgerEvent, create_ledger_event
from .exceptions import (
    InsufficientBalanceError, InvalidAmountError, LockPeriodActiveError,
    ReentrantCallError, TransferFailedError
)
from .interest import LedgerParameters
from .logging_config import get_logger, log_action
from .storage import InMemoryStorage, StorageInterface, create_storage
from .transfers import AssetTransfer


class SavingsLedger:
    """
    Interest-bearing savings balances keyed by user identity

    Interest is simple interest on principal, settled into ``accrued_interest``
    whenever the account is touched. Settled interest is not withdrawable as
    principal; it leaves the ledger through ``claim_interest``.
    """

    accounts_table = "savings_accounts"

    def __init__(
        self,
        transfers: AssetTransfer,
        parameters: LedgerParameters,
        storage: Optional[StorageInterface] = None,
        clock: Optional[Callable[[], int]] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
        legacy_withdraw_debit: bool = False
    ):
        self.transfers = transfers
        self.storage = storage or InMemoryStorage()
        self.clock = clock or SystemClock()
        self.event_dispatcher = event_dispatcher or EventDispatcher()
        self.legacy_withdraw_debit = legacy_withdraw_debit
        self.logger = get_logger("savings_ledger.ledger")

        self._parameters = parameters
        self._parameters_lock = threading.Lock()
        self._account_locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._local = threading.local()
        self._administrator: Optional[LedgerAdministrator] = None

    @classmethod
    def from_config(
        cls,
        transfers: AssetTransfer,
        config: Optional[LedgerConfig] = None,
        **kwargs
    ) -> 'SavingsLedger':
        """Build a ledger from configuration (storage and parameters included)"""
        config = config or get_config()
        parameters = LedgerParameters(
            annual_rate_bps=config.annual_rate_bps,
            lock_period=config.lock_period_seconds
        )
        kwargs.setdefault("storage", create_storage(config.storage_backend, config.database_path))
        kwargs.setdefault("legacy_withdraw_debit", config.legacy_withdraw_debit)
        return cls(transfers, parameters, **kwargs)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def deposit(self, user: str, amount: int) -> BalanceView:
        """
        Deposit ``amount`` for ``user``

        Pending interest is settled first, then the asset is pulled into
        custody. The accrual clock (and with it the lock period) restarts for
        the whole balance, so depositing into an unlocked account locks it
        again.

        Raises:
            InvalidAmountError: amount is not a positive integer
            TransferFailedError: custody transfer failed; nothing was changed
        """
        self._validate_amount(user, amount, "deposit")

        with self._account_guard(user):
            now = self.clock()
            parameters = self.parameters
            account = self._load_account(user)

            staged, interest = account, 0
            if account.principal > 0:
                staged, interest = account.settle(parameters, now)

            self._transfer_in(user, amount)

            staged = staged.credit(amount, now)
            self._save_account(staged)

        log_action(
            self.logger, "info", f"Deposited {amount} for {user}",
            user_id=user, action="deposit", resource="savings_account",
            extra={"amount": amount, "interest_settled": interest,
                   "principal": staged.principal, "timestamp": now}
        )
        if interest:
            self._publish(LedgerEvent.INTEREST_ACCRUED, user, now, amount=interest)
        self._publish(LedgerEvent.DEPOSIT, user, now, amount=amount)

        return BalanceView.of(staged, parameters, now)

    def withdraw(self, user: str, amount: int) -> BalanceView:
        """
        Withdraw ``amount`` of principal for ``user``

        Checks, in order: amount is positive, amount is covered by principal
        (interest does not count), lock period has elapsed. Pending interest
        is then settled, which restarts the accrual clock.

        If the outbound transfer fails the withdrawal is rolled back, unless
        the ledger runs with ``legacy_withdraw_debit``, in which case the
        debit stays recorded while the funds remain in custody.

        Raises:
            InvalidAmountError, InsufficientBalanceError,
            LockPeriodActiveError, TransferFailedError
        """
        self._validate_amount(user, amount, "withdraw")

        with self._account_guard(user):
            now = self.clock()
            parameters = self.parameters
            account = self._load_account(user)

            if amount > account.principal:
                self._reject(user, "withdraw", f"requested {amount}, principal {account.principal}")
                raise InsufficientBalanceError(amount, account.principal)

            unlock_time = account.unlock_time(parameters)
            if now < unlock_time:
                self._reject(user, "withdraw", f"locked until {unlock_time}")
                raise LockPeriodActiveError(unlock_time)

            staged, interest = account.settle(parameters, now)
            staged = staged.debit(amount)

            if self.legacy_withdraw_debit:
                self._save_account(staged)

            try:
                self._transfer_out(user, amount)
            except TransferFailedError:
                if self.legacy_withdraw_debit:
                    log_action(
                        self.logger, "error",
                        f"Principal of {user} debited by {amount} but funds remain in custody",
                        user_id=user, action="withdraw", resource="savings_account",
                        extra={"amount": amount, "principal": staged.principal}
                    )
                raise

            if not self.legacy_withdraw_debit:
                self._save_account(staged)

        log_action(
            self.logger, "info", f"Withdrew {amount} for {user}",
            user_id=user, action="withdraw", resource="savings_account",
            extra={"amount": amount, "interest_settled": interest,
                   "principal": staged.principal, "timestamp": now}
        )
        if interest:
            self._publish(LedgerEvent.INTEREST_ACCRUED, user, now, amount=interest)
        self._publish(LedgerEvent.WITHDRAWAL, user, now, amount=amount)

        return BalanceView.of(staged, parameters, now)

    def claim_interest(self, user: str) -> int:
        """
        Pay out all interest earned by ``user`` so far

        While principal is held the lock period applies exactly as for
        ``withdraw``; an empty account may claim at any time.

        Returns:
            The amount paid out

        Raises:
            InsufficientBalanceError: there is no interest to claim
            LockPeriodActiveError, TransferFailedError
        """
        with self._account_guard(user):
            now = self.clock()
            parameters = self.parameters
            account = self._load_account(user)

            if account.principal > 0:
                unlock_time = account.unlock_time(parameters)
                if now < unlock_time:
                    self._reject(user, "claim_interest", f"locked until {unlock_time}")
                    raise LockPeriodActiveError(unlock_time)

            staged, interest = account.settle(parameters, now)
            payout = staged.accrued_interest
            if payout == 0:
                self._reject(user, "claim_interest", "no interest accrued")
                raise InsufficientBalanceError(None, 0, balance_kind="interest")

            self._transfer_out(user, payout)

            staged = staged.clear_interest()
            self._save_account(staged)

        log_action(
            self.logger, "info", f"Paid {payout} interest to {user}",
            user_id=user, action="claim_interest", resource="savings_account",
            extra={"amount": payout, "timestamp": now}
        )
        if interest:
            self._publish(LedgerEvent.INTEREST_ACCRUED, user, now, amount=interest)
        self._publish(LedgerEvent.INTEREST_CLAIMED, user, now, amount=payout)

        return payout

    def view_balance(self, user: str) -> BalanceView:
        """Current balance of ``user``; never changes state"""
        now = self.clock()
        parameters = self.parameters
        return BalanceView.of(self._read_account(user), parameters, now)

    # ------------------------------------------------------------------
    # Administrative getters
    # ------------------------------------------------------------------

    @property
    def parameters(self) -> LedgerParameters:
        """Snapshot of the current rate and lock period"""
        with self._parameters_lock:
            return self._parameters

    def get_account(self, user: str) -> SavingsAccount:
        """Raw account record (zero-valued for unknown users)"""
        return self._read_account(user)

    def account_state(self, user: str) -> AccountState:
        return self._read_account(user).state(self.parameters, self.clock())

    def total_principal(self) -> int:
        """Sum of principal across all accounts"""
        return sum(
            SavingsAccount.from_dict(data).principal
            for data in self.storage.load_all(self.accounts_table)
        )

    def account_count(self) -> int:
        return self.storage.count(self.accounts_table)

    def list_accounts(self) -> List[SavingsAccount]:
        return [SavingsAccount.from_dict(data) for data in self.storage.load_all(self.accounts_table)]

    def issue_administrator(self) -> LedgerAdministrator:
        """
        Hand out the capability to change ledger parameters

        Only one administrator exists per ledger; asking twice is refused.
        """
        with self._parameters_lock:
            if self._administrator is not None:
                raise PermissionError("Ledger administrator has already been issued")
            self._administrator = LedgerAdministrator(self)
            return self._administrator

    def _apply_parameters(self, administrator: LedgerAdministrator,
                          annual_rate_bps: Optional[int] = None,
                          lock_period: Optional[int] = None) -> LedgerParameters:
        """Swap in new parameters (administrator only)"""
        with self._parameters_lock:
            if administrator is not self._administrator:
                raise PermissionError("Not the administrator of this ledger")
            previous = self._parameters
            parameters = previous.with_changes(
                annual_rate_bps=annual_rate_bps,
                lock_period=lock_period
            )
            self._parameters = parameters

        now = self.clock()
        log_action(
            self.logger, "info", "Ledger parameters updated",
            action="update_parameters", resource="ledger",
            extra={
                "annual_rate_bps": parameters.annual_rate_bps,
                "lock_period": parameters.lock_period,
                "previous_annual_rate_bps": previous.annual_rate_bps,
                "previous_lock_period": previous.lock_period
            }
        )
        self._publish(
            LedgerEvent.PARAMETERS_UPDATED, None, now,
            annual_rate_bps=parameters.annual_rate_bps,
            lock_period=parameters.lock_period
        )
        return parameters

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate_amount(self, user: str, amount, action: str) -> None:
        # bool is an int subclass; True is not an amount
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            self._reject(user, action, f"invalid amount {amount!r}")
            raise InvalidAmountError(amount)

    def _in_flight(self) -> Set[str]:
        users = getattr(self._local, "users", None)
        if users is None:
            users = set()
            self._local.users = users
        return users

    def _lock_for(self, user: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._account_locks.get(user)
            if lock is None:
                lock = threading.Lock()
                self._account_locks[user] = lock
            return lock

    @contextmanager
    def _account_guard(self, user: str):
        """Serialize operations on one account; refuse same-thread re-entry"""
        in_flight = self._in_flight()
        if user in in_flight:
            self._reject(user, "reentry", "operation already in progress")
            raise ReentrantCallError(user)

        with self._lock_for(user):
            in_flight.add(user)
            try:
                yield
            finally:
                in_flight.discard(user)

    def _read_account(self, user: str) -> SavingsAccount:
        # A transfer callback on the owning thread sees the last committed state
        if user in self._in_flight():
            return self._load_account(user)
        # Locks are only created by mutations, so no lock means nothing in flight
        with self._registry_lock:
            lock = self._account_locks.get(user)
        if lock is None:
            return self._load_account(user)
        with lock:
            return self._load_account(user)

    def _load_account(self, user: str) -> SavingsAccount:
        data = self.storage.load(self.accounts_table, user)
        if data is None:
            return SavingsAccount(user=user)
        return SavingsAccount.from_dict(data)

    def _save_account(self, account: SavingsAccount) -> None:
        self.storage.save(self.accounts_table, account.user, account.to_dict())

    def _transfer_in(self, user: str, amount: int) -> None:
        try:
            self.transfers.transfer_in(user, amount)
        except Exception as e:
            self._transfer_failed("in", user, amount, e)

    def _transfer_out(self, user: str, amount: int) -> None:
        try:
            self.transfers.transfer_out(user, amount)
        except Exception as e:
            self._transfer_failed("out", user, amount, e)

    def _transfer_failed(self, direction: str, user: str, amount: int, error: Exception) -> None:
        log_action(
            self.logger, "error", f"Transfer {direction} of {amount} for {user} failed: {error}",
            user_id=user, action=f"transfer_{direction}", resource="asset_transfer",
            extra={"amount": amount, "error_type": type(error).__name__}
        )
        raise TransferFailedError(direction, user, amount, str(error)) from error

    def _reject(self, user: str, action: str, reason: str) -> None:
        log_action(
            self.logger, "warning", f"Rejected {action} for {user}: {reason}",
            user_id=user, action=action, resource="savings_account"
        )

    def _publish(self, event_type: LedgerEvent, user: Optional[str], timestamp: int, **data) -> None:
        self.event_dispatcher.publish(create_ledger_event(event_type, user, timestamp, **data))
