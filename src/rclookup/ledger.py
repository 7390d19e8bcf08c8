"""Prepaid balance and append-only transaction log.

The transaction log is the source of truth.  The balance is recomputed
from the log on every read; the ``balance`` key is a mirror kept for
readers of the persisted state.  Reads never write: the mirror is
rewritten by every mutation and by an explicit :meth:`Ledger.repair_mirror`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, ValidationError

from rclookup._constants import BALANCE_KEY, MAX_TOPUP, MIN_TOPUP, TRANSACTIONS_KEY
from rclookup.exceptions import RcInsufficientBalanceError, RcInvalidAmountError, RcStoreError
from rclookup.identifier import VehicleIdentifier
from rclookup.models.transaction import Transaction, TransactionKind
from rclookup.storage import KeyValueStore, append_json, get_json

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class LedgerSummary(BaseModel):
    """Aggregate figures over the whole transaction log."""

    model_config = ConfigDict(frozen=True)

    total_transactions: int = 0
    total_spent: int = 0
    total_added: int = 0
    lookups_billed: int = 0


class Ledger:
    """Balance + transaction log on top of a :class:`KeyValueStore`.

    ``top_up`` and ``debit`` are the only mutators.  Neither awaits, so
    under asyncio each call is a complete critical section.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _load(self) -> list[Transaction]:
        items = get_json(self._store, TRANSACTIONS_KEY, default=[])
        if not isinstance(items, list):
            raise RcStoreError(f"stored {TRANSACTIONS_KEY!r} is not a list", key=TRANSACTIONS_KEY)
        try:
            return [Transaction.model_validate(item) for item in items]
        except ValidationError as exc:
            raise RcStoreError(f"corrupt transaction log: {exc}", key=TRANSACTIONS_KEY) from exc

    def history(self) -> list[Transaction]:
        """All transactions, oldest first as stored."""
        return self._load()

    def get_balance(self) -> int:
        """Current balance, derived from the log (0 for an empty log)."""
        return sum(txn.delta for txn in self._load())

    def summary(self) -> LedgerSummary:
        transactions = self._load()
        debits = [t for t in transactions if t.kind == TransactionKind.DEBIT]
        topups = [t for t in transactions if t.kind == TransactionKind.TOPUP]
        return LedgerSummary(
            total_transactions=len(transactions),
            total_spent=sum(t.cost or 0 for t in debits),
            total_added=sum(t.amount or 0 for t in topups),
            lookups_billed=len(debits),
        )

    def repair_mirror(self) -> bool:
        """Rewrite a ``balance`` key that disagrees with the log.

        Returns ``True`` when the key was rewritten.  An empty store with
        no mirror is left untouched.
        """
        balance = self.get_balance()
        mirrored = self._store.get(BALANCE_KEY)
        if mirrored == str(balance) or (mirrored is None and balance == 0):
            return False
        self._warn_drift(mirrored, balance)
        self._store.set(BALANCE_KEY, str(balance))
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def top_up(self, amount: int) -> int:
        """Add *amount* rupees and return the new balance."""
        if not _is_int(amount) or not MIN_TOPUP <= amount <= MAX_TOPUP:
            raise RcInvalidAmountError(
                f"top-up amount must be an integer between {MIN_TOPUP} and {MAX_TOPUP}, got {amount!r}",
                amount=amount,
            )
        transactions = self._load()
        old = sum(txn.delta for txn in transactions)
        now = self._clock()
        txn = Transaction(
            id=self._next_id(transactions, now),
            timestamp=now,
            kind=TransactionKind.TOPUP,
            amount=amount,
        )
        new_balance = self._commit(txn, old)
        _logger.info("Balance topped up amount=%d balance=%d", amount, new_balance)
        return new_balance

    def debit(self, cost: int, vehicle_identifier: VehicleIdentifier) -> int:
        """Charge *cost* rupees for a lookup of *vehicle_identifier*."""
        if not _is_int(cost) or cost < 1:
            raise RcInvalidAmountError(f"cost must be a positive integer, got {cost!r}", amount=cost)
        transactions = self._load()
        old = sum(txn.delta for txn in transactions)
        if old < cost:
            raise RcInsufficientBalanceError(
                f"insufficient balance: {old} available, {cost} required",
                balance=old,
                required=cost,
            )
        now = self._clock()
        txn = Transaction(
            id=self._next_id(transactions, now),
            timestamp=now,
            kind=TransactionKind.DEBIT,
            cost=cost,
            vehicle_number=vehicle_identifier.value,
        )
        new_balance = self._commit(txn, old)
        _logger.info(
            "Lookup billed vehicle=%s cost=%d balance=%d",
            vehicle_identifier.value,
            cost,
            new_balance,
        )
        return new_balance

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _next_id(transactions: list[Transaction], now: datetime) -> int:
        candidate = int(now.timestamp() * 1000)
        if transactions:
            candidate = max(candidate, transactions[-1].id + 1)
        return candidate

    def _commit(self, txn: Transaction, old_balance: int) -> int:
        # Log first: if the mirror write fails the log still holds the truth.
        append_json(self._store, TRANSACTIONS_KEY, txn.to_storage())
        new_balance = old_balance + txn.delta
        mirrored = self._store.get(BALANCE_KEY)
        if mirrored is not None and mirrored != str(old_balance):
            self._warn_drift(mirrored, old_balance)
        self._store.set(BALANCE_KEY, str(new_balance))
        return new_balance

    @staticmethod
    def _warn_drift(mirrored: str | None, balance: int) -> None:
        _logger.warning(
            "Stored balance %r disagrees with transaction log (%d); repairing",
            mirrored,
            balance,
        )
