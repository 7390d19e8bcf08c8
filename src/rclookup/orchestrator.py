"""Cache-or-fetch decision and the billing side effect of a lookup.

This is the only place that writes the record cache and debits the
ledger together; no other path bills the user.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from rclookup._transport import RcFetcher
from rclookup.cache import CacheWriteResult, RecordCache
from rclookup.exceptions import (
    RcFetchFailedError,
    RcInsufficientBalanceError,
    RcInvalidAmountError,
    RcLookupInProgressError,
)
from rclookup.identifier import VehicleIdentifier, normalize
from rclookup.ledger import Ledger
from rclookup.models.record import RcRecord

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Outcome of a resolved lookup.

    ``charged`` is ``False`` for cache hits; ``balance`` is the balance
    after the lookup.
    """

    identifier: VehicleIdentifier
    record: RcRecord
    charged: bool
    balance: int


class LookupOrchestrator:
    """Resolves vehicle numbers through the record cache, billing misses.

    Execution is single-threaded (asyncio); the fetcher call is the only
    suspension point.  A per-identifier in-flight marker rejects a second
    lookup of the same vehicle while the first is still awaiting the
    fetcher.
    """

    def __init__(
        self,
        ledger: Ledger,
        cache: RecordCache,
        *,
        fetch_timeout: float | None = None,
    ) -> None:
        self._ledger = ledger
        self._cache = cache
        self._fetch_timeout = fetch_timeout or None
        self._in_flight: set[str] = set()

    def is_pending(self, identifier: VehicleIdentifier) -> bool:
        return identifier.value in self._in_flight

    async def resolve(self, raw_identifier: str, lookup_cost: int, fetch: RcFetcher) -> RcRecord:
        """Return the RC record for *raw_identifier*, billing *lookup_cost* on a miss."""
        result = await self.resolve_detailed(raw_identifier, lookup_cost, fetch)
        return result.record

    async def resolve_detailed(self, raw_identifier: str, lookup_cost: int, fetch: RcFetcher) -> LookupResult:
        """Like :meth:`resolve` but also reports whether the lookup was billed."""
        identifier = normalize(raw_identifier)

        cached = self._cache.lookup(identifier)
        if cached is not None:
            _logger.info("Cache hit for %s; no charge applied", identifier.value)
            return LookupResult(identifier, cached, charged=False, balance=self._ledger.get_balance())

        if isinstance(lookup_cost, bool) or not isinstance(lookup_cost, int) or lookup_cost < 1:
            raise RcInvalidAmountError(f"lookup cost must be a positive integer, got {lookup_cost!r}", amount=lookup_cost)

        self._require_balance(lookup_cost)

        if identifier.value in self._in_flight:
            raise RcLookupInProgressError(
                f"lookup for {identifier.value} is already in progress",
                vehicle_number=identifier.value,
            )

        self._in_flight.add(identifier.value)
        try:
            record = await self._fetch(identifier, fetch)
        finally:
            self._in_flight.discard(identifier.value)

        # Another lookup may have spent the balance while this one was awaiting.
        self._require_balance(lookup_cost)

        # Cache before debit: an interruption in between leaves the record
        # cached but unbilled, never billed but missing.
        if self._cache.store(identifier, record) is CacheWriteResult.ALREADY_CACHED:
            _logger.warning("Record for %s was cached during the fetch; not billing again", identifier.value)
            existing = self._cache.lookup(identifier)
            return LookupResult(
                identifier,
                existing if existing is not None else record,
                charged=False,
                balance=self._ledger.get_balance(),
            )
        balance = self._ledger.debit(lookup_cost, identifier)
        return LookupResult(identifier, record, charged=True, balance=balance)

    def _require_balance(self, cost: int) -> None:
        balance = self._ledger.get_balance()
        if balance < cost:
            raise RcInsufficientBalanceError(
                f"insufficient balance: {balance} available, {cost} required",
                balance=balance,
                required=cost,
            )

    async def _fetch(self, identifier: VehicleIdentifier, fetch: RcFetcher) -> RcRecord:
        _logger.debug("Fetching RC record for %s", identifier.value)
        try:
            if self._fetch_timeout is None:
                record = await fetch(identifier)
            else:
                record = await asyncio.wait_for(fetch(identifier), timeout=self._fetch_timeout)
        except RcFetchFailedError:
            raise
        except TimeoutError as exc:
            raise RcFetchFailedError(
                f"RC lookup for {identifier.value} timed out after {self._fetch_timeout}s"
            ) from exc
        except Exception as exc:
            raise RcFetchFailedError(f"RC lookup for {identifier.value} failed: {exc}") from exc

        if not isinstance(record, RcRecord):
            raise RcFetchFailedError(
                f"RC lookup for {identifier.value} returned {type(record).__name__}, expected RcRecord"
            )
        if record.is_empty:
            raise RcFetchFailedError(f"RC lookup for {identifier.value} returned no data")
        return record
