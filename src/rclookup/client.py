"""High-level async client for paid RC lookups."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import aiohttp

from rclookup._transport import HttpRcFetcher, RcFetcher
from rclookup.cache import RecordCache
from rclookup.config import RcConfig
from rclookup.exceptions import RcConfigError, RcError, RcStoreError
from rclookup.identifier import VehicleIdentifier, normalize
from rclookup.ledger import Ledger, LedgerSummary
from rclookup.models.record import SAMPLE_RECORD, RcRecord
from rclookup.models.transaction import Transaction
from rclookup.orchestrator import LookupOrchestrator, LookupResult
from rclookup.render import document as _document
from rclookup.render import table as _table
from rclookup.storage import FileStore, KeyValueStore

_logger = logging.getLogger(__name__)


class RcClient:
    """Async client bundling the ledger, the record cache and the fetcher.

    Usage::

        async with RcClient(RcConfig.from_env()) as client:
            client.top_up(100)
            record = await client.lookup("TN 01 AB 1234")
    """

    def __init__(
        self,
        config: RcConfig,
        *,
        store: KeyValueStore | None = None,
        fetcher: RcFetcher | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._store: KeyValueStore = store if store is not None else FileStore(config.data_dir)
        self._external_session = session is not None
        self._http_session = session
        self._fetcher = fetcher
        try:
            self._tz = ZoneInfo(config.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise RcConfigError(f"unknown time zone {config.time_zone!r}") from exc
        self.ledger = Ledger(self._store)
        self.cache = RecordCache(self._store)
        self.orchestrator = LookupOrchestrator(
            self.ledger,
            self.cache,
            fetch_timeout=config.fetch_timeout,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RcClient:
        if self._fetcher is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._fetcher = HttpRcFetcher(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._fetcher = None

    @property
    def config(self) -> RcConfig:
        return self._config

    # ------------------------------------------------------------------
    # Balance
    # ------------------------------------------------------------------

    @property
    def balance(self) -> int:
        return self.ledger.get_balance()

    def top_up(self, amount: int) -> int:
        return self.ledger.top_up(amount)

    def history(self) -> list[Transaction]:
        return self.ledger.history()

    def summary(self) -> LedgerSummary:
        return self.ledger.summary()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _require_fetcher(self) -> RcFetcher:
        if self._fetcher is None:
            raise RcError("Client not initialized; use within 'async with RcClient(...)'")
        return self._fetcher

    async def lookup(self, vehicle_number: str) -> RcRecord:
        """Resolve *vehicle_number*, charging ``config.lookup_cost`` on a cache miss."""
        return await self.orchestrator.resolve(vehicle_number, self._config.lookup_cost, self._require_fetcher())

    async def lookup_detailed(self, vehicle_number: str) -> LookupResult:
        return await self.orchestrator.resolve_detailed(
            vehicle_number,
            self._config.lookup_cost,
            self._require_fetcher(),
        )

    def cached_record(self, vehicle_number: str) -> RcRecord | None:
        """Cached record for *vehicle_number* without fetching or charging."""
        return self.cache.lookup(normalize(vehicle_number))

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def save_document(self, vehicle_number: str, directory: Path | str) -> Path:
        """Write the cached record of *vehicle_number* as a PDF into *directory*."""
        identifier: VehicleIdentifier = normalize(vehicle_number)
        record = self.cache.lookup(identifier)
        if record is None:
            raise RcError(f"no cached RC record for {identifier.value}; look it up first")
        path = Path(directory) / _document.document_filename(record, identifier)
        self._write_file(path, _document.render_document(record, identifier))
        _logger.info("Saved RC document %s", path)
        return path

    def sample_document(self, directory: Path | str) -> Path:
        """Write the fixed sample RC as ``SAMPLE_RC.pdf`` into *directory*.

        Nothing is fetched, charged or cached.
        """
        path = Path(directory) / "SAMPLE_RC.pdf"
        self._write_file(path, _document.render_document(SAMPLE_RECORD))
        _logger.info("Saved sample RC document %s", path)
        return path

    def transactions_table(self, search: str | None = None, page: int = 1) -> _table.Page:
        rows = _table.to_table(self.ledger.history(), search, tz=self._tz)
        return _table.paginate(rows, page, self._config.page_size)

    def export_transactions(
        self,
        directory: Path | str,
        search: str | None = None,
        *,
        day: date | None = None,
    ) -> Path:
        """Write the (optionally filtered) log as CSV into *directory*."""
        day = day or datetime.now(UTC).astimezone(self._tz).date()
        path = Path(directory) / _table.export_filename(day)
        content = _table.to_csv(self.ledger.history(), search, tz=self._tz)
        self._write_file(path, content.encode("utf-8"))
        _logger.info("Exported transactions to %s", path)
        return path

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise RcStoreError(f"cannot write {path}: {exc}") from exc
