"""Per-vehicle cache of fetched RC records.

A record is written once, on the first successful billed lookup, and is
never overwritten or expired: it is what makes later lookups of the same
vehicle free.
"""

from __future__ import annotations

import enum
import logging

from rclookup._constants import RECORD_KEY_PREFIX
from rclookup.exceptions import RcInvalidFormatError, RcStoreError
from rclookup.identifier import VehicleIdentifier, normalize
from rclookup.models.record import RcRecord
from rclookup.storage import KeyValueStore, ScopedStore, get_json, set_json

_logger = logging.getLogger(__name__)


class CacheWriteResult(enum.Enum):
    STORED = "stored"
    ALREADY_CACHED = "already_cached"


class RecordCache:
    """Maps canonical vehicle numbers to RC records under ``rc_<number>`` keys."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = ScopedStore(store, RECORD_KEY_PREFIX)

    def lookup(self, identifier: VehicleIdentifier) -> RcRecord | None:
        """Return the cached record, or ``None``.  Never charges or writes.

        Entries may hold a whole service response (``{"data": {...}}``) as
        written by earlier clients; the envelope is unwrapped on read.
        """
        payload = get_json(self._store, identifier.value)
        if payload is None:
            return None
        try:
            return RcRecord.from_payload(payload)
        except ValueError as exc:
            raise RcStoreError(
                f"corrupt cached record for {identifier.value}: {exc}",
                key=RECORD_KEY_PREFIX + identifier.value,
            ) from exc

    def store(self, identifier: VehicleIdentifier, record: RcRecord) -> CacheWriteResult:
        """Cache *record* unless an entry already exists (first write wins)."""
        if self._store.get(identifier.value) is not None:
            _logger.debug("Record for %s already cached; keeping existing entry", identifier.value)
            return CacheWriteResult.ALREADY_CACHED
        set_json(self._store, identifier.value, record.to_storage())
        _logger.debug("Cached record for %s", identifier.value)
        return CacheWriteResult.STORED

    def identifiers(self) -> list[VehicleIdentifier]:
        """Cached vehicle numbers, sorted."""
        found: list[VehicleIdentifier] = []
        for key in self._store.keys():
            try:
                identifier = normalize(key)
            except RcInvalidFormatError:
                identifier = None
            if identifier is None or identifier.value != key:
                _logger.debug("Ignoring non-vehicle cache key %r", key)
                continue
            found.append(identifier)
        return found

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, VehicleIdentifier):
            return False
        return self._store.get(identifier.value) is not None
