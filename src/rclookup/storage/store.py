"""Durable string key-value stores.

The store knows nothing about balances or records: it maps string keys
to string values.  Every ``set`` is complete-or-unchanged; there are no
multi-key transactions, so callers sequence their own read-modify-write
pairs.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from rclookup.exceptions import RcStoreError

_logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"[A-Za-z0-9_.-]+")


def _check_key(key: str) -> str:
    if not isinstance(key, str) or not _KEY_RE.fullmatch(key) or key.startswith("."):
        raise RcStoreError(f"invalid store key: {key!r}", key=str(key))
    return key


class KeyValueStore(Protocol):
    """Structural store interface used by the ledger and the record cache.

    Having a protocol here makes it easy to pass in-memory stores to tests
    while keeping the production implementation (`FileStore`) concrete.
    """

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def keys(self, prefix: str = "") -> list[str]:
        ...


class MemoryStore:
    """Process-local store backed by a dict."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> str | None:
        return self._data.get(_check_key(key))

    def set(self, key: str, value: str) -> None:
        _check_key(key)
        if not isinstance(value, str):
            raise RcStoreError(f"value for {key!r} must be a string", key=key)
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(_check_key(key), None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(key for key in self._data if key.startswith(prefix))

    def snapshot(self) -> dict[str, str]:
        """Copy of every stored pair."""
        return dict(self._data)


class FileStore:
    """Store keeping one UTF-8 file per key under *root*.

    Writes go to a temporary file in the same directory which is fsynced
    and then renamed over the target, so a crash or a full disk never
    leaves a half-written value behind.
    """

    _SUFFIX = ".val"

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        return self._root / f"{_check_key(key)}{self._SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_bytes().decode("utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise RcStoreError(f"cannot read {key!r}: {exc}", key=key) from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        if not isinstance(value, str):
            raise RcStoreError(f"value for {key!r} must be a string", key=key)
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise RcStoreError(f"cannot encode {key!r}: {exc}", key=key) from exc

        tmp_path: Path | None = None
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=f".{key}.", dir=str(self._root))
            tmp_path = Path(tmp)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            tmp_path.replace(path)
            tmp_path = None
        except OSError as exc:
            raise RcStoreError(f"cannot write {key!r}: {exc}", key=key) from exc
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
        _logger.debug("Stored key=%s bytes=%d", key, len(data))

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise RcStoreError(f"cannot remove {key!r}: {exc}", key=key) from exc

    def keys(self, prefix: str = "") -> list[str]:
        if not self._root.is_dir():
            return []
        found: list[str] = []
        for path in self._root.iterdir():
            name = path.name
            if name.startswith(".") or not name.endswith(self._SUFFIX):
                continue
            key = name[: -len(self._SUFFIX)]
            if key.startswith(prefix):
                found.append(key)
        return sorted(found)


class ScopedStore:
    """View of *store* whose keys are transparently prefixed with *prefix*."""

    def __init__(self, store: KeyValueStore, prefix: str) -> None:
        if not prefix:
            raise RcStoreError("scope prefix must be non-empty")
        self._store = store
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def get(self, key: str) -> str | None:
        return self._store.get(self._prefix + key)

    def set(self, key: str, value: str) -> None:
        self._store.set(self._prefix + key, value)

    def remove(self, key: str) -> None:
        self._store.remove(self._prefix + key)

    def keys(self, prefix: str = "") -> list[str]:
        full = self._store.keys(self._prefix + prefix)
        return [key[len(self._prefix) :] for key in full]
