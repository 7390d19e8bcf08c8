"""JSON helpers layered on a :class:`KeyValueStore`."""

from __future__ import annotations

import json
from typing import Any

from rclookup.exceptions import RcStoreError
from rclookup.storage.store import KeyValueStore


def dumps(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise RcStoreError(f"value is not JSON serializable: {exc}") from exc


def get_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """Read and decode *key*; *default* when absent."""
    text = store.get(key)
    if text is None:
        return default
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise RcStoreError(f"stored value for {key!r} is not JSON: {text[:64]}", key=key) from exc


def set_json(store: KeyValueStore, key: str, value: Any) -> None:
    """Encode *value* before touching the store so a bad value writes nothing."""
    try:
        text = dumps(value)
    except RcStoreError as exc:
        raise RcStoreError(str(exc), key=key) from exc
    store.set(key, text)


def append_json(store: KeyValueStore, key: str, item: Any) -> list[Any]:
    """Append *item* to the JSON list at *key* and return the new list."""
    items = get_json(store, key, default=[])
    if not isinstance(items, list):
        raise RcStoreError(f"stored value for {key!r} is not a list", key=key)
    items.append(item)
    set_json(store, key, items)
    return items
