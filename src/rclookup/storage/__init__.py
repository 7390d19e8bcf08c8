"""Persistent key-value storage.

The ledger and the record cache share one store but use disjoint key
namespaces (``balance``/``transactions`` and ``rc_*``).
"""

from rclookup.storage.codec import append_json, get_json, set_json
from rclookup.storage.store import FileStore, KeyValueStore, MemoryStore, ScopedStore

__all__ = [
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "ScopedStore",
    "append_json",
    "get_json",
    "set_json",
]
