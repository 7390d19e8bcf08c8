from __future__ import annotations

from pathlib import Path

import pytest

from rclookup.exceptions import RcStoreError
from rclookup.storage import FileStore, MemoryStore, ScopedStore, append_json, get_json, set_json


def test_file_store_round_trips_values_exactly(tmp_path: Path) -> None:
    store = FileStore(tmp_path / "data")
    value = '{"ownerName":"Ravi Kumar ₹","note":"line1\\nline2"}\n'

    assert store.get("rc_TN01AB1234") is None
    store.set("rc_TN01AB1234", value)

    assert store.get("rc_TN01AB1234") == value
    assert FileStore(tmp_path / "data").get("rc_TN01AB1234") == value


def test_file_store_keys_ignore_temporary_files(tmp_path: Path) -> None:
    store = FileStore(tmp_path)
    store.set("balance", "10")
    store.set("rc_KA01AB0001", "{}")
    (tmp_path / ".rc_KA01AB0002.abc").write_text("partial")

    assert store.keys() == ["balance", "rc_KA01AB0001"]
    assert store.keys("rc_") == ["rc_KA01AB0001"]


def test_file_store_failed_write_keeps_previous_value(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = FileStore(tmp_path)
    store.set("balance", "10")

    def _boom(self: Path, target: Path) -> Path:
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", _boom)

    with pytest.raises(RcStoreError) as exc_info:
        store.set("balance", "20")

    assert exc_info.value.key == "balance"
    monkeypatch.undo()
    assert store.get("balance") == "10"
    assert [p.name for p in tmp_path.iterdir()] == ["balance.val"]


def test_remove_is_idempotent(tmp_path: Path) -> None:
    for store in (MemoryStore(), FileStore(tmp_path)):
        store.set("balance", "5")
        store.remove("balance")
        store.remove("balance")
        assert store.get("balance") is None


@pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden", "rc TN01", "rc_TN01AB1234\n"])
def test_invalid_keys_are_rejected(key: str) -> None:
    with pytest.raises(RcStoreError):
        MemoryStore().set(key, "x")


def test_scoped_store_prefixes_keys() -> None:
    base = MemoryStore()
    scoped = ScopedStore(base, "rc_")
    scoped.set("TN01AB1234", "{}")
    base.set("balance", "3")

    assert base.get("rc_TN01AB1234") == "{}"
    assert scoped.keys() == ["TN01AB1234"]


def test_append_json_extends_list() -> None:
    store = MemoryStore()
    append_json(store, "transactions", {"id": 1})
    append_json(store, "transactions", {"id": 2})

    assert get_json(store, "transactions") == [{"id": 1}, {"id": 2}]


def test_unserializable_value_writes_nothing() -> None:
    store = MemoryStore({"transactions": "[]"})

    with pytest.raises(RcStoreError):
        set_json(store, "transactions", [object()])

    assert store.get("transactions") == "[]"


def test_corrupt_json_raises_store_error() -> None:
    store = MemoryStore({"transactions": "[{"})
    with pytest.raises(RcStoreError):
        get_json(store, "transactions")
