# tests/test_kv_store.py

from __future__ import annotations

import os
import sqlite3
import stat
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.errors import StorageError
from taskpad.storage.kv_store import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    SqliteKeyValueStore,
    open_backend,
)
from taskpad.tasks.task_store import TaskStore


def test_sqlite_get_set_overwrite_delete(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "kv.sqlite3"
    kv = SqliteKeyValueStore(db)

    assert db.exists()
    assert kv.get("savedTasks") is None

    kv.set("savedTasks", b"[1]")
    kv.set("savedTasks", b"[2]")
    kv.set("other", b"x")
    assert kv.get("savedTasks") == b"[2]"
    assert kv.keys() == ["other", "savedTasks"]

    kv.delete("other")
    assert kv.get("other") is None


def test_sqlite_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    SqliteKeyValueStore(db).set("k", "héllo".encode("utf-8"))
    assert SqliteKeyValueStore(db).get("k") == "héllo".encode("utf-8")


def test_file_store_round_trip_and_sanitized_names(tmp_path: Path) -> None:
    kv = FileKeyValueStore(tmp_path / "store")

    assert kv.get("savedTasks") is None
    kv.set("savedTasks", b"[]")
    kv.set("../escape me", b"x")

    assert kv.get("savedTasks") == b"[]"
    assert kv.path_for("../escape me").parent == tmp_path / "store"
    assert kv.get("../escape me") == b"x"
    assert "savedTasks" in kv.keys()
    assert not list((tmp_path / "store").glob("*.tmp"))

    kv.delete("savedTasks")
    kv.delete("savedTasks")
    assert kv.get("savedTasks") is None


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
def test_file_store_keeps_values_private(tmp_path: Path) -> None:
    kv = FileKeyValueStore(tmp_path)
    kv.set("savedTasks", b"[]")
    mode = stat.S_IMODE(os.stat(kv.path_for("savedTasks")).st_mode)
    assert mode == 0o600


def test_file_store_rejects_empty_key(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        FileKeyValueStore(tmp_path).path_for("")


def test_in_memory_store_copies_values() -> None:
    kv = InMemoryKeyValueStore()
    buf = bytearray(b"abc")
    kv.set("k", bytes(buf))
    buf[0] = ord("z")
    assert kv.get("k") == b"abc"
    assert kv.keys() == ["k"]


@pytest.mark.parametrize("kind", ["sqlite", "file"])
def test_task_store_persists_across_restart(tmp_path: Path, kind: str) -> None:
    settings = SimpleNamespace(db_path=tmp_path / "t.sqlite3", store_dir=tmp_path / "store")

    first = TaskStore(open_backend(kind, settings))
    a = first.create("Buy milk", "2%")
    first.create("Walk dog")
    first.toggle_completion(a.id)

    second = TaskStore(open_backend(kind, settings))
    assert second.list() == first.list()


def test_open_backend_kinds(tmp_path: Path) -> None:
    settings = SimpleNamespace(db_path=tmp_path / "t.sqlite3", store_dir=tmp_path / "store")
    assert isinstance(open_backend("SQLite", settings), SqliteKeyValueStore)
    assert isinstance(open_backend("file", settings), FileKeyValueStore)
    assert isinstance(open_backend(" memory ", settings), InMemoryKeyValueStore)
    with pytest.raises(ValueError):
        open_backend("redis", settings)


def test_sqlite_errors_are_wrapped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    kv = SqliteKeyValueStore(tmp_path / "kv.sqlite3")

    def broken_conn():
        raise sqlite3.OperationalError("unable to open database file")

    monkeypatch.setattr(kv, "_get_conn", broken_conn)

    for call in (
        lambda: kv.get("k"),
        lambda: kv.set("k", b"v"),
        lambda: kv.delete("k"),
        lambda: kv.keys(),
    ):
        with pytest.raises(StorageError):
            call()
