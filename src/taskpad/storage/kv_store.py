# src/taskpad/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import os
import re
import sqlite3
import time
from pathlib import Path

from ..core.ports import KeyValueStore
from ..errors import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class SqliteKeyValueStore:
    """
    SQLite key-value store.

    One table, `kv(key, value, updated_at)`, created if missing.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "taskpad.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteKeyValueStore ready db=%s", self._db_path)

    @property
    def location(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get(self, key: str) -> bytes | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"failed to read key {key!r} from {self._db_path}") from e

        if row is None:
            return None
        value = row[0]
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    def set(self, key: str, value: bytes) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, sqlite3.Binary(value), time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"failed to write key {key!r} to {self._db_path}") from e
        logger.debug("kv set key=%s bytes=%d", key, len(value))

    def delete(self, key: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"failed to delete key {key!r} from {self._db_path}") from e

    def keys(self) -> list[str]:
        try:
            conn = self._get_conn()
            try:
                return [r[0] for r in conn.execute("SELECT key FROM kv ORDER BY key")]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"failed to list keys in {self._db_path}") from e


class FileKeyValueStore:
    """
    One file per key under a directory.

    Writes go to a temp file first and are moved into place with os.replace,
    so a crash never leaves a half-written value behind.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileKeyValueStore ready dir=%s", self._dir)

    @property
    def location(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("key is required")
        return self._dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"failed to read {path}") from e

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_bytes(value)
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"failed to write {path}") from e
        with contextlib.suppress(Exception):
            # Task text is personal; keep the file private on disk.
            os.chmod(path, 0o600)
        logger.debug("kv set key=%s bytes=%d path=%s", key, len(value), path)

    def delete(self, key: str) -> None:
        with contextlib.suppress(FileNotFoundError):
            self.path_for(key).unlink()

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self._dir.glob("*.json"))


class InMemoryKeyValueStore:
    """Dict-backed store; nothing survives the process."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    @property
    def location(self) -> str:
        return "<memory>"

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


BACKENDS = ("sqlite", "file", "memory")


def open_backend(kind: str, settings) -> KeyValueStore:
    """Build the backend named by `kind` using paths from settings."""
    kind = (kind or "").strip().lower()
    if kind == "sqlite":
        return SqliteKeyValueStore(settings.db_path)
    if kind == "file":
        return FileKeyValueStore(settings.store_dir)
    if kind == "memory":
        return InMemoryKeyValueStore()
    raise ValueError(f"unknown storage backend {kind!r} (expected one of: {', '.join(BACKENDS)})")
