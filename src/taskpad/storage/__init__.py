"""
Key-value persistence backends.

Components:
- kv_store.py: SQLite, one-file-per-key and in-memory stores
"""

from .kv_store import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    SqliteKeyValueStore,
    open_backend,
)

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "SqliteKeyValueStore",
    "open_backend",
]
