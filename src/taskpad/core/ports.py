# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps the persistence medium swappable and makes testing easier.
"""

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task

Clock = Callable[[], datetime]
# Must return a timezone-aware datetime.

IdFactory = Callable[[], str]

ChangeListener = Callable[[list["Task"]], None]
# Receives the collection snapshot after a mutation has been persisted.


class KeyValueStore(Protocol):
    """
    String-keyed blob storage.

    get() returns None for a missing key.
    set() overwrites and raises StorageError (or any exception) on failure.
    """

    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> None: ...
