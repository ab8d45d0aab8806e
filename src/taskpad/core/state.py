# src/taskpad/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..tasks.task_store import TaskStore
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings object (real Settings or a test SimpleNamespace).
    settings: object

    backend: KeyValueStore
    task_store: TaskStore

    # Serializes command handling when more than one front-end shares the state.
    lock: threading.RLock = field(default_factory=threading.RLock)
