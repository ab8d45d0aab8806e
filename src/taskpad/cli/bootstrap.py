# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the persistence backend and the task store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..storage.kv_store import open_backend
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.storage_backend == "sqlite":
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    elif settings.storage_backend == "file":
        settings.store_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    backend = open_backend(settings.storage_backend, settings)
    task_store = TaskStore(
        backend,
        key=settings.tasks_key,
        strict=bool(getattr(settings, "strict_persistence", False)),
    )
    logger.info(
        "Storage backend=%s location=%s", settings.storage_backend, getattr(backend, "location", "?")
    )
    return AppState(settings=settings, backend=backend, task_store=task_store)
