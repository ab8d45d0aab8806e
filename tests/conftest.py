# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.core.state import AppState
from taskpad.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeKeyValueStore, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        console_enabled=False,
        storage_backend="memory",
        tasks_key="savedTasks",
        strict_persistence=False,
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "taskpad.sqlite3",
        store_dir=tmp_path / "data" / "store",
    )


@pytest.fixture()
def backend() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(backend: FakeKeyValueStore, clock: FakeClock) -> TaskStore:
    """Fresh store per test on an in-memory backend with deterministic ids and time."""
    return TaskStore(backend, clock=clock, id_factory=SequentialIds())


@pytest.fixture()
def state(settings: SimpleNamespace, backend: FakeKeyValueStore, store: TaskStore) -> AppState:
    return AppState(settings=settings, backend=backend, task_store=store)
