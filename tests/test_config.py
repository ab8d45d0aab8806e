# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskpad.config import Settings

_VARS = (
    "TASKPAD_APP_NAME",
    "TASKPAD_LOG_LEVEL",
    "TASKPAD_CONSOLE_ENABLED",
    "TASKPAD_STORAGE_BACKEND",
    "TASKPAD_TASKS_KEY",
    "TASKPAD_STRICT_PERSISTENCE",
    "TASKPAD_DATA_DIR",
    "TASKPAD_DB_PATH",
    "TASKPAD_STORE_DIR",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "taskpad"
    assert s.log_level == "INFO"
    assert s.console_enabled is True
    assert s.storage_backend == "sqlite"
    assert s.tasks_key == "savedTasks"
    assert s.strict_persistence is False
    assert s.data_dir == Path(".local/taskpad")
    assert s.db_path == Path(".local/taskpad") / "taskpad.sqlite3"
    assert s.store_dir == Path(".local/taskpad") / "store"


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKPAD_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKPAD_CONSOLE_ENABLED", "no")
    monkeypatch.setenv("TASKPAD_STORAGE_BACKEND", " File ")
    monkeypatch.setenv("TASKPAD_TASKS_KEY", "myTasks")
    monkeypatch.setenv("TASKPAD_STRICT_PERSISTENCE", "yes")
    monkeypatch.setenv("TASKPAD_DATA_DIR", str(tmp_path))

    s = Settings.from_env()
    assert s.log_level == "DEBUG"
    assert s.console_enabled is False
    assert s.storage_backend == "file"
    assert s.tasks_key == "myTasks"
    assert s.strict_persistence is True
    # derived paths follow the data dir unless set explicitly
    assert s.db_path == tmp_path / "taskpad.sqlite3"
    assert s.store_dir == tmp_path / "store"


def test_blank_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKPAD_TASKS_KEY", "  ")
    monkeypatch.setenv("TASKPAD_STRICT_PERSISTENCE", "")
    monkeypatch.setenv("TASKPAD_DB_PATH", "")

    s = Settings.from_env()
    assert s.tasks_key == "savedTasks"
    assert s.strict_persistence is False
    assert s.db_path == Path(".local/taskpad") / "taskpad.sqlite3"


def test_unrecognized_booleans_keep_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKPAD_CONSOLE_ENABLED", "maybe")
    monkeypatch.setenv("TASKPAD_STRICT_PERSISTENCE", "sometimes")

    s = Settings.from_env()
    assert s.console_enabled is True
    assert s.strict_persistence is False


@pytest.mark.parametrize("raw", ["0", "false", "No", " n ", "OFF"])
def test_explicit_false_values(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("TASKPAD_CONSOLE_ENABLED", raw)
    assert Settings.from_env().console_enabled is False
