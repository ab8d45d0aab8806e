# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a default, so a bare checkout runs without any .env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKPAD"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Persistence ----
    storage_backend: str
    tasks_key: str
    strict_persistence: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    store_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad").strip() or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        storage_backend = _env(_k("STORAGE_BACKEND"), "sqlite").strip().lower() or "sqlite"
        tasks_key = _env(_k("TASKS_KEY"), "savedTasks").strip() or "savedTasks"
        strict_persistence = _env_bool(_k("STRICT_PERSISTENCE"), False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskpad.sqlite3")
        store_dir = _env_path(_k("STORE_DIR"), data_dir / "store")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            storage_backend=storage_backend,
            tasks_key=tasks_key,
            strict_persistence=strict_persistence,
            data_dir=data_dir,
            db_path=db_path,
            store_dir=store_dir,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read once on first use (.env never overrides the real environment)."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
