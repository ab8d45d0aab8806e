# src/taskpad/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # Every mutation is already persisted; this only retries a failed last write.
    store = getattr(state, "task_store", None)
    if store is not None and store.last_save_error is not None:
        if not store.save():
            logger.error("Tasks could not be saved on exit; recent changes are lost.")

    try:
        backend = getattr(state, "backend", None)
        if backend is not None and hasattr(backend, "close"):
            backend.close()
    except Exception:
        logger.debug("Backend close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; %d tasks loaded. Nothing to do.", len(state.task_store))
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
