# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import format_task_list, registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\033[1A\033[2K\r")
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        else:
            print(line)
    except Exception:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def summarize(tasks: list[Task]) -> str:
    done = sum(1 for t in tasks if t.is_completed)
    return f"[TASKS] {len(tasks)} total, {len(tasks) - done} open, {done} completed"


def run_console_loop(state: AppState, *, input_fn=input) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.task_store))
    _print_ts("[CONSOLE] Use /help for commands, /list to see tasks, /exit to quit.\n")
    print(format_task_list(state.task_store.list()))

    def emit(text: str) -> None:
        # Immediate user-visible feedback for longer operations.
        print(f"[{_ts_local()}] {text}", flush=True)

    # Re-render after every persisted change.
    unsubscribe = state.task_store.subscribe(lambda snapshot: _print_ts(summarize(snapshot)))

    try:
        while True:
            try:
                user_input = input_fn(">>> ").strip()
                _rewrite_prev_line(f"[{_ts_local()}] >>> {user_input}")
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                with state.lock:
                    response = command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is None:
                response = "Not a command. Use /add <title> to create a task, or /help."

            _print_ts(response)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
