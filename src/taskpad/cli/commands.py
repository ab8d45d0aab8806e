# src/taskpad/cli/commands.py

from __future__ import annotations

import contextlib
import dataclasses
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..errors import TaskPersistenceError
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskPersistenceError:
            logger.warning("/%s changed tasks but the write failed.", name, exc_info=True)
            return "Change applied in memory, but saving to storage failed (see log)."

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _split_title_description(args: list[str]) -> tuple[str, str | None]:
    """'Buy milk | 2%' -> ('Buy milk', '2%'); without '|' -> (text, None)."""
    text = " ".join(args)
    if "|" not in text:
        return text.strip(), None
    title, description = text.split("|", 1)
    return title.strip(), description.strip()


def _parse_position(state: AppState, raw: str) -> int | None:
    """1-based number shown by /list -> 0-based index, or None if it does not name a task."""
    try:
        n = int(raw)
    except ValueError:
        return None
    idx = n - 1
    if idx < 0 or idx >= len(state.task_store):
        return None
    return idx


def _warn_if_unsaved(state: AppState, emit: CommandEmitter | None) -> None:
    """Tell the user right away when the change could not be written (non-strict store)."""
    err = state.task_store.last_save_error
    if err is None or emit is None:
        return
    with contextlib.suppress(Exception):
        emit(f"[WARN] Change kept in memory only, saving failed: {err}")


def _fmt_date(task: Task) -> str:
    return task.created_at.astimezone().strftime("%Y-%m-%d")


def format_task_line(n: int, task: Task) -> str:
    mark = "x" if task.is_completed else " "
    line = f"{n}. [{mark}] {task.title}"
    if task.description:
        desc = task.description.splitlines()[0]
        line += f" - {desc}"
    return f"{line} ({_fmt_date(task)})"


def format_task_list(tasks: list[Task]) -> str:
    if not tasks:
        return "No tasks yet. Use /add <title> to add your first task."
    lines = ["Tasks:"]
    for i, t in enumerate(tasks, start=1):
        lines.append(f"  {format_task_line(i, t)}")
    return "\n".join(lines)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_task_list(state.task_store.list())


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <title>
    /add <title> | <description>
    """
    title, description = _split_title_description(args)
    if not title:
        return "Usage: /add <title> [| <description>]. The title must not be empty."

    task = state.task_store.create(title, description or "")
    _warn_if_unsaved(state, emit)
    return f"Added task {len(state.task_store)}: {task.title}"


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <n> <title>                  -> new title, description kept
    /edit <n> <title> | <description>  -> new title and description
    """
    if len(args) < 2:
        return "Usage: /edit <n> <title> [| <description>]."

    idx = _parse_position(state, args[0])
    if idx is None:
        return f"No task number {args[0]}. Use /list to see task numbers."

    title, description = _split_title_description(args[1:])
    if not title:
        return "The title must not be empty."

    current = state.task_store.list()[idx]
    changed = dataclasses.replace(
        current,
        title=title,
        description=current.description if description is None else description,
    )
    if not state.task_store.update(changed):
        return "That task no longer exists."
    _warn_if_unsaved(state, emit)
    return f"Updated task {idx + 1}: {changed.title}"


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/done <n> -> flip completed/open."""
    if not args:
        return "Usage: /done <n>."

    idx = _parse_position(state, args[0])
    if idx is None:
        return f"No task number {args[0]}. Use /list to see task numbers."

    task = state.task_store.list()[idx]
    if not state.task_store.toggle_completion(task.id):
        return "That task no longer exists."
    _warn_if_unsaved(state, emit)

    toggled = state.task_store.get(task.id)
    status = "completed" if toggled is not None and toggled.is_completed else "open"
    return f"Task {idx + 1} is now {status}: {task.title}"


def cmd_del(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/del <n> -> delete one task."""
    if not args:
        return "Usage: /del <n>."

    idx = _parse_position(state, args[0])
    if idx is None:
        return f"No task number {args[0]}. Use /list to see task numbers."

    task = state.task_store.list()[idx]
    state.task_store.delete_by_id(task.id)
    _warn_if_unsaved(state, emit)
    return f"Deleted task: {task.title}"


def cmd_rm(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/rm <n> [<n> ...] -> delete several tasks by their list numbers."""
    if not args:
        return "Usage: /rm <n> [<n> ...]."

    positions: set[int] = set()
    for raw in args:
        try:
            positions.add(int(raw) - 1)
        except ValueError:
            return f"Not a task number: {raw}. Usage: /rm <n> [<n> ...]."

    removed = state.task_store.delete_at_positions(positions)
    _warn_if_unsaved(state, emit)
    return f"Deleted {removed} task(s)."


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <n>."

    idx = _parse_position(state, args[0])
    if idx is None:
        return f"No task number {args[0]}. Use /list to see task numbers."

    t = state.task_store.list()[idx]
    created = t.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    return (
        f"Task {idx + 1}:\n"
        f"  Title: {t.title}\n"
        f"  Description: {t.description or '(none)'}\n"
        f"  Completed: {'yes' if t.is_completed else 'no'}\n"
        f"  Created: {created}\n"
        f"  Id: {t.id}"
    )


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    tasks = store.list()
    done = sum(1 for t in tasks if t.is_completed)
    backend = getattr(state.settings, "storage_backend", "?")
    location = getattr(state.backend, "location", "?")
    err = store.last_save_error
    last_save = "OK" if err is None else f"FAILED ({err})"
    return (
        "Status:\n"
        f"  Storage: {backend} ({location})\n"
        f"  Key: {store.key}\n"
        f"  Tasks: {len(tasks)} ({done} completed, {len(tasks) - done} open)\n"
        f"  Last save: {last_save}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| <description>].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n> <title> [| <description>].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["toggle"])
registry.register("del", cmd_del, help_text="Delete a task: /del <n>.")
registry.register("rm", cmd_rm, help_text="Delete several tasks: /rm <n> [<n> ...].")
registry.register("show", cmd_show, help_text="Show task details: /show <n>.")
registry.register("status", cmd_status, help_text="Show storage and task counts.")
