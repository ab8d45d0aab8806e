# src/taskpad/tasks/task_codec.py

"""
JSON encoding of the task list blob.

Wire shape: a JSON array, one object per task, in collection order:

    {"id": "...", "title": "...", "description": "...",
     "isCompleted": false, "createdAt": "2026-10-17T09:30:00+00:00"}

`createdAt` is ISO-8601 with an explicit UTC offset. There is no version field.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from ..errors import TaskDecodeError
from .task_models import Task

_STR_FIELDS = ("id", "title", "description")


def _ts_to_str(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat()


def _str_to_ts(raw: str) -> datetime:
    # Offsets near datetime.min/max parse but overflow when moved to UTC.
    try:
        ts = datetime.fromisoformat(raw)
        if ts.tzinfo is None:
            return ts.replace(tzinfo=UTC)
        return ts.astimezone(UTC)
    except (ValueError, OverflowError) as e:
        raise TaskDecodeError(f"bad createdAt timestamp: {raw!r}") from e


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "isCompleted": task.is_completed,
        "createdAt": _ts_to_str(task.created_at),
    }


def record_to_task(rec: Any) -> Task:
    if not isinstance(rec, dict):
        raise TaskDecodeError(f"task record must be an object, got {type(rec).__name__}")

    for name in (*_STR_FIELDS, "isCompleted", "createdAt"):
        if name not in rec:
            raise TaskDecodeError(f"task record is missing {name!r}")

    for name in _STR_FIELDS:
        if not isinstance(rec[name], str):
            raise TaskDecodeError(f"task field {name!r} must be a string")

    # bool is checked exactly: 0/1 are not accepted.
    if not isinstance(rec["isCompleted"], bool):
        raise TaskDecodeError("task field 'isCompleted' must be a boolean")
    if not isinstance(rec["createdAt"], str):
        raise TaskDecodeError("task field 'createdAt' must be a string")

    return Task(
        id=rec["id"],
        title=rec["title"],
        description=rec["description"],
        is_completed=rec["isCompleted"],
        created_at=_str_to_ts(rec["createdAt"]),
    )


def encode_tasks(tasks: Iterable[Task]) -> bytes:
    records = [task_to_record(t) for t in tasks]
    # ASCII escapes keep lone surrogates (from surrogateescape input) encodable.
    return json.dumps(records).encode("ascii")


def decode_tasks(blob: bytes | str) -> list[Task]:
    """Decode a blob produced by encode_tasks. Raises TaskDecodeError on any defect."""
    try:
        data = json.loads(blob)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise TaskDecodeError(f"task blob is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise TaskDecodeError(f"task blob must be a JSON array, got {type(data).__name__}")

    return [record_to_task(rec) for rec in data]
