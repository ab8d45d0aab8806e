# src/taskpad/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime


def new_task_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class Task:
    """
    One to-do item.

    `id` is the lookup key and never changes; `created_at` is fixed at creation.
    Instances are immutable: the store swaps whole values on update/toggle.
    """

    id: str
    title: str
    description: str
    is_completed: bool
    created_at: datetime
