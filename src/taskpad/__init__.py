# src/taskpad/__init__.py

"""taskpad: a single-user task list with write-through local persistence."""

from .tasks.task_models import Task
from .tasks.task_store import TaskStore

__all__ = ["Task", "TaskStore"]
__version__ = "0.1.0"
