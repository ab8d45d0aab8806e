# src/taskpad/errors.py

from __future__ import annotations


class TaskpadError(Exception):
    """Base class for taskpad errors."""


class StorageError(TaskpadError):
    """A key-value backend could not read or write a value."""


class TaskDecodeError(TaskpadError, ValueError):
    """The persisted task blob could not be decoded."""


class TaskPersistenceError(TaskpadError):
    """
    Raised by a strict TaskStore when the write after a mutation fails.

    The in-memory mutation has already happened when this is raised.
    """
