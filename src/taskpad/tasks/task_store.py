# src/taskpad/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable, Iterable, Iterator

from ..core.ports import ChangeListener, Clock, IdFactory, KeyValueStore
from ..errors import TaskDecodeError, TaskPersistenceError
from .task_codec import decode_tasks, encode_tasks
from .task_models import Task, new_task_id, utc_now

logger = logging.getLogger(__name__)

TASKS_KEY = "savedTasks"


class TaskStore:
    """
    Ordered in-memory task list with write-through persistence.

    Every mutating call changes the list, writes the whole list under one key
    of the backend, then notifies listeners. Nothing is batched or deferred.

    Failure policy:
    - load: missing/unreadable/undecodable blob -> empty list
    - save: failure is logged and absorbed (in-memory state stays authoritative);
      with strict=True it is raised as TaskPersistenceError after the mutation
    - unknown task id: silent no-op, reported only through the return value

    Thread-safety:
    - mutations are serialized by a re-entrant lock
    """

    def __init__(
        self,
        backend: KeyValueStore,
        *,
        key: str = TASKS_KEY,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_task_id,
        strict: bool = False,
    ) -> None:
        self._backend = backend
        self._key = key
        self._clock = clock
        self._id_factory = id_factory
        self._strict = strict

        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._listeners: list[ChangeListener] = []
        self.last_save_error: Exception | None = None

        self.initialize()

    @property
    def key(self) -> str:
        return self._key

    def initialize(self) -> None:
        with self._lock:
            self._tasks = self.load()
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- persistence ----

    def load(self) -> list[Task]:
        try:
            blob = self._backend.get(self._key)
        except Exception:
            logger.warning("Failed to read tasks key=%s; starting empty.", self._key, exc_info=True)
            return []

        if blob is None:
            return []

        try:
            return decode_tasks(blob)
        except TaskDecodeError as e:
            logger.warning("Stored tasks key=%s are malformed (%s); starting empty.", self._key, e)
            return []

    def save(self) -> bool:
        """Write the whole list under the store key. Returns False if the write failed."""
        with self._lock:
            try:
                self._backend.set(self._key, encode_tasks(self._tasks))
            except Exception as e:
                self.last_save_error = e
                logger.exception("Failed to persist %d tasks key=%s", len(self._tasks), self._key)
                return False
            self.last_save_error = None
            return True

    def _commit(self) -> None:
        # Caller holds the lock.
        ok = self.save()
        self._notify()
        if not ok and self._strict:
            raise TaskPersistenceError(
                f"failed to persist tasks under key {self._key!r}"
            ) from self.last_save_error

    # ---- change notification ----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register listener(snapshot) called once after every completed mutation.

        Returns a callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = list(self._tasks)
        for listener in list(self._listeners):
            try:
                listener(list(snapshot))
            except Exception:
                logger.exception("Task change listener %r failed.", listener)

    # ---- read API ----

    def list(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        with self._lock:
            for t in self._tasks:
                if t.id == task_id:
                    return t
            return None

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.list())

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    # ---- mutations ----

    def create(self, title: str, description: str = "") -> Task:
        # Title emptiness is the caller's concern.
        with self._lock:
            task = Task(
                id=self._id_factory(),
                title=title,
                description=description,
                is_completed=False,
                created_at=self._clock(),
            )
            self._tasks.append(task)
            logger.debug("Task created id=%s total=%d", task.id, len(self._tasks))
            self._commit()
            return task

    def update(self, task: Task) -> bool:
        """
        Replace the stored task with the same id, keeping its position.

        The stored created_at wins over the caller's value.
        Returns False (and writes nothing) if the id is unknown.
        """
        with self._lock:
            idx = self._index_of(task.id)
            if idx is None:
                logger.debug("Task update ignored, id=%s not found", task.id)
                return False

            current = self._tasks[idx]
            if task.created_at != current.created_at:
                task = dataclasses.replace(task, created_at=current.created_at)
            self._tasks[idx] = task
            logger.debug("Task updated id=%s index=%d", task.id, idx)
            self._commit()
            return True

    def toggle_completion(self, task_id: str) -> bool:
        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                logger.debug("Task toggle ignored, id=%s not found", task_id)
                return False

            current = self._tasks[idx]
            self._tasks[idx] = dataclasses.replace(current, is_completed=not current.is_completed)
            logger.debug(
                "Task toggled id=%s is_completed=%s", task_id, self._tasks[idx].is_completed
            )
            self._commit()
            return True

    def delete_by_id(self, task_id: str) -> bool:
        """Remove the task with this id. The list is written even when nothing matched."""
        with self._lock:
            idx = self._index_of(task_id)
            if idx is not None:
                del self._tasks[idx]
            logger.debug("Task delete id=%s removed=%s", task_id, idx is not None)
            self._commit()
            return idx is not None

    def delete_at_positions(self, positions: Iterable[int]) -> int:
        """Remove tasks at zero-based positions; out-of-range positions are ignored."""
        with self._lock:
            drop = {p for p in positions if 0 <= p < len(self._tasks)}
            if drop:
                self._tasks = [t for i, t in enumerate(self._tasks) if i not in drop]
            logger.debug("Tasks deleted at positions=%s removed=%d", sorted(drop), len(drop))
            self._commit()
            return len(drop)
