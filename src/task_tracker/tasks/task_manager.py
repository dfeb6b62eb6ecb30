# src/task_tracker/tasks/task_manager.py

from __future__ import annotations

import locale
import logging
import time
import uuid
from collections.abc import Callable
from datetime import date
from typing import Any

from ..core.ports import TaskRepo
from .task_errors import NotFoundError, StorageError, ValidationError
from .task_models import Task, TaskFilter, TaskSort, TaskStatus, parse_due_date

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return str(uuid.uuid4())


def _name_key(task: Task) -> str:
    # strxfrm rejects embedded NULs
    return locale.strxfrm(task.title.casefold().replace("\x00", ""))


class TaskManager:
    """
    In-memory source of truth for the task collection and its view parameters.

    Lifecycle:
    - __init__ loads the whole collection from the repo once
    - every mutation is applied in memory first, then the full collection is saved
    - close() does a final save

    If a save fails the mutation is NOT rolled back: the manager marks itself
    dirty, logs, and re-raises StorageError so the caller can tell the user.
    """

    def __init__(
        self,
        repo: TaskRepo,
        *,
        default_filter: TaskFilter | str = TaskFilter.ALL,
        default_sort: TaskSort | str = TaskSort.DATE,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._repo = repo
        self._id_factory = id_factory
        self._clock = clock

        self._tasks: list[Task] = list(repo.load())
        self._search = ""
        self._filter = _coerce_filter(default_filter)
        self._sort = _coerce_sort(default_sort)
        self.dirty = False

        logger.info(
            "TaskManager ready total=%d filter=%s sort=%s",
            len(self._tasks),
            self._filter.value,
            self._sort.value,
        )

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Snapshot of the collection in storage order (newest created first)."""
        return tuple(self._tasks)

    @property
    def search(self) -> str:
        return self._search

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    @property
    def sort(self) -> TaskSort:
        return self._sort

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def counts(self) -> dict[str, int]:
        done = sum(1 for t in self._tasks if t.status is TaskStatus.DONE)
        return {
            TaskFilter.ALL.value: len(self._tasks),
            TaskFilter.PENDING.value: len(self._tasks) - done,
            TaskFilter.DONE.value: done,
        }

    def visible_tasks(self) -> list[Task]:
        """
        Derived view: search -> status filter -> stable sort.

        Computed fresh on every call; the collection and its order are untouched.
        """
        needle = self._search.casefold()
        out = [
            t
            for t in self._tasks
            if needle in t.title.casefold() and self._filter.matches(t.status)
        ]

        if self._sort is TaskSort.DATE:
            out.sort(key=lambda t: t.due_date)
        else:
            out.sort(key=_name_key)
        return out

    # ---- view parameters (no persistence) ----

    def set_search(self, text: str | None) -> None:
        self._search = text or ""

    def set_filter(self, value: TaskFilter | str) -> None:
        self._filter = _coerce_filter(value)

    def set_sort(self, value: TaskSort | str) -> None:
        self._sort = _coerce_sort(value)

    def toggle_sort(self) -> TaskSort:
        self._sort = self._sort.toggled()
        return self._sort

    # ---- mutations ----

    def create(self, title: str, due_date: str | date) -> Task:
        clean_title = _validate_title(title)
        due = _validate_due_date(due_date)

        task = Task(
            id=self._fresh_id(),
            title=clean_title,
            due_date=due,
            status=TaskStatus.PENDING,
            created_at=int(self._clock()),
        )
        self._tasks.insert(0, task)
        logger.debug("Task created id=%s due=%s", task.id, task.due_date)
        self._persist()
        return task

    def update(self, task_id: str, title: str, due_date: str | date) -> Task:
        clean_title = _validate_title(title)
        due = _validate_due_date(due_date)

        task = self._require(task_id)
        task.title = clean_title
        task.due_date = due
        logger.debug("Task updated id=%s due=%s", task.id, task.due_date)
        self._persist()
        return task

    def toggle_status(self, task_id: str) -> Task:
        task = self._require(task_id)
        task.status = task.status.toggled()
        logger.debug("Task toggled id=%s status=%s", task.id, task.status.value)
        self._persist()
        return task

    def delete(self, task_id: str) -> bool:
        """Remove the task if present. Deleting an unknown id is a no-op."""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before
        logger.debug("Task delete id=%s removed=%s", task_id, removed)
        self._persist()
        return removed

    # ---- lifecycle ----

    def save(self) -> None:
        """Persist the full collection now. Raises StorageError."""
        self._persist()

    def close(self) -> None:
        """Final save on shutdown. Failures are logged, never raised."""
        try:
            self._persist()
        except StorageError:
            # already logged by _persist
            return
        logger.info("TaskManager closed total=%d", len(self._tasks))

    # ---- internals ----

    def _require(self, task_id: str) -> Task:
        task = self.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def _fresh_id(self) -> str:
        existing = {t.id for t in self._tasks}
        while True:
            tid = self._id_factory()
            if tid not in existing:
                return tid
            logger.warning("Id factory returned an id already in use (%s); retrying.", tid)

    def _persist(self) -> None:
        try:
            self._repo.save(list(self._tasks))
        except StorageError:
            self.dirty = True
            logger.exception("Saving %d tasks failed; keeping in-memory state.", len(self._tasks))
            raise
        self.dirty = False


def _validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title must not be empty.")
    return title.strip()


def _validate_due_date(raw: Any) -> date:
    try:
        return parse_due_date(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid due date {raw!r}: expected YYYY-MM-DD.") from e


def _coerce_filter(value: TaskFilter | str) -> TaskFilter:
    try:
        return TaskFilter(value)
    except ValueError:
        allowed = ", ".join(f.value for f in TaskFilter)
        raise ValidationError(f"Unknown filter {value!r} (expected one of: {allowed}).") from None


def _coerce_sort(value: TaskSort | str) -> TaskSort:
    try:
        return TaskSort(value)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskSort)
        raise ValidationError(f"Unknown sort key {value!r} (expected one of: {allowed}).") from None
