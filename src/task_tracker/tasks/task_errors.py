# src/task_tracker/tasks/task_errors.py

from __future__ import annotations

from pathlib import Path


class TaskTrackerError(Exception):
    """Base class for every error the task layer raises on purpose."""


class ValidationError(TaskTrackerError, ValueError):
    """Rejected input: empty title, unparsable due date, unknown filter/sort value."""


class NotFoundError(TaskTrackerError, KeyError):
    def __init__(self, task_id: str) -> None:
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"No task with id {self.task_id}"


class StorageError(TaskTrackerError, OSError):
    """Durable storage rejected a write. In-memory state is kept regardless."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        msg = self.args[0] if self.args else "storage failure"
        return f"{msg} ({self.path})" if self.path else str(msg)
