# src/task_tracker/tasks/task_models.py

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class TaskStatus(StrEnum):
    """Task completion status. Binary on purpose: toggled pending <-> done only."""

    PENDING = "pending"
    DONE = "done"

    def toggled(self) -> TaskStatus:
        return TaskStatus.DONE if self is TaskStatus.PENDING else TaskStatus.PENDING


class TaskFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    DONE = "done"

    def matches(self, status: TaskStatus) -> bool:
        return self is TaskFilter.ALL or self.value == status.value


class TaskSort(StrEnum):
    DATE = "date"
    NAME = "name"

    def toggled(self) -> TaskSort:
        return TaskSort.NAME if self is TaskSort.DATE else TaskSort.DATE


def parse_due_date(raw: Any) -> date:
    """
    Parse an ISO calendar date ("YYYY-MM-DD").

    A `date` instance is accepted as-is. A `datetime` is rejected: due dates
    carry no time-of-day.
    """
    if isinstance(raw, datetime):
        raise ValueError("due date must be a calendar date, not a timestamp")
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"due date must be a string, got {type(raw).__name__}")
    s = raw.strip()
    if not _ISO_DATE_RE.match(s):
        raise ValueError(f"due date must look like YYYY-MM-DD, got {raw!r}")
    return date.fromisoformat(s)


@dataclass(slots=True)
class Task:
    id: str
    title: str
    due_date: date
    status: TaskStatus
    created_at: int  # epoch milliseconds

    def to_record(self) -> dict[str, Any]:
        """JSON-ready record in the persisted layout."""
        return {
            "id": self.id,
            "title": self.title,
            "dueDate": self.due_date.isoformat(),
            "status": self.status.value,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> Task:
        """Build a Task from a persisted record. Raises ValueError on malformed input."""
        tid = raw.get("id")
        title = raw.get("title")
        if not isinstance(tid, str) or not tid:
            raise ValueError("record has no id")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"record {tid} has no title")

        created_at = raw.get("createdAt", 0)
        if isinstance(created_at, bool) or not isinstance(created_at, int | float):
            raise ValueError(f"record {tid} has a non-numeric createdAt")
        if isinstance(created_at, float) and not math.isfinite(created_at):
            raise ValueError(f"record {tid} has a non-finite createdAt")

        return cls(
            id=tid,
            title=title,
            due_date=parse_due_date(raw.get("dueDate")),
            status=TaskStatus(raw.get("status")),
            created_at=int(created_at),
        )
