# src/task_tracker/core/ports.py

"""
Ports (interfaces) used by the core.

The manager depends on a Protocol instead of the concrete JSON store.
This keeps storage swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Whole-collection persistence: read everything once, write everything back."""

    def load(self) -> list[Task]: ...

    def save(self, tasks: Sequence[Task]) -> None: ...
