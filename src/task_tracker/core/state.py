# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_manager import TaskManager
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings are kept on the state so commands can read them.
    settings: Any

    task_store: TaskRepo
    manager: TaskManager
