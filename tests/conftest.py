# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.state import AppState
from task_tracker.tasks.task_manager import TaskManager
from task_tracker.tasks.task_models import Task, TaskStatus
from task_tracker.tasks.task_store import JsonTaskStore

from .fakes import FakeTaskRepo, SequentialIds, make_task


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        data_dir=tmp_path,
        tasks_path=tmp_path / "task_tracker_data.json",
        default_sort="date",
        default_filter="all",
    )


@pytest.fixture()
def sample_tasks() -> list[Task]:
    """The two-task collection used throughout the scenarios (storage order)."""
    return [
        make_task("a", "Write report", "2025-01-10", TaskStatus.PENDING, created_at=2),
        make_task("b", "Buy milk", "2025-01-05", TaskStatus.DONE, created_at=1),
    ]


@pytest.fixture()
def repo(sample_tasks: list[Task]) -> FakeTaskRepo:
    return FakeTaskRepo(sample_tasks)


@pytest.fixture()
def manager(repo: FakeTaskRepo) -> TaskManager:
    return TaskManager(repo, id_factory=SequentialIds(), clock=lambda: 1_700_000_000_000)


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired with the real JSON store in tmp_path.

    NOTE: the store's behaviour is part of what command tests exercise.
    """
    store = JsonTaskStore(settings.tasks_path)
    manager = TaskManager(store, id_factory=SequentialIds(["aaaa1111", "aaaa2222", "bbbb3333"]))
    return AppState(settings=settings, task_store=store, manager=manager)
