# tests/test_config.py

from __future__ import annotations

import locale
import logging
import os
from pathlib import Path

import pytest

from task_tracker.cli.bootstrap import apply_collation_locale, create_initial_state, shutdown
from task_tracker.config import ENV_PREFIX, Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in list(os.environ):
        if name.startswith(f"{ENV_PREFIX}_"):
            monkeypatch.delenv(name)
    return monkeypatch


def test_settings_defaults(clean_env) -> None:
    s = Settings.from_env(dotenv=False)
    assert s.app_name == "task-tracker"
    assert s.log_level == "INFO"
    assert s.data_dir == Path(".local/task_tracker")
    assert s.tasks_path == Path(".local/task_tracker/task_tracker_data.json")
    assert s.default_sort == "date"
    assert s.default_filter == "all"
    assert s.log_file_enabled is True


def test_settings_from_env(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("TASK_TRACKER_DATA_DIR", str(tmp_path))
    clean_env.setenv("TASK_TRACKER_STORAGE_KEY", "work")
    clean_env.setenv("TASK_TRACKER_DEFAULT_SORT", "NAME")
    clean_env.setenv("TASK_TRACKER_DEFAULT_FILTER", "everything")
    clean_env.setenv("TASK_TRACKER_LOG_FILE_ENABLED", "no")
    clean_env.setenv("TASK_TRACKER_LOG_LEVEL", "debug")

    s = Settings.from_env(dotenv=False)

    assert s.tasks_path == tmp_path / "work.json"
    assert s.default_sort == "name"
    assert s.default_filter == "all"
    assert s.log_file_enabled is False
    assert s.log_level == "DEBUG"


def test_bootstrap_loads_and_shutdown_saves(settings) -> None:
    state = create_initial_state(settings=settings)
    assert state.manager.tasks == ()
    state.manager.create("Write report", "2025-01-10")
    shutdown(state)

    again = create_initial_state(settings=settings)
    assert [t.title for t in again.manager.tasks] == ["Write report"]


def test_unknown_collation_locale_keeps_current() -> None:
    current = locale.setlocale(locale.LC_COLLATE)
    assert apply_collation_locale("xx_NOT_A.LOCALE") == current
    assert locale.setlocale(locale.LC_COLLATE) == current


def test_console_filter_keeps_app_logs_and_quiets_the_rest() -> None:
    from task_tracker.logging_setup import _ConsoleNoiseFilter

    def record(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    f = _ConsoleNoiseFilter()
    assert f.filter(record("task_tracker.tasks.task_store", logging.DEBUG))
    assert not f.filter(record("py.warnings", logging.WARNING))
    assert not f.filter(record("urllib3", logging.WARNING))
    assert f.filter(record("py.warnings", logging.ERROR))
