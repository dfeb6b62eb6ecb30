# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- applies the collation locale used by name sorting,
- wires the JSON store into a TaskManager inside AppState.
"""

from __future__ import annotations

import locale
import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_manager import TaskManager
from ..tasks.task_store import JsonTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def apply_collation_locale(name: str) -> str:
    """
    Set LC_COLLATE for name sorting. Empty name means the user's default locale.

    Returns the locale actually in effect; an unknown locale is logged and the
    current one is kept.
    """
    try:
        return locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error:
        logger.warning("Collation locale %r is not available; keeping current.", name)
        return locale.setlocale(locale.LC_COLLATE)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = JsonTaskStore(settings.tasks_path)
    manager = TaskManager(
        store,
        default_filter=settings.default_filter,
        default_sort=settings.default_sort,
    )
    return AppState(settings=settings, task_store=store, manager=manager)


def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.manager.close()
    except Exception:
        logger.exception("TaskManager close failed.")
