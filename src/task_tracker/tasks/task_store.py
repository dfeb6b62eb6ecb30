# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from .task_errors import StorageError
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "task_tracker_data"


class JsonTaskStore:
    """
    Whole-collection JSON store.

    The collection lives in a single named slot: one JSON file holding an array
    of task records. Every save rewrites the file completely:
    - write <slot>.tmp
    - os.replace() it over the slot

    so a reader never sees a half-written collection.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @classmethod
    def in_dir(cls, data_dir: str | Path, storage_key: str = DEFAULT_STORAGE_KEY) -> JsonTaskStore:
        return cls(Path(data_dir) / f"{storage_key}.json")

    @property
    def path(self) -> Path:
        return self._path

    # ---- public API ----

    def load(self) -> list[Task]:
        """
        Return the persisted collection, or [] when nothing usable is stored.

        Never raises: a missing slot is the normal first-run state, and a
        corrupted slot is logged and treated as empty. Malformed records are
        skipped one by one.
        """
        if not self._path.exists():
            logger.info("No stored tasks at %s, starting empty.", self._path)
            return []

        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to read tasks from %s; starting empty.", self._path)
            return []

        if not isinstance(data, list):
            logger.error("Tasks slot %s does not hold a JSON array; starting empty.", self._path)
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for i, raw in enumerate(data):
            if not isinstance(raw, dict):
                logger.warning("Skipping non-object task record #%d in %s", i, self._path)
                continue
            try:
                task = Task.from_record(raw)
            except ValueError as e:
                logger.warning("Skipping malformed task record #%d in %s: %s", i, self._path, e)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s in %s", task.id, self._path)
                continue
            seen.add(task.id)
            out.append(task)

        logger.info("Loaded %d tasks from %s", len(out), self._path)
        return out

    def save(self, tasks: Sequence[Task]) -> None:
        """Replace the stored collection with `tasks`. Raises StorageError on failure."""
        tmp = self._path.with_suffix(".tmp")
        try:
            payload = json.dumps([t.to_record() for t in tasks], ensure_ascii=False, indent=2)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
        except (OSError, TypeError, ValueError) as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StorageError(f"Failed to save tasks: {e}", path=self._path) from e

        logger.debug("Saved %d tasks to %s", len(tasks), self._path)

    def clear(self) -> None:
        """Remove the slot entirely (next load() returns [])."""
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
        logger.info("Cleared tasks slot %s", self._path)
