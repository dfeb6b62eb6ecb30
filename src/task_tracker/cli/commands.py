# src/task_tracker/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_errors import NotFoundError, StorageError, TaskTrackerError, ValidationError
from ..tasks.task_manager import TaskManager
from ..tasks.task_models import Task, TaskStatus

CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], str], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID_LEN = 8
EXIT_HELP = "  /exit - Leave the console (alias: /quit)."


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task-layer errors are turned into replies; the caller never sees them.
        """
        if not line.startswith("/"):
            return None

        body = line[1:].lstrip()
        parts = body.split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        # argument text with its inner whitespace intact
        raw = body[len(parts[0]) :].strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 2

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, raw)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except StorageError as e:
            # The change is applied in memory; only the write failed.
            return f"Warning: change kept in memory but not saved: {e}"
        except TaskTrackerError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append(EXIT_HELP)
        return "\n".join(lines)


registry = CommandRegistry()


def resolve_task_id(manager: TaskManager, ref: str) -> str:
    """
    Resolve a full id or a unique id prefix to a task id.

    Raises NotFoundError when nothing matches and ValidationError when the
    prefix is ambiguous.
    """
    if manager.get(ref) is not None:
        return ref
    matches = [t.id for t in manager.tasks if t.id.startswith(ref)]
    if not matches:
        raise NotFoundError(ref)
    if len(matches) > 1:
        raise ValidationError(f"Id prefix {ref!r} is ambiguous ({len(matches)} tasks).")
    return matches[0]


def format_task(task: Task) -> str:
    mark = "x" if task.status is TaskStatus.DONE else " "
    return f"[{mark}] {task.id[:SHORT_ID_LEN]}  {task.due_date.isoformat()}  {task.title}"


def _view_line(manager: TaskManager) -> str:
    search = f'"{manager.search}"' if manager.search else "-"
    return f"filter={manager.filter.value} sort={manager.sort.value} search={search}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    manager = state.manager
    visible = manager.visible_tasks()
    header = f"Tasks ({len(visible)} shown, {_view_line(manager)}):"
    if not visible:
        return f"{header}\n  No tasks found. Time to focus!"
    return "\n".join([header, *(f"  {format_task(t)}" for t in visible)])


def cmd_add(state: AppState, args: list[str], raw: str) -> str:
    """/add YYYY-MM-DD title..."""
    if len(args) < 2:
        return "Usage: /add YYYY-MM-DD title"
    task = state.manager.create(raw.split(maxsplit=1)[1], args[0])
    return f"Created {format_task(task)}"


def cmd_edit(state: AppState, args: list[str], raw: str) -> str:
    """/edit id YYYY-MM-DD title..."""
    if len(args) < 3:
        return "Usage: /edit id YYYY-MM-DD title"
    task_id = resolve_task_id(state.manager, args[0])
    task = state.manager.update(task_id, raw.split(maxsplit=2)[2], args[1])
    return f"Updated {format_task(task)}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done id"
    task = state.manager.toggle_status(resolve_task_id(state.manager, args[0]))
    return f"Marked {task.status.value}: {format_task(task)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm id"
    manager = state.manager
    try:
        task_id = resolve_task_id(manager, args[0])
    except NotFoundError:
        # Deleting something that is not there is fine.
        return f"Nothing to delete for {args[0]}."
    manager.delete(task_id)
    return f"Deleted {task_id[:SHORT_ID_LEN]}."


def cmd_search(state: AppState, args: list[str], raw: str) -> str:
    state.manager.set_search(raw)
    return f'Search set to "{raw}".' if raw else "Search cleared."


def cmd_filter(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /filter all|pending|done"
    state.manager.set_filter(args[0].lower())
    return f"Filter set to {state.manager.filter.value}."


def cmd_sort(state: AppState, args: list[str]) -> str:
    """
    /sort          -> toggle date <-> name
    /sort date     -> earliest due date first
    /sort name     -> alphabetical by title
    """
    if not args:
        key = state.manager.toggle_sort()
    else:
        state.manager.set_sort(args[0].lower())
        key = state.manager.sort
    return f"Sorting by {key.value}."


def cmd_save(state: AppState, args: list[str]) -> str:
    """Retry persisting after a failed write (or just save now)."""
    was_dirty = state.manager.dirty
    state.manager.save()
    total = len(state.manager.tasks)
    return f"Saved {total} tasks." + (" Storage is back in sync." if was_dirty else "")


def cmd_status(state: AppState, args: list[str]) -> str:
    manager = state.manager
    counts = manager.counts()
    saved = "NO (last save failed)" if manager.dirty else "yes"
    path = getattr(state.task_store, "path", None)
    return (
        "Status:\n"
        f"  Tasks: {counts['all']} total, {counts['pending']} pending, {counts['done']} done\n"
        f"  View: {_view_line(manager)}\n"
        f"  Saved: {saved}\n"
        f"  Storage: {path if path is not None else '-'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks for the current view.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Create a task: /add YYYY-MM-DD title.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit id YYYY-MM-DD title.")
registry.register("done", cmd_toggle, help_text="Toggle pending/done: /done id.", aliases=["toggle"])
registry.register("rm", cmd_delete, help_text="Delete a task: /rm id.", aliases=["del"])
registry.register("search", cmd_search, help_text="Filter by title text: /search [text].")
registry.register("filter", cmd_filter, help_text="Status filter: /filter all | pending | done.")
registry.register("sort", cmd_sort, help_text="Sort order: /sort [date | name] (no arg toggles).")
registry.register("save", cmd_save, help_text="Save now (retry after a failed write).")
registry.register("status", cmd_status, help_text="Show counts, view and storage state.")
