# src/task_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import CommandRegistry
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")
READ_ONLY_COMMANDS = frozenset({"list", "ls", "help", "h", "?", "status", "save"})


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(
    state: AppState,
    *,
    registry: CommandRegistry = command_registry,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = _print_ts,
) -> None:
    """
    Interactive REPL over the command registry.

    Plain text (no leading slash) is treated as a search query, so typing a
    word narrows the list right away.
    """
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "task-tracker"))
    logger.info("Console connector started.")
    write(f"[{app_name}] Use /help for commands, /exit to quit.")
    write(registry.handle(state, "/list") or "")

    while True:
        try:
            user_input = read_line(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        line = user_input if user_input.startswith("/") else f"/search {user_input}"

        try:
            response = registry.handle(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            write(response)

        # Keep the list in view after anything that changes it.
        parts = line[1:].split()
        if parts and parts[0].lower() not in READ_ONLY_COMMANDS:
            write(registry.handle(state, "/list") or "")

    logger.info("Console connector finished.")
