# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loads the task collection),
runs the console REPL, then saves on the way out.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import apply_collation_locale, create_initial_state, shutdown
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = settings.data_dir if settings.log_file_enabled else None
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    collation = apply_collation_locale(settings.collation_locale)
    logger.debug("Name sorting uses LC_COLLATE=%s", collation)

    state = create_initial_state(settings=settings)
    try:
        run_console_loop(state)
    finally:
        shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
