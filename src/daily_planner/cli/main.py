# src/daily_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the task file), runs the
console REPL, then saves the task file on the way out.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, save_task_store
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        if save_task_store(state):
            print("Tasks saved. Goodbye!")
        else:
            print(f"Could not save tasks to {state.settings.tasks_path}. Goodbye.")
    except Exception:
        logger.exception("Unexpected error while saving tasks on exit.")


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    if not isinstance(console_level, int):
        console_level = logging.INFO

    log_file = setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s (tasks file: %s)...", settings.app_name, settings.tasks_path)
    logger.debug("Full log: %s", log_file)

    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
