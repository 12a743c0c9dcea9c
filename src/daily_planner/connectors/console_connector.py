# src/daily_planner/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.bootstrap import save_task_store
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def run_console_loop(
    state: AppState,
    *,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """
    Interactive REPL: read a line, dispatch slash commands, print the reply.

    Returns on /exit, EOF or Ctrl+C. Saving on exit is the caller's job
    (see cli.main._shutdown); with settings.autosave the store is also
    written after every command that changed it.
    """
    logger.info("Console started (tasks=%d).", len(state.task_store))
    app_name = str(getattr(state.settings, "app_name", "planner"))
    write(f"[{app_name}] Type /help for commands, /exit to save and quit.")

    autosave = bool(getattr(state.settings, "autosave", False))

    while True:
        try:
            user_input = read_line(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break
        except UnicodeDecodeError:
            logger.warning("Console input is not valid text; line ignored.", exc_info=True)
            write("Could not read that line (invalid characters). Please try again.")
            continue

        if not user_input:
            continue

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, user_input, emit=write)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list them."
        write(reply)

        if autosave and state.dirty and not save_task_store(state):
            write("Autosave failed (see log for details).")

    logger.info("Console finished.")
