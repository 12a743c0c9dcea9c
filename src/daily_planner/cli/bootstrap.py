# src/daily_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures local (gitignored) directories exist,
- loads the task file into a TaskStore and wires it into AppState,
- saves the store back (best-effort: failures are logged and reported, never raised).
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_codec import load_tasks, save_tasks
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    Path(settings.tasks_path).parent.mkdir(parents=True, exist_ok=True)


def load_task_store(settings) -> TaskStore:
    """
    Build the store from settings.tasks_path.

    Missing file -> empty store. An unreadable file is logged and also
    yields an empty store, so the session can still start.
    """
    path = Path(settings.tasks_path)
    try:
        tasks = load_tasks(path)
    except (OSError, UnicodeDecodeError):
        logger.exception("Failed to load tasks from %s; starting with an empty list.", path)
        tasks = []
    return TaskStore(tasks)


def save_task_store(state: AppState) -> bool:
    """Persist the whole store. Returns False (after logging) if the write failed."""
    path = Path(state.settings.tasks_path)
    try:
        save_tasks(path, state.task_store.all_tasks())
    except (OSError, UnicodeError):
        logger.exception("Failed to save tasks to %s", path)
        return False
    state.dirty = False
    return True


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    try:
        _ensure_local_dirs(settings)
    except OSError:
        logger.exception("Could not create data directory for %s", settings.tasks_path)

    return AppState(settings=settings, task_store=load_task_store(settings))
