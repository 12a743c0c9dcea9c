# src/daily_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything a console session owns.

    There is no module-level store: the composition root builds one AppState
    and passes it to the console loop and every command handler.
    """

    # Settings (or a compatible namespace in tests): tasks_path, autosave, app_name.
    settings: Any
    task_store: TaskStore

    # Set by mutating commands, cleared by a successful save.
    dirty: bool = False

    def mark_dirty(self) -> None:
        self.dirty = True
