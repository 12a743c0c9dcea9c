# tests/conftest.py

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from daily_planner.core.state import AppState
from daily_planner.tasks.task_models import Category, Priority
from daily_planner.tasks.task_store import TaskStore

NOW = datetime(2024, 1, 15, 9, 30)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="planner-test",
        log_level="INFO",
        autosave=False,
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.json",
        log_dir=tmp_path,
    )


@pytest.fixture()
def store() -> TaskStore:
    """Two tasks: an open low-priority errand and an open high-priority report due 2024-01-01."""
    s = TaskStore()
    s.add("Buy milk", Priority.LOW, Category.SHOPPING, None, "", now=NOW)
    s.add("Finish report", Priority.HIGH, Category.WORK, date(2024, 1, 1), "urgent", now=NOW)
    return s


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return AppState(settings=settings, task_store=TaskStore())
