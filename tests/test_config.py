# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from daily_planner.config import Settings

ENV_VARS = (
    "PLANNER_APP_NAME",
    "PLANNER_LOG_LEVEL",
    "PLANNER_AUTOSAVE",
    "PLANNER_DATA_DIR",
    "PLANNER_TASKS_PATH",
    "PLANNER_LOG_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env(dotenv=False)

    assert s.app_name == "planner"
    assert s.log_level == "INFO"
    assert s.autosave is False
    assert s.data_dir == Path(".local/planner")
    assert s.tasks_path == Path(".local/planner/tasks.json")
    assert s.log_dir == s.data_dir


def test_paths_follow_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PLANNER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PLANNER_AUTOSAVE", "yes")
    monkeypatch.setenv("PLANNER_LOG_LEVEL", "debug")

    s = Settings.from_env(dotenv=False)

    assert s.tasks_path == tmp_path / "tasks.json"
    assert s.log_dir == tmp_path
    assert s.autosave is True
    assert s.log_level == "DEBUG"


def test_explicit_tasks_path_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PLANNER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("PLANNER_TASKS_PATH", str(tmp_path / "elsewhere.json"))

    assert Settings.from_env(dotenv=False).tasks_path == tmp_path / "elsewhere.json"


def test_dotenv_file_is_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("PLANNER_APP_NAME=from-dotenv\n", "utf-8")
    monkeypatch.chdir(tmp_path)

    try:
        s = Settings.from_env()
    finally:
        # load_dotenv writes to os.environ directly, outside monkeypatch's bookkeeping.
        os.environ.pop("PLANNER_APP_NAME", None)

    assert s.app_name == "from-dotenv"
