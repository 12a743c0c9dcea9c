# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path

from daily_planner.cli.bootstrap import create_initial_state, load_task_store, save_task_store
from daily_planner.tasks.task_codec import save_tasks
from daily_planner.tasks.task_store import TaskStore


def test_initial_state_without_file_is_empty(settings) -> None:
    state = create_initial_state(settings=settings)

    assert len(state.task_store) == 0
    assert state.dirty is False
    assert state.settings is settings


def test_initial_state_loads_existing_file(settings, store: TaskStore) -> None:
    save_tasks(settings.tasks_path, store)

    state = create_initial_state(settings=settings)

    assert state.task_store.all_tasks() == store.all_tasks()


def test_corrupt_file_keeps_valid_records(settings) -> None:
    Path(settings.tasks_path).write_text(
        "[\n"
        '  {"description":"Keep me","priority":"HIGH","category":"WORK","dueDate":"",'
        '"createdAt":"2024-01-15 09:30","completed":true,"notes":""},\n'
        '  {"description":"Drop me","priority":"HIGH","category":"NOPE"\n'
        "]\n",
        "utf-8",
    )

    store = load_task_store(settings)

    assert [t.description for t in store] == ["Keep me"]
    assert store.get(0).completed is True


def test_unreadable_file_starts_empty(settings) -> None:
    Path(settings.tasks_path).write_bytes(b"\xff\xfe\x00garbage")

    assert len(load_task_store(settings)) == 0


def test_save_task_store_clears_dirty(state, store: TaskStore) -> None:
    state.task_store = store
    state.mark_dirty()

    assert save_task_store(state) is True
    assert state.dirty is False
    assert Path(state.settings.tasks_path).exists()


def test_shutdown_saves_and_never_raises(state, store: TaskStore, tmp_path: Path, capsys) -> None:
    from daily_planner.cli.main import _shutdown

    state.task_store = store
    _shutdown(state)
    assert "Tasks saved" in capsys.readouterr().out

    blocker = tmp_path / "file"
    blocker.write_text("x")
    state.settings.tasks_path = blocker / "tasks.json"
    _shutdown(state)
    assert "Could not save tasks" in capsys.readouterr().out


def test_deeply_nested_file_starts_empty(settings) -> None:
    Path(settings.tasks_path).write_text("[" * 100000, "utf-8")

    state = create_initial_state(settings=settings)

    assert len(state.task_store) == 0


def test_save_task_store_reports_unencodable_text(state, store: TaskStore) -> None:
    state.task_store = store
    store.edit(0, description="bad \udcff byte")
    state.mark_dirty()

    assert save_task_store(state) is False
    assert state.dirty is True
