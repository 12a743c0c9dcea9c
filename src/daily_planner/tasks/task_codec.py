# src/daily_planner/tasks/task_codec.py

"""
Task file format.

The file is a JSON array with exactly one record per line:

    [
      {"description": "...", "priority": "HIGH", ..., "notes": ""},
      {"description": "...", ...}
    ]

json.dumps escapes newlines inside strings, so a record never spans lines.
That is what makes salvage possible: when the whole document does not
parse (truncated write, hand edit), every line is tried on its own and only
the broken ones are lost.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from .errors import RecordParseError, ValidationError
from .task_models import (
    DATE_FORMAT,
    DATETIME_FORMAT,
    Category,
    Priority,
    Task,
    format_date,
    format_datetime,
    new_task,
)

logger = logging.getLogger(__name__)

# ---- encoding ----


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "description": task.description,
        "priority": task.priority.value,
        "category": task.category.value,
        "dueDate": format_date(task.due_date) if task.due_date is not None else "",
        "createdAt": format_datetime(task.created_at),
        "completed": bool(task.completed),
        "notes": task.notes,
    }


def serialize(tasks: Iterable[Task]) -> str:
    lines = [json.dumps(task_to_record(t), ensure_ascii=False) for t in tasks]
    if not lines:
        return "[]\n"
    return "[\n" + ",\n".join(f"  {line}" for line in lines) + "\n]\n"


# ---- decoding ----


def _str_field(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _parse_completed(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().lower() == "true"
    return False


def record_to_task(record: Any) -> Task:
    """
    Build a Task from one decoded record.

    Raises RecordParseError for anything that cannot become a valid task:
    non-object records, unknown priority/category names, unparseable dates,
    empty description.
    """
    if not isinstance(record, dict):
        raise RecordParseError(f"record is not an object: {type(record).__name__}")

    priority_raw = _str_field(record, "priority")
    category_raw = _str_field(record, "category")
    due_raw = _str_field(record, "dueDate")
    created_raw = _str_field(record, "createdAt")

    # Exact names only: the file is machine-written, user-friendly parsing lives in the CLI.
    try:
        priority = Priority(priority_raw)
    except ValueError:
        raise RecordParseError(f"unknown priority {priority_raw!r}") from None
    try:
        category = Category(category_raw)
    except ValueError:
        raise RecordParseError(f"unknown category {category_raw!r}") from None

    try:
        due_date = datetime.strptime(due_raw, DATE_FORMAT).date() if due_raw else None
    except ValueError:
        raise RecordParseError(f"invalid dueDate {due_raw!r}") from None
    try:
        created_at = datetime.strptime(created_raw, DATETIME_FORMAT)
    except ValueError:
        raise RecordParseError(f"invalid createdAt {created_raw!r}") from None

    try:
        task = new_task(
            _str_field(record, "description"),
            priority,
            category,
            due_date,
            _str_field(record, "notes"),
        )
    except ValidationError as e:
        raise RecordParseError(str(e)) from e

    # Not part of the creation path: restore what was persisted.
    task.created_at = created_at
    task.completed = _parse_completed(record.get("completed"))
    return task


def _salvage_records(text: str) -> Iterator[Any]:
    """Decode line by line, skipping lines that are not standalone JSON values."""
    for lineno, line in enumerate(text.splitlines(), start=1):
        s = line.strip()
        if s.startswith("["):
            s = s[1:].strip()
        if s.endswith("]"):
            s = s[:-1].strip()
        if s.endswith(","):
            s = s[:-1].strip()
        if not s:
            continue
        try:
            yield json.loads(s)
        except json.JSONDecodeError as e:
            logger.warning("Skipping unreadable line %d: %s", lineno, e.msg)
        except RecursionError:
            logger.warning("Skipping unreadable line %d: nested too deeply", lineno)


def _iter_records(text: str) -> Iterator[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Task file is not valid JSON (%s at line %d); salvaging records.", e.msg, e.lineno)
        yield from _salvage_records(text)
        return
    except RecursionError:
        logger.warning("Task file is nested too deeply to decode; salvaging records.")
        yield from _salvage_records(text)
        return

    if isinstance(data, list):
        yield from data
    elif isinstance(data, dict):
        yield data
    else:
        logger.warning("Task file holds a %s, expected a list; ignoring it.", type(data).__name__)


def deserialize(text: str) -> list[Task]:
    """Decode a task file. Malformed records are logged and skipped, never fatal."""
    text = (text or "").strip()
    if not text:
        return []

    tasks: list[Task] = []
    skipped = 0
    for n, record in enumerate(_iter_records(text), start=1):
        try:
            tasks.append(record_to_task(record))
        except RecordParseError as e:
            skipped += 1
            logger.warning("Skipping task record #%d: %s", n, e)

    if skipped:
        logger.info("Decoded %d task(s), skipped %d malformed record(s).", len(tasks), skipped)
    return tasks


# ---- files ----


def load_tasks(path: str | Path) -> list[Task]:
    """
    Read tasks from path.

    A missing file is an empty list. Other read errors (OSError, UnicodeDecodeError)
    propagate; the caller decides how to report them.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No task file at %s; starting empty.", path)
        return []
    tasks = deserialize(path.read_text("utf-8"))
    logger.info("Loaded %d task(s) from %s", len(tasks), path)
    return tasks


def save_tasks(path: str | Path, tasks: Iterable[Task]) -> None:
    """Write all tasks to path (temp file + os.replace). OSError and UnicodeEncodeError propagate."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tasks = list(tasks)
    payload = serialize(tasks)

    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(payload, "utf-8")
        os.replace(tmp, path)
    except (OSError, UnicodeError):
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise
    logger.info("Saved %d task(s) to %s", len(tasks), path)
