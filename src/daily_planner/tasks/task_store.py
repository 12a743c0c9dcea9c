# src/daily_planner/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from .errors import OutOfRangeError, ValidationError
from .task_models import Category, Priority, Task, new_task

logger = logging.getLogger(__name__)

# Sentinel for edit(): distinguishes "not passed" from an explicit None (clear due date).
_UNSET: object = object()


def _restore(task: Task, snapshot: Task) -> None:
    for f in fields(Task):
        setattr(task, f.name, getattr(snapshot, f.name))


@dataclass(frozen=True, slots=True)
class TaskStatistics:
    total: int
    completed: int
    pending: int
    overdue_count: int
    completion_rate: float
    per_category: dict[Category, int] = field(default_factory=dict)


class TaskStore:
    """
    In-memory ordered task collection.

    Positions are the only identity a task has:
    - tasks keep insertion order,
    - remove(i) shifts every task after i down by one, so positions shown
      to the user earlier are stale after a delete.

    Grouping queries return only non-empty buckets, keyed in enum declaration order.
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = list(tasks or [])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    # ---- low-level helpers ----

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._tasks):
            raise OutOfRangeError(index, len(self._tasks))

    # ---- mutations ----

    def add(
        self,
        description: str,
        priority: Priority,
        category: Category,
        due_date: date | None = None,
        notes: str = "",
        *,
        now: datetime | None = None,
    ) -> Task:
        task = new_task(description, priority, category, due_date, notes, now=now)
        self._tasks.append(task)
        logger.debug(
            "Task added index=%s priority=%s category=%s due=%s",
            len(self._tasks) - 1,
            task.priority,
            task.category,
            task.due_date,
        )
        return task

    def get(self, index: int) -> Task:
        self._check_index(index)
        return self._tasks[index]

    def update(self, index: int, mutator: Callable[[Task], None]) -> Task:
        """
        Apply mutator(task) in place.

        created_at always survives the mutation. If the mutator raises, or leaves
        an empty description (rejected the same way add() rejects it), the task
        is restored to its previous state.
        """
        self._check_index(index)
        task = self._tasks[index]
        before = replace(task)

        try:
            mutator(task)
        except Exception:
            _restore(task, before)
            raise
        task.created_at = before.created_at

        if not task.description or not task.description.strip():
            _restore(task, before)
            raise ValidationError("Task description cannot be empty.")

        logger.debug("Task updated index=%s", index)
        return task

    def edit(
        self,
        index: int,
        *,
        description: str | object = _UNSET,
        priority: Priority | object = _UNSET,
        category: Category | object = _UNSET,
        due_date: date | None | object = _UNSET,
        notes: str | object = _UNSET,
    ) -> Task:
        changes = {
            name: value
            for name, value in (
                ("description", description),
                ("priority", priority),
                ("category", category),
                ("due_date", due_date),
                ("notes", notes),
            )
            if value is not _UNSET
        }

        def apply(task: Task) -> None:
            for name, value in changes.items():
                setattr(task, name, value)

        return self.update(index, apply)

    def toggle_complete(self, index: int) -> Task:
        self._check_index(index)
        task = self._tasks[index]
        task.completed = not task.completed
        logger.debug("Task toggled index=%s completed=%s", index, task.completed)
        return task

    def remove(self, index: int) -> Task:
        """Remove and return the task at index. Every later task moves down one position."""
        self._check_index(index)
        task = self._tasks.pop(index)
        logger.debug("Task removed index=%s remaining=%s", index, len(self._tasks))
        return task

    # ---- queries ----

    def filter_by_category(self) -> dict[Category, list[Task]]:
        out: dict[Category, list[Task]] = {}
        for category in Category:
            bucket = [t for t in self._tasks if t.category == category]
            if bucket:
                out[category] = bucket
        return out

    def filter_by_priority(self, exclude_completed: bool = True) -> dict[Priority, list[Task]]:
        out: dict[Priority, list[Task]] = {}
        for priority in Priority:
            bucket = [
                t
                for t in self._tasks
                if t.priority == priority and not (exclude_completed and t.completed)
            ]
            if bucket:
                out[priority] = bucket
        return out

    def overdue(self, today: date | None = None) -> list[Task]:
        """Open tasks whose due date is strictly before today."""
        if today is None:
            today = date.today()
        return [t for t in self._tasks if t.is_overdue(today)]

    def search(self, term: str) -> list[Task]:
        needle = (term or "").strip()
        return [t for t in self._tasks if t.matches(needle)]

    def statistics(self, today: date | None = None) -> TaskStatistics:
        if today is None:
            today = date.today()

        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        rate = 0.0
        if total:
            # Half-up on the exact ratio: 1 of 16 shows as 6.3, not 6.2.
            exact = Decimal(completed * 100) / Decimal(total)
            rate = float(exact.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

        per_category: dict[Category, int] = {}
        for category in Category:
            n = sum(1 for t in self._tasks if t.category == category)
            if n:
                per_category[category] = n

        return TaskStatistics(
            total=total,
            completed=completed,
            pending=total - completed,
            overdue_count=len(self.overdue(today)),
            completion_rate=rate,
            per_category=per_category,
        )
