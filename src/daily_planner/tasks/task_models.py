# src/daily_planner/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from .errors import ValidationError

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M"


class Priority(StrEnum):
    """
    Task priority, declared from least to most severe.

    Values equal member names: the name is what gets persisted.
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def marks(self) -> str:
        return "!" * (list(Priority).index(self) + 1)

    @classmethod
    def parse(cls, raw: str) -> Priority:
        """Accept a name (any case), the marks ("!", "!!", "!!!") or a 1-based menu number."""
        s = (raw or "").strip()
        for p in cls:
            if s.upper() == p.value or s == p.marks:
                return p
        if s.isdecimal() and 1 <= int(s) <= len(cls):
            return list(cls)[int(s) - 1]
        choices = ", ".join(p.value.lower() for p in cls)
        raise ValidationError(f"Unknown priority {raw!r} (expected one of: {choices}).")


class Category(StrEnum):
    WORK = "WORK"
    PERSONAL = "PERSONAL"
    HEALTH = "HEALTH"
    EDUCATION = "EDUCATION"
    SHOPPING = "SHOPPING"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw: str) -> Category:
        s = (raw or "").strip()
        if s.upper() in cls.__members__:
            return cls[s.upper()]
        if s.isdecimal() and 1 <= int(s) <= len(cls):
            return list(cls)[int(s) - 1]
        choices = ", ".join(c.value.lower() for c in cls)
        raise ValidationError(f"Unknown category {raw!r} (expected one of: {choices}).")


@dataclass(slots=True)
class Task:
    description: str
    priority: Priority
    category: Category
    due_date: date | None
    created_at: datetime

    completed: bool = False
    notes: str = ""

    def is_overdue(self, today: date) -> bool:
        return not self.completed and self.due_date is not None and self.due_date < today

    def matches(self, term: str) -> bool:
        needle = term.lower()
        return needle in self.description.lower() or needle in self.notes.lower()


def format_date(d: date) -> str:
    """YYYY-MM-DD with a zero-padded year (strftime drops the padding below year 1000)."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def format_datetime(dt: datetime) -> str:
    return f"{format_date(dt.date())} {dt.hour:02d}:{dt.minute:02d}"


def parse_date(raw: str) -> date:
    try:
        return datetime.strptime(raw.strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date {raw!r} (expected YYYY-MM-DD).") from None


def validate_description(description: str | None) -> str:
    if not description or not description.strip():
        raise ValidationError("Task description cannot be empty.")
    return description


def new_task(
    description: str,
    priority: Priority,
    category: Category,
    due_date: date | None = None,
    notes: str = "",
    *,
    now: datetime | None = None,
) -> Task:
    """
    The one creation path for tasks.

    Values are stored as given (callers strip user input). created_at is truncated to
    the minute, which is the precision the file format keeps.
    """
    if now is None:
        now = datetime.now()
    return Task(
        description=validate_description(description),
        priority=priority,
        category=category,
        due_date=due_date,
        created_at=now.replace(second=0, microsecond=0),
        completed=False,
        notes=notes or "",
    )
