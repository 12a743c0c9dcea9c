# src/daily_planner/tasks/errors.py

from __future__ import annotations


class PlannerError(Exception):
    """Base class for recoverable planner errors (reported to the user, never fatal)."""


class ValidationError(PlannerError, ValueError):
    """User-supplied value rejected: empty description, unknown priority, bad date, ..."""


class OutOfRangeError(PlannerError, IndexError):
    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        if size == 0:
            msg = f"No task at index {index}: the list is empty."
        else:
            msg = f"No task at index {index}: valid range is 0..{size - 1}."
        super().__init__(msg)


class RecordParseError(PlannerError, ValueError):
    """A single persisted record is malformed; the loader skips it."""
