# src/daily_planner/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from datetime import date
from typing import cast

from ..core.state import AppState
from ..tasks.errors import PlannerError, ValidationError
from ..tasks.task_models import Category, Priority, Task, parse_date
from .bootstrap import save_task_store

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

NO_TASKS = "No tasks available."


class CommandRegistry:
    """Slash-command registry used by the console (/help, /add, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        PlannerError raised by a handler (bad position, empty description, ...)
        becomes the reply; anything else propagates to the caller.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except PlannerError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Save and exit.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def format_task(task: Task) -> str:
    status = "✓" if task.completed else "○"
    due = f" (Due: {task.due_date.isoformat()})" if task.due_date is not None else ""
    return f"{status} [{task.priority.marks}] {task.category.value} - {task.description}{due}"


def _numbered(tasks: list[Task], indent: str = "") -> list[str]:
    return [f"{indent}{i}. {format_task(t)}" for i, t in enumerate(tasks, start=1)]


def _plural(n: int, word: str = "task") -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


# ---- argument helpers ----


def _position_arg(state: AppState, args: list[str], usage: str) -> int:
    """Turn a 1-based position argument into a store index."""
    if not args:
        raise ValidationError(f"Usage: {usage}")
    raw = args[0].rstrip(".")
    if not raw.isdecimal():
        raise ValidationError(f"Invalid task number {args[0]!r}. Usage: {usage}")
    size = len(state.task_store)
    if size == 0:
        raise ValidationError(NO_TASKS)
    n = int(raw)
    if not 1 <= n <= size:
        raise ValidationError(f"No task #{n}. Choose a number between 1 and {size}.")
    return n - 1


def _parse_due(raw: str) -> date | None:
    if raw.strip().lower() in ("", "-", "none"):
        return None
    return parse_date(raw)


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <description> [p:<priority>] [c:<category>] [due:<YYYY-MM-DD>] [-- notes]

    "!", "!!", "!!!" are shorthands for low/medium/high.
    An invalid due date is dropped (the task is still added).
    """
    usage = "/add <description> [p:low|medium|high] [c:<category>] [due:YYYY-MM-DD] [-- notes]"
    if not args:
        return f"Usage: {usage}"

    notes = ""
    if "--" in args:
        cut = args.index("--")
        notes = " ".join(args[cut + 1 :]).strip()
        args = args[:cut]

    priority = Priority.MEDIUM
    category = Category.OTHER
    due_date: date | None = None
    warnings: list[str] = []
    words: list[str] = []

    for tok in args:
        low = tok.lower()
        if low.startswith("p:"):
            priority = Priority.parse(tok[2:])
        elif low.startswith("c:"):
            category = Category.parse(tok[2:])
        elif low.startswith("due:"):
            try:
                due_date = _parse_due(tok[4:])
            except ValidationError as e:
                warnings.append(f"{e} No due date set.")
        elif tok in ("!", "!!", "!!!"):
            priority = Priority.parse(tok)
        else:
            words.append(tok)

    task = state.task_store.add(" ".join(words).strip(), priority, category, due_date, notes)
    state.mark_dirty()

    lines = warnings + [f"Task #{len(state.task_store)} added: {format_task(task)}"]
    return "\n".join(lines)


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.all_tasks()
    if not tasks:
        return NO_TASKS

    lines = [f"All tasks ({len(tasks)} total):"]
    for i, t in enumerate(tasks, start=1):
        lines.append(f"{i:2d}. {format_task(t)}")
        if t.notes:
            lines.append(f"    notes: {t.notes}")
    return "\n".join(lines)


def cmd_by_category(state: AppState, args: list[str]) -> str:
    groups = state.task_store.filter_by_category()
    if not groups:
        return NO_TASKS

    lines = ["Tasks by category:"]
    for category, tasks in groups.items():
        lines.append(f"{category.value} ({_plural(len(tasks))}):")
        lines.extend(_numbered(tasks, indent="  "))
    return "\n".join(lines)


def cmd_by_priority(state: AppState, args: list[str]) -> str:
    if not len(state.task_store):
        return NO_TASKS
    groups = state.task_store.filter_by_priority()
    if not groups:
        return "All tasks are completed."

    lines = ["Open tasks by priority:"]
    # Most severe first.
    for priority in reversed(list(groups)):
        tasks = groups[priority]
        lines.append(f"{priority.value} priority ({_plural(len(tasks))}):")
        lines.extend(_numbered(tasks, indent="  "))
    return "\n".join(lines)


def cmd_overdue(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.overdue()
    if not tasks:
        return "No overdue tasks!"
    lines = [f"Overdue tasks ({_plural(len(tasks))}):"]
    lines.extend(_numbered(tasks))
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str]) -> str:
    index = _position_arg(state, args, "/done <n>")
    task = state.task_store.toggle_complete(index)
    state.mark_dirty()
    status = "completed" if task.completed else "incomplete"
    return f"Task #{index + 1} marked as {status}."


_EDIT_FIELDS = {
    "description": "description",
    "desc": "description",
    "priority": "priority",
    "p": "priority",
    "category": "category",
    "c": "category",
    "due": "due_date",
    "notes": "notes",
}


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <n> description <text...>
    /edit <n> priority low|medium|high
    /edit <n> category <name>
    /edit <n> due YYYY-MM-DD | -      (- or none clears the due date)
    /edit <n> notes [text...]         (no text clears the notes)
    """
    usage = "/edit <n> description|priority|category|due|notes <value...>"
    index = _position_arg(state, args, usage)
    if len(args) < 2:
        return f"Usage: {usage}"

    field_name = _EDIT_FIELDS.get(args[1].lower())
    if field_name is None:
        return f"Unknown field {args[1]!r}. Usage: {usage}"
    value = " ".join(args[2:]).strip()

    store = state.task_store
    if field_name == "description":
        task = store.edit(index, description=value)
    elif field_name == "priority":
        task = store.edit(index, priority=Priority.parse(value))
    elif field_name == "category":
        task = store.edit(index, category=Category.parse(value))
    elif field_name == "due_date":
        task = store.edit(index, due_date=_parse_due(value))
    else:
        task = store.edit(index, notes=value)

    state.mark_dirty()
    return f"Task #{index + 1} updated: {format_task(task)}"


def cmd_remove(state: AppState, args: list[str]) -> str:
    index = _position_arg(state, args, "/rm <n> [yes]")
    confirmed = len(args) > 1 and args[1].lower() in ("y", "yes")
    if not confirmed:
        task = state.task_store.get(index)
        return (
            f"Delete task #{index + 1}: {format_task(task)}?\n"
            f"Repeat as /rm {index + 1} yes to confirm. Later tasks will move up one number."
        )

    task = state.task_store.remove(index)
    state.mark_dirty()
    return f"Deleted task: {task.description}"


def cmd_search(state: AppState, args: list[str]) -> str:
    term = " ".join(args).strip()
    if not term:
        return "Usage: /search <term>"
    if not len(state.task_store):
        return NO_TASKS

    results = state.task_store.search(term)
    if not results:
        return f"No tasks found matching '{term}'."
    lines = [f"Search results ({len(results)} found):"]
    lines.extend(_numbered(results))
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str]) -> str:
    stats = state.task_store.statistics()
    if stats.total == 0:
        return "No tasks available for statistics."

    lines = [
        "Task statistics:",
        f"  Total: {stats.total}",
        f"  Completed: {stats.completed}",
        f"  Pending: {stats.pending}",
        f"  Overdue: {stats.overdue_count}",
        f"  Completion rate: {stats.completion_rate:.1f}%",
        "Tasks by category:",
    ]
    for category, n in stats.per_category.items():
        lines.append(f"  {category.value}: {n}")
    return "\n".join(lines)


def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    path = state.settings.tasks_path
    if emit:
        with contextlib.suppress(Exception):
            emit(f"Saving {_plural(len(state.task_store))} to {path}...")

    if save_task_store(state):
        return "Tasks saved."
    return f"Could not save tasks to {path} (see log for details)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <text> [p:high] [c:work] [due:YYYY-MM-DD] [-- notes].",
)
registry.register("list", cmd_list, help_text="Show all tasks with their numbers.", aliases=["ls"])
registry.register("cat", cmd_by_category, help_text="Show tasks grouped by category.")
registry.register("prio", cmd_by_priority, help_text="Show open tasks grouped by priority.")
registry.register("overdue", cmd_overdue, help_text="Show open tasks past their due date.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.")
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a field: /edit <n> description|priority|category|due|notes <value>.",
)
registry.register("rm", cmd_remove, help_text="Delete a task: /rm <n> yes.", aliases=["delete"])
registry.register("search", cmd_search, help_text="Search descriptions and notes: /search <term>.")
registry.register("stats", cmd_stats, help_text="Show totals, completion rate, per-category counts.")
registry.register("save", cmd_save, help_text="Save tasks to disk now.")
