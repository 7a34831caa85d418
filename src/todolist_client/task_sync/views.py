"""Pure derivations of the task list views."""

from collections.abc import Iterable
from datetime import date, datetime

from .models import Task, TaskId, date_component


def is_personal(task: Task) -> bool:
    return task.is_personal


def matches_date(task: Task, day: str | None) -> bool:
    """Date-component equality between a task's due date and ``day``."""
    if not day:
        return False
    due = task.due_day
    return due is not None and due == day


def normalize_date(value: str | date | datetime | None) -> str | None:
    """Reduce a selected date to ``YYYY-MM-DD`` (None for empty input)."""
    return date_component(value)


def personal_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in tasks if is_personal(task)]


def tasks_for_date(tasks: Iterable[Task], day: str | None) -> list[Task]:
    if not day:
        return []
    return [task for task in tasks if matches_date(task, day)]


def same_id(left: TaskId, right: TaskId) -> bool:
    """Ids are opaque: 12 and "12" name the same task."""
    return str(left) == str(right)


def without_id(tasks: Iterable[Task], task_id: TaskId) -> list[Task]:
    return [task for task in tasks if not same_id(task.id, task_id)]


def dedupe_by_id(tasks: Iterable[Task]) -> tuple[list[Task], int]:
    """
    Drop repeated ids, keeping the first occurrence.

    Returns:
        Tuple of (unique tasks, number of dropped duplicates)
    """
    seen: set[str] = set()
    unique: list[Task] = []
    dropped = 0
    for task in tasks:
        if str(task.id) in seen:
            dropped += 1
            continue
        seen.add(str(task.id))
        unique.append(task)
    return unique, dropped
