"""Dashboard statistics computed on read from a task list."""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from .config import CARD_PALETTE, IN_PROGRESS_PREVIEW_LIMIT, PERSONAL_BUCKET_LABEL
from .models import Task
from .views import normalize_date, tasks_for_date


@dataclass
class TodaySummary:
    """Counts for the tasks due on one calendar day."""

    date: str
    total: int
    completed: int
    percentage: int


@dataclass
class ProgressCard:
    """An in-progress task with its presentational colour and icon."""

    task: Task
    color: str
    icon: str


@dataclass
class ProjectGroup:
    """Per-project totals for the dashboard grouping."""

    name: str
    total: int
    completed: int
    percentage: int
    color: str
    icon: str


def completion_percentage(completed: int, total: int) -> int:
    """
    Rounded completion percentage, 0 when there is nothing to complete.

    Halves round up (2.5 -> 3), matching how the dashboard displays it.
    """
    if total <= 0:
        return 0
    return int(math.floor(completed / total * 100 + 0.5))


def _palette_entry(index: int) -> tuple[str, str]:
    return CARD_PALETTE[index % len(CARD_PALETTE)]


def today_summary(tasks: Iterable[Task], today: str | date | None = None) -> TodaySummary:
    """
    Summarize the tasks due today.

    Args:
        tasks: Task list to scan
        today: Day to treat as "today" (defaults to the current local date)

    Returns:
        TodaySummary with total, completed and rounded percentage
    """
    day = normalize_date(today) or date.today().isoformat()
    due_today = tasks_for_date(tasks, day)
    completed = sum(1 for task in due_today if task.is_completed)
    return TodaySummary(
        date=day,
        total=len(due_today),
        completed=completed,
        percentage=completion_percentage(completed, len(due_today)),
    )


def today_count(tasks: Iterable[Task], today: str | date | None = None) -> int:
    return today_summary(tasks, today).total


def today_completion_percentage(
    tasks: Iterable[Task], today: str | date | None = None
) -> int:
    return today_summary(tasks, today).percentage


def in_progress_preview(
    tasks: Iterable[Task], limit: int = IN_PROGRESS_PREVIEW_LIMIT
) -> list[ProgressCard]:
    """
    Tasks with 0 < progress < 100, capped to ``limit``.

    Colours and icons are assigned round-robin by position in the preview.
    """
    started = [task for task in tasks if 0 < task.progress < 100][: max(0, limit)]
    cards = []
    for index, task in enumerate(started):
        color, icon = _palette_entry(index)
        cards.append(ProgressCard(task=task, color=color, icon=icon))
    return cards


def group_by_project(tasks: Sequence[Task]) -> list[ProjectGroup]:
    """
    Bucket tasks by project name, largest bucket first.

    Tasks without a project fall into the "Personal" bucket. Buckets with
    the same size keep the order in which they first appeared.
    """
    buckets: dict[str, list[Task]] = {}
    for task in tasks:
        buckets.setdefault(task.project_name or PERSONAL_BUCKET_LABEL, []).append(task)

    groups = []
    for index, (name, members) in enumerate(buckets.items()):
        completed = sum(1 for task in members if task.is_completed)
        color, icon = _palette_entry(index)
        groups.append(
            ProjectGroup(
                name=name,
                total=len(members),
                completed=completed,
                percentage=completion_percentage(completed, len(members)),
                color=color,
                icon=icon,
            )
        )

    # sorted() is stable, so ties keep first-appearance order
    return sorted(groups, key=lambda group: group.total, reverse=True)
