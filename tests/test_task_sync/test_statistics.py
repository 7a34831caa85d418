"""Unit tests for dashboard statistics."""

from datetime import date

import pytest

from todolist_client.task_sync.config import CARD_PALETTE
from todolist_client.task_sync.models import Task
from todolist_client.task_sync.statistics import (
    completion_percentage,
    group_by_project,
    in_progress_preview,
    today_completion_percentage,
    today_count,
    today_summary,
)

TODAY = "2024-03-20"


def make_task(task_id: int, **kwargs) -> Task:
    kwargs.setdefault("name", f"Task {task_id}")
    return Task(id=task_id, **kwargs)


@pytest.mark.unit
class TestCompletionPercentage:
    """Test the rounding rule."""

    @pytest.mark.parametrize(
        "completed, total, expected",
        [
            (1, 4, 25),
            (0, 0, 0),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),
            (3, 3, 100),
        ],
    )
    def test_values(self, completed, total, expected) -> None:
        assert completion_percentage(completed, total) == expected


@pytest.mark.unit
class TestTodaySummary:
    """Test today's counts."""

    def test_four_due_one_completed(self) -> None:
        tasks = [
            make_task(1, due_date=TODAY, progress=100),
            make_task(2, due_date=TODAY, progress=50),
            make_task(3, due_date=f"{TODAY}T10:00:00", progress=0),
            make_task(4, due_date=TODAY, progress=99),
            make_task(5, due_date="2024-03-21", progress=100),
            make_task(6, progress=100),
        ]

        summary = today_summary(tasks, TODAY)

        assert summary.date == TODAY
        assert summary.total == 4
        assert summary.completed == 1
        assert summary.percentage == 25
        assert today_count(tasks, TODAY) == 4
        assert today_completion_percentage(tasks, TODAY) == 25

    def test_nothing_due(self) -> None:
        summary = today_summary([make_task(1, due_date="2024-01-01")], TODAY)

        assert summary.total == 0
        assert summary.percentage == 0

    def test_defaults_to_current_day(self) -> None:
        today = date.today().isoformat()

        summary = today_summary([make_task(1, due_date=today, progress=100)])

        assert summary.date == today
        assert summary.percentage == 100


@pytest.mark.unit
class TestInProgressPreview:
    """Test the in-progress card preview."""

    def test_only_started_tasks_in_order(self) -> None:
        tasks = [
            make_task(1, progress=0),
            make_task(2, progress=10),
            make_task(3, progress=100),
            make_task(4, progress=90),
        ]

        cards = in_progress_preview(tasks)

        assert [card.task.id for card in cards] == [2, 4]
        assert (cards[0].color, cards[0].icon) == CARD_PALETTE[0]
        assert (cards[1].color, cards[1].icon) == CARD_PALETTE[1]

    def test_limit_and_palette_wraps(self) -> None:
        tasks = [make_task(i, progress=50) for i in range(12)]

        cards = in_progress_preview(tasks)

        assert len(cards) == 10
        assert cards[len(CARD_PALETTE)].color == CARD_PALETTE[0][0]
        assert len(in_progress_preview(tasks, limit=3)) == 3


@pytest.mark.unit
class TestGroupByProject:
    """Test per-project grouping."""

    def test_groups_sorted_by_size(self) -> None:
        tasks = [
            make_task(1, project_name="Work", progress=100),
            make_task(2),
            make_task(3, project_name="Work"),
            make_task(4, project_name="Home", progress=100),
            make_task(5, project_name="Work"),
            make_task(6, project_name=""),
        ]

        groups = group_by_project(tasks)

        assert [group.name for group in groups] == ["Work", "Personal", "Home"]
        work = groups[0]
        assert (work.total, work.completed, work.percentage) == (3, 1, 33)
        assert groups[2].percentage == 100

    def test_ties_keep_first_appearance(self) -> None:
        tasks = [
            make_task(1, project_name="B"),
            make_task(2, project_name="A"),
        ]

        groups = group_by_project(tasks)

        assert [group.name for group in groups] == ["B", "A"]
        assert groups[0].color == CARD_PALETTE[0][0]
        assert groups[1].color == CARD_PALETTE[1][0]

    def test_empty(self) -> None:
        assert group_by_project([]) == []
