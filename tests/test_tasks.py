"""Tests for core task logic."""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from tempo.core.tasks import (
    Task,
    TaskCategory,
    filter_evening,
    filter_incomplete,
    sort_by_start,
    tasks_on_day,
)
from tempo.errors import InvalidDataError


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def make_task(today):
    def _make(task_id: str, hour: int, duration: int = 30, **kwargs) -> Task:
        day = kwargs.pop("day", today)
        return Task(
            id=task_id,
            title=f"Task {task_id}",
            category=kwargs.pop("category", TaskCategory.FLEXIBLE_TASK),
            start_time=datetime.combine(day, time(hour, 0)),
            duration_minutes=duration,
            scheduled_date=day,
            **kwargs,
        )
    return _make


class TestTask:
    def test_end_time(self, make_task, today):
        assert make_task("a", 9, 90).end_time == datetime.combine(today, time(10, 30))

    def test_compressible(self, make_task):
        task = make_task("a", 7, 30, minimum_duration_minutes=10)
        assert task.is_compressible is True
        assert task.compressible_minutes == 20

    def test_not_compressible_without_floor(self, make_task):
        task = make_task("a", 7, 30)
        assert task.is_compressible is False
        assert task.compressible_minutes == 0

    def test_floor_equal_to_duration(self, make_task):
        task = make_task("a", 7, 30, minimum_duration_minutes=30)
        assert task.is_compressible is False
        assert task.compressible_minutes == 0

    @pytest.mark.parametrize(
        "duration,minimum",
        [(0, None), (-5, None), (30, 0), (30, 45)],
    )
    def test_invariants(self, make_task, duration, minimum):
        with pytest.raises(InvalidDataError):
            make_task("a", 9, duration, minimum_duration_minutes=minimum)

    def test_rejects_utc_offset(self, today):
        with pytest.raises(InvalidDataError, match="local"):
            Task(
                id="a",
                title="Standup",
                category=TaskCategory.FLEXIBLE_TASK,
                start_time=datetime.combine(today, time(9, 0), tzinfo=timezone.utc),
                duration_minutes=15,
                scheduled_date=today,
            )

    def test_unknown_category_falls_back(self):
        assert TaskCategory.from_value("chores") == TaskCategory.FLEXIBLE_TASK
        assert TaskCategory.from_value(None) == TaskCategory.FLEXIBLE_TASK


class TestTaskDict:
    def test_from_dict(self):
        task = Task.from_dict(
            {
                "id": 7,
                "title": "Meditate",
                "category": "identity_habit",
                "start_time": "2025-01-15T07:00:00",
                "duration_minutes": 30,
                "minimum_duration_minutes": 10,
                "is_evening_task": True,
            }
        )
        assert task.id == "7"
        assert task.category == TaskCategory.IDENTITY_HABIT
        assert task.scheduled_date == date(2025, 1, 15)
        assert task.minimum_duration_minutes == 10
        assert task.is_evening_task is True
        assert task.is_completed is False

    def test_round_trip_preserves_fields(self, make_task):
        task = make_task("a", 9, 45, minimum_duration_minutes=15, notes="bring water")
        assert Task.from_dict(task.to_dict()) == task

    @pytest.mark.parametrize(
        "data",
        [
            {"start_time": "2025-01-15T07:00:00", "duration_minutes": 30},
            {"id": "a", "duration_minutes": 30},
            {"id": "a", "start_time": "tomorrow", "duration_minutes": 30},
            {"id": "a", "start_time": "2025-01-15T07:00:00", "duration_minutes": "long"},
            {"id": "a", "start_time": "2025-01-15T07:00:00+00:00", "duration_minutes": 30},
            {"id": "a", "start_time": "2025-01-15T07:00:00", "duration_minutes": 30, "is_completed": "false"},
            {"id": "a", "start_time": "2025-01-15T07:00:00", "duration_minutes": 30, "is_evening_task": 1},
            "oops",
            [1],
        ],
    )
    def test_from_dict_invalid(self, data):
        with pytest.raises(InvalidDataError):
            Task.from_dict(data)


class TestFilters:
    def test_tasks_on_day(self, make_task, today):
        tasks = [make_task("a", 9), make_task("b", 9, day=today + timedelta(days=1))]
        assert [t.id for t in tasks_on_day(tasks, today)] == ["a"]
        assert [t.id for t in tasks_on_day(tasks, datetime.combine(today, time(12)))] == ["a"]

    def test_sort_by_start_is_stable(self, make_task):
        tasks = [make_task("late", 15), make_task("first", 9), make_task("second", 9)]
        assert [t.id for t in sort_by_start(tasks)] == ["first", "second", "late"]

    def test_filter_incomplete(self, make_task):
        tasks = [make_task("a", 9, is_completed=True), make_task("b", 10)]
        assert [t.id for t in filter_incomplete(tasks)] == ["b"]

    def test_filter_evening(self, make_task):
        tasks = [make_task("a", 19, is_evening_task=True), make_task("b", 10)]
        assert [t.id for t in filter_evening(tasks)] == ["a"]
