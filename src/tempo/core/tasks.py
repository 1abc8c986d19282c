"""Pure task domain logic - no I/O dependencies.

All times are naive local wall-clock datetimes.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum

from tempo.errors import InvalidDataError


class TaskCategory(str, Enum):
    """How a task is treated when the day gets reshuffled."""

    NON_NEGOTIABLE = "non_negotiable"
    IDENTITY_HABIT = "identity_habit"
    FLEXIBLE_TASK = "flexible_task"
    OPTIONAL_GOAL = "optional_goal"

    @classmethod
    def from_value(cls, raw: str | None) -> "TaskCategory":
        """Parse a stored category, falling back to flexible for unknown values."""
        try:
            return cls(raw)
        except ValueError:
            return cls.FLEXIBLE_TASK


def _flag(data: dict, key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise InvalidDataError(f"task {data.get('id', '?')}: {key} must be true or false, got {value!r}")
    return value


@dataclass
class Task:
    """A time-bound task occupying [start_time, start_time + duration)."""

    id: str
    title: str
    category: TaskCategory
    start_time: datetime
    duration_minutes: int
    scheduled_date: date
    minimum_duration_minutes: int | None = None
    notes: str | None = None
    is_completed: bool = False
    is_evening_task: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if self.start_time.tzinfo is not None:
            raise InvalidDataError(f"task {self.id}: start time must be local, without a UTC offset")
        if self.duration_minutes <= 0:
            raise InvalidDataError(
                f"task {self.id}: duration must be positive, got {self.duration_minutes}"
            )
        minimum = self.minimum_duration_minutes
        if minimum is not None and not 0 < minimum <= self.duration_minutes:
            raise InvalidDataError(
                f"task {self.id}: minimum duration {minimum} outside 1..{self.duration_minutes}"
            )

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(minutes=self.duration_minutes)

    @property
    def is_compressible(self) -> bool:
        """Has a floor duration strictly below its current duration."""
        if self.minimum_duration_minutes is None:
            return False
        return self.minimum_duration_minutes < self.duration_minutes

    @property
    def compressible_minutes(self) -> int:
        """Minutes reclaimable by compressing down to the floor."""
        if self.minimum_duration_minutes is None:
            return 0
        return max(0, self.duration_minutes - self.minimum_duration_minutes)

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its JSON representation."""
        if not isinstance(data, dict):
            raise InvalidDataError(f"task record must be an object, got {data!r}")
        try:
            start_time = datetime.fromisoformat(data["start_time"])
            if data.get("scheduled_date"):
                scheduled_date = date.fromisoformat(data["scheduled_date"])
            else:
                scheduled_date = start_time.date()
            duration = int(data["duration_minutes"])
            minimum = data.get("minimum_duration_minutes")
            minimum = int(minimum) if minimum is not None else None
            timestamps = {
                key: datetime.fromisoformat(data[key])
                for key in ("created_at", "updated_at")
                if data.get(key)
            }
            task_id = str(data["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidDataError(f"task {data.get('id', '?')}: {e}") from e

        return cls(
            id=task_id,
            title=data.get("title", ""),
            category=TaskCategory.from_value(data.get("category")),
            start_time=start_time,
            duration_minutes=duration,
            scheduled_date=scheduled_date,
            minimum_duration_minutes=minimum,
            notes=data.get("notes"),
            is_completed=_flag(data, "is_completed"),
            is_evening_task=_flag(data, "is_evening_task"),
            **timestamps,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category.value,
            "start_time": self.start_time.isoformat(),
            "duration_minutes": self.duration_minutes,
            "scheduled_date": self.scheduled_date.isoformat(),
            "minimum_duration_minutes": self.minimum_duration_minutes,
            "notes": self.notes,
            "is_completed": self.is_completed,
            "is_evening_task": self.is_evening_task,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def as_day(value: date | datetime) -> date:
    """Normalize a datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def tasks_on_day(tasks: list[Task], day: date | datetime) -> list[Task]:
    """Filter to tasks scheduled on a calendar day."""
    day = as_day(day)
    return [t for t in tasks if t.scheduled_date == day]


def sort_by_start(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks by start time.

    Stable: tasks sharing a start time keep their input order.
    """
    return sorted(tasks, key=lambda t: t.start_time)


def filter_incomplete(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if not t.is_completed]


def filter_evening(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.is_evening_task]
