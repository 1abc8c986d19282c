"""Overflow and compression accounting - pure functions, no I/O.

Overflow and compressible capacity are reported as independent numbers.
Deciding what to compress, move or defer is left to the caller.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .slots import EVENING_START_HOUR, at_hour
from .tasks import Task, TaskCategory

CompressionPredicate = Callable[[Task], bool]


def is_identity_habit(task: Task) -> bool:
    """Default compression policy: only identity habits shrink."""
    return task.category == TaskCategory.IDENTITY_HABIT


def category_predicate(*categories: TaskCategory) -> CompressionPredicate:
    """Build a compression policy from a set of categories."""
    allowed = frozenset(categories)

    def _is_eligible(task: Task) -> bool:
        return task.category in allowed

    return _is_eligible


def _local(now: datetime) -> datetime:
    """Task times are local wall-clock; convert an aware `now` to match."""
    if now.tzinfo is None:
        return now
    return now.astimezone().replace(tzinfo=None)


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() / 60)


def _remaining_tasks(now: datetime, tasks: list[Task], end_time: datetime) -> list[Task]:
    """Incomplete tasks starting in [now, end_time)."""
    return [t for t in tasks if not t.is_completed and now <= t.start_time < end_time]


def calculate_overflow(
    now: datetime,
    tasks: list[Task],
    cutoff_hour: int = EVENING_START_HOUR,
) -> int:
    """
    Minutes of remaining work that do not fit before the cutoff.

    Counts incomplete tasks starting between now and the cutoff on now's day.
    Never negative; 0 means everything fits.
    """
    now = _local(now)
    end_time = at_hour(now.date(), cutoff_hour)
    available = max(0, _minutes_between(now, end_time))
    needed = sum(t.duration_minutes for t in _remaining_tasks(now, tasks, end_time))
    return max(0, needed - available)


def would_overflow_into_evening(
    now: datetime,
    tasks: list[Task],
    evening_start_hour: int = EVENING_START_HOUR,
) -> bool:
    return calculate_overflow(now, tasks, cutoff_hour=evening_start_hour) > 0


def compression_needed(tasks: list[Task], available_minutes: int) -> int:
    """Minutes the given tasks exceed the available time by (never negative)."""
    total = sum(t.duration_minutes for t in tasks)
    return max(0, total - available_minutes)


def max_compression_available(
    tasks: list[Task],
    is_eligible: CompressionPredicate = is_identity_habit,
) -> int:
    """Minutes reclaimable from tasks that are compressible and policy-eligible."""
    return sum(t.compressible_minutes for t in tasks if t.is_compressible and is_eligible(t))


@dataclass
class OverflowReport:
    """Overflow findings for the rest of a day."""

    now: datetime
    cutoff: datetime
    available_minutes: int
    needed_minutes: int
    overflow_minutes: int
    compressible_minutes: int

    @property
    def has_overflow(self) -> bool:
        return self.overflow_minutes > 0

    @property
    def compression_covers_overflow(self) -> bool:
        return self.compressible_minutes >= self.overflow_minutes


def analyze_overflow(
    now: datetime,
    tasks: list[Task],
    cutoff_hour: int = EVENING_START_HOUR,
    is_eligible: CompressionPredicate = is_identity_habit,
) -> OverflowReport:
    """
    Bundle overflow and compression numbers for the work left before the cutoff.

    Compressible minutes are counted over the same remaining tasks that
    produce the overflow.
    """
    now = _local(now)
    end_time = at_hour(now.date(), cutoff_hour)
    remaining = _remaining_tasks(now, tasks, end_time)
    available = max(0, _minutes_between(now, end_time))
    needed = sum(t.duration_minutes for t in remaining)

    return OverflowReport(
        now=now,
        cutoff=end_time,
        available_minutes=available,
        needed_minutes=needed,
        overflow_minutes=calculate_overflow(now, tasks, cutoff_hour),
        compressible_minutes=max_compression_available(remaining, is_eligible),
    )
