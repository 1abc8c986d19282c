"""Conflict detection and fit checks - pure functions, no I/O."""

from datetime import datetime, timedelta

from .slots import TimeSlot
from .tasks import Task, sort_by_start


def find_conflicts(time_range: TimeSlot, tasks: list[Task]) -> list[Task]:
    """Tasks overlapping a time range, in input order."""
    return [t for t in tasks if time_range.overlaps_task(t)]


def would_cause_conflict(task: Task, new_start_time: datetime, tasks: list[Task]) -> bool:
    """
    Check if moving a task to a new start would overlap another task.

    The moving task is excluded by id, so `tasks` may still contain it.
    """
    new_slot = TimeSlot(
        start=new_start_time,
        end=new_start_time + timedelta(minutes=task.duration_minutes),
    )
    return any(other.id != task.id and new_slot.overlaps_task(other) for other in tasks)


def can_fit(duration_minutes: int, slot: TimeSlot) -> bool:
    """Exact fits count."""
    return slot.duration_minutes() >= duration_minutes


def can_fit_between(duration_minutes: int, start: datetime, end: datetime) -> bool:
    """Check if a duration fits between two times. Raises InvalidRangeError if start >= end."""
    return can_fit(duration_minutes, TimeSlot(start=start, end=end))


def find_overlapping_pairs(tasks: list[Task]) -> list[tuple[Task, Task]]:
    """
    Find double-booked tasks.

    Returns list of (task1, task2) tuples that overlap, ordered by start.
    """
    pairs = []
    sorted_tasks = sort_by_start(tasks)

    for i, t1 in enumerate(sorted_tasks):
        for t2 in sorted_tasks[i + 1 :]:
            # t2 starts after t1 ends - no more overlaps possible
            if t2.start_time >= t1.end_time:
                break
            pairs.append((t1, t2))

    return pairs
