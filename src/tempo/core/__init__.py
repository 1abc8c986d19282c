"""Functional core - pure scheduling logic with no I/O."""

from .tasks import Task, TaskCategory, tasks_on_day, sort_by_start, filter_incomplete
from .slots import (
    TimeSlot,
    find_available_slots,
    find_evening_slots,
    find_first_available_slot,
    find_weekend_slots,
)
from .conflicts import find_conflicts, would_cause_conflict, can_fit, can_fit_between
from .overflow import (
    OverflowReport,
    analyze_overflow,
    calculate_overflow,
    compression_needed,
    max_compression_available,
    would_overflow_into_evening,
)
from .changes import Change, ChangeAction, TaskUpdate, plan_update
from .sleep import SleepSchedule, find_sleep_conflicts

__all__ = [
    # Tasks
    "Task",
    "TaskCategory",
    "tasks_on_day",
    "sort_by_start",
    "filter_incomplete",
    # Slots
    "TimeSlot",
    "find_available_slots",
    "find_evening_slots",
    "find_first_available_slot",
    "find_weekend_slots",
    # Conflicts
    "find_conflicts",
    "would_cause_conflict",
    "can_fit",
    "can_fit_between",
    # Overflow
    "OverflowReport",
    "analyze_overflow",
    "calculate_overflow",
    "compression_needed",
    "max_compression_available",
    "would_overflow_into_evening",
    # Changes
    "Change",
    "ChangeAction",
    "TaskUpdate",
    "plan_update",
    # Sleep
    "SleepSchedule",
    "find_sleep_conflicts",
]
