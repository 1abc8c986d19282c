"""Ports - interfaces/protocols for external dependencies."""

from .task_store import TaskStore
from .sleep_provider import SleepScheduleProvider

__all__ = [
    "TaskStore",
    "SleepScheduleProvider",
]
