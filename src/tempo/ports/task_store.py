"""Task store interface."""

from datetime import date
from typing import Protocol

from tempo.core.changes import TaskUpdate
from tempo.core.tasks import Task


class TaskStore(Protocol):
    """
    Interface for reading and persisting tasks in any backend.

    Fetches return copies sorted by start time. `update`, `delete` and the
    `mark_*` calls raise TaskNotFoundError for unknown ids.
    """

    def fetch_day(self, target_date: date) -> list[Task]:
        """Fetch tasks scheduled on a date."""
        ...

    def fetch_range(self, start_date: date, end_date: date) -> list[Task]:
        """Fetch tasks scheduled between two dates, inclusive."""
        ...

    def fetch_task(self, task_id: str) -> Task | None:
        """Fetch a single task. Returns None if not found."""
        ...

    def fetch_incomplete(self, target_date: date) -> list[Task]:
        ...

    def fetch_evening(self, target_date: date) -> list[Task]:
        ...

    def create(self, task: Task) -> None:
        ...

    def update(self, task: Task) -> None:
        ...

    def delete(self, task_id: str) -> None:
        ...

    def commit(self, updates: list[TaskUpdate]) -> None:
        """Persist every update or none of them. Raises SaveFailedError."""
        ...

    def mark_completed(self, task_id: str) -> None:
        ...

    def mark_incomplete(self, task_id: str) -> None:
        ...
