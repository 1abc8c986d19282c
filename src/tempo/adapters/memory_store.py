"""In-memory task store adapter."""

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable

from tempo.core.changes import TaskUpdate
from tempo.core.tasks import Task, sort_by_start
from tempo.errors import InvalidDataError, SaveFailedError, TaskNotFoundError

logger = logging.getLogger(__name__)


class InMemoryTaskStore:
    """
    Dict-backed task store.

    Implements TaskStore protocol. Readers always get copies, and every write
    builds a staged copy of the table, persists it, then swaps it in, so a
    failed write leaves the store exactly as it was. Subclasses hook in real
    storage by overriding `_persist`.
    """

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: dict[str, Task] = {t.id: replace(t) for t in tasks or []}

    def _persist(self, tasks: dict[str, Task]) -> None:
        """Write the staged table to backing storage. No-op in memory."""

    def _write(self, staged: dict[str, Task]) -> None:
        try:
            self._persist(staged)
        except OSError as e:
            raise SaveFailedError(e) from e
        self._tasks = staged

    def _select(self, predicate: Callable[[Task], bool]) -> list[Task]:
        return sort_by_start([replace(t) for t in self._tasks.values() if predicate(t)])

    def _require(self, task_id: str) -> Task:
        if task_id not in self._tasks:
            raise TaskNotFoundError(task_id)
        return self._tasks[task_id]

    # ============== Reads ==============

    def fetch_day(self, target_date: date) -> list[Task]:
        """Fetch tasks scheduled on a date."""
        return self._select(lambda t: t.scheduled_date == target_date)

    def fetch_range(self, start_date: date, end_date: date) -> list[Task]:
        """Fetch tasks scheduled between two dates, inclusive."""
        tasks = self._select(lambda t: start_date <= t.scheduled_date <= end_date)
        return sorted(tasks, key=lambda t: t.scheduled_date)

    def fetch_task(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        return replace(task) if task else None

    def fetch_incomplete(self, target_date: date) -> list[Task]:
        return self._select(lambda t: t.scheduled_date == target_date and not t.is_completed)

    def fetch_evening(self, target_date: date) -> list[Task]:
        return self._select(lambda t: t.scheduled_date == target_date and t.is_evening_task)

    # ============== Writes ==============

    def create(self, task: Task) -> None:
        if task.id in self._tasks:
            raise InvalidDataError(f"task {task.id} already exists")
        self._write({**self._tasks, task.id: replace(task)})

    def update(self, task: Task) -> None:
        self._require(task.id)
        self._write({**self._tasks, task.id: replace(task, updated_at=datetime.now())})

    def delete(self, task_id: str) -> None:
        self._require(task_id)
        staged = dict(self._tasks)
        del staged[task_id]
        self._write(staged)

    def commit(self, updates: list[TaskUpdate]) -> None:
        """Apply every update to a staged table and persist it in one write."""
        staged = dict(self._tasks)
        for update in updates:
            current = staged.get(update.task_id)
            if current is None:
                logger.debug(f"Commit skipping {update.task_id}: no longer in store")
                continue
            try:
                staged[update.task_id] = update.apply_to(current)
            except (TypeError, ValueError) as e:
                raise SaveFailedError(e) from e

        self._write(staged)
        logger.debug(f"Committed {len(updates)} task update(s)")

    def _set_completed(self, task_id: str, completed: bool) -> None:
        self._require(task_id)
        self.commit(
            [TaskUpdate(task_id, {"is_completed": completed, "updated_at": datetime.now()})]
        )

    def mark_completed(self, task_id: str) -> None:
        self._set_completed(task_id, True)

    def mark_incomplete(self, task_id: str) -> None:
        self._set_completed(task_id, False)
