"""Shared workflow layer between the CLI and the stores.

Wires configuration to adapters and runs the one stateful operation of the
engine: applying a batch of decided changes.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path

from .adapters.config_sleep import ConfigSleepProvider
from .adapters.json_store import JsonTaskStore
from .config import DATA_DIR, Config
from .core.changes import Change, plan_update
from .core.overflow import CompressionPredicate, OverflowReport, analyze_overflow, category_predicate
from .core.sleep import find_sleep_conflicts
from .core.tasks import Task, TaskCategory
from .errors import InvalidDataError
from .ports import SleepScheduleProvider, TaskStore

logger = logging.getLogger(__name__)


def get_store(config: Config) -> JsonTaskStore:
    """Resolve the task file from config."""
    if config.store_file:
        return JsonTaskStore(Path(config.store_file).expanduser())
    return JsonTaskStore(DATA_DIR / "tasks.json")


def get_sleep_provider(config: Config) -> ConfigSleepProvider:
    return ConfigSleepProvider(config)


def compression_policy(config: Config) -> CompressionPredicate:
    """Compression eligibility predicate built from COMPRESSIBLE_CATEGORIES."""
    categories = []
    for name in config.compressible_categories:
        try:
            categories.append(TaskCategory(name))
        except ValueError:
            logger.warning(f"Unknown compressible category: {name}")
    return category_predicate(*categories)


def apply_changes(
    store: TaskStore,
    changes: list[Change],
    now: datetime | None = None,
) -> int:
    """
    Apply a batch of decided changes as one transaction.

    Each change is resolved against the store independently, in input order.
    Changes whose task no longer exists are skipped. Every resulting update
    goes to the store in a single commit, which either persists all of them
    or raises SaveFailedError and persists none.

    Returns the number of tasks updated. Callers comparing this with
    len(changes) can detect skipped and user-decision changes.
    """
    now = now or datetime.now()
    updates = []

    for change in changes:
        task = store.fetch_task(change.task_id)
        if task is None:
            logger.debug(f"Skipping {change.action.value} change: task {change.task_id} not found")
            continue

        update = plan_update(change, task, now)
        if update is None:
            logger.debug(f"Leaving task {change.task_id} for a user decision")
            continue
        updates.append(update)

    store.commit(updates)
    logger.info(f"Applied {len(updates)} of {len(changes)} change(s)")
    return len(updates)


def load_changes(path: Path) -> list[Change]:
    """Read a JSON list of change records."""
    try:
        data = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidDataError(f"cannot read changes from {path}: {e}") from e

    if not isinstance(data, list):
        raise InvalidDataError(f"{path} must contain a JSON list of changes")
    return [Change.from_dict(item) for item in data]


def overflow_report(store: TaskStore, config: Config, now: datetime | None = None) -> OverflowReport:
    """Overflow findings for the rest of today, before the evening starts."""
    now = now or datetime.now()
    tasks = store.fetch_day(now.date())
    return analyze_overflow(
        now,
        tasks,
        cutoff_hour=config.evening_start_hour,
        is_eligible=compression_policy(config),
    )


def sleep_conflicts(
    store: TaskStore,
    provider: SleepScheduleProvider,
    target_date: date,
) -> list[Task]:
    """Tasks running into the night's sleep window, or [] when sleep is untracked."""
    schedule = provider.fetch_schedule()
    if schedule is None:
        return []
    window = schedule.window_for(target_date)
    tasks = store.fetch_range(window.start.date(), window.end.date())
    return find_sleep_conflicts(target_date, tasks, schedule)
