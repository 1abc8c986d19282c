"""Tests for the shared workflow layer."""

import json
from datetime import date, datetime, time
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tempo.adapters.memory_store import InMemoryTaskStore
from tempo.config import DATA_DIR, Config
from tempo.core.changes import Change
from tempo.core.tasks import Task, TaskCategory
from tempo.errors import InvalidDataError, SaveFailedError
from tempo.workflows import (
    apply_changes,
    compression_policy,
    get_sleep_provider,
    get_store,
    load_changes,
    overflow_report,
    sleep_conflicts,
)


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def now(today):
    return datetime.combine(today, time(15, 0))


@pytest.fixture
def make_task(today):
    def _make(task_id: str, hour: int, duration: int, **kwargs) -> Task:
        return Task(
            id=task_id,
            title=f"Task {task_id}",
            category=kwargs.pop("category", TaskCategory.FLEXIBLE_TASK),
            start_time=datetime.combine(today, time(hour, 0)),
            duration_minutes=duration,
            scheduled_date=today,
            created_at=datetime(2025, 1, 1),
            updated_at=datetime(2025, 1, 1),
            **kwargs,
        )
    return _make


@pytest.fixture
def store(make_task):
    return InMemoryTaskStore(
        [
            make_task("habit", 16, 60, category=TaskCategory.IDENTITY_HABIT, minimum_duration_minutes=15),
            make_task("report", 10, 90),
            make_task("call", 21, 30),
        ]
    )


class TestApplyChanges:
    def test_resize_applies_and_missing_task_is_skipped(self, store, now, today):
        changes = [
            Change.resize("report", 45),
            Change.move("deleted", datetime.combine(today, time(9, 0))),
        ]
        assert apply_changes(store, changes, now=now) == 1

        report = store.fetch_task("report")
        assert report.duration_minutes == 45
        assert report.updated_at == now
        assert store.fetch_task("deleted") is None

    def test_all_actions(self, store, now, today):
        saturday = datetime(2025, 1, 18, 10, 0)
        changes = [
            Change.move_and_resize("habit", datetime.combine(today, time(17, 0)), 15),
            Change.defer("report", saturday),
            Change.move("call", datetime.combine(today, time(20, 0))),
        ]
        assert apply_changes(store, changes, now=now) == 3

        habit = store.fetch_task("habit")
        assert (habit.start_time.hour, habit.duration_minutes) == (17, 15)
        assert store.fetch_task("report").scheduled_date == date(2025, 1, 18)
        assert store.fetch_task("report").start_time == saturday
        assert store.fetch_task("call").start_time.hour == 20
        assert [t.id for t in store.fetch_day(today)] == ["habit", "call"]

    def test_protect_and_pool_only_touch_timestamp(self, store, now):
        before = {t.id: t for t in store.fetch_range(date(2025, 1, 1), date(2025, 12, 31))}
        apply_changes(store, [Change.protect("habit"), Change.pool("report")], now=now)

        for task_id in ("habit", "report"):
            after = store.fetch_task(task_id)
            assert after.updated_at == now
            assert Task(**{**after.__dict__, "updated_at": before[task_id].updated_at}) == before[task_id]
        assert store.fetch_task("call") == before["call"]

    def test_user_decision_left_alone(self, store, now):
        before = store.fetch_task("call")
        assert apply_changes(store, [Change.requires_decision("call")], now=now) == 0
        assert store.fetch_task("call") == before

    def test_single_commit(self, now, make_task):
        store = MagicMock()
        store.fetch_task.side_effect = lambda task_id: make_task(task_id, 9, 30)

        apply_changes(store, [Change.resize("a", 20), Change.pool("b")], now=now)

        store.commit.assert_called_once()
        updates = store.commit.call_args.args[0]
        assert [u.task_id for u in updates] == ["a", "b"]

    def test_commit_failure_persists_nothing(self, store, now):
        snapshot = store.fetch_task("report")

        def fail(updates):
            raise SaveFailedError(OSError("disk full"))

        store.commit = fail
        with pytest.raises(SaveFailedError) as exc_info:
            apply_changes(store, [Change.resize("report", 30), Change.pool("habit")], now=now)

        assert isinstance(exc_info.value.cause, OSError)
        assert store.fetch_task("report") == snapshot
        assert snapshot.duration_minutes == 90
        assert store.fetch_task("habit").updated_at == datetime(2025, 1, 1)

    def test_invalid_change_aborts_batch(self, store, now):
        with pytest.raises(InvalidDataError):
            apply_changes(store, [Change.resize("report", 30), Change.resize("habit", 5)], now=now)
        assert store.fetch_task("report").duration_minutes == 90

    def test_defaults_now(self, store):
        apply_changes(store, [Change.pool("report")])
        assert store.fetch_task("report").updated_at > datetime(2025, 1, 1)


class TestLoadChanges:
    def test_reads_list(self, tmp_path):
        path = tmp_path / "changes.json"
        path.write_text(
            json.dumps(
                [
                    {"task_id": "a", "action": "resized", "new_duration_minutes": 20},
                    {"task_id": "b", "action": "deferred", "new_date": "2025-01-18T09:00:00"},
                ]
            )
        )
        changes = load_changes(path)
        assert [c.task_id for c in changes] == ["a", "b"]
        assert changes[1].new_date == datetime(2025, 1, 18, 9, 0)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "changes.json"
        path.write_text('{"task_id": "a"}')
        with pytest.raises(InvalidDataError):
            load_changes(path)

    def test_unreadable(self, tmp_path):
        with pytest.raises(InvalidDataError):
            load_changes(tmp_path / "missing.json")

    @pytest.mark.parametrize("records", [["oops"], [1], [None]])
    def test_record_not_an_object(self, tmp_path, records):
        path = tmp_path / "changes.json"
        path.write_text(json.dumps(records))
        with pytest.raises(InvalidDataError, match="must be an object"):
            load_changes(path)


class TestGetStore:
    def test_uses_configured_file(self, tmp_path):
        store = get_store(Config(store_file=str(tmp_path / "mine.json")))
        assert store.path == tmp_path / "mine.json"

    def test_expands_user_path(self):
        store = get_store(Config(store_file="~/some/tasks.json"))
        assert store.path == Path.home() / "some" / "tasks.json"

    def test_falls_back_to_default(self):
        assert get_store(Config()).path == DATA_DIR / "tasks.json"


class TestCompressionPolicy:
    def test_configured_categories(self, make_task):
        policy = compression_policy(Config(compressible_categories=["identity_habit", "optional_goal", "bogus"]))
        assert policy(make_task("a", 9, 30, category=TaskCategory.OPTIONAL_GOAL)) is True
        assert policy(make_task("b", 9, 30, category=TaskCategory.FLEXIBLE_TASK)) is False


class TestOverflowReport:
    def test_uses_config_cutoff(self, store, now):
        # 16:00 habit counts before 18:00; the 21:00 call never does
        report = overflow_report(store, Config(), now=now)
        assert report.cutoff.hour == 18
        assert report.needed_minutes == 60
        assert report.overflow_minutes == 0

        report = overflow_report(store, Config(evening_start_hour=16), now=now)
        assert report.cutoff.hour == 16
        assert report.needed_minutes == 0

    def test_reports_compressible_minutes(self, store):
        report = overflow_report(store, Config(evening_start_hour=16), now=datetime(2025, 1, 15, 9, 0))
        # report (90 min at 10:00) fits in 420 available minutes
        assert report.needed_minutes == 90
        assert report.compressible_minutes == 0

        report = overflow_report(store, Config(evening_start_hour=17), now=datetime(2025, 1, 15, 15, 30))
        assert report.available_minutes == 90
        assert report.needed_minutes == 60
        assert report.compressible_minutes == 45


class TestSleepConflicts:
    def test_untracked(self, store, today):
        assert sleep_conflicts(store, get_sleep_provider(Config()), today) == []

    def test_late_task_runs_into_sleep(self, store, today):
        provider = get_sleep_provider(Config(bedtime="21:15", wake_time="06:30"))
        assert [t.id for t in sleep_conflicts(store, provider, today)] == ["call"]
