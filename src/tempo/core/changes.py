"""Decided per-task changes and the field updates they stage - no I/O."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from tempo.errors import InvalidDataError

from .tasks import Task


class ChangeAction(str, Enum):
    PROTECTED = "protected"
    RESIZED = "resized"
    MOVED = "moved"
    MOVED_AND_RESIZED = "moved_and_resized"
    DEFERRED = "deferred"
    POOLED = "pooled"
    REQUIRES_USER_DECISION = "requires_user_decision"


# Payload fields each action must carry
_REQUIRED_PAYLOAD = {
    ChangeAction.RESIZED: ("new_duration_minutes",),
    ChangeAction.MOVED: ("new_start_time",),
    ChangeAction.MOVED_AND_RESIZED: ("new_start_time", "new_duration_minutes"),
    ChangeAction.DEFERRED: ("new_date",),
}


@dataclass(frozen=True)
class Change:
    """One decided adjustment (or explicit no-op) targeted at a task."""

    task_id: str
    action: ChangeAction
    new_start_time: datetime | None = None
    new_duration_minutes: int | None = None
    new_date: datetime | None = None
    reason: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", ChangeAction(self.action))
        missing = [
            name for name in _REQUIRED_PAYLOAD.get(self.action, ()) if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"{self.action.value} change for {self.task_id} needs {', '.join(missing)}")
        for name in ("new_start_time", "new_date"):
            moment = getattr(self, name)
            if moment is not None and moment.tzinfo is not None:
                raise ValueError(f"{self.action.value} change for {self.task_id}: {name} must be local time")

    @classmethod
    def protect(cls, task_id: str, reason: str = "") -> "Change":
        return cls(task_id, ChangeAction.PROTECTED, reason=reason)

    @classmethod
    def resize(cls, task_id: str, new_duration_minutes: int, reason: str = "") -> "Change":
        return cls(task_id, ChangeAction.RESIZED, new_duration_minutes=new_duration_minutes, reason=reason)

    @classmethod
    def move(cls, task_id: str, new_start_time: datetime, reason: str = "") -> "Change":
        return cls(task_id, ChangeAction.MOVED, new_start_time=new_start_time, reason=reason)

    @classmethod
    def move_and_resize(
        cls,
        task_id: str,
        new_start_time: datetime,
        new_duration_minutes: int,
        reason: str = "",
    ) -> "Change":
        return cls(
            task_id,
            ChangeAction.MOVED_AND_RESIZED,
            new_start_time=new_start_time,
            new_duration_minutes=new_duration_minutes,
            reason=reason,
        )

    @classmethod
    def defer(cls, task_id: str, new_date: datetime, reason: str = "") -> "Change":
        return cls(task_id, ChangeAction.DEFERRED, new_date=new_date, reason=reason)

    @classmethod
    def pool(cls, task_id: str, reason: str = "") -> "Change":
        return cls(task_id, ChangeAction.POOLED, reason=reason)

    @classmethod
    def requires_decision(cls, task_id: str, reason: str = "") -> "Change":
        return cls(task_id, ChangeAction.REQUIRES_USER_DECISION, reason=reason)

    @classmethod
    def from_dict(cls, data: dict) -> "Change":
        """Create Change from its JSON representation."""
        if not isinstance(data, dict):
            raise InvalidDataError(f"change record must be an object, got {data!r}")
        try:
            kwargs = {
                "task_id": str(data["task_id"]),
                "action": ChangeAction(data["action"]),
                "reason": data.get("reason", ""),
            }
            for key in ("new_start_time", "new_date"):
                if data.get(key):
                    kwargs[key] = datetime.fromisoformat(data[key])
            if data.get("new_duration_minutes") is not None:
                kwargs["new_duration_minutes"] = int(data["new_duration_minutes"])
            return cls(**kwargs)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidDataError(f"change for {data.get('task_id', '?')}: {e}") from e


@dataclass(frozen=True)
class TaskUpdate:
    """New field values staged for one task."""

    task_id: str
    fields: dict = field(default_factory=dict)

    def apply_to(self, task: Task) -> Task:
        """Return an updated copy; the original task is left alone."""
        return replace(task, **self.fields)


def _checked_duration(task: Task, minutes: int) -> int:
    floor = task.minimum_duration_minutes or 1
    if minutes < floor:
        raise InvalidDataError(f"task {task.id}: cannot resize to {minutes} min (floor {floor})")
    return minutes


def plan_update(change: Change, task: Task, now: datetime) -> TaskUpdate | None:
    """
    Stage the field updates a change makes to a task, without mutating it.

    Protected and pooled changes only touch the modification time.
    Changes that need a user decision are never applied and return None.
    """
    match change.action:
        case ChangeAction.REQUIRES_USER_DECISION:
            return None
        case ChangeAction.PROTECTED | ChangeAction.POOLED:
            fields = {}
        case ChangeAction.RESIZED:
            fields = {"duration_minutes": _checked_duration(task, change.new_duration_minutes)}
        case ChangeAction.MOVED:
            fields = {"start_time": change.new_start_time}
        case ChangeAction.MOVED_AND_RESIZED:
            fields = {
                "start_time": change.new_start_time,
                "duration_minutes": _checked_duration(task, change.new_duration_minutes),
            }
        case ChangeAction.DEFERRED:
            fields = {
                "scheduled_date": change.new_date.date(),
                "start_time": change.new_date,
            }

    fields["updated_at"] = now
    return TaskUpdate(task_id=task.id, fields=fields)
