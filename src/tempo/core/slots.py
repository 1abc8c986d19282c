"""Free-time slot finding - pure functions, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from tempo.errors import InvalidRangeError

from .tasks import Task, as_day, sort_by_start, tasks_on_day

MORNING_START_HOUR = 6
EVENING_START_HOUR = 18
DAY_END_HOUR = 23
WEEKEND_START_HOUR = 8
DEFAULT_WEEKS_TO_SEARCH = 2


@dataclass(frozen=True)
class TimeSlot:
    """A half-open interval [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidRangeError(
                f"slot start {self.start.isoformat()} is not before end {self.end.isoformat()}"
            )

    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() / 60)

    def format(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')} ({self.duration_minutes()} min)"

    def contains(self, dt: datetime) -> bool:
        """Check if a datetime falls within this slot."""
        return self.start <= dt < self.end

    def overlaps(self, other: "TimeSlot") -> bool:
        """Check if this slot overlaps with another. Touching endpoints do not count."""
        return self.start < other.end and self.end > other.start

    def overlaps_task(self, task: Task) -> bool:
        """Check if this slot overlaps a task's occupied interval."""
        return self.start < task.end_time and self.end > task.start_time


def at_hour(day: date, hour: int) -> datetime:
    """The instant `hour` hours into `day` (24 means the following midnight)."""
    return datetime.combine(day, time(0, 0)) + timedelta(hours=hour)


def find_available_slots(
    day: date | datetime,
    tasks: list[Task],
    start_hour: int = MORNING_START_HOUR,
    end_hour: int = DAY_END_HOUR,
    min_duration: int = 0,
) -> list[TimeSlot]:
    """
    Find free slots between a day's tasks inside an hour window.

    Pure function - no I/O.

    Args:
        day: Calendar day to search
        tasks: Any tasks; only those scheduled on `day` are considered
        start_hour: Start of the window (hour, 24h format)
        end_hour: End of the window (hour, 24h format)
        min_duration: Drop slots shorter than this many minutes

    Returns:
        Free TimeSlots in chronological order, clipped to the window
    """
    day = as_day(day)
    day_tasks = sort_by_start(tasks_on_day(tasks, day))

    window_start = at_hour(day, start_hour)
    window_end = at_hour(day, end_hour)

    free_slots = []
    current_time = window_start

    for task in day_tasks:
        # Gap before this task? Tasks past the window end close it off.
        task_start = min(task.start_time, window_end)
        if current_time < task_start:
            free_slots.append(TimeSlot(start=current_time, end=task_start))

        current_time = max(current_time, task.end_time)
        if current_time >= window_end:
            break

    if current_time < window_end:
        free_slots.append(TimeSlot(start=current_time, end=window_end))

    if min_duration:
        free_slots = [s for s in free_slots if s.duration_minutes() >= min_duration]
    return free_slots


def find_evening_slots(
    day: date | datetime,
    tasks: list[Task],
    start_hour: int = EVENING_START_HOUR,
    end_hour: int = DAY_END_HOUR,
) -> list[TimeSlot]:
    """Find free slots in the evening window."""
    return find_available_slots(day, tasks, start_hour=start_hour, end_hour=end_hour)


def find_first_available_slot(
    duration_minutes: int,
    day: date | datetime,
    tasks: list[Task],
    after: datetime | None = None,
    start_hour: int = MORNING_START_HOUR,
    end_hour: int = DAY_END_HOUR,
) -> TimeSlot | None:
    """
    First slot starting at or after `after` that can hold `duration_minutes`.

    `after` defaults to the start of the day. Returns None if nothing fits.
    """
    slots = find_available_slots(day, tasks, start_hour=start_hour, end_hour=end_hour)
    if after is None:
        after = at_hour(as_day(day), 0)

    for slot in slots:
        if slot.start >= after and slot.duration_minutes() >= duration_minutes:
            return slot
    return None


def evening_free_minutes(day: date | datetime, tasks: list[Task]) -> int:
    """Total free minutes in the evening window."""
    return sum(s.duration_minutes() for s in find_evening_slots(day, tasks))


def evening_scheduled_minutes(day: date | datetime, tasks: list[Task]) -> int:
    """Total minutes of evening-flagged tasks on a day."""
    return sum(t.duration_minutes for t in tasks_on_day(tasks, day) if t.is_evening_task)


# ============== Weekends ==============


def is_weekend(day: date | datetime) -> bool:
    """Saturday or Sunday."""
    return as_day(day).weekday() >= 5


def next_weekend(after: date | datetime) -> date:
    """First Saturday or Sunday strictly after the given day."""
    check = as_day(after) + timedelta(days=1)
    while not is_weekend(check):
        check += timedelta(days=1)
    return check


def _weekend_days(start_date: date, weeks: int) -> list[date]:
    """Weekend days from start_date through start_date + weeks (inclusive)."""
    days = (start_date + timedelta(days=offset) for offset in range(weeks * 7 + 1))
    return [d for d in days if is_weekend(d)]


def find_weekend_slots(
    start_date: date | datetime,
    duration_minutes: int,
    tasks: list[Task],
    weeks: int = DEFAULT_WEEKS_TO_SEARCH,
    start_hour: int = WEEKEND_START_HOUR,
    end_hour: int = DAY_END_HOUR,
) -> list[TimeSlot]:
    """
    Find weekend slots that can hold `duration_minutes` over the next N weeks.

    Weekends get a later window start. Slots come back in day order.
    """
    slots = []
    for day in _weekend_days(as_day(start_date), weeks):
        slots.extend(
            find_available_slots(
                day,
                tasks,
                start_hour=start_hour,
                end_hour=end_hour,
                min_duration=duration_minutes,
            )
        )
    return slots


def weekend_free_minutes(
    start_date: date | datetime,
    tasks: list[Task],
    weeks: int = DEFAULT_WEEKS_TO_SEARCH,
    start_hour: int = WEEKEND_START_HOUR,
    end_hour: int = DAY_END_HOUR,
) -> int:
    """Total free weekend minutes over the next N weeks."""
    total = 0
    for day in _weekend_days(as_day(start_date), weeks):
        slots = find_available_slots(day, tasks, start_hour=start_hour, end_hour=end_hour)
        total += sum(s.duration_minutes() for s in slots)
    return total
