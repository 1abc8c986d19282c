"""Nightly sleep window - pure functions, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from .conflicts import find_conflicts
from .slots import TimeSlot
from .tasks import Task, as_day


@dataclass
class SleepSchedule:
    """A daily bedtime/wake-time pair plus a wind-down buffer before bed."""

    bedtime_hour: int
    bedtime_minute: int
    wake_hour: int
    wake_minute: int
    buffer_minutes: int = 30

    @classmethod
    def parse(cls, bedtime: str, wake_time: str, buffer_minutes: int = 30) -> "SleepSchedule":
        """Build from "HH:MM" strings. Raises ValueError on bad input."""
        bed = time.fromisoformat(bedtime)
        wake = time.fromisoformat(wake_time)
        return cls(bed.hour, bed.minute, wake.hour, wake.minute, buffer_minutes)

    def bedtime_on(self, day: date | datetime) -> datetime:
        return datetime.combine(as_day(day), time(self.bedtime_hour, self.bedtime_minute))

    def wake_time_after(self, day: date | datetime) -> datetime:
        """Wake-up ending the night that starts on `day`."""
        bedtime = self.bedtime_on(day)
        wake = datetime.combine(as_day(day), time(self.wake_hour, self.wake_minute))
        if wake <= bedtime:
            wake += timedelta(days=1)
        return wake

    def wind_down_start(self, day: date | datetime) -> datetime:
        return self.bedtime_on(day) - timedelta(minutes=self.buffer_minutes)

    def window_for(self, day: date | datetime) -> TimeSlot:
        """The night's sleep interval, starting at bedtime on `day`."""
        return TimeSlot(start=self.bedtime_on(day), end=self.wake_time_after(day))

    def format(self) -> str:
        return (
            f"{self.bedtime_hour:02d}:{self.bedtime_minute:02d}-"
            f"{self.wake_hour:02d}:{self.wake_minute:02d} "
            f"(wind down {self.buffer_minutes} min)"
        )


DEFAULT_SLEEP_SCHEDULE = SleepSchedule(bedtime_hour=22, bedtime_minute=30, wake_hour=6, wake_minute=30)


def find_sleep_conflicts(
    day: date | datetime,
    tasks: list[Task],
    schedule: SleepSchedule,
) -> list[Task]:
    """Tasks running into the night's sleep window."""
    return find_conflicts(schedule.window_for(day), tasks)
