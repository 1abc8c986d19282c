"""Sleep schedule provider interface."""

from typing import Protocol

from tempo.core.sleep import SleepSchedule


class SleepScheduleProvider(Protocol):
    """Read-only source of the user's bedtime and wake time."""

    def fetch_schedule(self) -> SleepSchedule | None:
        """Return the schedule, or None if sleep tracking is off."""
        ...
