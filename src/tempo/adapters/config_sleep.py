"""Configuration-backed sleep schedule adapter."""

import logging

from tempo.config import Config
from tempo.core.sleep import SleepSchedule

logger = logging.getLogger(__name__)


class ConfigSleepProvider:
    """
    Sleep schedule read from tempo.conf.

    Implements SleepScheduleProvider protocol. Returns None until both
    BEDTIME and WAKE_TIME are set.
    """

    def __init__(self, config: Config):
        self.config = config

    def fetch_schedule(self) -> SleepSchedule | None:
        if not self.config.bedtime or not self.config.wake_time:
            return None
        try:
            return SleepSchedule.parse(
                self.config.bedtime,
                self.config.wake_time,
                buffer_minutes=self.config.sleep_buffer_minutes,
            )
        except ValueError:
            logger.warning(
                f"Invalid sleep times: BEDTIME={self.config.bedtime!r} WAKE_TIME={self.config.wake_time!r}"
            )
            return None
