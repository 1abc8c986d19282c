"""Configuration management for Tempo."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.slots import (
    DAY_END_HOUR,
    DEFAULT_WEEKS_TO_SEARCH,
    EVENING_START_HOUR,
    MORNING_START_HOUR,
    WEEKEND_START_HOUR,
)

logger = logging.getLogger(__name__)

TEMPO_HOME = Path(os.environ.get("TEMPO_HOME", Path.home() / "tempo"))
CONFIG_FILE = TEMPO_HOME / "config" / "tempo.conf"
DATA_DIR = TEMPO_HOME / "data"


@dataclass
class Config:
    """Tempo configuration."""

    morning_start_hour: int = MORNING_START_HOUR
    evening_start_hour: int = EVENING_START_HOUR
    day_end_hour: int = DAY_END_HOUR
    weekend_start_hour: int = WEEKEND_START_HOUR
    weeks_to_search: int = DEFAULT_WEEKS_TO_SEARCH
    compressible_categories: list[str] = field(default_factory=lambda: ["identity_habit"])
    store_file: str = ""
    # Sleep settings; empty bedtime means sleep tracking is off
    bedtime: str = ""
    wake_time: str = ""
    sleep_buffer_minutes: int = 30


_INT_KEYS = {
    "morning_start_hour",
    "evening_start_hour",
    "day_end_hour",
    "weekend_start_hour",
    "weeks_to_search",
    "sleep_buffer_minutes",
}


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from tempo.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        if key in _INT_KEYS:
            try:
                setattr(config, key, int(value))
            except ValueError:
                logger.warning(f"Ignoring non-integer {key.upper()}: {value!r}")
            continue

        match key:
            case "compressible_categories":
                config.compressible_categories = [c.strip() for c in value.split(",") if c.strip()]
            case "store_file":
                config.store_file = value
            case "bedtime":
                config.bedtime = value
            case "wake_time":
                config.wake_time = value

    return config
