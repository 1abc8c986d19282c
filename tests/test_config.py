"""Tests for configuration loading."""

import logging

from tempo.config import Config, load_config


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "missing.conf") == Config()


def test_parses_values(tmp_path):
    path = tmp_path / "tempo.conf"
    path.write_text(
        "# Tempo settings\n"
        "EVENING_START_HOUR=19\n"
        "DAY_END_HOUR = 22  # earlier night\n"
        "COMPRESSIBLE_CATEGORIES=identity_habit, optional_goal\n"
        'STORE_FILE="~/tasks # main.json"\n'
        "BEDTIME='22:00'\n"
        "WAKE_TIME=06:15\n"
        "not a setting\n"
        "UNKNOWN_KEY=1\n"
    )
    config = load_config(path)

    assert config.evening_start_hour == 19
    assert config.day_end_hour == 22
    assert config.morning_start_hour == 6
    assert config.compressible_categories == ["identity_habit", "optional_goal"]
    assert config.store_file == "~/tasks # main.json"
    assert config.bedtime == "22:00"
    assert config.wake_time == "06:15"


def test_bad_integer_keeps_default(tmp_path, caplog):
    path = tmp_path / "tempo.conf"
    path.write_text("WEEKS_TO_SEARCH=soon\n")
    with caplog.at_level(logging.WARNING):
        config = load_config(path)
    assert config.weeks_to_search == 2
    assert "WEEKS_TO_SEARCH" in caplog.text
