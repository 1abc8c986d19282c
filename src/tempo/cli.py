"""Tempo CLI - day scheduling and reshuffle engine."""

import json
import logging
import sys
from dataclasses import replace
from datetime import date, datetime, time, timedelta

import click

from .config import load_config
from .core.conflicts import find_conflicts, find_overlapping_pairs, would_cause_conflict
from .core.slots import (
    TimeSlot,
    find_available_slots,
    find_evening_slots,
    find_first_available_slot,
    find_weekend_slots,
)
from .errors import TempoError
from .workflows import (
    apply_changes,
    get_sleep_provider,
    get_store,
    load_changes,
    overflow_report,
    sleep_conflicts,
)

DATE = click.DateTime(formats=["%Y-%m-%d"])
CLOCK = click.DateTime(formats=["%H:%M"])
MOMENT = click.DateTime(formats=["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"])


def _day(value: datetime | None) -> date:
    return value.date() if value else date.today()


def _at(day: date, clock: datetime) -> datetime:
    return datetime.combine(day, time(clock.hour, clock.minute))


def _fail(e: Exception | str) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _show_slots(slots: list[TimeSlot], as_json: bool, empty_msg: str = "No free slots.") -> None:
    """Shared slot display logic."""
    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "start": s.start.isoformat(),
                        "end": s.end.isoformat(),
                        "duration_minutes": s.duration_minutes(),
                    }
                    for s in slots
                ],
                indent=2,
            )
        )
        return

    if not slots:
        click.echo(empty_msg)
        return

    current_date = None
    for slot in slots:
        slot_date = slot.start.date()
        if slot_date != current_date:
            if current_date is not None:
                click.echo()
            click.echo(f"### {slot_date.strftime('%A, %B %d')}")
            current_date = slot_date
        click.echo(f"  {slot.format()}")


@click.group()
@click.version_option(package_name="tempo")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Tempo - day scheduling and reshuffle engine."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--date", "day", type=DATE, help="Day to search (default today)")
@click.option("--evening", is_flag=True, help="Only the evening window")
@click.option("--min", "min_duration", type=int, default=0, help="Minimum slot length in minutes")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def slots(day: datetime | None, evening: bool, min_duration: int, as_json: bool):
    """Show free time slots for a day."""
    config = load_config()
    target = _day(day)
    try:
        tasks = get_store(config).fetch_day(target)
    except TempoError as e:
        _fail(e)

    if evening:
        found = find_evening_slots(
            target, tasks, start_hour=config.evening_start_hour, end_hour=config.day_end_hour
        )
        found = [s for s in found if s.duration_minutes() >= min_duration]
    else:
        found = find_available_slots(
            target,
            tasks,
            start_hour=config.morning_start_hour,
            end_hour=config.day_end_hour,
            min_duration=min_duration,
        )
    _show_slots(found, as_json)


@main.command("first-slot")
@click.argument("duration", type=int)
@click.option("--date", "day", type=DATE, help="Day to search (default today)")
@click.option("--after", type=CLOCK, help="Earliest start, HH:MM")
def first_slot(duration: int, day: datetime | None, after: datetime | None):
    """Find the first slot that fits DURATION minutes."""
    config = load_config()
    target = _day(day)
    try:
        tasks = get_store(config).fetch_day(target)
    except TempoError as e:
        _fail(e)

    slot = find_first_available_slot(
        duration,
        target,
        tasks,
        after=_at(target, after) if after else None,
        start_hour=config.morning_start_hour,
        end_hour=config.day_end_hour,
    )
    if slot is None:
        click.echo(f"No slot fits {duration} min.")
        sys.exit(1)
    click.echo(slot.format())


@main.command()
@click.argument("duration", type=int)
@click.option("--weeks", type=int, help="Weeks to search (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def weekend(duration: int, weeks: int | None, as_json: bool):
    """Find weekend slots that fit DURATION minutes."""
    config = load_config()
    weeks = weeks or config.weeks_to_search
    start = date.today()
    try:
        tasks = get_store(config).fetch_range(start, start + timedelta(weeks=weeks))
    except TempoError as e:
        _fail(e)

    found = find_weekend_slots(
        start,
        duration,
        tasks,
        weeks=weeks,
        start_hour=config.weekend_start_hour,
        end_hour=config.day_end_hour,
    )
    _show_slots(found, as_json, "No weekend slots fit.")


@main.command()
@click.option("--date", "day", type=DATE, help="Day to check (default today)")
@click.option("--at", "at_clock", type=CLOCK, help="Candidate start, HH:MM")
@click.option("--duration", type=int, help="Candidate length in minutes")
@click.option("--task", "task_id", help="Task to move to --at")
def conflicts(day: datetime | None, at_clock: datetime | None, duration: int | None, task_id: str | None):
    """Show double bookings, or check a candidate time."""
    config = load_config()
    target = _day(day)
    try:
        store = get_store(config)
        tasks = store.fetch_day(target)
    except TempoError as e:
        _fail(e)

    if at_clock and task_id:
        task = store.fetch_task(task_id)
        if task is None:
            _fail(f"Task {task_id} not found")
        start = _at(target, at_clock)
        if would_cause_conflict(task, start, tasks):
            click.echo(f"Moving \"{task.title}\" to {start.strftime('%H:%M')} would conflict.")
            sys.exit(1)
        click.echo(f"\"{task.title}\" can move to {start.strftime('%H:%M')}.")
        return

    if at_clock:
        start = _at(target, at_clock)
        try:
            window = TimeSlot(start=start, end=start + timedelta(minutes=duration or 0))
        except TempoError as e:
            _fail(e)
        clashes = find_conflicts(window, tasks)
        if not clashes:
            click.echo(f"{window.format()} is free.")
            return
        for task in clashes:
            click.echo(f"  {task.start_time.strftime('%H:%M')} {task.title} ({task.duration_minutes} min)")
        sys.exit(1)

    pairs = find_overlapping_pairs(tasks)
    if not pairs:
        click.echo("No conflicts.")
        return
    for first, second in pairs:
        click.echo(
            f"  {first.start_time.strftime('%H:%M')} {first.title} overlaps "
            f"{second.start_time.strftime('%H:%M')} {second.title}"
        )


@main.command()
@click.option("--now", type=MOMENT, help="Current moment, YYYY-MM-DDTHH:MM (default now)")
@click.option("--cutoff", type=click.IntRange(0, 24), help="Cutoff hour (default EVENING_START_HOUR)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def overflow(now: datetime | None, cutoff: int | None, as_json: bool):
    """Show overflow and compressible minutes before the evening."""
    config = load_config()
    if cutoff is not None:
        config = replace(config, evening_start_hour=cutoff)
    try:
        report = overflow_report(get_store(config), config, now=now)
    except TempoError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "cutoff": report.cutoff.isoformat(),
                    "available_minutes": report.available_minutes,
                    "needed_minutes": report.needed_minutes,
                    "overflow_minutes": report.overflow_minutes,
                    "compressible_minutes": report.compressible_minutes,
                },
                indent=2,
            )
        )
        return

    click.echo(f"Until {report.cutoff.strftime('%H:%M')}: {report.needed_minutes} min planned, "
               f"{report.available_minutes} min available")
    if not report.has_overflow:
        click.echo("Everything fits.")
        return
    click.echo(f"Overflow: {report.overflow_minutes} min")
    click.echo(f"Compressible: {report.compressible_minutes} min")


@main.command()
@click.argument("changes_file", type=click.Path(exists=True, dir_okay=False))
def apply(changes_file: str):
    """Apply a JSON list of decided changes as one batch."""
    config = load_config()
    try:
        changes = load_changes(changes_file)
        applied = apply_changes(get_store(config), changes)
    except TempoError as e:
        _fail(e)
    click.echo(f"Applied {applied} of {len(changes)} change(s).")


@main.command()
@click.option("--date", "day", type=DATE, help="Night to check (default tonight)")
def sleep(day: datetime | None):
    """Show the sleep window and tasks that run into it."""
    config = load_config()
    target = _day(day)
    provider = get_sleep_provider(config)
    schedule = provider.fetch_schedule()
    if schedule is None:
        click.echo("Sleep schedule not configured. Set BEDTIME and WAKE_TIME in tempo.conf.")
        return

    click.echo(f"Sleep: {schedule.format()}")
    click.echo(f"Wind down from {schedule.wind_down_start(target).strftime('%H:%M')}")
    try:
        clashes = sleep_conflicts(get_store(config), provider, target)
    except TempoError as e:
        _fail(e)
    for task in clashes:
        click.echo(f"  {task.start_time.strftime('%H:%M')} {task.title} runs into sleep")


@main.command()
@click.argument("task_id")
@click.option("--undo", is_flag=True, help="Mark as not done")
def done(task_id: str, undo: bool):
    """Mark a task as completed."""
    config = load_config()
    try:
        store = get_store(config)
        if undo:
            store.mark_incomplete(task_id)
        else:
            store.mark_completed(task_id)
    except TempoError as e:
        _fail(e)
    click.echo(f"Task {task_id} marked {'not done' if undo else 'done'}.")
