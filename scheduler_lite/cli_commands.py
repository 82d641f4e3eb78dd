"""Command implementations behind the scheduler_lite CLI.

The view and reminder commands load a snapshot from the CSV store, run the
recurrence core over it and print plain text. The management commands
(add, update, delete, remind, recur) check for time conflicts before
writing and print a one-line result.
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from .config_loader import Config
from .lite_backup import backup, restore
from .lite_calendar_views import (
    day_view,
    month_view,
    render_day,
    render_month,
    render_week,
    repeat_labels_for,
    week_start_for,
    week_view,
)
from .lite_interval_parser import describe_period, parse_interval
from .lite_models import AdditionalEventFields, Event, RecurrenceRule, ReminderOffset
from .lite_reminder_service import format_duration, resolve_next_reminder
from .lite_store import CsvCalendarStore
from .time_utils import now_local

logger = logging.getLogger(__name__)


def parse_date_arg(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from exc


def parse_month_arg(value: str) -> tuple[int, int]:
    """argparse type for YYYY-MM months."""
    try:
        year_text, month_text = value.split("-", 1)
        year, month = int(year_text), int(month_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid month {value!r}, expected YYYY-MM") from exc
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"invalid month {value!r}, expected YYYY-MM")
    return year, month


def parse_datetime_arg(value: str) -> datetime:
    """argparse type for YYYY-MM-DDTHH:MM timestamps."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid date and time {value!r}, expected YYYY-MM-DDTHH:MM"
        ) from exc


def parse_interval_arg(value: str) -> str:
    """argparse type for recurrence intervals; returns the text as stored."""
    if parse_interval(value) is None:
        raise argparse.ArgumentTypeError(
            f"invalid interval {value!r}, expected a number with d, w, m or y (e.g. 2w)"
        )
    return value.strip().lower()


def parse_minutes_arg(value: str) -> int:
    try:
        minutes = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid minutes {value!r}") from exc
    if minutes < 0:
        raise argparse.ArgumentTypeError("Minutes cannot be negative.")
    return minutes


def parse_count_arg(value: str) -> int:
    try:
        count = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid count {value!r}") from exc
    if count < 1:
        raise argparse.ArgumentTypeError("Count must be at least 1.")
    return count


def first_day_of_week(day: date, week_starts_on: str) -> date:
    """Start of the week containing ``day`` for the configured first weekday."""
    if week_starts_on == "sunday":
        return day - timedelta(days=(day.weekday() + 1) % 7)
    return week_start_for(day)


def cmd_day(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    day = args.date or now_local().date()
    view = day_view(
        store.load_events(), store.load_recurrence_rules(), day, store.load_additional_map()
    )
    print(render_day(view))
    return 0


def cmd_week(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    start = first_day_of_week(args.date or now_local().date(), cfg.week_starts_on)
    days = week_view(
        store.load_events(), store.load_recurrence_rules(), start, store.load_additional_map()
    )
    print(render_week(days))
    return 0


def cmd_month(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    if args.month:
        year, month = args.month
    else:
        today = now_local().date()
        year, month = today.year, today.month
    days = month_view(
        store.load_events(),
        store.load_recurrence_rules(),
        year,
        month,
        store.load_additional_map(),
    )
    print(render_month(days))
    return 0


def cmd_next_reminder(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    now = now_local()
    info = resolve_next_reminder(
        store.load_events(), store.load_recurrence_rules(), store.load_reminders(), now
    )
    if info is None:
        print("No upcoming reminders.")
        return 0

    print(f"Next reminder: {info.event.title}")
    print(f"  Event starts: {info.occurrence_start.strftime('%Y-%m-%d %H:%M')}")
    print(f"  Notify at:    {info.notify_at.strftime('%Y-%m-%d %H:%M')}")
    print(f"  In:           {format_duration(info.time_until_notify)}")
    return 0


def cmd_backup(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    path = backup(store, args.path or cfg.backup_path)
    print(f"Backup completed: {path}")
    return 0


def cmd_restore(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    result = restore(store, args.path or cfg.backup_path)
    for skipped in result.skipped_conflicts:
        print(f"Conflict detected: the event {skipped.title} was not added.")
    print(f"Restore completed: {len(result.restored)} events restored.")
    return 0


def _rule_from_args(event_id: int, args: argparse.Namespace) -> Optional[RecurrenceRule]:
    if not args.every:
        return None
    return RecurrenceRule(
        event_id=event_id,
        interval=args.every,
        recurrence_count=args.count or 0,
        end_date=args.until,
    )


def _merge_additional(
    store: CsvCalendarStore, event_id: int, location: Optional[str], category: Optional[str]
) -> None:
    """Store location and category, keeping whichever of them is not given."""
    if location is None and category is None:
        return
    current = store.load_additional_map().get(event_id) or AdditionalEventFields(event_id=event_id)
    store.upsert_additional_fields(
        AdditionalEventFields(
            event_id=event_id,
            location=current.location if location is None else location.strip() or None,
            category=current.category if category is None else category.strip() or None,
        )
    )


def cmd_add(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    if args.start >= args.end:
        print("Start time must be before end time.")
        return 1
    if not args.every and (args.count or args.until):
        print("--count and --until need --every.")
        return 1

    events = store.load_events()
    event = Event(
        event_id=store.next_event_id(events),
        title=args.title,
        description=args.description,
        start=args.start,
        end=args.end,
    )
    if store.has_conflict(event, events):
        print("Time conflict detected. Event not added.")
        return 1

    store.add_event(event)
    rule = _rule_from_args(event.event_id, args)
    if rule is not None:
        store.upsert_recurrence_rule(rule)
    _merge_additional(store, event.event_id, args.location, args.category)
    if args.remind is not None:
        store.upsert_reminder(ReminderOffset(event_id=event.event_id, minutes_before=args.remind))

    print(f"Event added with ID {event.event_id}" + (" (recurring)" if rule else ""))
    return 0


def cmd_update(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    events = store.load_events()
    current = next((e for e in events if e.event_id == args.event_id), None)
    if current is None:
        print("Event not found.")
        return 1

    changes = {
        name: value
        for name, value in (
            ("title", args.title),
            ("description", args.description),
            ("start", args.start),
            ("end", args.end),
        )
        if value is not None
    }
    updated = current.model_copy(update=changes)
    if updated.start >= updated.end:
        print("Start time must be before end time.")
        return 1
    if store.has_conflict(updated, events):
        print("Time conflict detected. Update cancelled.")
        return 1

    store.update_event(updated)
    _merge_additional(store, updated.event_id, args.location, args.category)
    print("Event updated.")
    return 0


def cmd_delete(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    had_rule = any(r.event_id == args.event_id for r in store.load_recurrence_rules())
    if not store.delete_event(args.event_id):
        print("Event not found.")
        return 1
    print("Event deleted." + (" (Recurring entry removed.)" if had_rule else ""))
    return 0


def cmd_search(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    if args.title is not None:
        if not args.title.strip():
            print("Title cannot be empty.")
            return 1
        matches = store.search_by_title(args.title)
    elif args.date is not None:
        matches = store.search_by_date(args.date)
    elif args.range is not None:
        matches = store.search_by_date_range(*args.range)
    elif args.location is not None:
        matches = store.search_by_location(args.location)
    else:
        matches = store.search_by_category(args.category)

    if not matches:
        print("No events found.")
        return 0

    labels = repeat_labels_for(store.load_recurrence_rules())
    for event in matches:
        print(f"[{event.event_id}] {event.title}")
        print(
            f"    {event.start.strftime('%Y-%m-%d %H:%M')} -> {event.end.strftime('%Y-%m-%d %H:%M')}"
        )
        print(f"    {labels.get(event.event_id, describe_period(None))}")
        print()
    return 0


def cmd_remind(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    if store.get_event(args.event_id) is None:
        print("Event not found.")
        return 1

    if args.remove:
        if store.delete_reminder(args.event_id):
            print("Reminder deleted.")
        else:
            print("No reminder found for that event.")
        return 0

    existed = any(r.event_id == args.event_id for r in store.load_reminders())
    store.upsert_reminder(ReminderOffset(event_id=args.event_id, minutes_before=args.minutes))
    action = "updated" if existed else "added"
    print(f"Reminder {action} ({args.minutes} minutes before the event)")
    return 0


def cmd_recur(args: argparse.Namespace, cfg: Config, store: CsvCalendarStore) -> int:
    if store.get_event(args.event_id) is None:
        print("Event not found.")
        return 1

    if args.remove:
        if store.delete_recurrence_rule(args.event_id):
            print("Recurring settings removed.")
        else:
            print("No recurring settings found for that event.")
        return 0

    rule = _rule_from_args(args.event_id, args)
    store.upsert_recurrence_rule(rule)
    print(f"Recurring settings updated ({describe_period(parse_interval(rule.interval))}).")
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace, Config, CsvCalendarStore], int]] = {
    "day": cmd_day,
    "week": cmd_week,
    "month": cmd_month,
    "next-reminder": cmd_next_reminder,
    "backup": cmd_backup,
    "restore": cmd_restore,
    "add": cmd_add,
    "update": cmd_update,
    "delete": cmd_delete,
    "search": cmd_search,
    "remind": cmd_remind,
    "recur": cmd_recur,
}


def dispatch(args: argparse.Namespace, cfg: Config) -> int:
    """Run the command selected in ``args`` against the configured store."""
    command = COMMANDS[args.command]
    store = CsvCalendarStore(cfg.data_dir)
    logger.debug("Running %s against %s", args.command, store.data_dir)
    return command(args, cfg, store)
