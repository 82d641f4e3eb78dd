"""CSV-backed event store for Scheduler Lite.

Stores events, recurrence rules, reminders and additional fields in four
CSV files inside a data directory. The recurrence core only needs the
``load_*`` methods; the remaining methods back the command-line tools.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError

from .lite_exceptions import StoreError
from .lite_models import AdditionalEventFields, Event, RecurrenceRule, ReminderOffset

logger = logging.getLogger(__name__)

EVENT_FILE = "event.csv"
RECURRENT_FILE = "recurrent.csv"
REMINDER_FILE = "reminder.csv"
ADDITIONAL_FILE = "additional.csv"

EVENT_HEADER = ["eventId", "title", "description", "startDateTime", "endDateTime"]
RECURRENT_HEADER = ["eventId", "recurrentInterval", "recurrentTimes", "recurrentEndDate"]
REMINDER_HEADER = ["eventId", "minutesBefore"]
# Header spelling kept as existing data files have it.
ADDITIONAL_HEADER = ["eventId", "Location", "Catagory"]

# Written in place of a missing end date.
NO_END_DATE = "0"

T = TypeVar("T")


def format_datetime(value: datetime) -> str:
    """Format a datetime the way the CSV files store it (minute precision)."""
    if value.second or value.microsecond:
        return value.isoformat()
    return value.strftime("%Y-%m-%dT%H:%M")


def parse_end_date(raw: str) -> date | None:
    """Parse a stored end date; ``"0"`` or empty means no end date."""
    raw = raw.strip()
    if not raw or raw == NO_END_DATE:
        return None
    return date.fromisoformat(raw)


def event_from_row(row: list[str]) -> Event:
    """Build an Event from a CSV row.

    Descriptions containing commas written by older versions may span
    several columns; everything between the title and the two timestamps is
    joined back together.
    """
    if len(row) < 5:
        raise ValueError(f"expected at least 5 columns, got {len(row)}")
    return Event(
        event_id=int(row[0].strip()),
        title=row[1].strip(),
        description=",".join(row[2:-2]).strip(),
        start=datetime.fromisoformat(row[-2].strip()),
        end=datetime.fromisoformat(row[-1].strip()),
    )


def event_to_row(event: Event) -> list[str]:
    return [
        str(event.event_id),
        event.title,
        event.description or "",
        format_datetime(event.start),
        format_datetime(event.end),
    ]


def rule_from_row(row: list[str]) -> RecurrenceRule:
    if len(row) < 4:
        raise ValueError(f"expected 4 columns, got {len(row)}")
    return RecurrenceRule(
        event_id=int(row[0].strip()),
        interval=row[1].strip(),
        recurrence_count=int(row[2].strip() or 0),
        end_date=parse_end_date(row[3]),
    )


def rule_to_row(rule: RecurrenceRule) -> list[str]:
    return [
        str(rule.event_id),
        rule.interval or "",
        str(rule.recurrence_count),
        rule.end_date.isoformat() if rule.end_date else NO_END_DATE,
    ]


def reminder_from_row(row: list[str]) -> ReminderOffset:
    if len(row) < 2:
        raise ValueError(f"expected 2 columns, got {len(row)}")
    return ReminderOffset(event_id=int(row[0].strip()), minutes_before=int(row[1].strip()))


def reminder_to_row(reminder: ReminderOffset) -> list[str]:
    return [str(reminder.event_id), str(reminder.minutes_before)]


def additional_from_row(row: list[str]) -> AdditionalEventFields:
    if len(row) < 3:
        raise ValueError(f"expected 3 columns, got {len(row)}")
    location = row[1].strip()
    category = row[2].strip()
    return AdditionalEventFields(
        event_id=int(row[0].strip()),
        location=location or None,
        category=category or None,
    )


def additional_to_row(fields: AdditionalEventFields) -> list[str]:
    return [str(fields.event_id), fields.location or "", fields.category or ""]


def parse_rows(
    rows: Iterable[list[str]],
    parse: Callable[[list[str]], T],
    source: str,
) -> list[T]:
    """Parse data rows, skipping blank and malformed ones with a warning."""
    records: list[T] = []
    for line_no, row in enumerate(rows, start=2):
        if not row or not any(cell.strip() for cell in row):
            continue
        try:
            records.append(parse(row))
        except (ValueError, ValidationError) as e:
            logger.warning("Skipping malformed row %d in %s: %s", line_no, source, e)
    return records


class CsvCalendarStore:
    """Flat-file store rooted at ``data_dir``."""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    # ------------------------------------------------------------------ #
    # Low-level file access
    # ------------------------------------------------------------------ #

    def path_for(self, filename: str) -> Path:
        return self.data_dir / filename

    def read_rows(self, filename: str) -> list[list[str]]:
        """Return the CSV rows of a data file, header included.

        A missing file reads as []. Quoted fields may span several lines.
        """
        path = self.path_for(filename)
        if not path.exists():
            logger.debug("Data file %s not found; treating as empty", path)
            return []
        try:
            with path.open("r", encoding="utf-8", newline="") as fh:
                return list(csv.reader(fh))
        except OSError as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

    def _read(self, filename: str, parse: Callable[[list[str]], T]) -> list[T]:
        rows = iter(self.read_rows(filename))
        # First row is the header
        if next(rows, None) is None:
            return []
        return parse_rows(rows, parse, filename)

    def _write(self, filename: str, header: list[str], rows: Iterable[list[str]]) -> None:
        path = self.path_for(filename)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="") as fh:
                writer = csv.writer(fh, lineterminator="\n")
                writer.writerow(header)
                writer.writerows(rows)
        except OSError as e:
            raise StoreError(f"Failed to write {path}: {e}") from e
        logger.debug("Wrote %s", path)

    # ------------------------------------------------------------------ #
    # Read contract used by the recurrence core
    # ------------------------------------------------------------------ #

    def load_events(self) -> list[Event]:
        return self._read(EVENT_FILE, event_from_row)

    def load_recurrence_rules(self) -> list[RecurrenceRule]:
        return self._read(RECURRENT_FILE, rule_from_row)

    def load_reminders(self) -> list[ReminderOffset]:
        return self._read(REMINDER_FILE, reminder_from_row)

    def load_additional_fields(self) -> list[AdditionalEventFields]:
        return self._read(ADDITIONAL_FILE, additional_from_row)

    def load_additional_map(self) -> dict[int, AdditionalEventFields]:
        """Additional fields keyed by event ID (later rows win)."""
        return {fields.event_id: fields for fields in self.load_additional_fields()}

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def save_events(self, events: Iterable[Event]) -> None:
        self._write(EVENT_FILE, EVENT_HEADER, (event_to_row(e) for e in events))

    def save_recurrence_rules(self, rules: Iterable[RecurrenceRule]) -> None:
        self._write(RECURRENT_FILE, RECURRENT_HEADER, (rule_to_row(r) for r in rules))

    def save_reminders(self, reminders: Iterable[ReminderOffset]) -> None:
        self._write(REMINDER_FILE, REMINDER_HEADER, (reminder_to_row(r) for r in reminders))

    def save_additional_fields(self, fields: Iterable[AdditionalEventFields]) -> None:
        self._write(ADDITIONAL_FILE, ADDITIONAL_HEADER, (additional_to_row(f) for f in fields))

    def add_event(self, event: Event) -> None:
        events = self.load_events()
        events.append(event)
        self.save_events(events)
        logger.info("Added event id=%d title=%r", event.event_id, event.title)

    def update_event(self, updated: Event) -> bool:
        """Replace the event with the same ID. Returns False if not found."""
        events = self.load_events()
        for i, event in enumerate(events):
            if event.event_id == updated.event_id:
                events[i] = updated
                self.save_events(events)
                logger.info("Updated event id=%d", updated.event_id)
                return True
        logger.warning("Event id=%d not found for update", updated.event_id)
        return False

    def delete_event(self, event_id: int) -> bool:
        """Delete an event and every record linked to it."""
        events = self.load_events()
        remaining = [e for e in events if e.event_id != event_id]
        if len(remaining) == len(events):
            logger.warning("Event id=%d not found for deletion", event_id)
            return False

        self.save_events(remaining)
        self.save_recurrence_rules(r for r in self.load_recurrence_rules() if r.event_id != event_id)
        self.save_reminders(r for r in self.load_reminders() if r.event_id != event_id)
        self.save_additional_fields(
            f for f in self.load_additional_fields() if f.event_id != event_id
        )
        logger.info("Deleted event id=%d and its linked records", event_id)
        return True

    def upsert_recurrence_rule(self, rule: RecurrenceRule) -> None:
        rules = [r for r in self.load_recurrence_rules() if r.event_id != rule.event_id]
        rules.append(rule)
        self.save_recurrence_rules(rules)

    def delete_recurrence_rule(self, event_id: int) -> bool:
        """Remove the rule of an event. Returns False if it had none."""
        rules = self.load_recurrence_rules()
        remaining = [r for r in rules if r.event_id != event_id]
        if len(remaining) == len(rules):
            return False
        self.save_recurrence_rules(remaining)
        return True

    def upsert_reminder(self, reminder: ReminderOffset) -> None:
        reminders = [r for r in self.load_reminders() if r.event_id != reminder.event_id]
        reminders.append(reminder)
        self.save_reminders(reminders)

    def delete_reminder(self, event_id: int) -> bool:
        """Remove the reminder of an event. Returns False if it had none."""
        reminders = self.load_reminders()
        remaining = [r for r in reminders if r.event_id != event_id]
        if len(remaining) == len(reminders):
            return False
        self.save_reminders(remaining)
        return True

    def upsert_additional_fields(self, fields: AdditionalEventFields) -> None:
        rows = [f for f in self.load_additional_fields() if f.event_id != fields.event_id]
        rows.append(fields)
        self.save_additional_fields(rows)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def next_event_id(self, events: Iterable[Event] | None = None) -> int:
        """Return one more than the highest event ID (1 for an empty store)."""
        if events is None:
            events = self.load_events()
        return max((e.event_id for e in events), default=0) + 1

    def has_conflict(self, candidate: Event, events: Iterable[Event] | None = None) -> bool:
        """Check whether ``candidate`` overlaps another event.

        Events with the same ID are ignored so updates do not conflict with
        themselves. Touching intervals do not overlap.
        """
        if events is None:
            events = self.load_events()
        return find_conflict(candidate, events) is not None

    def get_event(self, event_id: int) -> Event | None:
        for event in self.load_events():
            if event.event_id == event_id:
                return event
        return None

    def search_by_title(self, keyword: str) -> list[Event]:
        """Events whose title contains ``keyword`` (case-insensitive)."""
        needle = keyword.strip().lower()
        return [e for e in self.load_events() if needle in e.title.lower()]

    def search_by_date(self, day: date) -> list[Event]:
        return [e for e in self.load_events() if e.start.date() == day]

    def search_by_date_range(self, start: date, end: date) -> list[Event]:
        """Events whose start date lies in ``start..end`` (inclusive)."""
        return [e for e in self.load_events() if start <= e.start.date() <= end]

    def search_by_location(self, keyword: str) -> list[Event]:
        return self._search_additional(keyword, lambda f: f.location)

    def search_by_category(self, keyword: str) -> list[Event]:
        return self._search_additional(keyword, lambda f: f.category)

    def _search_additional(
        self, keyword: str, value: Callable[[AdditionalEventFields], str | None]
    ) -> list[Event]:
        needle = keyword.strip().lower()
        additional = self.load_additional_map()
        matches = []
        for event in self.load_events():
            fields = additional.get(event.event_id)
            text = value(fields) if fields is not None else None
            if text and needle in text.lower():
                matches.append(event)
        return matches


def find_conflict(candidate: Event, events: Iterable[Event]) -> Event | None:
    """Return the first event overlapping ``candidate``, ignoring its own ID."""
    for event in events:
        if event.event_id == candidate.event_id:
            continue
        if candidate.start < event.end and candidate.end > event.start:
            return event
    return None
