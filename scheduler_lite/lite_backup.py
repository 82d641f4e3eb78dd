"""Single-file backup and restore for the CSV event store.

A backup file holds the four data files one after another, each introduced
by a section marker line::

    #EVENT
    eventId,title,description,startDateTime,endDateTime
    1,Standup,,2026-01-05T09:00,2026-01-05T09:15

    #RECURRENT
    ...

Restoring merges the backup into the current store. Restored events get
fresh IDs; events overlapping existing ones are skipped together with their
linked records.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .lite_exceptions import BackupError, StoreError
from .lite_models import AdditionalEventFields, Event, RecurrenceRule, ReminderOffset
from .lite_store import (
    ADDITIONAL_FILE,
    EVENT_FILE,
    RECURRENT_FILE,
    REMINDER_FILE,
    CsvCalendarStore,
    additional_from_row,
    event_from_row,
    find_conflict,
    parse_rows,
    reminder_from_row,
    rule_from_row,
)

logger = logging.getLogger(__name__)


class Section(str, Enum):
    """Section markers of a backup file, in write order."""

    EVENT = "#EVENT"
    RECURRENT = "#RECURRENT"
    ADDITIONAL = "#ADDITIONAL"
    REMINDER = "#REMINDER"


SECTION_FILES = {
    Section.EVENT: EVENT_FILE,
    Section.RECURRENT: RECURRENT_FILE,
    Section.ADDITIONAL: ADDITIONAL_FILE,
    Section.REMINDER: REMINDER_FILE,
}

HEADER_FIRST_COLUMN = "eventId"


@dataclass
class BackupContents:
    """Records parsed from a backup file, still carrying their old IDs."""

    events: list[Event] = field(default_factory=list)
    rules: list[RecurrenceRule] = field(default_factory=list)
    additional: list[AdditionalEventFields] = field(default_factory=list)
    reminders: list[ReminderOffset] = field(default_factory=list)


@dataclass
class RestoreResult:
    """Outcome of a restore."""

    restored: list[Event] = field(default_factory=list)
    skipped_conflicts: list[Event] = field(default_factory=list)
    id_map: dict[int, int] = field(default_factory=dict)


def backup(store: CsvCalendarStore, backup_path: Path | str) -> Path:
    """Write every data file of ``store`` into one backup file.

    Rows are re-written with the csv module so quoted multi-line fields
    survive unchanged.

    Returns:
        Path of the written backup
    """
    path = Path(backup_path)
    try:
        sections = [
            (section, store.read_rows(filename)) for section, filename in SECTION_FILES.items()
        ]
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as fh:
            writer = csv.writer(fh, lineterminator="\n")
            for i, (section, rows) in enumerate(sections):
                if i:
                    writer.writerow([])
                writer.writerow([section.value])
                writer.writerows(rows)
    except (OSError, StoreError) as e:
        raise BackupError(f"Backup to {path} failed: {e}") from e

    logger.info("Backup written to %s", path)
    return path


def read_backup(backup_path: Path | str) -> BackupContents:
    """Parse a backup file into its records.

    A section marker is a row holding nothing but the marker; data rows
    always have several columns, so marker text inside a quoted field is
    never mistaken for one.
    """
    path = Path(backup_path)
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            all_rows = list(csv.reader(fh))
    except OSError as e:
        raise BackupError(f"Cannot read backup {path}: {e}") from e

    markers = {s.value: s for s in Section}
    rows: dict[Section, list[list[str]]] = {s: [] for s in Section}
    current: Section | None = None

    for row in all_rows:
        if len(row) == 1 and row[0] in markers:
            current = markers[row[0]]
            continue
        if current is None or not row or row[0] == HEADER_FIRST_COLUMN:
            continue
        rows[current].append(row)

    source = str(path)
    return BackupContents(
        events=parse_rows(rows[Section.EVENT], event_from_row, source),
        rules=parse_rows(rows[Section.RECURRENT], rule_from_row, source),
        additional=parse_rows(rows[Section.ADDITIONAL], additional_from_row, source),
        reminders=parse_rows(rows[Section.REMINDER], reminder_from_row, source),
    )


def restore(store: CsvCalendarStore, backup_path: Path | str) -> RestoreResult:
    """Merge a backup file into ``store``.

    Each backup event is given the next free ID unless it overlaps an event
    already in the store (or restored earlier in the same run), in which case
    it is skipped. Linked rules, reminders and additional fields follow their
    event to its new ID or are dropped with it.
    """
    contents = read_backup(backup_path)
    result = RestoreResult()

    try:
        merged_events = store.load_events()
        next_id = store.next_event_id(merged_events)

        for old in contents.events:
            candidate = old.model_copy(update={"event_id": next_id})
            if find_conflict(candidate, merged_events) is not None:
                logger.warning(
                    "Conflict detected: backup event %r was not restored", old.title
                )
                result.skipped_conflicts.append(old)
                continue
            result.id_map[old.event_id] = next_id
            merged_events.append(candidate)
            result.restored.append(candidate)
            next_id += 1

        id_map = result.id_map
        merged_rules = store.load_recurrence_rules() + [
            r.model_copy(update={"event_id": id_map[r.event_id]})
            for r in contents.rules
            if r.event_id in id_map
        ]
        merged_additional = store.load_additional_fields() + [
            a.model_copy(update={"event_id": id_map[a.event_id]})
            for a in contents.additional
            if a.event_id in id_map
        ]
        merged_reminders = store.load_reminders() + [
            r.model_copy(update={"event_id": id_map[r.event_id]})
            for r in contents.reminders
            if r.event_id in id_map
        ]

        store.save_events(merged_events)
        store.save_recurrence_rules(merged_rules)
        store.save_additional_fields(merged_additional)
        store.save_reminders(merged_reminders)
    except StoreError as e:
        raise BackupError(f"Restore from {backup_path} failed: {e}") from e

    logger.info(
        "Restore completed: %d events restored, %d skipped due to conflicts",
        len(result.restored),
        len(result.skipped_conflicts),
    )
    return result
