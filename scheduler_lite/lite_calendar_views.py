"""Day, week and month views over expanded occurrences."""

import calendar
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from .lite_interval_parser import describe_period, parse_interval
from .lite_models import AdditionalEventFields, Event, Occurrence, RecurrenceRule
from .lite_recurrence_expander import expand_occurrences

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class ViewEntry:
    """An occurrence together with the metadata of its event."""

    occurrence: Occurrence
    extra: Optional[AdditionalEventFields] = None
    repeat: Optional[str] = None

    @property
    def location(self) -> Optional[str]:
        if self.extra is None or not self.extra.location or not self.extra.location.strip():
            return None
        return self.extra.location

    @property
    def category(self) -> Optional[str]:
        if self.extra is None or not self.extra.category or not self.extra.category.strip():
            return None
        return self.extra.category


@dataclass
class CalendarDay:
    """All occurrences starting on one date."""

    day: date
    entries: list[ViewEntry] = field(default_factory=list)

    @property
    def has_events(self) -> bool:
        return bool(self.entries)


def week_start_for(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def repeat_labels_for(rules: Iterable[RecurrenceRule]) -> dict[int, str]:
    """Map event IDs to labels like ``"every week"`` for their usable rules.

    The last rule per event wins. Rules whose interval does not parse are
    left out, as those events do not repeat.
    """
    latest = {rule.event_id: rule for rule in rules}
    labels = {}
    for event_id, rule in latest.items():
        period = parse_interval(rule.interval)
        if period is not None:
            labels[event_id] = describe_period(period)
    return labels


def _collect_days(
    events: Iterable[Event],
    rules: Optional[Iterable[RecurrenceRule]],
    first: date,
    last: date,
    additional: Optional[Mapping[int, AdditionalEventFields]],
) -> list[CalendarDay]:
    """Expand the window ``first..last`` and bucket occurrences per date."""
    rules = list(rules or [])
    occurrences = expand_occurrences(events, rules, first, last)
    repeat_labels = repeat_labels_for(rules)
    days: dict[date, CalendarDay] = {}
    for offset in range((last - first).days + 1):
        current = first + timedelta(days=offset)
        days[current] = CalendarDay(current)

    for occ in sorted(occurrences, key=lambda o: (o.start, o.event_id)):
        bucket = days.get(occ.start.date())
        if bucket is None:
            continue
        extra = additional.get(occ.event_id) if additional else None
        bucket.entries.append(
            ViewEntry(occurrence=occ, extra=extra, repeat=repeat_labels.get(occ.event_id))
        )

    logger.debug(
        "Collected %d occurrences for %s..%s",
        sum(len(d.entries) for d in days.values()),
        first,
        last,
    )
    return list(days.values())


def day_view(
    events: Iterable[Event],
    rules: Optional[Iterable[RecurrenceRule]],
    day: date,
    additional: Optional[Mapping[int, AdditionalEventFields]] = None,
) -> CalendarDay:
    """Occurrences starting on ``day``."""
    return _collect_days(events, rules, day, day, additional)[0]


def week_view(
    events: Iterable[Event],
    rules: Optional[Iterable[RecurrenceRule]],
    week_start: date,
    additional: Optional[Mapping[int, AdditionalEventFields]] = None,
) -> list[CalendarDay]:
    """Seven days of occurrences starting at ``week_start``."""
    last = week_start + timedelta(days=DAYS_PER_WEEK - 1)
    return _collect_days(events, rules, week_start, last, additional)


def month_view(
    events: Iterable[Event],
    rules: Optional[Iterable[RecurrenceRule]],
    year: int,
    month: int,
    additional: Optional[Mapping[int, AdditionalEventFields]] = None,
) -> list[CalendarDay]:
    """Every day of the given month with its occurrences."""
    days_in_month = calendar.monthrange(year, month)[1]
    first = date(year, month, 1)
    last = date(year, month, days_in_month)
    return _collect_days(events, rules, first, last, additional)


# Text rendering


def _format_entry(entry: ViewEntry, indent: str, bullet: str) -> list[str]:
    occ = entry.occurrence
    lines = [
        f"{indent}{bullet}{occ.title} ({occ.start.strftime('%H:%M')} -> {occ.end.strftime('%H:%M')})"
    ]
    if entry.repeat:
        lines.append(f"{indent}    Repeats: {entry.repeat}")
    if entry.location:
        lines.append(f"{indent}    Location: {entry.location}")
    if entry.category:
        lines.append(f"{indent}    Category: {entry.category}")
    return lines


def render_day(view: CalendarDay) -> str:
    """Render a day view as plain text."""
    lines = [f"=== {view.day.isoformat()} ({view.day.strftime('%A').upper()}) ==="]
    if not view.has_events:
        lines.append("No events")
    for entry in view.entries:
        lines.extend(_format_entry(entry, "", "- "))
    return "\n".join(lines)


def render_week(days: list[CalendarDay]) -> str:
    """Render a week view as plain text."""
    if not days:
        return ""
    lines = [f"=== Week of {days[0].day.isoformat()} ==="]
    for view in days:
        lines.append(f"{view.day.strftime('%a').upper()} {view.day.day}:")
        if not view.has_events:
            lines.append("  No events")
        for entry in view.entries:
            lines.extend(_format_entry(entry, "  ", "- "))
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def render_month(days: list[CalendarDay]) -> str:
    """Render a month grid (Sunday first) followed by the event list."""
    if not days:
        return ""
    first = days[0].day
    lines = [f"{calendar.month_name[first.month].upper()} {first.year}", "Su  Mo  Tu  We  Th  Fr  Sa"]

    # Sunday-first column of the 1st: Monday=0 .. Sunday=6 maps to 1 .. 0
    offset = (first.weekday() + 1) % DAYS_PER_WEEK
    row = "    " * offset
    for view in days:
        row += f"{view.day.day:2d}{'*' if view.has_events else ' '} "
        if view.day.weekday() == calendar.SATURDAY:
            lines.append(row.rstrip())
            row = ""
    if row:
        lines.append(row.rstrip())

    lines.append("")
    for view in days:
        for entry in view.entries:
            lines.extend(_format_entry(entry, "", f"* {view.day.isoformat()}: "))
    return "\n".join(lines).rstrip("\n")
