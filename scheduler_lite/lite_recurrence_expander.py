"""Recurrence expansion logic for Scheduler Lite.

Two views of the same series are provided:

- ``expand_occurrences`` enumerates the occurrences that fall inside a
  query window, for calendar views.
- ``next_occurrence_at_or_after`` walks a single series forward until it
  reaches a reference instant, for reminder resolution.

Occurrence ``i`` of a series always starts at ``anchor + i * period`` where
the anchor is the base event start. Both functions use that definition, so
they agree on which instants belong to a series even for month-end anchors.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Optional, Union

from .lite_interval_parser import parse_interval
from .lite_models import Event, Occurrence, Period, RecurrenceRule

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    """Reduce a date or datetime to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def occurrence_start(anchor: datetime, period: Period, index: int) -> Optional[datetime]:
    """Return the start of occurrence ``index`` of a series anchored at ``anchor``.

    Returns None once the occurrence would fall past ``datetime.max``; the
    series has no further occurrences after that.
    """
    try:
        return anchor + period.to_relativedelta(index)
    except (ValueError, OverflowError):
        logger.debug("Occurrence %d of series anchored at %s is out of range", index, anchor)
        return None


def _expand_rule(
    base: Event,
    rule: RecurrenceRule,
    period: Period,
    range_start: date,
    range_end: date,
) -> list[Occurrence]:
    """Generate the occurrences of one rule that start inside the window.

    Index 0 is the base event itself and is never regenerated. Every index
    considered counts against the rule's count limit whether or not it is
    inside the window.
    """
    duration = base.end - base.start
    generated: list[Occurrence] = []

    index = 1
    while True:
        if rule.has_count_limit and index >= rule.recurrence_count:
            break

        start = occurrence_start(base.start, period, index)
        if start is None:
            break
        start_date = start.date()

        if rule.has_end_date_limit and start_date > rule.end_date:
            break
        if start_date > range_end:
            break

        if start_date >= range_start:
            try:
                end = start + duration
            except OverflowError:
                break
            generated.append(
                Occurrence(
                    event_id=base.event_id,
                    title=base.title,
                    description=base.description,
                    start=start,
                    end=end,
                    is_generated=True,
                )
            )

        index += 1

    return generated


def expand_occurrences(
    events: Iterable[Event],
    rules: Optional[Iterable[RecurrenceRule]],
    range_start: DateLike,
    range_end: DateLike,
) -> list[Occurrence]:
    """Expand recurring events into the occurrences overlapping a date window.

    Args:
        events: Base events; all of them are returned unchanged as occurrences
        rules: Recurrence rules, may be None
        range_start: First date of the window (inclusive)
        range_end: Last date of the window (inclusive)

    Returns:
        The base events followed by the generated occurrences of every valid
        rule whose start date lies inside the window. Orphan rules and rules
        with an unparsable interval contribute nothing.
    """
    if events is None:
        raise TypeError("events is required")

    base_events = list(events)
    expanded = [Occurrence.from_event(event) for event in base_events]
    if not rules:
        return expanded

    window_start = _as_date(range_start)
    window_end = _as_date(range_end)

    events_by_id: dict[int, Event] = {}
    for event in base_events:
        events_by_id.setdefault(event.event_id, event)

    for rule in rules:
        base = events_by_id.get(rule.event_id)
        if base is None:
            logger.debug("Skipping orphan recurrence rule for event %d", rule.event_id)
            continue

        period = parse_interval(rule.interval)
        if period is None:
            logger.debug(
                "Skipping recurrence rule for event %d: unparsable interval %r",
                rule.event_id,
                rule.interval,
            )
            continue

        occurrences = _expand_rule(base, rule, period, window_start, window_end)
        logger.debug(
            "Expanded event %d (%s) into %d occurrences for %s..%s",
            base.event_id,
            rule.interval,
            len(occurrences),
            window_start,
            window_end,
        )
        expanded.extend(occurrences)

    return expanded


def next_occurrence_at_or_after(
    base_start: datetime,
    rule: RecurrenceRule,
    now: datetime,
) -> Optional[datetime]:
    """Find the first occurrence of a series starting at or after ``now``.

    The series is walked forward one index at a time from the base
    occurrence (index 0). The walk stops as soon as the rule's count or
    end-date limit is exceeded, or when the next occurrence would fall past
    ``datetime.max``.

    Each candidate is computed from the anchor as ``anchor + index * period``
    rather than by adding one period to the previous candidate. The two
    differ for month-end anchors: from Jan 31 a monthly walk here gives
    Feb 28 then Mar 31, where repeated stepping would give Feb 28 then
    Mar 28. Anchoring keeps the result equal to an instant that
    ``expand_occurrences`` produces for the same series.

    Args:
        base_start: Start of the base event (the anchor)
        rule: Recurrence rule of the event
        now: Reference instant

    Returns:
        Start of the next valid occurrence, or None if the series has ended
        or the interval does not parse.
    """
    period = parse_interval(rule.interval)
    if period is None:
        return None

    index = 0
    candidate = base_start

    while True:
        if candidate >= now:
            if rule.has_end_date_limit and candidate.date() > rule.end_date:
                return None
            if rule.has_count_limit and index >= rule.recurrence_count:
                return None
            return candidate

        index += 1
        if rule.has_count_limit and index >= rule.recurrence_count:
            return None

        candidate = occurrence_start(base_start, period, index)
        if candidate is None:
            return None

        if rule.has_end_date_limit and candidate.date() > rule.end_date:
            return None
