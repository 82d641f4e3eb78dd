"""Next-reminder resolution for Scheduler Lite.

Combines events, recurrence rules and reminder offsets to find the single
nearest reminder that has not fired yet.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Optional, Union

from .lite_models import Event, NextReminderInfo, RecurrenceRule, ReminderOffset
from .lite_recurrence_expander import next_occurrence_at_or_after

logger = logging.getLogger(__name__)

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR


def resolve_next_reminder(
    events: Iterable[Event],
    rules: Optional[Iterable[RecurrenceRule]],
    reminders: Optional[Iterable[ReminderOffset]],
    now: datetime,
) -> Optional[NextReminderInfo]:
    """Find the chronologically nearest reminder at or after ``now``.

    Args:
        events: Base events (required)
        rules: Recurrence rules, may be None
        reminders: Reminder offsets, may be None

    Returns:
        NextReminderInfo for the earliest notify-at instant, or None when no
        event has an upcoming reminder. On equal notify-at instants the
        event listed first wins.
    """
    if events is None:
        raise TypeError("events is required")

    # Later entries overwrite earlier ones with the same event ID.
    reminder_map: dict[int, ReminderOffset] = {r.event_id: r for r in reminders or ()}
    rule_map: dict[int, RecurrenceRule] = {r.event_id: r for r in rules or ()}

    best: Optional[NextReminderInfo] = None

    for event in events:
        reminder = reminder_map.get(event.event_id)
        if reminder is None:
            continue

        occurrence_start: Optional[datetime] = event.start
        rule = rule_map.get(event.event_id)
        if rule is not None:
            occurrence_start = next_occurrence_at_or_after(event.start, rule, now)
            if occurrence_start is None:
                logger.debug("Event %d has no upcoming occurrence", event.event_id)
                continue

        try:
            notify_at = occurrence_start - timedelta(minutes=reminder.minutes_before)
        except OverflowError:
            # Before datetime.min, so already in the past
            continue
        if notify_at < now:
            continue

        if best is None or notify_at < best.notify_at:
            best = NextReminderInfo(
                event=event,
                occurrence_start=occurrence_start,
                notify_at=notify_at,
                time_until_notify=notify_at - now,
            )

    if best is not None:
        logger.debug(
            "Next reminder: event %d at %s (occurrence %s)",
            best.event.event_id,
            best.notify_at.isoformat(),
            best.occurrence_start.isoformat(),
        )
    return best


def _plural(amount: int, unit: str) -> str:
    return f"{amount} {unit}" if amount == 1 else f"{amount} {unit}s"


def format_duration(duration: Union[timedelta, int, None]) -> str:
    """Render a time span as ``"{d} days {h} hours {m} minutes"``.

    Zero-valued units are omitted; minutes are shown when they are non-zero
    or when nothing else is, so the shortest output is ``"0 minutes"``.

    Args:
        duration: A timedelta, a number of minutes, or None

    Returns:
        Human readable duration string
    """
    if duration is None:
        return _plural(0, "minute")

    if isinstance(duration, timedelta):
        total_minutes = int(duration.total_seconds() // 60)
    else:
        total_minutes = int(duration)
    total_minutes = max(0, total_minutes)

    days, remainder = divmod(total_minutes, MINUTES_PER_DAY)
    hours, minutes = divmod(remainder, MINUTES_PER_HOUR)

    parts = []
    if days > 0:
        parts.append(_plural(days, "day"))
    if hours > 0:
        parts.append(_plural(hours, "hour"))
    if minutes > 0 or not parts:
        parts.append(_plural(minutes, "minute"))

    return " ".join(parts)
