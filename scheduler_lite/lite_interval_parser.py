"""Recurrence interval parsing for Scheduler Lite.

Intervals are short strings such as ``"1d"``, ``"2w"``, ``"3m"`` or ``"1y"``.
A bare number means days, except the legacy value ``"1"`` which has always
meant weekly.
"""

import logging
import re
from typing import Optional

from .lite_models import Period

logger = logging.getLogger(__name__)

LEGACY_WEEKLY_INTERVAL = "1"

_NUMBER_RE = re.compile(r"[+-]?[0-9]+")


def _parse_positive_int(text: str) -> Optional[int]:
    """Return ``text`` as a positive int, or None if it is not one."""
    if not _NUMBER_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value > 0 else None


def parse_interval(interval: Optional[str]) -> Optional[Period]:
    """Parse a textual recurrence interval into a Period.

    Args:
        interval: Raw interval text, may be None

    Returns:
        Period with a single non-zero dimension, or None when the text is
        missing, empty, non-positive, non-numeric or has an unknown unit.
        None means the owning rule must be treated as non-recurring.
    """
    if interval is None:
        return None

    text = interval.strip().lower()
    if not text:
        return None

    if text == LEGACY_WEEKLY_INTERVAL:
        return Period(days=7)

    unit = text[-1]
    if unit.isdigit():
        days = _parse_positive_int(text)
        if days is None:
            logger.debug("Ignoring non-positive or malformed interval %r", interval)
            return None
        return Period(days=days)

    number = _parse_positive_int(text[:-1])
    if number is None:
        logger.debug("Ignoring interval %r with invalid multiplier", interval)
        return None

    if unit == "d":
        return Period(days=number)
    if unit == "w":
        return Period(days=number * 7)
    if unit == "m":
        return Period(months=number)
    if unit == "y":
        return Period(years=number)

    logger.debug("Ignoring interval %r with unknown unit %r", interval, unit)
    return None


def describe_period(period: Optional[Period]) -> str:
    """Render a Period as a display label such as ``"every 2 weeks"``."""
    if period is None or period.is_empty:
        return "does not repeat"

    if period.years:
        amount, unit = period.years, "year"
    elif period.months:
        amount, unit = period.months, "month"
    elif period.days % 7 == 0:
        amount, unit = period.days // 7, "week"
    else:
        amount, unit = period.days, "day"

    if amount == 1:
        return f"every {unit}"
    return f"every {amount} {unit}s"
