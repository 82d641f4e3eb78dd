"""Data models for the scheduler core - Scheduler Lite version.

All records are immutable pydantic values. Datetimes are naive local
timestamps; the scheduler has no notion of time zones.
"""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Event(BaseModel):
    """Base calendar event as supplied by the event store."""

    event_id: int = Field(..., description="Unique event ID assigned by the store")
    title: str = Field(..., description="Event title")
    description: Optional[str] = Field(default=None, description="Optional free-text description")
    start: datetime = Field(..., description="Start of the event")
    end: datetime = Field(..., description="End of the event")

    model_config = ConfigDict(frozen=True)

    @property
    def duration(self) -> timedelta:
        """Length of the event."""
        return self.end - self.start

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class RecurrenceRule(BaseModel):
    """Recurrence configuration linked to an event by ID.

    Either ``recurrence_count`` or ``end_date`` is normally used. When both
    are set, both limits apply and whichever is reached first stops the
    series.
    """

    event_id: int = Field(..., description="ID of the base event")
    interval: Optional[str] = Field(default=None, description="Raw interval text, e.g. '1w'")
    recurrence_count: int = Field(
        default=0, description="Total occurrences including the base one, 0 if unused"
    )
    end_date: Optional[date] = Field(
        default=None, description="Last date an occurrence may fall on, None if unused"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def has_count_limit(self) -> bool:
        return self.recurrence_count > 0

    @property
    def has_end_date_limit(self) -> bool:
        return self.end_date is not None


class ReminderOffset(BaseModel):
    """Notify ``minutes_before`` minutes ahead of an event occurrence."""

    event_id: int = Field(..., description="ID of the event to remind about")
    minutes_before: int = Field(..., ge=0, description="Offset before occurrence start")

    model_config = ConfigDict(frozen=True)


class AdditionalEventFields(BaseModel):
    """Optional metadata stored next to an event."""

    event_id: int = Field(..., description="ID of the event")
    location: Optional[str] = Field(default=None, description="Event location")
    category: Optional[str] = Field(default=None, description="Event category")

    model_config = ConfigDict(frozen=True)


class Period(BaseModel):
    """A parsed recurrence interval: years, months and days."""

    years: int = 0
    months: int = 0
    days: int = 0

    model_config = ConfigDict(frozen=True)

    def to_relativedelta(self, multiplier: int = 1) -> relativedelta:
        """Return the shift of ``multiplier`` periods.

        relativedelta applies years and months before days and clamps the
        day to the end of the resulting month, which matches fixed-date
        calendar arithmetic.
        """
        return relativedelta(
            years=self.years * multiplier,
            months=self.months * multiplier,
            days=self.days * multiplier,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.years or self.months or self.days)


class Occurrence(BaseModel):
    """One concrete instance of an event, derived and never persisted."""

    event_id: int
    title: str
    description: Optional[str] = None
    start: datetime
    end: datetime
    is_generated: bool = Field(
        default=False, description="True if produced by recurrence expansion"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_event(cls, event: Event) -> "Occurrence":
        """Wrap a base event as its own (index 0) occurrence."""
        return cls(
            event_id=event.event_id,
            title=event.title,
            description=event.description,
            start=event.start,
            end=event.end,
        )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class NextReminderInfo(BaseModel):
    """The chronologically nearest upcoming reminder."""

    event: Event
    occurrence_start: datetime
    notify_at: datetime
    time_until_notify: timedelta

    model_config = ConfigDict(frozen=True)
