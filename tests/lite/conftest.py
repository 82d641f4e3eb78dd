from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import pytest

from scheduler_lite.lite_models import Event, RecurrenceRule, ReminderOffset
from scheduler_lite.lite_store import CsvCalendarStore


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Ensure scheduler environment variables do not leak between tests.

    Some tests set SCHEDULER_TEST_TIME to freeze "now"; others exercise the
    SCHEDULER_* config and logging overrides.
    """
    for key in (
        "SCHEDULER_TEST_TIME",
        "SCHEDULER_DEBUG",
        "SCHEDULER_LOG_LEVEL",
        "SCHEDULER_DATA_DIR",
        "SCHEDULER_WEEK_STARTS_ON",
        "SCHEDULER_BACKUP_PATH",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory for events; times are given as ISO strings for readability."""

    def _make(
        event_id: int,
        start: str,
        end: str,
        title: str = "Event",
        description: str = "",
    ) -> Event:
        return Event(
            event_id=event_id,
            title=title,
            description=description,
            start=datetime.fromisoformat(start),
            end=datetime.fromisoformat(end),
        )

    return _make


@pytest.fixture
def daily_standup(make_event: Callable[..., Event]) -> Event:
    """One-hour event on 2026-01-01 used by the recurrence tests."""
    return make_event(1, "2026-01-01T10:00", "2026-01-01T11:00", title="Standup")


@pytest.fixture
def tmp_store(tmp_path: Path) -> CsvCalendarStore:
    """Empty CSV store in a temporary data directory."""
    return CsvCalendarStore(tmp_path / "data")


@pytest.fixture
def populated_store(tmp_store: CsvCalendarStore, make_event: Callable[..., Event]) -> CsvCalendarStore:
    """Store with a weekly recurring event, a one-off event and reminders."""
    tmp_store.save_events(
        [
            make_event(1, "2026-01-01T09:00", "2026-01-01T09:30", title="Weekly sync"),
            make_event(2, "2026-01-05T14:00", "2026-01-05T15:00", title="Dentist"),
        ]
    )
    tmp_store.save_recurrence_rules([RecurrenceRule(event_id=1, interval="1w")])
    tmp_store.save_reminders(
        [
            ReminderOffset(event_id=1, minutes_before=60),
            ReminderOffset(event_id=2, minutes_before=30),
        ]
    )
    return tmp_store
