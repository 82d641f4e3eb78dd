"""Unit tests for scheduler_lite.lite_calendar_views."""

from datetime import date, datetime

import pytest

from scheduler_lite.lite_calendar_views import (
    CalendarDay,
    ViewEntry,
    day_view,
    month_view,
    repeat_labels_for,
    render_day,
    render_month,
    render_week,
    week_start_for,
    week_view,
)
from scheduler_lite.lite_models import AdditionalEventFields, Occurrence, RecurrenceRule

pytestmark = pytest.mark.unit


@pytest.fixture
def weekly_and_single(make_event):
    events = [
        make_event(1, "2026-01-01T09:00", "2026-01-01T09:30", title="Weekly sync"),
        make_event(2, "2026-01-05T14:00", "2026-01-05T15:00", title="Dentist"),
    ]
    rules = [RecurrenceRule(event_id=1, interval="1w")]
    return events, rules


def test_week_start_for_returns_monday() -> None:
    assert week_start_for(date(2026, 1, 8)) == date(2026, 1, 5)
    assert week_start_for(date(2026, 1, 5)) == date(2026, 1, 5)
    assert week_start_for(date(2026, 1, 11)) == date(2026, 1, 5)


def test_day_view_includes_generated_occurrences(weekly_and_single) -> None:
    events, rules = weekly_and_single

    view = day_view(events, rules, date(2026, 1, 8))

    assert view.day == date(2026, 1, 8)
    assert [e.occurrence.title for e in view.entries] == ["Weekly sync"]
    assert view.entries[0].occurrence.is_generated


def test_day_view_without_events(weekly_and_single) -> None:
    events, rules = weekly_and_single
    view = day_view(events, rules, date(2026, 1, 9))
    assert not view.has_events


def test_week_view_covers_seven_days_in_order(weekly_and_single) -> None:
    events, rules = weekly_and_single

    days = week_view(events, rules, date(2026, 1, 5))

    assert [d.day for d in days] == [date(2026, 1, 5 + i) for i in range(7)]
    by_day = {d.day: [e.occurrence.title for e in d.entries] for d in days}
    assert by_day[date(2026, 1, 5)] == ["Dentist"]
    assert by_day[date(2026, 1, 8)] == ["Weekly sync"]
    assert sum(len(d.entries) for d in days) == 2


def test_entries_are_sorted_by_start(make_event) -> None:
    events = [
        make_event(1, "2026-01-05T15:00", "2026-01-05T16:00", title="Late"),
        make_event(2, "2026-01-05T08:00", "2026-01-05T09:00", title="Early"),
    ]
    view = day_view(events, [], date(2026, 1, 5))
    assert [e.occurrence.title for e in view.entries] == ["Early", "Late"]


def test_month_view_has_every_day(weekly_and_single) -> None:
    events, rules = weekly_and_single

    days = month_view(events, rules, 2026, 2)

    assert len(days) == 28
    busy = [d.day.day for d in days if d.has_events]
    assert busy == [5, 12, 19, 26]


def test_additional_fields_attach_to_entries(weekly_and_single) -> None:
    events, rules = weekly_and_single
    additional = {2: AdditionalEventFields(event_id=2, location="Clinic", category="  ")}

    view = day_view(events, rules, date(2026, 1, 5), additional)

    entry = view.entries[0]
    assert entry.location == "Clinic"
    assert entry.category is None


def test_render_day(weekly_and_single) -> None:
    events, rules = weekly_and_single
    additional = {2: AdditionalEventFields(event_id=2, location="Clinic", category="Health")}

    text = render_day(day_view(events, rules, date(2026, 1, 5), additional))

    assert text.splitlines() == [
        "=== 2026-01-05 (MONDAY) ===",
        "- Dentist (14:00 -> 15:00)",
        "    Location: Clinic",
        "    Category: Health",
    ]


def test_render_day_empty() -> None:
    text = render_day(CalendarDay(date(2026, 1, 6)))
    assert text == "=== 2026-01-06 (TUESDAY) ===\nNo events"


def test_render_week(weekly_and_single) -> None:
    events, rules = weekly_and_single

    lines = render_week(week_view(events, rules, date(2026, 1, 5))).splitlines()

    assert lines[0] == "=== Week of 2026-01-05 ==="
    assert lines[1:3] == ["MON 5:", "  - Dentist (14:00 -> 15:00)"]
    assert "TUE 6:" in lines
    assert lines[lines.index("TUE 6:") + 1] == "  No events"
    assert lines[lines.index("THU 8:") + 1] == "  - Weekly sync (09:00 -> 09:30)"
    assert lines[lines.index("THU 8:") + 2] == "      Repeats: every week"
    assert lines[-2:] == ["SUN 11:", "  No events"]


def test_render_week_empty_list() -> None:
    assert render_week([]) == ""


def test_render_month_grid_and_list(weekly_and_single) -> None:
    events, rules = weekly_and_single

    lines = render_month(month_view(events, rules, 2026, 2)).splitlines()

    assert lines[0] == "FEBRUARY 2026"
    assert lines[1] == "Su  Mo  Tu  We  Th  Fr  Sa"
    # 1 Feb 2026 is a Sunday so the grid starts in the first column
    assert lines[2] == " 1   2   3   4   5*  6   7"
    assert lines[6] == "" and lines[5].startswith("22")
    assert lines[7:] == [
        "* 2026-02-05: Weekly sync (09:00 -> 09:30)",
        "    Repeats: every week",
        "* 2026-02-12: Weekly sync (09:00 -> 09:30)",
        "    Repeats: every week",
        "* 2026-02-19: Weekly sync (09:00 -> 09:30)",
        "    Repeats: every week",
        "* 2026-02-26: Weekly sync (09:00 -> 09:30)",
        "    Repeats: every week",
    ]


def test_render_month_leading_blanks(weekly_and_single) -> None:
    events, rules = weekly_and_single

    lines = render_month(month_view(events, rules, 2026, 1)).splitlines()

    # 1 Jan 2026 is a Thursday: four empty cells before it
    assert lines[2] == " " * 16 + " 1*  2   3"


def test_view_entry_blank_metadata() -> None:
    occ = Occurrence(
        event_id=1,
        title="x",
        start=datetime(2026, 1, 1, 9, 0),
        end=datetime(2026, 1, 1, 10, 0),
    )
    assert ViewEntry(occurrence=occ).location is None
    assert ViewEntry(occurrence=occ, extra=AdditionalEventFields(event_id=1)).category is None


def test_repeat_labels_last_rule_wins_and_bad_intervals_are_dropped() -> None:
    rules = [
        RecurrenceRule(event_id=1, interval="1d"),
        RecurrenceRule(event_id=1, interval="2w"),
        RecurrenceRule(event_id=2, interval="fortnightly"),
        RecurrenceRule(event_id=3, interval="1y"),
    ]

    assert repeat_labels_for(rules) == {1: "every 2 weeks", 3: "every year"}


def test_day_view_labels_only_recurring_entries(weekly_and_single) -> None:
    events, rules = weekly_and_single

    view = day_view(events, iter(rules), date(2026, 1, 1))

    assert [(e.occurrence.title, e.repeat) for e in view.entries] == [("Weekly sync", "every week")]
    assert day_view(events, rules, date(2026, 1, 5)).entries[0].repeat is None
