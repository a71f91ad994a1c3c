from datetime import date, datetime, timedelta

import pytest

from src.errors import ValidationError
from src.workspace.entities import TimeEntry
from src.workspace.timesheet import (
    Timer,
    billable_total,
    day_total,
    entries_for_day,
    format_elapsed,
    week_days,
    week_total,
)


def _entry(day, hours, billable=True):
    return TimeEntry(id=str(day), user_id="u", project_id="p", project_name="P", description="",
                     date=datetime(2024, 5, day, 15), hours=hours, billable=billable)


ENTRIES = [_entry(13, 2.0), _entry(13, 1.5, billable=False), _entry(14, 4.0), _entry(20, 8.0)]


def test_day_and_week_totals():
    days = week_days(date(2024, 5, 15))
    assert len(entries_for_day(ENTRIES, date(2024, 5, 13))) == 2
    assert day_total(ENTRIES, date(2024, 5, 13)) == 3.5
    assert week_total(ENTRIES, days) == 7.5
    assert billable_total(ENTRIES, days) == 6.0


def test_format_elapsed():
    assert format_elapsed(0) == "00:00:00"
    assert format_elapsed(3725) == "01:02:05"
    assert format_elapsed(-5) == "00:00:00"


def test_timer_needs_a_project():
    with pytest.raises(ValidationError):
        Timer().start("", "")


def test_short_timer_run_is_discarded():
    start = datetime(2024, 5, 15, 9)
    timer = Timer()
    timer.start("p1", "Website", now=start)
    assert timer.running
    assert timer.stop("u", now=start + timedelta(seconds=59)) is None
    assert not timer.running


def test_timer_draft_rounds_hours():
    start = datetime(2024, 5, 15, 9)
    timer = Timer()
    timer.start("p1", "Website", "Review", now=start)
    assert timer.elapsed(now=start + timedelta(minutes=5)) == 300

    draft = timer.stop("u@example.com", now=start + timedelta(minutes=50))
    assert draft.hours == 0.83
    assert draft.project_id == "p1"
    assert draft.description == "Review"
    assert draft.billable is True
    assert timer.elapsed() == 0
