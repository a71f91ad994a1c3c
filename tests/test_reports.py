from datetime import date, datetime

import pytest

from src.workspace.entities import Project, TimeEntry
from src.workspace.reports import (
    build_report,
    demo_report,
    forecast,
    monthly_hours,
    profitability,
    report_summary,
    utilization,
)


TODAY = date(2024, 5, 15)
RATES = dict(today=TODAY, hourly_rate=150.0, hourly_cost=75.0, capacity_hours=160.0)


def _entry(eid, user, project, day, hours, billable=True):
    return TimeEntry(
        id=eid, user_id=user, project_id=project, project_name=project, description="", date=day,
        hours=hours, billable=billable,
    )


@pytest.fixture
def entries():
    return [
        _entry("1", "a", "p1", datetime(2024, 5, 2), 3.0),
        _entry("2", "a", "p1", datetime(2024, 5, 3), 1.0, billable=False),
        _entry("3", "b", "p2", datetime(2024, 4, 10), 2.0),
    ]


@pytest.fixture
def projects():
    return [Project(id="p1", name="Website"), Project(id="p2", name="<b>Mobile</b> App")]


def test_monthly_hours(entries):
    rows = monthly_hours(entries, TODAY, 150.0)
    assert [r["month"] for r in rows] == ["Dec", "Jan", "Feb", "Mar", "Apr", "May"]
    assert rows[-1] == {"month": "May", "billable": 3.0, "non_billable": 1.0, "total": 4.0, "revenue": 450.0}
    assert rows[-2]["revenue"] == 300.0
    assert rows[0]["total"] == 0


def test_profitability(entries, projects):
    rows = profitability(projects, entries, 150.0, 75.0)
    assert rows[0] == {"name": "Website", "revenue": 450.0, "cost": 300.0, "profit": 150.0, "margin": 33, "hours": 4.0}
    assert rows[1]["name"] == "Mobile App"
    assert rows[1]["margin"] == 50


def test_profitability_without_revenue_has_zero_margin(projects):
    rows = profitability(projects, [_entry("1", "a", "p1", datetime(2024, 5, 2), 2.0, billable=False)], 150.0, 75.0)
    assert rows[0]["revenue"] == 0
    assert rows[0]["margin"] == 0
    assert rows[0]["profit"] == -150.0


def test_utilization(entries):
    rows = utilization(entries, TODAY, 160.0)
    assert rows == [{"name": "a", "billable": 3.0, "non_billable": 1.0, "available": 156.0, "utilization": 2}]
    assert [r["name"] for r in utilization(entries, TODAY, 160.0, month_offset=1)] == ["b"]
    assert utilization([], TODAY, 160.0) == []


def test_forecast_grows_from_trailing_average(entries):
    rows = forecast(monthly_hours(entries, TODAY, 150.0), TODAY)
    assert len(rows) == 6
    assert rows[0]["month"] == "May 2024"
    assert rows[0]["projected"] == 375
    assert rows[1]["projected"] == 394
    assert rows[0]["confirmed"] == 225


def test_build_report_summary(entries, projects):
    report = build_report(projects, entries, **RATES)
    assert report.demo is False
    assert report.summary["total_revenue"] == 750.0
    assert report.summary["total_hours"] == 6.0
    assert report.summary["billable_hours"] == 5.0
    assert report.summary["revenue_change"] == 50
    assert report.summary["next_month_forecast"] == 394


def test_average_utilization_rounds_halves_up():
    summary = report_summary([], [{"utilization": 2}, {"utilization": 3}], [])
    assert summary["avg_utilization"] == 3

    summary = report_summary(
        [], [{"utilization": 40}], [], previous_utilization=[{"utilization": 10}, {"utilization": 11}]
    )
    assert summary["utilization_change"] == 40 - 11


def test_empty_report_is_all_zeros(projects):
    report = build_report(projects, [], **RATES)
    assert report.summary["total_revenue"] == 0
    assert report.utilization == []
    assert all(row["projected"] == 0 for row in report.forecast)


def test_demo_report_is_flagged_and_deterministic(projects):
    first = demo_report(projects, **RATES, seed=11)
    second = demo_report(projects, **RATES, seed=11)
    assert first.demo is True
    assert first.monthly == second.monthly
    assert len(first.utilization) == 5
    assert len(first.profitability) == len(projects)
