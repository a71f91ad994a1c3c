"""Financial and utilization reports.

Figures come from logged time entries. A synthetic data set is available for
demos, but only through ``demo_report`` and always flagged with ``demo=True``
so the UI can label it; the real path never uses randomness.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from src.workspace.derive import rate
from src.workspace.entities import Project, TimeEntry, strip_html


REPORT_MONTHS = 6
FORECAST_GROWTH = 0.05
PIPELINE_RATIO = 0.5
CONFIRMED_RATIO = 0.6
DEMO_TEAM = ["You", "Alex M", "Sarah C", "Mike R", "Hannah L"]

_COLUMNS = ["user_id", "project_id", "month", "hours", "billable"]


@dataclass
class ReportBundle:
    monthly: List[Dict[str, Any]] = field(default_factory=list)
    profitability: List[Dict[str, Any]] = field(default_factory=list)
    utilization: List[Dict[str, Any]] = field(default_factory=list)
    forecast: List[Dict[str, Any]] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)
    demo: bool = False


def _entries_frame(entries: Sequence[TimeEntry]) -> pd.DataFrame:
    if not entries:
        return pd.DataFrame(columns=_COLUMNS)
    df = pd.DataFrame(
        [
            {
                "user_id": e.user_id,
                "project_id": e.project_id,
                "month": pd.Timestamp(e.date).to_period("M"),
                "hours": float(e.hours),
                "billable": bool(e.billable),
            }
            for e in entries
        ]
    )
    return df


def _month_periods(today: date, count: int, *, forward: bool = False) -> List[pd.Period]:
    current = pd.Timestamp(today).to_period("M")
    if forward:
        return [current + i for i in range(count)]
    return [current - (count - 1 - i) for i in range(count)]


def monthly_hours(entries: Sequence[TimeEntry], today: date, hourly_rate: float, months: int = REPORT_MONTHS) -> List[Dict[str, Any]]:
    df = _entries_frame(entries)
    rows = []
    for period in _month_periods(today, months):
        month_df = df[df["month"] == period] if not df.empty else df
        billable = float(month_df.loc[month_df["billable"], "hours"].sum()) if not month_df.empty else 0.0
        non_billable = float(month_df.loc[~month_df["billable"].astype(bool), "hours"].sum()) if not month_df.empty else 0.0
        rows.append(
            {
                "month": period.strftime("%b"),
                "billable": round(billable, 2),
                "non_billable": round(non_billable, 2),
                "total": round(billable + non_billable, 2),
                "revenue": round(billable * hourly_rate, 2),
            }
        )
    return rows


def profitability(
    projects: Sequence[Project],
    entries: Sequence[TimeEntry],
    hourly_rate: float,
    hourly_cost: float,
    limit: int = 6,
) -> List[Dict[str, Any]]:
    """Per-project revenue (billable hours) against cost (all hours)."""
    df = _entries_frame(entries)
    rows = []
    for project in projects[:limit]:
        project_df = df[df["project_id"] == project.id] if not df.empty else df
        hours = float(project_df["hours"].sum()) if not project_df.empty else 0.0
        billable = float(project_df.loc[project_df["billable"], "hours"].sum()) if not project_df.empty else 0.0
        revenue = billable * hourly_rate
        cost = hours * hourly_cost
        profit = revenue - cost
        rows.append(
            {
                "name": strip_html(project.name)[:15],
                "revenue": round(revenue, 2),
                "cost": round(cost, 2),
                "profit": round(profit, 2),
                "margin": rate(profit, revenue),
                "hours": round(hours, 2),
            }
        )
    return rows


def utilization(
    entries: Sequence[TimeEntry],
    today: date,
    capacity_hours: float,
    month_offset: int = 0,
) -> List[Dict[str, Any]]:
    """Per-user utilization of the monthly capacity for the month ``month_offset`` back."""
    df = _entries_frame(entries)
    period = pd.Timestamp(today).to_period("M") - month_offset
    if df.empty:
        return []
    month_df = df[df["month"] == period]
    rows = []
    for user_id, user_df in month_df.groupby("user_id", sort=True):
        billable = float(user_df.loc[user_df["billable"], "hours"].sum())
        non_billable = float(user_df.loc[~user_df["billable"].astype(bool), "hours"].sum())
        rows.append(
            {
                "name": str(user_id),
                "billable": round(billable, 2),
                "non_billable": round(non_billable, 2),
                "available": round(max(0.0, capacity_hours - billable - non_billable), 2),
                "utilization": rate(billable, capacity_hours),
            }
        )
    return rows


def forecast(monthly: Sequence[Dict[str, Any]], today: date, months: int = REPORT_MONTHS) -> List[Dict[str, Any]]:
    """Project the trailing average revenue forward with flat monthly growth."""
    earning = [m["revenue"] for m in monthly if m["revenue"] > 0]
    base = sum(earning) / len(earning) if earning else 0.0
    rows = []
    for i, period in enumerate(_month_periods(today, months, forward=True)):
        projected = base * (1 + i * FORECAST_GROWTH)
        rows.append(
            {
                "month": period.strftime("%b %Y"),
                "projected": round(projected),
                "pipeline": round(projected * PIPELINE_RATIO),
                "confirmed": round(projected * CONFIRMED_RATIO),
            }
        )
    return rows


def _avg_utilization(rows: Sequence[Dict[str, Any]]) -> int:
    if not rows:
        return 0
    return rate(sum(r["utilization"] for r in rows), 100 * len(rows))


def report_summary(
    monthly: Sequence[Dict[str, Any]],
    utilization_rows: Sequence[Dict[str, Any]],
    forecast_rows: Sequence[Dict[str, Any]],
    previous_utilization: Optional[Sequence[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    total_revenue = sum(m["revenue"] for m in monthly)
    total_hours = sum(m["total"] for m in monthly)
    billable_hours = sum(m["billable"] for m in monthly)
    avg_util = _avg_utilization(utilization_rows)

    revenue_change = 0
    if len(monthly) >= 2:
        previous, latest = monthly[-2]["revenue"], monthly[-1]["revenue"]
        revenue_change = rate(latest - previous, previous)

    utilization_change = 0
    if previous_utilization is not None:
        utilization_change = avg_util - _avg_utilization(previous_utilization)

    return {
        "total_revenue": round(total_revenue, 2),
        "total_hours": round(total_hours, 2),
        "billable_hours": round(billable_hours, 2),
        "avg_utilization": avg_util,
        "next_month_forecast": forecast_rows[1]["projected"] if len(forecast_rows) > 1 else 0,
        "revenue_change": revenue_change,
        "utilization_change": utilization_change,
    }


def build_report(
    projects: Sequence[Project],
    entries: Sequence[TimeEntry],
    *,
    today: date,
    hourly_rate: float,
    hourly_cost: float,
    capacity_hours: float,
) -> ReportBundle:
    monthly = monthly_hours(entries, today, hourly_rate)
    util = utilization(entries, today, capacity_hours)
    prev_util = utilization(entries, today, capacity_hours, month_offset=1)
    fc = forecast(monthly, today)
    return ReportBundle(
        monthly=monthly,
        profitability=profitability(projects, entries, hourly_rate, hourly_cost),
        utilization=util,
        forecast=fc,
        summary=report_summary(monthly, util, fc, prev_util),
        demo=False,
    )


def demo_report(
    projects: Sequence[Project],
    *,
    today: date,
    hourly_rate: float,
    hourly_cost: float,
    capacity_hours: float,
    seed: int = 7,
) -> ReportBundle:
    """Synthetic figures for demos; deterministic for a given seed."""
    rng = random.Random(seed)

    monthly = []
    for period in _month_periods(today, REPORT_MONTHS):
        billable = rng.randint(100, 399)
        non_billable = rng.randint(20, 69)
        monthly.append(
            {
                "month": period.strftime("%b"),
                "billable": billable,
                "non_billable": non_billable,
                "total": billable + non_billable,
                "revenue": billable * hourly_rate,
            }
        )

    profit_rows = []
    for project in projects[:6]:
        hours = rng.randint(50, 249)
        revenue = hours * hourly_rate
        cost = hours * hourly_cost
        profit_rows.append(
            {
                "name": strip_html(project.name)[:15],
                "revenue": revenue,
                "cost": cost,
                "profit": revenue - cost,
                "margin": rate(revenue - cost, revenue),
                "hours": hours,
            }
        )

    util_rows = []
    for name in DEMO_TEAM:
        billable = rng.randint(40, 179)
        non_billable = rng.randint(10, 39)
        util_rows.append(
            {
                "name": name,
                "billable": billable,
                "non_billable": non_billable,
                "available": max(0, capacity_hours - billable - non_billable),
                "utilization": rate(billable, capacity_hours),
            }
        )

    fc = []
    for i, period in enumerate(_month_periods(today, REPORT_MONTHS, forward=True)):
        base = 45000 + rng.randint(0, 14999)
        projected = base * (1 + i * FORECAST_GROWTH)
        fc.append(
            {
                "month": period.strftime("%b %Y"),
                "projected": round(projected),
                "pipeline": round(projected * (0.3 + rng.random() * 0.4)),
                "confirmed": round(projected * CONFIRMED_RATIO),
            }
        )

    return ReportBundle(
        monthly=monthly,
        profitability=profit_rows,
        utilization=util_rows,
        forecast=fc,
        summary=report_summary(monthly, util_rows, fc),
        demo=True,
    )
