from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Sequence

import pandas as pd

from src.workspace.entities import Project, strip_html


PROJECT_COLORS = ["#3b82f6", "#10b981", "#f59e0b", "#8b5cf6", "#ec4899", "#ef4444"]


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    date: datetime
    type: str  # deadline | task
    project_name: str
    color: str


def calendar_events(projects: Sequence[Project]) -> List[CalendarEvent]:
    """Project deadlines plus the due dates of unfinished tasks."""
    events: List[CalendarEvent] = []
    for idx, project in enumerate(projects):
        color = PROJECT_COLORS[idx % len(PROJECT_COLORS)]
        name = strip_html(project.name)
        if project.end_date:
            events.append(
                CalendarEvent(
                    id=f"{project.id}-deadline",
                    title=f"{name} deadline",
                    date=project.end_date,
                    type="deadline",
                    project_name=name,
                    color=color,
                )
            )
        for task in project.tasks:
            if task.end_date and task.status != "done":
                events.append(
                    CalendarEvent(
                        id=f"{project.id}-{task.id}",
                        title=strip_html(task.name),
                        date=task.end_date,
                        type="task",
                        project_name=name,
                        color=color,
                    )
                )
    return events


def start_of_week(day: date) -> date:
    # weeks start on Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_days(anchor: date) -> List[date]:
    start = start_of_week(anchor)
    return [start + timedelta(days=i) for i in range(7)]


def month_grid(anchor: date) -> List[List[date]]:
    """Whole weeks covering the month of ``anchor``, padded with neighbouring days."""
    first = anchor.replace(day=1)
    last = (pd.Timestamp(first) + pd.offsets.MonthEnd(0)).date()
    cursor = start_of_week(first)
    end = start_of_week(last) + timedelta(days=6)
    weeks: List[List[date]] = []
    while cursor <= end:
        weeks.append([cursor + timedelta(days=i) for i in range(7)])
        cursor += timedelta(days=7)
    return weeks


def shift(anchor: date, view: str, steps: int) -> date:
    if view == "week":
        return anchor + timedelta(weeks=steps)
    return (pd.Timestamp(anchor) + pd.DateOffset(months=steps)).date()


def events_on(events: Iterable[CalendarEvent], day: date) -> List[CalendarEvent]:
    return [e for e in events if e.date.date() == day]
