"""Weekly timesheet arithmetic and the quick timer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from src.errors import ValidationError
from src.workspace.calendar import week_days
from src.workspace.entities import TimeEntry


MIN_TIMER_SECONDS = 60

__all__ = [
    "TimeEntryDraft",
    "Timer",
    "billable_total",
    "day_total",
    "entries_for_day",
    "format_elapsed",
    "week_days",
    "week_total",
]


@dataclass(frozen=True)
class TimeEntryDraft:
    user_id: str
    project_id: str
    project_name: str
    description: str
    date: datetime
    hours: float
    billable: bool = True


def entries_for_day(entries: Iterable[TimeEntry], day: date) -> List[TimeEntry]:
    return [e for e in entries if e.date.date() == day]


def day_total(entries: Iterable[TimeEntry], day: date) -> float:
    return sum(e.hours for e in entries_for_day(entries, day))


def week_total(entries: Sequence[TimeEntry], days: Sequence[date]) -> float:
    return sum(day_total(entries, d) for d in days)


def billable_total(entries: Iterable[TimeEntry], days: Sequence[date]) -> float:
    wanted = set(days)
    return sum(e.hours for e in entries if e.billable and e.date.date() in wanted)


def format_elapsed(seconds: int) -> str:
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


@dataclass
class Timer:
    """Wall-clock timer; survives page reruns because only the start instant is kept."""

    project_id: str = ""
    project_name: str = ""
    description: str = ""
    started_at: Optional[datetime] = None

    @property
    def running(self) -> bool:
        return self.started_at is not None

    def start(self, project_id: str, project_name: str, description: str = "", now: Optional[datetime] = None) -> None:
        if not project_id:
            raise ValidationError("Select a project before starting the timer", fields=["project"])
        self.project_id = project_id
        self.project_name = project_name
        self.description = description
        self.started_at = now or datetime.utcnow()

    def elapsed(self, now: Optional[datetime] = None) -> int:
        if self.started_at is None:
            return 0
        return max(0, int(((now or datetime.utcnow()) - self.started_at).total_seconds()))

    def stop(self, user_id: str, now: Optional[datetime] = None) -> Optional[TimeEntryDraft]:
        """Stop and return an entry draft, or None when under a minute was tracked."""
        now = now or datetime.utcnow()
        seconds = self.elapsed(now)
        draft = None
        if seconds >= MIN_TIMER_SECONDS and self.project_id:
            draft = TimeEntryDraft(
                user_id=user_id,
                project_id=self.project_id,
                project_name=self.project_name or "Unknown",
                description=self.description or "Timer entry",
                date=now,
                hours=round(seconds / 3600, 2),
                billable=True,
            )
        self.started_at = None
        self.description = ""
        return draft
