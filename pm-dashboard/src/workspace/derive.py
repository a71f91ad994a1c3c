"""Pure derivations from fetched entities to view-ready shapes.

Nothing in here performs I/O; every function takes already-fetched lists and
returns new values without mutating its input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from src.workspace.entities import (
    Client,
    Project,
    ProjectTask,
    TASK_STATUSES,
    strip_html,
)


UPCOMING_WINDOW_DAYS = 7


def flatten_tasks(projects: Sequence[Project]) -> List[ProjectTask]:
    """Lift every embedded task out of its project.

    Order follows the projects, then the tasks inside each project. The
    project's priority wins over the task's own (kept as ``own_priority``).
    """
    flat: List[ProjectTask] = []
    for project in projects:
        for task in project.tasks:
            flat.append(
                ProjectTask(
                    id=task.id,
                    name=task.name,
                    assignee=task.assignee,
                    status=task.status,
                    start_date=task.start_date,
                    end_date=task.end_date,
                    project_id=project.id,
                    project_name=project.name,
                    priority=project.priority,
                    own_priority=task.priority,
                )
            )
    return flat


@dataclass
class TaskBuckets:
    overdue: List[Any] = field(default_factory=list)
    today: List[Any] = field(default_factory=list)
    upcoming: List[Any] = field(default_factory=list)
    completed: List[Any] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            "overdue": len(self.overdue),
            "today": len(self.today),
            "upcoming": len(self.upcoming),
            "completed": len(self.completed),
        }


def _day(value: Union[date, datetime, None]) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def bucket_tasks(tasks: Iterable[Any], today: Optional[date] = None) -> TaskBuckets:
    """Partition tasks by due date relative to ``today``.

    Membership is decided on calendar days only; time of day never matters.
    Done tasks only ever land in ``completed``. Unfinished tasks without a due
    date, or due more than a week out, land nowhere.
    """
    today = today or date.today()
    horizon = today + timedelta(days=UPCOMING_WINDOW_DAYS)
    buckets = TaskBuckets()
    for task in tasks:
        if task.status == "done":
            buckets.completed.append(task)
            continue
        due = _day(task.end_date)
        if due is None:
            continue
        if due < today:
            buckets.overdue.append(task)
        elif due == today:
            buckets.today.append(task)
        elif due <= horizon:
            buckets.upcoming.append(task)
    return buckets


def count_by(items: Iterable[Any], key: Union[str, Callable[[Any], Any]]) -> Dict[str, int]:
    getter = key if callable(key) else (lambda item: getattr(item, key))
    counts: Dict[str, int] = {}
    for item in items:
        label = getter(item)
        counts[label] = counts.get(label, 0) + 1
    return counts


def rate(numerator: float, denominator: float) -> int:
    """Whole-number percentage, rounding halves up; 0 when the denominator is 0."""
    if not denominator:
        return 0
    return int(math.floor(100 * numerator / denominator + 0.5))


def to_chart_data(counts: Dict[str, int]) -> List[Dict[str, Any]]:
    return [
        {"name": (str(label)[:1].upper() + str(label)[1:]) if label else "", "value": value}
        for label, value in counts.items()
    ]


def task_stats(tasks: Sequence[Any]) -> Dict[str, int]:
    counts = count_by(tasks, "status")
    return {
        "total": len(tasks),
        "todo": counts.get("todo", 0),
        "in_progress": counts.get("in-progress", 0),
        "done": counts.get("done", 0),
    }


def project_stats(projects: Sequence[Project]) -> Dict[str, int]:
    total_projects = len(projects)
    completed_projects = sum(1 for p in projects if p.status == "completed")
    active_projects = sum(1 for p in projects if p.status == "active")
    total_tasks = sum(len(p.tasks) for p in projects)
    completed_tasks = sum(1 for p in projects for t in p.tasks if t.status == "done")
    avg_progress = (
        int(math.floor(sum(p.progress for p in projects) / total_projects + 0.5))
        if total_projects
        else 0
    )
    return {
        "total_projects": total_projects,
        "completed_projects": completed_projects,
        "active_projects": active_projects,
        "total_tasks": total_tasks,
        "completed_tasks": completed_tasks,
        "avg_progress": avg_progress,
        "completion_rate": rate(completed_projects, total_projects),
        "task_completion_rate": rate(completed_tasks, total_tasks),
    }


def progress_series(projects: Sequence[Project], limit: int = 8, name_width: int = 20) -> List[Dict[str, Any]]:
    series = []
    for project in projects[:limit]:
        name = strip_html(project.name)
        if len(name) > name_width:
            name = name[:name_width] + "..."
        series.append({"name": name, "progress": project.progress, "tasks": project.task_count})
    return series


def group_by_status(tasks: Iterable[Any]) -> Dict[str, List[Any]]:
    """Board columns in workflow order; tasks with an unknown status are left out."""
    columns: Dict[str, List[Any]] = {status: [] for status in TASK_STATUSES}
    for task in tasks:
        if task.status in columns:
            columns[task.status].append(task)
    return columns


def filter_clients(clients: Iterable[Client], query: str = "", status: str = "all") -> List[Client]:
    needle = (query or "").strip().lower()
    result = []
    for client in clients:
        if status != "all" and client.status != status:
            continue
        if needle and not any(
            needle in (value or "").lower() for value in (client.name, client.company, client.email)
        ):
            continue
        result.append(client)
    return result


def filter_tasks(
    tasks: Iterable[ProjectTask],
    query: str = "",
    assignee: Optional[str] = None,
    priority: Optional[str] = None,
) -> List[ProjectTask]:
    needle = (query or "").strip().lower()
    result = []
    for task in tasks:
        if assignee and task.assignee != assignee:
            continue
        if priority and task.priority != priority:
            continue
        if needle and needle not in task.name.lower() and needle not in strip_html(task.project_name).lower():
            continue
        result.append(task)
    return result
