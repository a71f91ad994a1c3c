"""In-memory entity types shared by the store, derivations and pages.

Dates are always ``datetime`` (naive, UTC) once an entity exists; the store's
conversion layer is the only place that deals with other encodings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


PROJECT_STATUSES = ("backlog", "planned", "active", "completed", "cancelled")
PRIORITIES = ("low", "medium", "high", "urgent")
TASK_STATUSES = ("todo", "in-progress", "done")
CLIENT_STATUSES = ("active", "inactive", "lead")

TASK_STATUS_LABELS = {"todo": "To Do", "in-progress": "In Progress", "done": "Done"}

_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(value: Optional[str]) -> str:
    if not value:
        return ""
    return _TAG_RE.sub("", value).strip()


@dataclass
class Task:
    id: str
    name: str
    assignee: str = "Unassigned"
    status: str = "todo"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    priority: Optional[str] = None


@dataclass
class ProjectTask:
    """A task lifted out of its project, carrying the project's id, name and priority."""

    id: str
    name: str
    assignee: str
    status: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    project_id: str
    project_name: str
    priority: str
    own_priority: Optional[str] = None


@dataclass
class Project:
    id: str
    name: str
    description: str = ""
    status: str = "planned"
    priority: str = "medium"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    progress: int = 0
    task_count: int = 0
    tasks: List[Task] = field(default_factory=list)
    members: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    client: str = ""
    type_label: str = "Project"
    duration_label: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def plain_name(self) -> str:
        return strip_html(self.name)


@dataclass
class Client:
    id: str
    name: str
    email: str
    company: str
    phone: str = ""
    status: str = "lead"
    project_count: int = 0
    total_value: float = 0.0
    avatar: Optional[str] = None
    notes: str = ""
    created_at: Optional[datetime] = None


@dataclass
class Idea:
    id: str
    title: str
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class TimeEntry:
    id: str
    user_id: str
    project_id: str
    project_name: str
    description: str
    date: datetime
    hours: float
    billable: bool = True
    created_at: Optional[datetime] = None
