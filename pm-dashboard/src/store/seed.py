"""Demo projects for an empty workspace. Dates are relative to the seeding day."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from src.workspace.entities import Project, Task


def _task(name: str, assignee: str, status: str, start: datetime, days: int) -> Task:
    return Task(
        id=str(uuid.uuid4()),
        name=name,
        assignee=assignee,
        status=status,
        start_date=start,
        end_date=start + timedelta(days=days),
    )


def sample_projects(today: Optional[datetime] = None) -> List[Project]:
    now = (today or datetime.utcnow()).replace(hour=9, minute=0, second=0, microsecond=0)

    def d(offset: int) -> datetime:
        return now + timedelta(days=offset)

    return [
        Project(
            id="",
            name="Website Redesign",
            description="Refresh the marketing site with the new brand system.",
            status="active",
            priority="high",
            start_date=d(-21),
            end_date=d(14),
            progress=45,
            task_count=4,
            members=["Jason D", "Alice M", "Sam K"],
            tags=["web", "design"],
            client="Acme Corporation",
            type_label="Design",
            duration_label="5 weeks",
            tasks=[
                _task("Audit current pages", "Alice M", "done", d(-21), 5),
                _task("Wireframes", "Sam K", "done", d(-14), 6),
                _task("Visual design", "Alice M", "in-progress", d(-7), 6),
                _task("Build templates", "Jason D", "todo", d(-1), 4),
            ],
        ),
        Project(
            id="",
            name="Mobile App Launch",
            description="Ship v1 of the customer app to both stores.",
            status="active",
            priority="urgent",
            start_date=d(-30),
            end_date=d(7),
            progress=70,
            task_count=3,
            members=["Jason D", "Priya R"],
            tags=["mobile"],
            client="TechStart Inc",
            type_label="Development",
            duration_label="6 weeks",
            tasks=[
                _task("Beta feedback fixes", "Priya R", "in-progress", d(-5), 5),
                _task("Store listing copy", "Jason D", "todo", d(-2), 2),
                _task("Release checklist", "Priya R", "todo", d(1), 2),
            ],
        ),
        Project(
            id="",
            name="Q3 Reporting Dashboard",
            description="Internal KPI dashboard for the finance team.",
            status="planned",
            priority="medium",
            start_date=d(7),
            end_date=d(45),
            progress=0,
            task_count=2,
            members=["Sam K"],
            tags=["analytics"],
            client="Global Finance",
            type_label="Analytics",
            duration_label="5 weeks",
            tasks=[
                _task("Gather requirements", "Sam K", "todo", d(7), 5),
                _task("Data model", "Sam K", "todo", d(12), 7),
            ],
        ),
        Project(
            id="",
            name="Brand Guidelines",
            description="Document typography, colour and voice.",
            status="completed",
            priority="low",
            start_date=d(-60),
            end_date=d(-20),
            progress=100,
            task_count=2,
            members=["Alice M"],
            tags=["design"],
            client="",
            type_label="Design",
            duration_label="6 weeks",
            tasks=[
                _task("Typography", "Alice M", "done", d(-60), 10),
                _task("Tone of voice", "Alice M", "done", d(-45), 10),
            ],
        ),
    ]
