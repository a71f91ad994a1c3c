"""Workspace domain: entity types and the pure derivations behind every view.

- entities: dataclasses for projects, tasks, clients, ideas and time entries
- derive: flattening, due-date buckets, counts and rates
- calendar / timesheet / reports: view-specific aggregation
- collection_state / dialog / view_state: presentation state helpers
- validation: form checks run before any store call
"""

from .derive import (
    TaskBuckets,
    bucket_tasks,
    count_by,
    flatten_tasks,
    project_stats,
    rate,
    task_stats,
    to_chart_data,
)
from .entities import Client, Idea, Project, ProjectTask, Task, TimeEntry

__all__ = [
    "Client",
    "Idea",
    "Project",
    "ProjectTask",
    "Task",
    "TaskBuckets",
    "TimeEntry",
    "bucket_tasks",
    "count_by",
    "flatten_tasks",
    "project_stats",
    "rate",
    "task_stats",
    "to_chart_data",
]
