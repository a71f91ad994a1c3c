"""Projects collection, with tasks embedded in each project document.

Tasks are not independently addressable rows: every task operation loads the
owning project, edits its task list and writes the whole list back.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from src.activity_log import track_operation
from src.errors import StoreError, ValidationError, report_error
from src.workspace.entities import PRIORITIES, PROJECT_STATUSES, TASK_STATUSES, Project, Task

from .convert import project_from_doc, task_to_doc, to_datetime
from .db import get_session
from .models import ProjectRecord


COLLECTION = "projects"

STARTER_TASK_NAME = "Kickoff meeting"

# Entity attribute -> column; lists are serialized separately
_SCALAR_FIELDS = {
    "name": "name",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "progress": "progress",
    "task_count": "task_count",
    "client": "client",
    "type_label": "type_label",
    "duration_label": "duration_label",
}
_DATE_FIELDS = ("start_date", "end_date")
_LIST_FIELDS = ("members", "tags")


def _new_id() -> str:
    return str(uuid.uuid4())


def _dump_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([task_to_doc(t) for t in tasks])


def _apply_fields(record: ProjectRecord, fields: Dict[str, Any]) -> None:
    for key, column in _SCALAR_FIELDS.items():
        if key in fields:
            setattr(record, column, fields[key])
    for key in _DATE_FIELDS:
        if key in fields:
            setattr(record, key, to_datetime(fields[key]))
    for key in _LIST_FIELDS:
        if key in fields:
            setattr(record, key, json.dumps(list(fields[key] or [])))
    if "tasks" in fields:
        record.tasks = _dump_tasks(fields["tasks"] or [])


def _record_from_project(project: Project) -> ProjectRecord:
    record = ProjectRecord(id=project.id or _new_id())
    _apply_fields(
        record,
        {
            "name": project.name,
            "description": project.description,
            "status": project.status,
            "priority": project.priority,
            "progress": project.progress,
            "task_count": project.task_count,
            "client": project.client,
            "type_label": project.type_label,
            "duration_label": project.duration_label,
            "start_date": project.start_date,
            "end_date": project.end_date,
            "members": project.members,
            "tags": project.tags,
            "tasks": project.tasks,
        },
    )
    return record


def _write_failed(operation: str, exc: Exception) -> StoreError:
    return StoreError(f"Failed to {operation} project: {exc}", collection=COLLECTION, operation=operation)


# ---------------- Reads ----------------

def list_projects(*, actor: Optional[str] = None, database_url: Optional[str] = None) -> List[Project]:
    """List every project with its embedded tasks.

    Args:
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Returns:
        Projects in creation order. On a database error the failure is
        reported to the error observers and an empty list is returned.
    """
    try:
        with track_operation(COLLECTION, "list", user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                rows = session.execute(
                    select(ProjectRecord).order_by(ProjectRecord.created_at, ProjectRecord.id)
                ).scalars().all()
                docs = [row.to_dict() for row in rows]
            op.detail["count"] = len(docs)
    except SQLAlchemyError as exc:
        report_error("Failed to load projects", exc)
        return []
    return [project_from_doc(doc) for doc in docs]


def get_project(
    project_id: str,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> Optional[Project]:
    """Fetch one project, or None when it is missing or the query failed."""
    try:
        with track_operation(COLLECTION, "get", entity_id=project_id, user_id=actor, database_url=database_url):
            with get_session(database_url) as session:
                row = session.get(ProjectRecord, project_id)
                doc = row.to_dict() if row else None
    except SQLAlchemyError as exc:
        report_error("Failed to load project", exc)
        return None
    return project_from_doc(doc) if doc else None


# ---------------- Project writes ----------------

def project_from_wizard(data: Dict[str, Any], *, now: Optional[datetime] = None) -> Project:
    """Map creation-wizard answers onto a new Project.

    Recognised keys: title, description, status, priority, start_date,
    deadline_date, target_date, owner_name, contributor_names, tags, intent,
    client, add_starter_tasks, tasks (already-built Task list, e.g. from a
    template).
    """
    now = now or datetime.utcnow()

    status = data.get("status") or "planned"
    priority = data.get("priority") or "medium"
    if status not in PROJECT_STATUSES:
        raise ValidationError(f"Unknown project status: {status}", fields=["status"])
    if priority not in PRIORITIES:
        raise ValidationError(f"Unknown priority: {priority}", fields=["priority"])

    start = to_datetime(data.get("start_date")) or now
    end = to_datetime(data.get("deadline_date")) or to_datetime(data.get("target_date")) or now

    members: List[str] = []
    for name in [data.get("owner_name") or "You", *(data.get("contributor_names") or [])]:
        if name and name not in members:
            members.append(name)

    tasks = list(data.get("tasks") or [])
    if data.get("add_starter_tasks"):
        tasks.insert(
            0,
            Task(id=_new_id(), name=STARTER_TASK_NAME, assignee="Team", status="todo", start_date=now, end_date=now),
        )

    return Project(
        id="",
        name=data.get("title") or "Untitled Project",
        description=data.get("description") or "",
        status=status,
        priority=priority,
        start_date=start,
        end_date=end,
        progress=0,
        task_count=len(tasks),
        tasks=tasks,
        members=members,
        tags=list(data.get("tags") or []),
        client=data.get("client") or "",
        type_label=data.get("intent") or "Project",
        duration_label="",
    )


def create_project(
    data: Dict[str, Any],
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> str:
    """Create a project from creation-wizard data.

    Args:
        data: Wizard answers (title, dates, intent, template_tasks, ...);
            see project_from_wizard for the mapping
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Returns:
        The new project's id.

    Raises:
        StoreError: The write failed.
    """
    project = project_from_wizard(data)
    record = _record_from_project(project)
    try:
        with track_operation(
            COLLECTION, "create", entity_id=record.id, entity_label=project.plain_name,
            user_id=actor, database_url=database_url,
        ):
            with get_session(database_url) as session:
                session.add(record)
                session.commit()
    except SQLAlchemyError as exc:
        raise _write_failed("create", exc) from exc
    return record.id


def update_project(
    project_id: str,
    updates: Dict[str, Any],
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> None:
    """Apply a partial update to a project.

    Args:
        project_id: Project to change
        updates: New values keyed by Project attribute names; unknown keys
            are ignored
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Raises:
        StoreError: The project does not exist or the write failed.
    """
    try:
        with track_operation(
            COLLECTION, "update", entity_id=project_id, user_id=actor, database_url=database_url,
            detail={"fields": sorted(updates)},
        ) as op:
            with get_session(database_url) as session:
                record = session.get(ProjectRecord, project_id)
                if record is None:
                    raise StoreError("Project not found", collection=COLLECTION, operation="update")
                _apply_fields(record, updates)
                op.entity_label = record.name
                session.commit()
    except SQLAlchemyError as exc:
        raise _write_failed("update", exc) from exc


def delete_project(
    project_id: str,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> bool:
    """Delete a project (and so its tasks). Returns False if it did not exist."""
    try:
        with track_operation(COLLECTION, "delete", entity_id=project_id, user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                record = session.get(ProjectRecord, project_id)
                if record is None:
                    op.detail["missing"] = True
                    return False
                op.entity_label = record.name
                session.delete(record)
                session.commit()
    except SQLAlchemyError as exc:
        raise _write_failed("delete", exc) from exc
    return True


def seed_projects(
    projects: Optional[Iterable[Project]] = None,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> int:
    """Insert sample projects in one transaction; returns how many were added."""
    if projects is None:
        from .seed import sample_projects

        projects = sample_projects()
    records = [_record_from_project(replace(p, id="")) for p in projects]
    try:
        with track_operation(COLLECTION, "seed", user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                session.add_all(records)
                session.commit()
            op.detail["count"] = len(records)
    except SQLAlchemyError as exc:
        raise _write_failed("seed", exc) from exc
    return len(records)


# ---------------- Embedded tasks ----------------

def _mutate_tasks(
    project_id: str,
    operation: str,
    mutate: Callable[[List[Task]], List[Task]],
    *,
    task_id: Optional[str],
    actor: Optional[str],
    database_url: Optional[str],
    detail: Optional[Dict[str, Any]] = None,
) -> None:
    try:
        with track_operation(
            COLLECTION, operation, entity_id=project_id, user_id=actor,
            database_url=database_url, detail=dict(detail or {}, task_id=task_id),
        ) as op:
            with get_session(database_url) as session:
                record = session.get(ProjectRecord, project_id)
                if record is None:
                    raise StoreError("Project not found", collection=COLLECTION, operation=operation)
                op.entity_label = record.name
                tasks = project_from_doc(record.to_dict()).tasks
                record.tasks = _dump_tasks(mutate(tasks))
                session.commit()
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to {operation.replace('_', ' ')}: {exc}", collection=COLLECTION, operation=operation) from exc


def _find(tasks: List[Task], task_id: str, operation: str) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    raise StoreError("Task not found", collection=COLLECTION, operation=operation)


def add_task(
    project_id: str,
    task: Task,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> str:
    """Append a task to a project's task list.

    Args:
        project_id: Project that receives the task
        task: The task; a blank id is replaced with a generated one
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Returns:
        The task id.
    """
    task = replace(task, id=task.id or _new_id())

    def mutate(tasks: List[Task]) -> List[Task]:
        if any(t.id == task.id for t in tasks):
            raise StoreError("Duplicate task id", collection=COLLECTION, operation="add_task")
        return tasks + [task]

    _mutate_tasks(
        project_id, "add_task", mutate, task_id=task.id, actor=actor, database_url=database_url,
        detail={"task_name": task.name, "assignee": task.assignee},
    )
    return task.id


def update_task(
    project_id: str,
    task_id: str,
    updates: Dict[str, Any],
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> None:
    """Partial task update keyed by Task attribute names (id cannot change)."""
    changes = {k: v for k, v in updates.items() if k != "id"}
    for key in _DATE_FIELDS:
        if key in changes:
            changes[key] = to_datetime(changes[key])

    def mutate(tasks: List[Task]) -> List[Task]:
        index = _find(tasks, task_id, "update_task")
        tasks[index] = replace(tasks[index], **changes)
        return tasks

    _mutate_tasks(
        project_id, "update_task", mutate, task_id=task_id, actor=actor, database_url=database_url,
        detail={"fields": sorted(changes)},
    )


def set_task_status(
    project_id: str,
    task_id: str,
    status: str,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> None:
    """Move a task to another board column."""
    if status not in TASK_STATUSES:
        raise ValidationError(f"Unknown task status: {status}", fields=["status"])

    def mutate(tasks: List[Task]) -> List[Task]:
        index = _find(tasks, task_id, "set_task_status")
        tasks[index] = replace(tasks[index], status=status)
        return tasks

    _mutate_tasks(
        project_id, "set_task_status", mutate, task_id=task_id, actor=actor, database_url=database_url,
        detail={"status": status},
    )


def delete_task(
    project_id: str,
    task_id: str,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> None:
    def mutate(tasks: List[Task]) -> List[Task]:
        return [t for t in tasks if t.id != task_id]

    _mutate_tasks(project_id, "delete_task", mutate, task_id=task_id, actor=actor, database_url=database_url)
