"""Document-style tables, one per collection.

Nested and list-valued fields (a project's tasks, members and tags) are kept
as JSON text so a project row holds the whole project document, tasks
included. Task dates inside that JSON are ISO strings.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def _generate_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.utcnow()


def _loads_list(raw) -> list:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return []
    return value if isinstance(value, list) else []


class ProjectRecord(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_generate_id)
    name = Column(Text, nullable=False)
    description = Column(Text, default="")
    status = Column(String(32), default="planned", index=True)
    priority = Column(String(32), default="medium")
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    progress = Column(Integer, default=0)
    task_count = Column(Integer, default=0)
    tasks = Column(Text, default="[]")  # JSON list of task documents
    members = Column(Text, default="[]")  # JSON list
    tags = Column(Text, default="[]")  # JSON list
    client = Column(String(256), default="")
    type_label = Column(String(128), default="Project")
    duration_label = Column(String(128), default="")
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "status": self.status,
            "priority": self.priority,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "progress": self.progress or 0,
            "taskCount": self.task_count or 0,
            "tasks": _loads_list(self.tasks),
            "members": _loads_list(self.members),
            "tags": _loads_list(self.tags),
            "client": self.client or "",
            "typeLabel": self.type_label or "Project",
            "durationLabel": self.duration_label or "",
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class ClientRecord(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_generate_id)
    name = Column(String(256), nullable=False)
    email = Column(String(256), nullable=False)
    company = Column(String(256), nullable=False)
    phone = Column(String(64), default="")
    status = Column(String(16), default="lead", index=True)
    project_count = Column(Integer, default=0)
    total_value = Column(Float, default=0.0)
    avatar = Column(String(512), nullable=True)
    notes = Column(Text, default="")
    created_at = Column(DateTime, default=_utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "company": self.company,
            "phone": self.phone or "",
            "status": self.status,
            "projectCount": self.project_count or 0,
            "totalValue": self.total_value or 0.0,
            "avatar": self.avatar,
            "notes": self.notes or "",
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class IdeaRecord(Base):
    __tablename__ = "ideas"

    id = Column(String(36), primary_key=True, default=_generate_id)
    title = Column(String(512), nullable=False)
    description = Column(Text, default="")
    created_at = Column(DateTime, default=_utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description or "",
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class TimeEntryRecord(Base):
    __tablename__ = "time_entries"

    id = Column(String(36), primary_key=True, default=_generate_id)
    user_id = Column(String(256), nullable=False, index=True)
    project_id = Column(String(36), nullable=False, index=True)
    project_name = Column(Text, default="")  # denormalized for display
    description = Column(Text, default="")
    date = Column(DateTime, nullable=False, index=True)
    hours = Column(Float, nullable=False, default=0.0)
    billable = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "projectId": self.project_id,
            "projectName": self.project_name or "",
            "taskDescription": self.description or "",
            "date": self.date,
            "hours": self.hours or 0.0,
            "billable": bool(self.billable),
            "createdAt": self.created_at,
        }
