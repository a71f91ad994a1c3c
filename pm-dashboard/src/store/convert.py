"""Document <-> entity mapping, applied once at the fetch boundary.

Stored documents carry dates in several shapes: native DateTime columns,
ISO strings inside JSON, epoch numbers from older imports, and serialized
``{"seconds": ..., "nanoseconds": ...}`` timestamps. ``to_datetime`` folds all
of them into a naive UTC ``datetime`` so nothing past this module branches on
representation.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

from src.workspace.entities import Client, Idea, Project, Task, TimeEntry


_EPOCH_MS_THRESHOLD = 1e11


def _from_epoch(value: float) -> Optional[datetime]:
    if math.isnan(value) or math.isinf(value):
        return None
    if abs(value) > _EPOCH_MS_THRESHOLD:
        value = value / 1000.0
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return None


def to_datetime(value: Any) -> Optional[datetime]:
    """Normalize any supported timestamp encoding; unparseable input gives None."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        if pd.isna(value):
            return None
        if value.tzinfo is not None:
            value = value.tz_convert("UTC").tz_localize(None)
        return value.to_pydatetime()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _from_epoch(float(value))
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
            return _from_epoch(float(seconds) + float(nanos) / 1e9)
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if len(text) == 8 and text.isdigit():
            # compact ISO date, YYYYMMDD
            try:
                return datetime.strptime(text, "%Y%m%d")
            except ValueError:
                pass
        try:
            return _from_epoch(float(text))
        except ValueError:
            pass
        try:
            parsed = pd.to_datetime(text, utc=True)
        except (ValueError, TypeError, OverflowError):
            return None
        if pd.isna(parsed):
            return None
        return parsed.tz_convert("UTC").tz_localize(None).to_pydatetime()
    return None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v)]


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


# ---------------- Tasks (embedded in projects) ----------------

def task_from_doc(doc: Dict[str, Any]) -> Task:
    return Task(
        id=str(doc.get("id") or ""),
        name=str(doc.get("name") or ""),
        assignee=str(doc.get("assignee") or "Unassigned"),
        status=str(doc.get("status") or "todo"),
        start_date=to_datetime(doc.get("startDate")),
        end_date=to_datetime(doc.get("endDate")),
        priority=doc.get("priority") or None,
    )


def task_to_doc(task: Task) -> Dict[str, Any]:
    doc = {
        "id": task.id,
        "name": task.name,
        "assignee": task.assignee,
        "status": task.status,
        "startDate": _iso(task.start_date),
        "endDate": _iso(task.end_date),
    }
    if task.priority:
        doc["priority"] = task.priority
    return doc


# ---------------- Projects ----------------

def project_from_doc(doc: Dict[str, Any]) -> Project:
    tasks = [task_from_doc(t) for t in doc.get("tasks") or [] if isinstance(t, dict)]
    return Project(
        id=str(doc.get("id") or ""),
        name=str(doc.get("name") or ""),
        description=str(doc.get("description") or ""),
        status=str(doc.get("status") or "planned"),
        priority=str(doc.get("priority") or "medium"),
        start_date=to_datetime(doc.get("startDate")),
        end_date=to_datetime(doc.get("endDate")),
        progress=_int(doc.get("progress")),
        task_count=_int(doc.get("taskCount")),
        tasks=tasks,
        members=_str_list(doc.get("members")),
        tags=_str_list(doc.get("tags")),
        client=str(doc.get("client") or ""),
        type_label=str(doc.get("typeLabel") or "Project"),
        duration_label=str(doc.get("durationLabel") or ""),
        created_at=to_datetime(doc.get("createdAt")),
        updated_at=to_datetime(doc.get("updatedAt")),
    )


# ---------------- Clients / ideas / time entries ----------------

def client_from_doc(doc: Dict[str, Any]) -> Client:
    return Client(
        id=str(doc.get("id") or ""),
        name=str(doc.get("name") or ""),
        email=str(doc.get("email") or ""),
        company=str(doc.get("company") or ""),
        phone=str(doc.get("phone") or ""),
        status=str(doc.get("status") or "lead"),
        project_count=_int(doc.get("projectCount")),
        total_value=_float(doc.get("totalValue")),
        avatar=doc.get("avatar") or None,
        notes=str(doc.get("notes") or ""),
        created_at=to_datetime(doc.get("createdAt")) or datetime.utcnow(),
    )


def idea_from_doc(doc: Dict[str, Any]) -> Idea:
    return Idea(
        id=str(doc.get("id") or ""),
        title=str(doc.get("title") or ""),
        description=str(doc.get("description") or ""),
        created_at=to_datetime(doc.get("createdAt")) or datetime.utcnow(),
        updated_at=to_datetime(doc.get("updatedAt")),
    )


def time_entry_from_doc(doc: Dict[str, Any]) -> TimeEntry:
    return TimeEntry(
        id=str(doc.get("id") or ""),
        user_id=str(doc.get("userId") or ""),
        project_id=str(doc.get("projectId") or ""),
        project_name=str(doc.get("projectName") or ""),
        description=str(doc.get("taskDescription") or ""),
        date=to_datetime(doc.get("date")) or datetime.utcnow(),
        hours=_float(doc.get("hours")),
        billable=bool(doc.get("billable", True)),
        created_at=to_datetime(doc.get("createdAt")),
    )
