"""Time entries collection, scoped per user."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError

from src.activity_log import track_operation
from src.errors import StoreError, report_error
from src.workspace.entities import TimeEntry
from src.workspace.timesheet import TimeEntryDraft

from .convert import time_entry_from_doc, to_datetime
from .db import get_session
from .models import TimeEntryRecord


COLLECTION = "time_entries"


def _list(user_id: Optional[str], actor: Optional[str], database_url: Optional[str]) -> List[TimeEntry]:
    try:
        with track_operation(
            COLLECTION, "list", user_id=actor or user_id, database_url=database_url,
            detail={"scope": "user" if user_id else "all"},
        ) as op:
            with get_session(database_url) as session:
                query = select(TimeEntryRecord)
                if user_id is not None:
                    query = query.where(TimeEntryRecord.user_id == user_id)
                query = query.order_by(desc(TimeEntryRecord.date), desc(TimeEntryRecord.created_at))
                docs = [row.to_dict() for row in session.execute(query).scalars().all()]
            op.detail["count"] = len(docs)
    except SQLAlchemyError as exc:
        report_error("Failed to load time entries", exc)
        return []
    return [time_entry_from_doc(doc) for doc in docs]


def list_time_entries(
    user_id: str,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> List[TimeEntry]:
    """List one user's time entries.

    Args:
        user_id: Whose entries to return
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Returns:
        Entries ordered by date, most recent first. Empty on database errors.
    """
    return _list(user_id, actor, database_url)


def list_all_time_entries(*, actor: Optional[str] = None, database_url: Optional[str] = None) -> List[TimeEntry]:
    """Every user's entries; feeds the reports view."""
    return _list(None, actor, database_url)


def add_time_entry(
    draft: TimeEntryDraft,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> TimeEntry:
    """Persist a time entry.

    Args:
        draft: The validated entry (from the timer or the manual form)
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Returns:
        The stored entry, with its id and created_at filled in.

    Raises:
        StoreError: The write failed.
    """
    record = TimeEntryRecord(
        user_id=draft.user_id,
        project_id=draft.project_id,
        project_name=draft.project_name,
        description=draft.description,
        date=to_datetime(draft.date),
        hours=float(draft.hours),
        billable=bool(draft.billable),
    )
    try:
        with track_operation(
            COLLECTION, "create", entity_label=draft.project_name, user_id=actor or draft.user_id,
            database_url=database_url, detail={"hours": draft.hours, "billable": draft.billable},
        ) as op:
            with get_session(database_url) as session:
                session.add(record)
                session.commit()
                op.entity_id = record.id
                doc = record.to_dict()
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to save time entry: {exc}", collection=COLLECTION, operation="create") from exc
    return time_entry_from_doc(doc)


def delete_time_entry(entry_id: str, *, actor: Optional[str] = None, database_url: Optional[str] = None) -> bool:
    try:
        with track_operation(COLLECTION, "delete", entity_id=entry_id, user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                record = session.get(TimeEntryRecord, entry_id)
                if record is None:
                    op.detail["missing"] = True
                    return False
                op.entity_label = record.project_name
                session.delete(record)
                session.commit()
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to delete time entry: {exc}", collection=COLLECTION, operation="delete") from exc
    return True
