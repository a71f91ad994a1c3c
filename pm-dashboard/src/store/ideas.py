"""Ideas collection: free-form notes, independent of projects."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError

from src.activity_log import track_operation
from src.errors import StoreError, report_error
from src.workspace.entities import Idea

from .convert import idea_from_doc
from .db import get_session
from .models import IdeaRecord


COLLECTION = "ideas"


def list_ideas(*, actor: Optional[str] = None, database_url: Optional[str] = None) -> List[Idea]:
    """Ideas, newest first. Database errors are reported and give []."""
    try:
        with track_operation(COLLECTION, "list", user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                rows = session.execute(select(IdeaRecord).order_by(desc(IdeaRecord.created_at))).scalars().all()
                docs = [row.to_dict() for row in rows]
            op.detail["count"] = len(docs)
    except SQLAlchemyError as exc:
        report_error("Failed to load ideas", exc)
        return []
    return [idea_from_doc(doc) for doc in docs]


def create_idea(
    title: str,
    description: str = "",
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> str:
    """Create an idea.

    Args:
        title: Required title
        description: Rich-text body; stored as given
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Returns:
        The new idea's id.
    """
    record = IdeaRecord(title=title, description=description or "")
    try:
        with track_operation(COLLECTION, "create", entity_label=title, user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                session.add(record)
                session.commit()
                op.entity_id = record.id
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to save idea: {exc}", collection=COLLECTION, operation="create") from exc
    return record.id


def update_idea(
    idea_id: str,
    *,
    title: Optional[str] = None,
    description: Optional[str] = None,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> None:
    """Edit title and/or description; always stamps updated_at."""
    try:
        with track_operation(COLLECTION, "update", entity_id=idea_id, user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                record = session.get(IdeaRecord, idea_id)
                if record is None:
                    raise StoreError("Idea not found", collection=COLLECTION, operation="update")
                if title is not None:
                    record.title = title
                if description is not None:
                    record.description = description
                record.updated_at = datetime.utcnow()
                op.entity_label = record.title
                session.commit()
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to save idea: {exc}", collection=COLLECTION, operation="update") from exc


def delete_idea(idea_id: str, *, actor: Optional[str] = None, database_url: Optional[str] = None) -> bool:
    try:
        with track_operation(COLLECTION, "delete", entity_id=idea_id, user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                record = session.get(IdeaRecord, idea_id)
                if record is None:
                    op.detail["missing"] = True
                    return False
                op.entity_label = record.title
                session.delete(record)
                session.commit()
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to delete idea: {exc}", collection=COLLECTION, operation="delete") from exc
    return True
