"""Activity log repository functions."""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, desc, func
from sqlalchemy.exc import SQLAlchemyError

from src.settings import get_config
from src.store.db import get_engine, get_session

from .models import ActivityRecord, Base


_SENSITIVE_KEYS = {"password", "token", "secret", "credential", "authorization", "api_key"}

# Reads are only persisted when they fail.
READ_OPERATIONS = ("list", "get")


def init_db(database_url: Optional[str] = None) -> None:
    """Initialize the activity table.

    Creates the table if it doesn't exist. Safe to call multiple times.

    Args:
        database_url: Optional database URL override.
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)


def _redact(detail: Dict[str, Any]) -> Dict[str, Any]:
    redacted = {}
    for k, v in detail.items():
        if any(s in k.lower() for s in _SENSITIVE_KEYS):
            redacted[k] = "***REDACTED***"
        elif isinstance(v, dict):
            redacted[k] = _redact(v)
        else:
            redacted[k] = v
    return redacted


def log_activity(
    collection: str,
    operation: str,
    success: bool = False,
    entity_id: Optional[str] = None,
    entity_label: Optional[str] = None,
    user_id: Optional[str] = None,
    error_type: Optional[str] = None,
    error_message: Optional[str] = None,
    detail: Optional[Dict[str, Any]] = None,
    started_at: Optional[datetime] = None,
    finished_at: Optional[datetime] = None,
    duration_ms: Optional[float] = None,
    database_url: Optional[str] = None,
) -> Optional[str]:
    """Persist one activity record.

    Args:
        collection: Collection the operation touched (projects, clients, ...)
        operation: list, get, create, update, delete or seed
        success: Whether the operation succeeded
        entity_id: Id of the affected entity, if any
        entity_label: Human-readable name of the entity
        user_id: Who performed the operation
        error_type: Exception class name on failure
        error_message: Exception message on failure
        detail: Extra context (sensitive keys are redacted)
        started_at: When the operation started
        finished_at: When the operation finished
        duration_ms: Duration in milliseconds
        database_url: Optional database URL override

    Returns:
        The new record's id, or None when logging is disabled or failed.
    """
    if not get_config().activity_log_enabled:
        return None

    try:
        session = get_session(database_url)

        detail_json = None
        if detail:
            detail_json = json.dumps(_redact(detail), default=str)[:10000]

        record = ActivityRecord(
            collection=collection,
            operation=operation,
            entity_id=entity_id,
            entity_label=(entity_label or "")[:500] or None,
            user_id=user_id,
            success=success,
            error_type=error_type,
            error_message=error_message[:2000] if error_message else None,
            detail_json=detail_json,
            started_at=started_at or datetime.utcnow(),
            finished_at=finished_at,
            duration_ms=duration_ms,
        )

        session.add(record)
        session.commit()
        record_id = record.id
        session.close()

        return record_id

    except SQLAlchemyError:
        # Logging must never break the dashboard
        return None


def get_activity(
    collection: Optional[str] = None,
    operation: Optional[str] = None,
    success: Optional[bool] = None,
    user_id: Optional[str] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    include_reads: bool = True,
    limit: int = 100,
    offset: int = 0,
    database_url: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Query activity records with filters.

    Args:
        collection: Filter by collection
        operation: Filter by operation
        success: Filter by success status
        user_id: Filter by user
        since: Only records started at or after this time
        until: Only records started before this time
        include_reads: Include failed list/get records
        limit: Maximum number of records
        offset: Offset for pagination
        database_url: Optional database URL override

    Returns:
        List of record dicts, newest first. Empty on database errors.
    """
    try:
        session = get_session(database_url)

        query = session.query(ActivityRecord)

        if collection:
            query = query.filter(ActivityRecord.collection == collection)
        if operation:
            query = query.filter(ActivityRecord.operation == operation)
        if success is not None:
            query = query.filter(ActivityRecord.success == success)
        if user_id:
            query = query.filter(ActivityRecord.user_id == user_id)
        if since:
            query = query.filter(ActivityRecord.started_at >= since)
        if until:
            query = query.filter(ActivityRecord.started_at < until)
        if not include_reads:
            query = query.filter(ActivityRecord.operation.notin_(READ_OPERATIONS))

        query = query.order_by(desc(ActivityRecord.started_at)).limit(limit).offset(offset)

        results = [row.to_dict() for row in query.all()]
        session.close()
        return results

    except SQLAlchemyError:
        return []


def get_activity_record(record_id: str, database_url: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Get a single activity record by id, or None if missing."""
    try:
        session = get_session(database_url)
        row = session.query(ActivityRecord).filter(ActivityRecord.id == record_id).first()
        result = row.to_dict() if row else None
        session.close()
        return result
    except SQLAlchemyError:
        return None


def get_activity_stats(
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    database_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Aggregate statistics over a time window.

    Args:
        since: Start of the window (default: 7 days ago)
        until: End of the window (default: now)
        database_url: Optional database URL override

    Returns:
        Dict with totals, success rate, average duration and per-collection
        and per-operation counts.
    """
    if since is None:
        since = datetime.utcnow() - timedelta(days=7)
    if until is None:
        until = datetime.utcnow()

    empty = {
        "total": 0,
        "succeeded": 0,
        "failed": 0,
        "success_rate": 0,
        "avg_duration_ms": None,
        "by_collection": {},
        "since": since.isoformat(),
        "until": until.isoformat(),
    }

    try:
        session = get_session(database_url)

        window = and_(ActivityRecord.started_at >= since, ActivityRecord.started_at < until)

        total = session.query(func.count(ActivityRecord.id)).filter(window).scalar() or 0
        succeeded = session.query(func.count(ActivityRecord.id)).filter(
            and_(window, ActivityRecord.success.is_(True))
        ).scalar() or 0
        avg_duration = session.query(func.avg(ActivityRecord.duration_ms)).filter(
            and_(window, ActivityRecord.duration_ms.isnot(None))
        ).scalar()
        per_collection = session.query(
            ActivityRecord.collection, func.count(ActivityRecord.id)
        ).filter(window).group_by(ActivityRecord.collection).all()

        session.close()

    except SQLAlchemyError:
        return empty

    success_rate = (succeeded / total * 100) if total > 0 else 0
    return {
        "total": total,
        "succeeded": succeeded,
        "failed": total - succeeded,
        "success_rate": round(success_rate, 2),
        "avg_duration_ms": round(avg_duration, 2) if avg_duration else None,
        "by_collection": {name: count for name, count in per_collection},
        "since": since.isoformat(),
        "until": until.isoformat(),
    }


def get_recent_errors(
    limit: int = 20,
    since: Optional[datetime] = None,
    database_url: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Failed operations, newest first.

    Args:
        limit: Maximum number of records
        since: Start of the window (default: 24 hours ago)
        database_url: Optional database URL override
    """
    if since is None:
        since = datetime.utcnow() - timedelta(days=1)

    try:
        session = get_session(database_url)
        query = session.query(ActivityRecord).filter(
            and_(ActivityRecord.started_at >= since, ActivityRecord.success.is_(False))
        ).order_by(desc(ActivityRecord.started_at)).limit(limit)
        results = [row.to_dict() for row in query.all()]
        session.close()
        return results
    except SQLAlchemyError:
        return []


def cleanup_old_activity(
    retention_days: Optional[int] = None,
    database_url: Optional[str] = None,
) -> int:
    """Delete records older than the retention period.

    Args:
        retention_days: Days to keep (default: PM_ACTIVITY_LOG_RETENTION_DAYS)
        database_url: Optional database URL override

    Returns:
        Number of records deleted.
    """
    if retention_days is None:
        retention_days = get_config().activity_log_retention_days

    cutoff = datetime.utcnow() - timedelta(days=retention_days)

    try:
        session = get_session(database_url)
        deleted = session.query(ActivityRecord).filter(
            ActivityRecord.created_at < cutoff
        ).delete(synchronize_session=False)
        session.commit()
        session.close()
        return deleted
    except SQLAlchemyError:
        return 0
