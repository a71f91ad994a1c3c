"""Wrap store operations so each one leaves an activity record.

Usage::

    with track_operation("projects", "create", user_id=actor) as op:
        ...
        op.entity_id = record.id
        op.entity_label = record.name

The block's exception, if any, is recorded and then re-raised unchanged.
Successful reads ("list", "get") leave no record unless record_success is set.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, Optional

from .repo import READ_OPERATIONS, log_activity


@dataclass
class OperationContext:
    collection: str
    operation: str
    entity_id: Optional[str] = None
    entity_label: Optional[str] = None
    user_id: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)


@contextmanager
def track_operation(
    collection: str,
    operation: str,
    *,
    entity_id: Optional[str] = None,
    entity_label: Optional[str] = None,
    user_id: Optional[str] = None,
    detail: Optional[Dict[str, Any]] = None,
    database_url: Optional[str] = None,
    record_success: Optional[bool] = None,
) -> Iterator[OperationContext]:
    op = OperationContext(
        collection=collection,
        operation=operation,
        entity_id=entity_id,
        entity_label=entity_label,
        user_id=user_id,
        detail=dict(detail or {}),
    )
    if record_success is None:
        record_success = operation not in READ_OPERATIONS
    started_at = datetime.utcnow()
    success = False
    error_type = None
    error_message = None

    try:
        yield op
        success = True
    except Exception as exc:
        error_type = type(exc).__name__
        error_message = str(exc)
        raise
    finally:
        if record_success or not success:
            finished_at = datetime.utcnow()
            log_activity(
                collection=op.collection,
                operation=op.operation,
                success=success,
                entity_id=op.entity_id,
                entity_label=op.entity_label,
                user_id=op.user_id,
                error_type=error_type,
                error_message=error_message,
                detail=op.detail or None,
                started_at=started_at,
                finished_at=finished_at,
                duration_ms=(finished_at - started_at).total_seconds() * 1000,
                database_url=database_url,
            )
