"""Activity log database models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, Index, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _generate_id() -> str:
    return str(uuid.uuid4())


class ActivityRecord(Base):
    """One store operation: what ran, against which entity, and how it ended.

    Rows double as the dashboard's log and as the feed behind the Inbox page.
    """

    __tablename__ = "activity_log"

    id = Column(String(36), primary_key=True, default=_generate_id)

    # What was touched
    collection = Column(String(64), nullable=False, index=True)  # projects, clients, ...
    operation = Column(String(64), nullable=False, index=True)  # list, create, update, ...
    entity_id = Column(String(64), nullable=True, index=True)
    entity_label = Column(Text, nullable=True)  # human-readable name for the Inbox

    # Who
    user_id = Column(String(256), nullable=True, index=True)

    # Outcome
    success = Column(Boolean, nullable=False, default=False, index=True)
    error_type = Column(String(128), nullable=True)
    error_message = Column(Text, nullable=True)
    detail_json = Column(Text, nullable=True)

    # Timing
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    finished_at = Column(DateTime, nullable=True)
    duration_ms = Column(Float, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_activity_log_collection_operation", "collection", "operation"),
        Index("ix_activity_log_started_success", "started_at", "success"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "collection": self.collection,
            "operation": self.operation,
            "entity_id": self.entity_id,
            "entity_label": self.entity_label,
            "user_id": self.user_id,
            "success": self.success,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "detail_json": self.detail_json,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_ms": self.duration_ms,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
