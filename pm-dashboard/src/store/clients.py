"""Clients collection.

Clients are not linked to projects: deleting one never touches a project row.
``project_count`` and ``total_value`` are denormalized counters that only the
seed data sets; edits made through the dialog leave them as stored.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError

from src.activity_log import track_operation
from src.errors import StoreError, report_error
from src.workspace.entities import Client

from .convert import client_from_doc
from .db import get_session
from .models import ClientRecord


COLLECTION = "clients"

EDITABLE_FIELDS = ("name", "email", "company", "phone", "status", "notes", "avatar")

SAMPLE_CLIENTS: Sequence[Dict[str, Any]] = (
    {
        "name": "Acme Corporation",
        "email": "contact@acme.com",
        "company": "Acme Corp",
        "phone": "+1 555-0100",
        "status": "active",
        "project_count": 3,
        "total_value": 125000,
        "notes": "Key enterprise client",
    },
    {
        "name": "TechStart Inc",
        "email": "hello@techstart.io",
        "company": "TechStart",
        "phone": "+1 555-0101",
        "status": "active",
        "project_count": 2,
        "total_value": 45000,
    },
    {
        "name": "Global Finance",
        "email": "projects@globalfinance.com",
        "company": "Global Finance Ltd",
        "phone": "+1 555-0102",
        "status": "active",
        "project_count": 5,
        "total_value": 280000,
        "notes": "Premium banking client",
    },
    {
        "name": "HealthPlus",
        "email": "dev@healthplus.org",
        "company": "HealthPlus Foundation",
        "status": "lead",
        "project_count": 0,
        "total_value": 0,
    },
    {
        "name": "RetailMax",
        "email": "tech@retailmax.com",
        "company": "RetailMax LLC",
        "phone": "+1 555-0104",
        "status": "inactive",
        "project_count": 1,
        "total_value": 18000,
    },
)


def _record(fields: Dict[str, Any]) -> ClientRecord:
    return ClientRecord(
        name=fields["name"],
        email=fields["email"],
        company=fields["company"],
        phone=fields.get("phone") or "",
        status=fields.get("status") or "lead",
        notes=fields.get("notes") or "",
        avatar=fields.get("avatar") or None,
        project_count=int(fields.get("project_count") or 0),
        total_value=float(fields.get("total_value") or 0),
    )


def list_clients(*, actor: Optional[str] = None, database_url: Optional[str] = None) -> List[Client]:
    """List clients.

    Args:
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Returns:
        Clients, newest first. Empty on database errors (which are reported).
    """
    try:
        with track_operation(COLLECTION, "list", user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                rows = session.execute(
                    select(ClientRecord).order_by(desc(ClientRecord.created_at))
                ).scalars().all()
                docs = [row.to_dict() for row in rows]
            op.detail["count"] = len(docs)
    except SQLAlchemyError as exc:
        report_error("Failed to load clients", exc)
        return []
    return [client_from_doc(doc) for doc in docs]


def create_client(
    fields: Dict[str, Any],
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> str:
    """Create a client.

    New clients always start with zero projects and zero value.

    Args:
        fields: name, email, company and optional phone, status, notes, avatar
        actor: Who is acting; recorded in the activity log
        database_url: Optional database URL override

    Returns:
        The new client's id.
    """
    record = _record({k: fields.get(k) for k in EDITABLE_FIELDS})
    try:
        with track_operation(
            COLLECTION, "create", entity_label=record.name, user_id=actor, database_url=database_url
        ) as op:
            with get_session(database_url) as session:
                session.add(record)
                session.commit()
                op.entity_id = record.id
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to save client: {exc}", collection=COLLECTION, operation="create") from exc
    return record.id


def update_client(
    client_id: str,
    updates: Dict[str, Any],
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> None:
    """Apply a partial update; only EDITABLE_FIELDS are written.

    Raises:
        StoreError: The client does not exist or the write failed.
    """
    changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}
    try:
        with track_operation(
            COLLECTION, "update", entity_id=client_id, user_id=actor, database_url=database_url,
            detail={"fields": sorted(changes)},
        ) as op:
            with get_session(database_url) as session:
                record = session.get(ClientRecord, client_id)
                if record is None:
                    raise StoreError("Client not found", collection=COLLECTION, operation="update")
                for key, value in changes.items():
                    setattr(record, key, value)
                op.entity_label = record.name
                session.commit()
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to save client: {exc}", collection=COLLECTION, operation="update") from exc


def delete_client(
    client_id: str,
    *,
    actor: Optional[str] = None,
    database_url: Optional[str] = None,
) -> bool:
    """Delete a client. Projects naming the client are left untouched.

    Returns:
        False if the client did not exist.
    """
    try:
        with track_operation(COLLECTION, "delete", entity_id=client_id, user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                record = session.get(ClientRecord, client_id)
                if record is None:
                    op.detail["missing"] = True
                    return False
                op.entity_label = record.name
                session.delete(record)
                session.commit()
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to delete client: {exc}", collection=COLLECTION, operation="delete") from exc
    return True


def seed_clients(*, actor: Optional[str] = None, database_url: Optional[str] = None) -> int:
    records = [_record(dict(sample)) for sample in SAMPLE_CLIENTS]
    try:
        with track_operation(COLLECTION, "seed", user_id=actor, database_url=database_url) as op:
            with get_session(database_url) as session:
                session.add_all(records)
                session.commit()
            op.detail["count"] = len(records)
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to seed clients: {exc}", collection=COLLECTION, operation="seed") from exc
    return len(records)
