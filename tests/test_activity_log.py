import json
from datetime import datetime, timedelta

import pytest

from src.activity_log import (
    cleanup_old_activity,
    get_activity,
    get_activity_record,
    get_activity_stats,
    get_recent_errors,
    log_activity,
    track_operation,
)
from src.activity_log.models import ActivityRecord
from src.errors import StoreError
from src.settings import reset_config
from src.store.db import get_session
from src.store.projects import create_project, list_projects


def test_store_writes_leave_activity(db_url):
    create_project({"title": "Audit"}, actor="owner@example.com", database_url=db_url)
    list_projects(actor="owner@example.com", database_url=db_url)

    writes = get_activity(include_reads=False, database_url=db_url)
    assert [(r["collection"], r["operation"]) for r in writes] == [("projects", "create")]
    assert writes[0]["entity_label"] == "Audit"
    assert writes[0]["user_id"] == "owner@example.com"
    assert writes[0]["success"] is True

    assert [r["operation"] for r in get_activity(database_url=db_url)] == ["create"]


def test_successful_reads_leave_no_record(db_url):
    list_projects(database_url=db_url)
    list_projects(database_url=db_url)
    assert get_activity(database_url=db_url) == []

    with track_operation("projects", "list", database_url=db_url, record_success=True):
        pass
    assert [r["operation"] for r in get_activity(database_url=db_url)] == ["list"]


def test_failed_reads_are_recorded(db_url):
    with pytest.raises(RuntimeError):
        with track_operation("projects", "get", entity_id="p1", database_url=db_url):
            raise RuntimeError("connection lost")

    [record] = get_activity(database_url=db_url)
    assert record["operation"] == "get"
    assert record["success"] is False
    assert get_activity(include_reads=False, database_url=db_url) == []


def test_track_operation_records_and_reraises(db_url):
    with pytest.raises(StoreError):
        with track_operation("clients", "update", entity_id="c1", database_url=db_url) as op:
            op.detail["fields"] = ["name"]
            raise StoreError("Client not found", collection="clients", operation="update")

    [record] = get_activity(database_url=db_url)
    assert record["success"] is False
    assert record["error_type"] == "StoreError"
    assert record["error_message"] == "Client not found"
    assert json.loads(record["detail_json"]) == {"fields": ["name"]}
    assert get_recent_errors(database_url=db_url)[0]["id"] == record["id"]


def test_sensitive_detail_is_redacted(db_url):
    record_id = log_activity(
        "settings", "update", success=True, detail={"api_key": "abc", "nested": {"password": "x"}, "ok": 1},
        database_url=db_url,
    )
    record = get_activity_record(record_id, database_url=db_url)
    assert json.loads(record["detail_json"]) == {
        "api_key": "***REDACTED***",
        "nested": {"password": "***REDACTED***"},
        "ok": 1,
    }


def test_disabled_logging_records_nothing(db_url, monkeypatch):
    monkeypatch.setenv("PM_ACTIVITY_LOG_ENABLED", "false")
    reset_config()
    assert log_activity("projects", "create", success=True, database_url=db_url) is None
    assert get_activity(database_url=db_url) == []


def test_logging_failure_does_not_break_the_operation(db_url, tmp_path):
    bad_url = f"sqlite:///{(tmp_path / 'gone' / 'x.db').as_posix()}"
    with track_operation("ideas", "create", database_url=bad_url) as op:
        op.entity_id = "i1"
    assert op.entity_id == "i1"


def test_stats(db_url):
    log_activity("projects", "create", success=True, duration_ms=10, database_url=db_url)
    log_activity("projects", "update", success=False, duration_ms=30, database_url=db_url)
    log_activity("clients", "create", success=True, duration_ms=20, database_url=db_url)

    stats = get_activity_stats(database_url=db_url)
    assert stats["total"] == 3
    assert stats["succeeded"] == 2
    assert stats["failed"] == 1
    assert stats["success_rate"] == pytest.approx(66.67)
    assert stats["avg_duration_ms"] == 20
    assert stats["by_collection"] == {"projects": 2, "clients": 1}


def test_cleanup_old_activity(db_url):
    log_activity("projects", "create", success=True, database_url=db_url)
    old_id = log_activity("projects", "delete", success=True, database_url=db_url)
    with get_session(db_url) as session:
        record = session.get(ActivityRecord, old_id)
        record.created_at = datetime.utcnow() - timedelta(days=45)
        session.commit()

    assert cleanup_old_activity(30, database_url=db_url) == 1
    assert [r["operation"] for r in get_activity(database_url=db_url)] == ["create"]
