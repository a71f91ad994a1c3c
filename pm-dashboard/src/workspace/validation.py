"""Client-side form checks. A failure raises before any store call is issued."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List

from src.errors import ValidationError
from src.workspace.entities import (
    CLIENT_STATUSES,
    PRIORITIES,
    PROJECT_STATUSES,
    TASK_STATUSES,
)


REQUIRED_MESSAGE = "Please fill in all required fields"


def _text(form: Dict[str, Any], key: str) -> str:
    value = form.get(key)
    return value.strip() if isinstance(value, str) else ""


def _require(form: Dict[str, Any], keys: List[str]) -> None:
    missing = []
    for key in keys:
        value = form.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(key)
    if missing:
        raise ValidationError(REQUIRED_MESSAGE, fields=missing)


def _choice(form: Dict[str, Any], key: str, allowed, default: str) -> str:
    value = form.get(key) or default
    if value not in allowed:
        raise ValidationError(f"Invalid {key}: {value}", fields=[key])
    return value


def _as_day(value: Any):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def validate_task_form(form: Dict[str, Any]) -> Dict[str, Any]:
    _require(form, ["name", "project_id", "due_date"])
    return {
        "name": _text(form, "name"),
        "project_id": form["project_id"],
        "assignee": _text(form, "assignee") or "Unassigned",
        "status": _choice(form, "status", TASK_STATUSES, "todo"),
        "priority": _choice(form, "priority", PRIORITIES, "medium"),
        "due_date": form["due_date"],
        "start_date": form.get("start_date"),
    }


def validate_project_form(form: Dict[str, Any]) -> Dict[str, Any]:
    _require(form, ["name"])
    start = _as_day(form.get("start_date"))
    end = _as_day(form.get("end_date"))
    if start and end and end < start:
        raise ValidationError("End date cannot be before the start date", fields=["end_date"])
    cleaned = dict(form)
    cleaned["name"] = _text(form, "name")
    cleaned["status"] = _choice(form, "status", PROJECT_STATUSES, "planned")
    cleaned["priority"] = _choice(form, "priority", PRIORITIES, "medium")
    return cleaned


def validate_client_form(form: Dict[str, Any]) -> Dict[str, Any]:
    _require(form, ["name", "email", "company"])
    email = _text(form, "email")
    if "@" not in email:
        raise ValidationError("Please enter a valid email address", fields=["email"])
    return {
        "name": _text(form, "name"),
        "email": email,
        "company": _text(form, "company"),
        "phone": _text(form, "phone"),
        "status": _choice(form, "status", CLIENT_STATUSES, "lead"),
        "notes": _text(form, "notes"),
    }


def validate_idea_form(form: Dict[str, Any]) -> Dict[str, Any]:
    _require(form, ["title"])
    return {"title": _text(form, "title"), "description": _text(form, "description")}


def validate_time_entry_form(form: Dict[str, Any]) -> Dict[str, Any]:
    _require(form, ["project_id", "date"])
    try:
        hours = float(form.get("hours") or 0)
    except (TypeError, ValueError):
        hours = 0.0
    if hours <= 0:
        raise ValidationError("Hours must be greater than zero", fields=["hours"])
    if hours > 24:
        raise ValidationError("A single entry cannot exceed 24 hours", fields=["hours"])
    return {
        "project_id": form["project_id"],
        "description": _text(form, "description") or "Manual entry",
        "date": form["date"],
        "hours": round(hours, 2),
        "billable": bool(form.get("billable", True)),
    }
