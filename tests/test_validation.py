from datetime import date

import pytest

from src.errors import ValidationError
from src.workspace.validation import (
    validate_client_form,
    validate_project_form,
    validate_task_form,
    validate_time_entry_form,
)


def test_task_form_requires_name_project_and_due_date():
    with pytest.raises(ValidationError) as info:
        validate_task_form({"name": "", "project_id": None})
    assert set(info.value.fields) == {"name", "project_id", "due_date"}


def test_task_form_defaults():
    cleaned = validate_task_form({"name": " Copy ", "project_id": "p1", "due_date": date(2024, 5, 1)})
    assert cleaned["name"] == "Copy"
    assert cleaned["assignee"] == "Unassigned"
    assert cleaned["status"] == "todo"
    assert cleaned["priority"] == "medium"


def test_task_form_rejects_unknown_status():
    with pytest.raises(ValidationError):
        validate_task_form({"name": "x", "project_id": "p", "due_date": date(2024, 5, 1), "status": "blocked"})


def test_project_form_date_order():
    with pytest.raises(ValidationError) as info:
        validate_project_form({"name": "P", "start_date": date(2024, 5, 2), "end_date": date(2024, 5, 1)})
    assert info.value.fields == ["end_date"]
    cleaned = validate_project_form({"name": " P ", "start_date": date(2024, 5, 1), "end_date": date(2024, 5, 1)})
    assert cleaned["name"] == "P"
    assert cleaned["status"] == "planned"


def test_client_form():
    with pytest.raises(ValidationError):
        validate_client_form({"name": "A", "email": "not-an-email", "company": "A"})
    cleaned = validate_client_form({"name": "A", "email": " a@b.co ", "company": "A"})
    assert cleaned["email"] == "a@b.co"
    assert cleaned["status"] == "lead"


@pytest.mark.parametrize("hours", [0, -1, 24.5, "abc"])
def test_time_entry_hours_bounds(hours):
    with pytest.raises(ValidationError):
        validate_time_entry_form({"project_id": "p", "date": date(2024, 5, 1), "hours": hours})


def test_time_entry_form_rounds_and_defaults():
    cleaned = validate_time_entry_form({"project_id": "p", "date": date(2024, 5, 1), "hours": "1.2345"})
    assert cleaned["hours"] == 1.23
    assert cleaned["description"] == "Manual entry"
    assert cleaned["billable"] is True
