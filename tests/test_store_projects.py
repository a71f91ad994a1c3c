from datetime import datetime

import pytest

from src.errors import StoreError, ValidationError
from src.store import projects as store
from src.store.projects import project_from_wizard
from src.workspace.entities import Task


def _create(db_url, **overrides):
    data = {
        "title": "Website Redesign",
        "description": "Refresh the site",
        "status": "active",
        "priority": "high",
        "start_date": datetime(2024, 5, 1),
        "deadline_date": datetime(2024, 6, 30),
        "owner_name": "Jason",
        "contributor_names": ["Alice", "Jason", "Sam"],
        "tags": ["web"],
        "intent": "Design",
        "client": "Acme",
    }
    data.update(overrides)
    return store.create_project(data, actor="owner@example.com", database_url=db_url)


def test_create_then_list_preserves_fields(db_url):
    project_id = _create(db_url)
    projects = store.list_projects(database_url=db_url)

    assert [p.id for p in projects] == [project_id]
    project = projects[0]
    assert project.name == "Website Redesign"
    assert project.description == "Refresh the site"
    assert project.status == "active"
    assert project.priority == "high"
    assert project.start_date.date() == datetime(2024, 5, 1).date()
    assert project.end_date.date() == datetime(2024, 6, 30).date()
    assert project.members == ["Jason", "Alice", "Sam"]
    assert project.tags == ["web"]
    assert project.type_label == "Design"
    assert project.client == "Acme"
    assert project.progress == 0
    assert project.tasks == []


def test_wizard_defaults_and_starter_task():
    now = datetime(2024, 5, 1, 9)
    project = project_from_wizard({"add_starter_tasks": True}, now=now)
    assert project.name == "Untitled Project"
    assert project.status == "planned"
    assert project.priority == "medium"
    assert project.start_date == project.end_date == now
    assert project.members == ["You"]
    assert [t.name for t in project.tasks] == [store.STARTER_TASK_NAME]
    assert project.task_count == 1


def test_wizard_target_date_used_when_no_deadline():
    project = project_from_wizard({"target_date": "2024-07-01"}, now=datetime(2024, 5, 1))
    assert project.end_date == datetime(2024, 7, 1)


def test_wizard_rejects_unknown_status():
    with pytest.raises(ValidationError):
        project_from_wizard({"status": "someday"})


def test_update_project(db_url):
    project_id = _create(db_url)
    store.update_project(project_id, {"status": "completed", "progress": 100, "tags": ["done"]}, database_url=db_url)
    project = store.get_project(project_id, database_url=db_url)
    assert project.status == "completed"
    assert project.progress == 100
    assert project.tags == ["done"]
    assert project.name == "Website Redesign"


def test_update_missing_project_raises(db_url):
    with pytest.raises(StoreError):
        store.update_project("missing", {"status": "active"}, database_url=db_url)


def test_delete_project(db_url):
    project_id = _create(db_url)
    assert store.delete_project(project_id, database_url=db_url) is True
    assert store.delete_project(project_id, database_url=db_url) is False
    assert store.list_projects(database_url=db_url) == []


def test_task_lifecycle(db_url):
    project_id = _create(db_url)
    task_id = store.add_task(
        project_id,
        Task(id="", name="Wireframes", assignee="Sam", end_date=datetime(2024, 5, 20), priority="low"),
        database_url=db_url,
    )
    assert task_id

    store.set_task_status(project_id, task_id, "in-progress", database_url=db_url)
    store.update_task(project_id, task_id, {"name": "Hi-fi wireframes", "end_date": "2024-05-22"}, database_url=db_url)

    task = store.get_project(project_id, database_url=db_url).tasks[0]
    assert task.name == "Hi-fi wireframes"
    assert task.status == "in-progress"
    assert task.end_date == datetime(2024, 5, 22)
    assert task.priority == "low"

    store.delete_task(project_id, task_id, database_url=db_url)
    assert store.get_project(project_id, database_url=db_url).tasks == []


def test_duplicate_task_id_rejected(db_url):
    project_id = _create(db_url)
    store.add_task(project_id, Task(id="t1", name="one"), database_url=db_url)
    with pytest.raises(StoreError):
        store.add_task(project_id, Task(id="t1", name="two"), database_url=db_url)
    assert len(store.get_project(project_id, database_url=db_url).tasks) == 1


def test_task_operations_on_missing_targets(db_url):
    project_id = _create(db_url)
    with pytest.raises(StoreError):
        store.update_task(project_id, "nope", {"name": "x"}, database_url=db_url)
    with pytest.raises(StoreError):
        store.add_task("missing", Task(id="", name="x"), database_url=db_url)
    with pytest.raises(ValidationError):
        store.set_task_status(project_id, "nope", "blocked", database_url=db_url)


def test_seed_projects(db_url):
    added = store.seed_projects(database_url=db_url)
    projects = store.list_projects(database_url=db_url)
    assert added == len(projects) == 4
    assert all(p.tasks for p in projects)
    assert len({t.id for p in projects for t in p.tasks}) == sum(len(p.tasks) for p in projects)


def test_list_failure_returns_empty_and_reports(db_url, tmp_path, error_spy):
    bad_url = f"sqlite:///{(tmp_path / 'missing' / 'dir' / 'pm.db').as_posix()}"
    assert store.list_projects(database_url=bad_url) == []
    assert store.get_project("x", database_url=bad_url) is None
    assert len(error_spy) == 2
    assert error_spy[0][0] == "Failed to load projects"


def test_write_failure_raises_store_error(db_url, tmp_path):
    bad_url = f"sqlite:///{(tmp_path / 'missing' / 'dir' / 'pm.db').as_posix()}"
    with pytest.raises(StoreError) as info:
        store.create_project({"title": "x"}, database_url=bad_url)
    assert info.value.collection == "projects"
    assert info.value.operation == "create"
