import pytest
from streamlit.testing.v1 import AppTest

from src.settings import APP_DIR, reset_config
from src.store.clients import create_client, update_client
from src.store.ideas import create_idea
from src.store.projects import create_project, list_projects, set_task_status


@pytest.fixture
def signed_in(db_url, monkeypatch):
    monkeypatch.setenv("PM_AUTH_PROVIDER", "dev")
    monkeypatch.setenv("PM_DEV_USER_EMAIL", "owner@example.com")
    monkeypatch.setenv("PM_ALLOWED_EMAILS", "owner@example.com")
    reset_config()
    yield db_url
    reset_config()


def _run(page, at=None):
    at = at or AppTest.from_file(str(APP_DIR / page), default_timeout=30)
    at.run()
    return at


def test_ideas_page_refetches_when_shown_again(signed_in):
    at = _run("pages/8_Ideas.py")
    assert at.session_state["ideas"] == []

    create_idea("Written elsewhere", database_url=signed_in)
    _run("pages/8_Ideas.py", at)
    assert [i.title for i in at.session_state["ideas"]] == ["Written elsewhere"]


def test_projects_page_sees_status_changes_from_other_pages(signed_in):
    project_id = create_project({"title": "Launch"}, database_url=signed_in)
    at = _run("pages/0_Projects.py")
    [project] = at.session_state["projects"]
    task = project.tasks[0]
    assert task.status != "done"

    # e.g. a task moved to Done on the My Tasks board
    set_task_status(project_id, task.id, "done", database_url=signed_in)
    _run("pages/0_Projects.py", at)
    [project] = at.session_state["projects"]
    assert project.tasks[0].status == "done"
    assert list_projects(database_url=signed_in)[0].tasks[0].status == "done"


def test_clients_page_shows_edits_made_since_last_visit(signed_in):
    client_id = create_client(
        {"name": "Dana", "email": "dana@example.com", "company": "Scully LLC"}, database_url=signed_in
    )
    at = _run("pages/3_Clients.py")
    assert [c.name for c in at.session_state["clients"]] == ["Dana"]

    update_client(client_id, {"name": "Renamed"}, database_url=signed_in)
    _run("pages/3_Clients.py", at)
    assert [c.name for c in at.session_state["clients"]] == ["Renamed"]
