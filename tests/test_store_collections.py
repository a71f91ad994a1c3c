from datetime import datetime

import pytest

from src.errors import StoreError
from src.store import clients, ideas, time_entries
from src.store.projects import create_project, list_projects, seed_projects
from src.workspace.timesheet import TimeEntryDraft


CLIENT = {
    "name": "Dana Scully",
    "email": "dana@fbi.gov",
    "company": "FBI",
    "phone": "+1 555-0199",
    "status": "active",
    "notes": "Prefers email",
}


def test_client_round_trip(db_url):
    client_id = clients.create_client(CLIENT, database_url=db_url)
    [client] = clients.list_clients(database_url=db_url)
    assert client.id == client_id
    for key, value in CLIENT.items():
        assert getattr(client, key) == value
    assert client.project_count == 0
    assert client.total_value == 0.0


def test_new_clients_ignore_counter_fields(db_url):
    clients.create_client(dict(CLIENT, project_count=9, total_value=1000), database_url=db_url)
    [client] = clients.list_clients(database_url=db_url)
    assert client.project_count == 0
    assert client.total_value == 0.0


def test_client_edit_keeps_counters(db_url):
    clients.seed_clients(database_url=db_url)
    acme = next(c for c in clients.list_clients(database_url=db_url) if c.name == "Acme Corporation")
    clients.update_client(acme.id, {"phone": "+1 555-0000", "project_count": 0}, database_url=db_url)
    edited = next(c for c in clients.list_clients(database_url=db_url) if c.id == acme.id)
    assert edited.phone == "+1 555-0000"
    assert edited.project_count == 3
    assert edited.total_value == 125000


def test_seed_clients(db_url):
    assert clients.seed_clients(database_url=db_url) == 5
    names = {c.name for c in clients.list_clients(database_url=db_url)}
    assert names == {"Acme Corporation", "TechStart Inc", "Global Finance", "HealthPlus", "RetailMax"}


def test_deleting_a_client_leaves_projects_untouched(db_url):
    client_id = clients.create_client(dict(CLIENT, company="Acme"), database_url=db_url)
    create_project({"title": "For Acme", "client": "Acme"}, database_url=db_url)
    seed_projects(database_url=db_url)
    before = list_projects(database_url=db_url)

    assert clients.delete_client(client_id, database_url=db_url) is True

    assert list_projects(database_url=db_url) == before
    assert clients.list_clients(database_url=db_url) == []


def test_update_missing_client_raises(db_url):
    with pytest.raises(StoreError):
        clients.update_client("missing", {"name": "x"}, database_url=db_url)


def test_idea_lifecycle(db_url):
    idea_id = ideas.create_idea("Dark mode", "Users keep asking", database_url=db_url)
    [idea] = ideas.list_ideas(database_url=db_url)
    assert (idea.id, idea.title, idea.description) == (idea_id, "Dark mode", "Users keep asking")
    assert idea.updated_at is None

    ideas.update_idea(idea_id, description="Ship in Q3", database_url=db_url)
    [idea] = ideas.list_ideas(database_url=db_url)
    assert idea.title == "Dark mode"
    assert idea.description == "Ship in Q3"
    assert idea.updated_at is not None

    assert ideas.delete_idea(idea_id, database_url=db_url) is True
    assert ideas.list_ideas(database_url=db_url) == []


def _draft(user, day, hours=1.5, billable=True):
    return TimeEntryDraft(
        user_id=user,
        project_id="p1",
        project_name="Website",
        description="Design review",
        date=datetime(2024, 5, day, 12),
        hours=hours,
        billable=billable,
    )


def test_time_entries_are_scoped_and_newest_first(db_url):
    time_entries.add_time_entry(_draft("a@example.com", 1), database_url=db_url)
    time_entries.add_time_entry(_draft("a@example.com", 3), database_url=db_url)
    time_entries.add_time_entry(_draft("b@example.com", 2), database_url=db_url)

    mine = time_entries.list_time_entries("a@example.com", database_url=db_url)
    assert [e.date.day for e in mine] == [3, 1]
    assert all(e.user_id == "a@example.com" for e in mine)
    assert len(time_entries.list_all_time_entries(database_url=db_url)) == 3


def test_add_time_entry_returns_stored_entry(db_url):
    entry = time_entries.add_time_entry(_draft("a@example.com", 4, hours=2.25, billable=False), database_url=db_url)
    assert entry.id
    assert entry.description == "Design review"
    assert entry.hours == 2.25
    assert entry.billable is False
    assert entry.created_at is not None

    assert time_entries.delete_time_entry(entry.id, database_url=db_url) is True
    assert time_entries.delete_time_entry(entry.id, database_url=db_url) is False


def test_collection_fetch_failures_give_empty_lists(db_url, tmp_path, error_spy):
    bad_url = f"sqlite:///{(tmp_path / 'nowhere' / 'pm.db').as_posix()}"
    assert clients.list_clients(database_url=bad_url) == []
    assert ideas.list_ideas(database_url=bad_url) == []
    assert time_entries.list_time_entries("a@example.com", database_url=bad_url) == []
    assert [message for message, _ in error_spy] == [
        "Failed to load clients",
        "Failed to load ideas",
        "Failed to load time entries",
    ]
