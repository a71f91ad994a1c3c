import random
from datetime import date, datetime, timedelta

from src.workspace.derive import (
    bucket_tasks,
    count_by,
    filter_clients,
    filter_tasks,
    flatten_tasks,
    group_by_status,
    progress_series,
    project_stats,
    rate,
    task_stats,
    to_chart_data,
)
from src.workspace.entities import Client, Project, Task


TODAY = date(2024, 5, 15)


def _at(offset_days, hour=9):
    return datetime.combine(TODAY + timedelta(days=offset_days), datetime.min.time()).replace(hour=hour)


def _project(pid, tasks, **kw):
    return Project(id=pid, name=kw.pop("name", f"Project {pid}"), tasks=tasks, **kw)


def test_bucket_scenario():
    t1 = Task(id="1", name="late", status="todo", end_date=_at(-1))
    t2 = Task(id="2", name="now", status="todo", end_date=_at(0, hour=23))
    t3 = Task(id="3", name="soon", status="in-progress", end_date=_at(3))
    t4 = Task(id="4", name="finished", status="done", end_date=_at(-5))
    flat = flatten_tasks([_project("p", [t1, t2, t3, t4])])

    buckets = bucket_tasks(flat, today=TODAY)

    assert [t.id for t in buckets.overdue] == ["1"]
    assert [t.id for t in buckets.today] == ["2"]
    assert [t.id for t in buckets.upcoming] == ["3"]
    assert [t.id for t in buckets.completed] == ["4"]


def test_done_tasks_never_land_in_due_buckets():
    tasks = [Task(id=str(i), name="x", status="done", end_date=_at(i)) for i in range(-3, 4)]
    buckets = bucket_tasks(tasks, today=TODAY)
    assert buckets.overdue == buckets.today == buckets.upcoming == []
    assert len(buckets.completed) == len(tasks)


def test_buckets_are_disjoint_and_cover_the_expected_subset():
    rng = random.Random(3)
    tasks = []
    for i in range(200):
        due = None if rng.random() < 0.1 else _at(rng.randint(-20, 20), hour=rng.randint(0, 23))
        tasks.append(Task(id=str(i), name="t", status=rng.choice(["todo", "in-progress", "done"]), end_date=due))

    buckets = bucket_tasks(tasks, today=TODAY)
    groups = [buckets.overdue, buckets.today, buckets.upcoming, buckets.completed]
    seen = [t.id for group in groups for t in group]
    assert len(seen) == len(set(seen))

    horizon = TODAY + timedelta(days=7)
    expected = {
        t.id for t in tasks
        if t.status == "done" or (t.end_date is not None and t.end_date.date() <= horizon)
    }
    assert set(seen) == expected


def test_tasks_beyond_a_week_or_without_due_date_are_unbucketed():
    tasks = [Task(id="far", name="x", end_date=_at(8)), Task(id="none", name="y")]
    assert bucket_tasks(tasks, today=TODAY).counts() == {"overdue": 0, "today": 0, "upcoming": 0, "completed": 0}


def test_rate():
    assert rate(0, 0) == 0
    assert rate(3, 0) == 0
    assert rate(1, 3) == 33
    assert rate(1, 8) == 13
    assert rate(5, 5) == 100


def test_flatten_counts_and_carries_project_identity():
    projects = [
        _project("a", [Task(id=str(i), name="t") for i in range(3)], priority="high"),
        _project("b", []),
        _project("c", [Task(id="x", name="t", priority="low")], name="<i>Gamma</i>"),
    ]
    flat = flatten_tasks(projects)
    assert len(flat) == 4
    assert {t.project_id for t in flat[:3]} == {"a"}
    assert flat[0].priority == "high"
    assert flat[3].project_name == "<i>Gamma</i>"
    assert flat[3].priority == "medium"
    assert flat[3].own_priority == "low"


def test_count_by_and_chart_data():
    tasks = [Task(id="1", name="a", status="todo"), Task(id="2", name="b", status="todo"),
             Task(id="3", name="c", status="done")]
    counts = count_by(tasks, "status")
    assert counts == {"todo": 2, "done": 1}
    assert to_chart_data(counts) == [{"name": "Todo", "value": 2}, {"name": "Done", "value": 1}]


def test_task_stats():
    tasks = [Task(id="1", name="a", status="todo"), Task(id="2", name="b", status="in-progress"),
             Task(id="3", name="c", status="done"), Task(id="4", name="d", status="done")]
    assert task_stats(tasks) == {"total": 4, "todo": 1, "in_progress": 1, "done": 2}


def test_project_stats():
    projects = [
        _project("a", [Task(id="1", name="t", status="done"), Task(id="2", name="t")], status="completed", progress=100),
        _project("b", [Task(id="3", name="t")], status="active", progress=25),
        _project("c", [], status="planned", progress=0),
    ]
    stats = project_stats(projects)
    assert stats["total_projects"] == 3
    assert stats["completed_projects"] == 1
    assert stats["active_projects"] == 1
    assert stats["total_tasks"] == 3
    assert stats["completed_tasks"] == 1
    assert stats["avg_progress"] == 42
    assert stats["completion_rate"] == 33
    assert stats["task_completion_rate"] == 33


def test_project_stats_on_empty_list():
    stats = project_stats([])
    assert stats["avg_progress"] == 0
    assert stats["completion_rate"] == 0


def test_progress_series_limits_and_truncates():
    projects = [_project(str(i), [], name=f"A rather long project name {i}", progress=i * 10) for i in range(10)]
    series = progress_series(projects)
    assert len(series) == 8
    assert series[0]["name"] == "A rather long projec..."
    assert series[7]["progress"] == 70


def test_group_by_status_keeps_workflow_order():
    tasks = [Task(id="1", name="a", status="done"), Task(id="2", name="b", status="todo"),
             Task(id="3", name="c", status="blocked")]
    columns = group_by_status(tasks)
    assert list(columns) == ["todo", "in-progress", "done"]
    assert [t.id for t in columns["todo"]] == ["2"]
    assert sum(len(v) for v in columns.values()) == 2


def test_filter_clients():
    clients = [
        Client(id="1", name="Acme", email="hi@acme.com", company="Acme Corp", status="active"),
        Client(id="2", name="Beta", email="b@beta.io", company="Beta", status="lead"),
    ]
    assert [c.id for c in filter_clients(clients, "ACME")] == ["1"]
    assert [c.id for c in filter_clients(clients, "beta.io")] == ["2"]
    assert [c.id for c in filter_clients(clients, "", "lead")] == ["2"]
    assert filter_clients(clients, "acme", "lead") == []


def test_filter_tasks():
    flat = flatten_tasks(
        [
            _project("a", [Task(id="1", name="Wireframes", assignee="Sam")], name="Website", priority="high"),
            _project("b", [Task(id="2", name="Copy", assignee="Ana")], name="Launch"),
        ]
    )
    assert [t.id for t in filter_tasks(flat, query="web")] == ["1"]
    assert [t.id for t in filter_tasks(flat, assignee="Ana")] == ["2"]
    assert [t.id for t in filter_tasks(flat, priority="high")] == ["1"]
