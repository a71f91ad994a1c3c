from datetime import datetime, timedelta

from src.store.projects import create_project, get_project
from src.workspace.templates import (
    DAYS_PER_TEMPLATE_TASK,
    TEMPLATES,
    get_template,
    search_templates,
    template_tasks,
    wizard_data_from_template,
)


def test_lookup_and_search():
    assert get_template("bug-fix-sprint").name == "Bug Fix Sprint"
    assert get_template("nope") is None
    assert len(search_templates("")) == len(TEMPLATES)
    assert [t.id for t in search_templates("design")] == ["brand-identity"]


def test_template_tasks_are_sequential():
    start = datetime(2024, 5, 1)
    tasks = template_tasks(get_template("web-development"), start, assignee="Sam")
    assert len(tasks) == 8
    assert tasks[0].start_date == start
    assert tasks[1].start_date == start + timedelta(days=DAYS_PER_TEMPLATE_TASK)
    assert all(t.status == "todo" and t.assignee == "Sam" for t in tasks)
    assert len({t.id for t in tasks}) == 8


def test_project_from_template(db_url):
    template = get_template("mobile-mvp")
    data = wizard_data_from_template(template, "  ", owner_name="Jason", start=datetime(2024, 5, 1))
    assert data["title"] == "Mobile App MVP"
    assert data["deadline_date"] == data["tasks"][-1].end_date

    project = get_project(create_project(data, database_url=db_url), database_url=db_url)
    assert [t.name for t in project.tasks] == list(template.tasks)
    assert project.task_count == len(template.tasks)
    assert project.type_label == "Development"
    assert project.members == ["Jason"]
