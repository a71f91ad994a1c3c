"""Projects - cards, creation wizard, edit dialog and per-project task lists."""

from datetime import date, datetime, time

import streamlit as st

from src.errors import DashboardError, StoreError
from src.store import projects as project_store
from src.theme import PRIORITY_COLORS, STATUS_COLORS, badge
from src.ui import notify_failure, notify_success, page_header, render_collection, require_session, sync_collection
from src.workspace import collection_state as cs
from src.workspace import dialog
from src.workspace.entities import PRIORITIES, PROJECT_STATUSES, TASK_STATUS_LABELS, TASK_STATUSES, Task, strip_html
from src.workspace.templates import TEMPLATES, get_template, template_tasks
from src.workspace.validation import validate_project_form, validate_task_form


session = require_session()

INTENTS = ["Project", "Client work", "Internal", "Design", "Development", "Marketing", "Research"]


def _reload():
    sync_collection("projects", lambda: project_store.list_projects(actor=session.user_id))


_reload()
st.session_state.setdefault("project_dialog", dialog.DialogState())
st.session_state.setdefault("task_dialog", dialog.DialogState())
st.session_state.setdefault("selected_project", None)


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return None


def _find_project(project_id):
    for p in st.session_state.projects:
        if p.id == project_id:
            return p
    return None


# ------------------ DIALOGS ------------------

def _persist_project(fields, entity):
    if entity is None:
        data = {
            "title": fields["name"],
            "description": fields.get("description", ""),
            "status": fields["status"],
            "priority": fields["priority"],
            "start_date": fields.get("start_date"),
            "deadline_date": fields.get("end_date"),
            "owner_name": session.display_name,
            "contributor_names": fields.get("members", []),
            "tags": fields.get("tags", []),
            "intent": fields.get("type_label"),
            "client": fields.get("client", ""),
            "add_starter_tasks": fields.get("add_starter_tasks", False),
        }
        template = get_template(fields.get("template_id") or "")
        if template is not None:
            start = _as_datetime(fields.get("start_date")) or datetime.utcnow()
            data["tasks"] = template_tasks(template, start, assignee=session.display_name)
        project_store.create_project(data, actor=session.user_id)
        return
    updates = {k: v for k, v in fields.items() if k not in ("template_id", "add_starter_tasks")}
    for key in ("start_date", "end_date"):
        if key in updates:
            updates[key] = _as_datetime(updates[key])
    project_store.update_project(entity.id, updates, actor=session.user_id)


@st.dialog("Project", width="large")
def project_dialog():
    state = st.session_state.project_dialog
    f = state.fields
    creating = state.mode == dialog.CREATE
    st.markdown("#### " + ("New project" if creating else "Edit project"))
    if state.error:
        st.error(state.error)

    name = st.text_input("Project name *", value=f.get("name", ""))
    description = st.text_area("Description", value=f.get("description", ""))
    c1, c2 = st.columns(2)
    with c1:
        status = st.selectbox("Status", PROJECT_STATUSES, index=PROJECT_STATUSES.index(f.get("status", "planned")))
        start = st.date_input("Start date", value=f.get("start_date") or date.today())
        type_label = st.selectbox(
            "Project type",
            INTENTS,
            index=INTENTS.index(f["type_label"]) if f.get("type_label") in INTENTS else 0,
        )
    with c2:
        priority = st.selectbox("Priority", PRIORITIES, index=PRIORITIES.index(f.get("priority", "medium")))
        end = st.date_input("Deadline", value=f.get("end_date") or date.today())
        client = st.text_input("Client", value=f.get("client", ""))
    members = st.text_input("Contributors (comma separated)", value=", ".join(f.get("members", [])))
    tags = st.text_input("Tags (comma separated)", value=", ".join(f.get("tags", [])))

    fields = {
        "name": name,
        "description": description,
        "status": status,
        "priority": priority,
        "start_date": start,
        "end_date": end,
        "type_label": type_label,
        "client": client,
        "members": [m.strip() for m in members.split(",") if m.strip()],
        "tags": [t.strip() for t in tags.split(",") if t.strip()],
    }
    if creating:
        template_ids = [""] + [t.id for t in TEMPLATES]
        fields["template_id"] = st.selectbox(
            "Start from template",
            template_ids,
            format_func=lambda tid: "None" if not tid else get_template(tid).name,
        )
        fields["add_starter_tasks"] = st.checkbox("Add a kickoff meeting task", value=True)
    else:
        fields["progress"] = st.slider("Progress", 0, 100, int(f.get("progress", 0)))

    b1, b2 = st.columns(2)
    if b1.button("Save", type="primary", use_container_width=True):
        new_state = dialog.submit(state, fields, validate_project_form, _persist_project)
        st.session_state.project_dialog = new_state
        if new_state.refresh:
            st.session_state.project_dialog = dialog.acknowledge_refresh(new_state)
            notify_success("Project created" if creating else "Project updated")
            _reload()
        st.rerun()
    if b2.button("Cancel", use_container_width=True):
        st.session_state.project_dialog = dialog.cancel(state)
        st.rerun()


def _persist_task(fields, entity):
    task_fields = {
        "name": fields["name"],
        "assignee": fields["assignee"],
        "status": fields["status"],
        "priority": fields["priority"],
        "start_date": _as_datetime(fields.get("start_date")),
        "end_date": _as_datetime(fields["due_date"]),
    }
    if entity is None:
        project_store.add_task(fields["project_id"], Task(id="", **task_fields), actor=session.user_id)
    else:
        project_store.update_task(fields["project_id"], entity.id, task_fields, actor=session.user_id)


@st.dialog("Task")
def task_dialog():
    state = st.session_state.task_dialog
    f = state.fields
    creating = state.mode == dialog.CREATE
    st.markdown("#### " + ("New task" if creating else "Edit task"))
    if state.error:
        st.error(state.error)
    name = st.text_input("Task name *", value=f.get("name", ""))
    assignee = st.text_input("Assignee", value=f.get("assignee", session.display_name))
    c1, c2 = st.columns(2)
    with c1:
        status = st.selectbox(
            "Status", TASK_STATUSES, index=TASK_STATUSES.index(f.get("status", "todo")),
            format_func=TASK_STATUS_LABELS.get,
        )
        start = st.date_input("Start date", value=f.get("start_date") or date.today())
    with c2:
        priority = st.selectbox("Priority", PRIORITIES, index=PRIORITIES.index(f.get("priority") or "medium"))
        due = st.date_input("Due date *", value=f.get("due_date"))
    fields = {
        "project_id": f.get("project_id"),
        "name": name,
        "assignee": assignee,
        "status": status,
        "priority": priority,
        "start_date": start,
        "due_date": due,
    }
    b1, b2 = st.columns(2)
    if b1.button("Save", type="primary", use_container_width=True):
        new_state = dialog.submit(state, fields, validate_task_form, _persist_task)
        st.session_state.task_dialog = new_state
        if new_state.refresh:
            st.session_state.task_dialog = dialog.acknowledge_refresh(new_state)
            notify_success("Task saved")
            _reload()
        st.rerun()
    if b2.button("Cancel", use_container_width=True):
        st.session_state.task_dialog = dialog.cancel(state)
        st.rerun()


# ------------------ RENDERING ------------------

def _delete_project(project):
    try:
        project_store.delete_project(project.id, actor=session.user_id)
    except StoreError as exc:
        notify_failure(exc)
        return
    st.session_state.projects = cs.apply(st.session_state.projects, cs.Remove(project.id))
    if st.session_state.selected_project == project.id:
        st.session_state.selected_project = None
    notify_success("Project deleted")


def _edit_fields(project):
    return {
        "name": strip_html(project.name),
        "description": project.description,
        "status": project.status,
        "priority": project.priority,
        "start_date": project.start_date.date() if project.start_date else None,
        "end_date": project.end_date.date() if project.end_date else None,
        "type_label": project.type_label,
        "client": project.client,
        "members": project.members,
        "tags": project.tags,
        "progress": project.progress,
    }


def render_cards(items):
    cols = st.columns(3)
    for idx, project in enumerate(items):
        with cols[idx % 3]:
            end = project.end_date.strftime("%b %d, %Y") if project.end_date else "No deadline"
            st.markdown(
                f"""
                <div class="pm-card">
                    <h4>{project.plain_name}</h4>
                    {badge(project.status, STATUS_COLORS.get(project.status, "#64748b"))}
                    {badge(project.priority, PRIORITY_COLORS.get(project.priority, "#64748b"))}
                    <div class="pm-muted" style="margin-top:.4rem">{project.type_label} · {project.task_count} tasks · due {end}</div>
                    <div class="pm-progress"><div style="width:{project.progress}%"></div></div>
                    <div class="pm-muted">{project.progress}% complete · {", ".join(project.members[:3])}</div>
                </div>
                """,
                unsafe_allow_html=True,
            )
            b1, b2, b3 = st.columns(3)
            if b1.button("Open", key=f"open_{project.id}", use_container_width=True):
                st.session_state.selected_project = project.id
                st.rerun()
            if b2.button("Edit", key=f"edit_{project.id}", use_container_width=True):
                st.session_state.project_dialog = dialog.open_edit(project, _edit_fields(project))
                st.rerun()
            with b3.popover("🗑", use_container_width=True):
                st.caption(f"Delete {project.plain_name} and its tasks?")
                if st.button("Delete", key=f"del_{project.id}", type="primary"):
                    _delete_project(project)
                    st.rerun()


def render_details(project):
    st.divider()
    h1, h2 = st.columns([4, 1])
    h1.markdown(f"### {project.plain_name}")
    if h2.button("Close", key="close_details", use_container_width=True):
        st.session_state.selected_project = None
        st.rerun()
    if project.description:
        st.markdown(strip_html(project.description))
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Progress", f"{project.progress}%")
    m2.metric("Tasks", project.task_count)
    m3.metric("Start", project.start_date.strftime("%b %d") if project.start_date else "-")
    m4.metric("Deadline", project.end_date.strftime("%b %d") if project.end_date else "-")

    if st.button("➕ Add task", key="add_task"):
        st.session_state.task_dialog = dialog.open_create({"project_id": project.id, "assignee": session.display_name})
        st.rerun()

    if not project.tasks:
        st.info("No tasks in this project yet.")
        return

    for task in project.tasks:
        c1, c2, c3, c4, c5 = st.columns([3, 2, 2, 1, 1])
        c1.markdown(f"**{strip_html(task.name)}**  \n<span class='pm-muted'>{task.assignee}</span>", unsafe_allow_html=True)
        new_status = c2.selectbox(
            "Status", TASK_STATUSES, index=TASK_STATUSES.index(task.status) if task.status in TASK_STATUSES else 0,
            format_func=TASK_STATUS_LABELS.get, key=f"status_{task.id}", label_visibility="collapsed",
        )
        c3.caption(f"Due {task.end_date.strftime('%b %d, %Y')}" if task.end_date else "No due date")
        if new_status != task.status:
            try:
                project_store.set_task_status(project.id, task.id, new_status, actor=session.user_id)
            except DashboardError as exc:
                notify_failure(exc)
            else:
                _reload()
                st.rerun()
        if c4.button("✏️", key=f"edit_task_{task.id}"):
            st.session_state.task_dialog = dialog.open_edit(
                task,
                {
                    "project_id": project.id,
                    "name": task.name,
                    "assignee": task.assignee,
                    "status": task.status,
                    "priority": task.priority or project.priority,
                    "start_date": task.start_date.date() if task.start_date else None,
                    "due_date": task.end_date.date() if task.end_date else None,
                },
            )
            st.rerun()
        if c5.button("🗑", key=f"del_task_{task.id}"):
            try:
                project_store.delete_task(project.id, task.id, actor=session.user_id)
            except StoreError as exc:
                notify_failure(exc)
            else:
                _reload()
                st.rerun()


# ------------------ PAGE ------------------

page_header("Projects", "Everything your team is delivering, in one place")

t1, t2, t3, t4 = st.columns([2, 1, 1, 1])
search = t1.text_input("Search", placeholder="Filter by name…", label_visibility="collapsed")
status_filter = t2.selectbox("Status", ["all", *PROJECT_STATUSES], label_visibility="collapsed")
if t3.button("➕ New project", type="primary", use_container_width=True):
    st.session_state.project_dialog = dialog.open_create({"status": "planned", "priority": "medium"})
    st.rerun()
if t4.button("↻ Refresh", use_container_width=True):
    _reload()
    st.toast("Projects refreshed", icon="✅")

visible = [
    p for p in st.session_state.projects
    if (status_filter == "all" or p.status == status_filter)
    and (not search or search.lower() in p.plain_name.lower())
]

seed_clicked = render_collection(
    visible,
    render_cards,
    empty_title="No projects yet",
    empty_message="Create your first project, or load a few demo projects to look around.",
    action_label="Load demo projects" if not st.session_state.projects else None,
    key="projects",
)
if seed_clicked:
    try:
        added = project_store.seed_projects(actor=session.user_id)
    except StoreError as exc:
        notify_failure(exc)
    else:
        notify_success(f"Added {added} demo projects")
        _reload()
        st.rerun()

selected = _find_project(st.session_state.selected_project)
if selected is not None:
    render_details(selected)

if st.session_state.project_dialog.is_open:
    project_dialog()
elif st.session_state.task_dialog.is_open:
    task_dialog()
