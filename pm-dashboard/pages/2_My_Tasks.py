import streamlit as st

from src.errors import DashboardError
from src.store.projects import list_projects, set_task_status
from src.theme import PRIORITY_COLORS, badge
from src.ui import notify_failure, notify_success, page_header, render_collection, require_session
from src.workspace.derive import bucket_tasks, filter_tasks, flatten_tasks, group_by_status, task_stats
from src.workspace.entities import PRIORITIES, TASK_STATUS_LABELS, TASK_STATUSES, strip_html


session = require_session()

st.markdown(
    """
    <style>
    .task-row { padding: .55rem .8rem; border-radius: 10px; border: 1px solid #e5e7eb;
                margin-bottom: .4rem; background: #ffffff; }
    .task-row .task-name { font-weight: 600; }
    .stat-card { padding: 1rem; border-radius: 12px; text-align: center;
                 background: linear-gradient(135deg, #eef2ff 0%, #f8fafc 100%); }
    .stat-card .value { font-size: 1.8rem; font-weight: 700; }
    .stat-card .label { color: #64748b; font-size: .85rem; }
    </style>
    """,
    unsafe_allow_html=True,
)

page_header("My Tasks", "Every task across your projects, by due date")

projects = list_projects(actor=session.user_id)
all_tasks = flatten_tasks(projects)

with st.sidebar:
    st.markdown("### Filters")
    query = st.text_input("Search tasks", key="my_tasks_query")
    assignees = sorted({t.assignee for t in all_tasks})
    assignee = st.selectbox("Assignee", ["Everyone", *assignees], key="my_tasks_assignee")
    priority = st.selectbox("Priority", ["Any", *PRIORITIES], key="my_tasks_priority")

tasks = filter_tasks(
    all_tasks,
    query=query,
    assignee=None if assignee == "Everyone" else assignee,
    priority=None if priority == "Any" else priority,
)

stats = task_stats(tasks)
cols = st.columns(4)
for col, (label, key) in zip(cols, [("Total", "total"), ("To Do", "todo"), ("In Progress", "in_progress"), ("Done", "done")]):
    col.markdown(
        f'<div class="stat-card"><div class="value">{stats[key]}</div><div class="label">{label}</div></div>',
        unsafe_allow_html=True,
    )

st.write("")


def _move(task, status):
    try:
        set_task_status(task.project_id, task.id, status, actor=session.user_id)
    except DashboardError as exc:
        notify_failure(exc)
        return
    notify_success(f"Moved to {TASK_STATUS_LABELS[status]}")
    st.rerun()


def render_task_rows(items, prefix):
    for task in items:
        due = task.end_date.strftime("%b %d") if task.end_date else "No due date"
        c1, c2 = st.columns([5, 2])
        c1.markdown(
            f"""
            <div class="task-row">
                <span class="task-name">{strip_html(task.name)}</span>
                {badge(task.priority, PRIORITY_COLORS.get(task.priority, "#64748b"))}
                <div class="pm-muted">{strip_html(task.project_name)} · {task.assignee} · {due}</div>
            </div>
            """,
            unsafe_allow_html=True,
        )
        done = c2.checkbox("Done", value=task.status == "done", key=f"{prefix}_{task.project_id}_{task.id}")
        if done != (task.status == "done"):
            _move(task, "done" if done else "todo")


buckets = bucket_tasks(tasks)
counts = buckets.counts()
tab_overdue, tab_today, tab_upcoming, tab_done, tab_board = st.tabs(
    [
        f"🔴 Overdue ({counts['overdue']})",
        f"📌 Today ({counts['today']})",
        f"📅 Upcoming ({counts['upcoming']})",
        f"✅ Completed ({counts['completed']})",
        "🗂 Board",
    ]
)

with tab_overdue:
    render_collection(buckets.overdue, lambda items: render_task_rows(items, "overdue"),
                      empty_title="Nothing overdue", empty_message="You're all caught up.", key="overdue")
with tab_today:
    render_collection(buckets.today, lambda items: render_task_rows(items, "today"),
                      empty_title="Nothing due today", empty_message="Enjoy the breathing room.", key="today")
with tab_upcoming:
    render_collection(buckets.upcoming, lambda items: render_task_rows(items, "upcoming"),
                      empty_title="Nothing due this week", empty_message="Tasks due in the next 7 days show up here.",
                      key="upcoming")
with tab_done:
    render_collection(buckets.completed, lambda items: render_task_rows(items, "done"),
                      empty_title="No completed tasks", empty_message="Finished tasks collect here.", key="done")


@st.fragment
def board():
    columns = group_by_status(tasks)
    board_cols = st.columns(len(TASK_STATUSES))
    for col, status in zip(board_cols, TASK_STATUSES):
        with col:
            st.markdown(f"#### {TASK_STATUS_LABELS[status]} ({len(columns[status])})")
            for task in columns[status]:
                with st.container(border=True):
                    st.markdown(f"**{strip_html(task.name)}**")
                    st.caption(f"{strip_html(task.project_name)} · {task.assignee}")
                    target = st.selectbox(
                        "Move to",
                        TASK_STATUSES,
                        index=TASK_STATUSES.index(status),
                        format_func=TASK_STATUS_LABELS.get,
                        key=f"board_{task.project_id}_{task.id}",
                        label_visibility="collapsed",
                    )
                    if target != status:
                        _move(task, target)


with tab_board:
    if tasks:
        board()
    else:
        st.info("No tasks match the current filters.")
