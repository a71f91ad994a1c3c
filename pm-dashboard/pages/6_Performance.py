import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from src.store.projects import list_projects
from src.theme import PRIORITY_COLORS, STATUS_COLORS
from src.ui import empty_state, page_header, require_session
from src.workspace.derive import count_by, flatten_tasks, progress_series, project_stats, to_chart_data


session = require_session()

page_header("Performance", "How the portfolio is tracking")

projects = list_projects(actor=session.user_id)
if not projects:
    empty_state("No data yet", "Create a project to see performance metrics.")
    st.stop()

stats = project_stats(projects)
tasks = flatten_tasks(projects)

k1, k2, k3, k4 = st.columns(4)
k1.metric("Projects", stats["total_projects"], f"{stats['active_projects']} active")
k2.metric("Completion rate", f"{stats['completion_rate']}%", f"{stats['completed_projects']} completed")
k3.metric("Tasks done", f"{stats['completed_tasks']}/{stats['total_tasks']}", f"{stats['task_completion_rate']}%")
k4.metric("Avg progress", f"{stats['avg_progress']}%")

st.divider()

left, right = st.columns(2)

with left:
    st.markdown("#### Projects by status")
    status_df = pd.DataFrame(to_chart_data(count_by(projects, "status")))
    fig = px.pie(
        status_df, names="name", values="value", hole=0.55, template="plotly_white",
        color="name", color_discrete_map={k.capitalize(): v for k, v in STATUS_COLORS.items()},
    )
    fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True)

with right:
    st.markdown("#### Tasks by priority")
    if tasks:
        priority_df = pd.DataFrame(to_chart_data(count_by(tasks, "priority")))
        fig = px.bar(
            priority_df, x="name", y="value", template="plotly_white",
            color="name", color_discrete_map={k.capitalize(): v for k, v in PRIORITY_COLORS.items()},
        )
        fig.update_layout(height=320, showlegend=False, margin=dict(l=10, r=10, t=10, b=10), xaxis_title=None, yaxis_title="Tasks")
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.caption("No tasks yet.")

st.markdown("#### Project progress")
series = pd.DataFrame(progress_series(projects))
fig = go.Figure()
fig.add_trace(
    go.Bar(
        x=series["progress"],
        y=series["name"],
        orientation="h",
        marker_color="#6366f1",
        text=[f"{p}%" for p in series["progress"]],
        textposition="outside",
        customdata=series["tasks"],
        hovertemplate="%{y}<br>%{x}% complete<br>%{customdata} tasks<extra></extra>",
    )
)
fig.update_layout(
    template="plotly_white",
    height=max(240, 42 * len(series)),
    xaxis=dict(range=[0, 110], title="Progress (%)"),
    yaxis=dict(autorange="reversed"),
    margin=dict(l=10, r=10, t=10, b=10),
)
st.plotly_chart(fig, use_container_width=True)

if tasks:
    st.markdown("#### Workload by assignee")
    workload = pd.DataFrame(
        [{"assignee": t.assignee, "status": t.status} for t in tasks]
    ).value_counts().reset_index(name="tasks")
    fig = px.bar(workload, x="assignee", y="tasks", color="status", template="plotly_white", barmode="stack")
    fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10), xaxis_title=None)
    st.plotly_chart(fig, use_container_width=True)
