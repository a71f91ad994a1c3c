from datetime import date, datetime, time, timedelta

import pandas as pd
import plotly.express as px
import streamlit as st

from src.errors import DashboardError, StoreError
from src.store.projects import list_projects
from src.store.time_entries import add_time_entry, delete_time_entry, list_time_entries
from src.ui import notify_failure, notify_success, page_header, render_collection, require_session, sync_collection
from src.workspace import collection_state as cs
from src.workspace.timesheet import (
    TimeEntryDraft,
    Timer,
    billable_total,
    day_total,
    entries_for_day,
    format_elapsed,
    week_days,
    week_total,
)
from src.workspace.validation import validate_time_entry_form


session = require_session()

st.session_state.setdefault("timer", Timer())
st.session_state.setdefault("timesheet_anchor", date.today())
sync_collection("time_entries", lambda: list_time_entries(session.user_id, actor=session.user_id))

projects = list_projects(actor=session.user_id)
project_names = {p.id: p.plain_name for p in projects}

page_header("Time Tracking", "Track hours against your projects")


def _save(draft):
    try:
        entry = add_time_entry(draft, actor=session.user_id)
    except StoreError as exc:
        notify_failure(exc)
        return
    st.session_state.time_entries = cs.apply(st.session_state.time_entries, cs.Upsert(entry))
    notify_success(f"Logged {draft.hours:.2f}h on {draft.project_name}")


# ------------------ TIMER ------------------

timer: Timer = st.session_state.timer
with st.container(border=True):
    st.markdown("#### ⏱ Timer")
    if timer.running:

        @st.fragment(run_every=1)
        def ticking():
            st.markdown(f"## {format_elapsed(timer.elapsed())}")
            st.caption(f"{timer.project_name} · {timer.description or 'No description'}")

        ticking()
        if st.button("Stop", type="primary"):
            draft = timer.stop(session.user_id)
            if draft is None:
                st.toast("Less than a minute tracked, nothing logged")
            else:
                _save(draft)
            st.rerun()
    elif not projects:
        st.info("Create a project before tracking time.")
    else:
        c1, c2, c3 = st.columns([2, 3, 1])
        project_id = c1.selectbox("Project", list(project_names), format_func=project_names.get, key="timer_project")
        description = c2.text_input("What are you working on?", key="timer_description")
        c3.write("")
        if c3.button("Start", type="primary", use_container_width=True):
            try:
                timer.start(project_id, project_names.get(project_id, ""), description)
            except DashboardError as exc:
                notify_failure(exc)
            st.rerun()


# ------------------ MANUAL ENTRY ------------------

with st.expander("➕ Add time manually"):
    if not projects:
        st.caption("No projects yet.")
    else:
        with st.form("manual_entry", clear_on_submit=True):
            c1, c2, c3 = st.columns(3)
            project_id = c1.selectbox("Project", list(project_names), format_func=project_names.get)
            entry_date = c2.date_input("Date", value=date.today())
            hours = c3.number_input("Hours", min_value=0.0, max_value=24.0, step=0.25, value=1.0)
            description = st.text_input("Description")
            billable = st.checkbox("Billable", value=True)
            if st.form_submit_button("Log time", type="primary"):
                try:
                    cleaned = validate_time_entry_form(
                        {
                            "project_id": project_id,
                            "date": entry_date,
                            "hours": hours,
                            "description": description,
                            "billable": billable,
                        }
                    )
                except DashboardError as exc:
                    notify_failure(exc)
                else:
                    _save(
                        TimeEntryDraft(
                            user_id=session.user_id,
                            project_id=cleaned["project_id"],
                            project_name=project_names.get(cleaned["project_id"], "Unknown"),
                            description=cleaned["description"],
                            date=datetime.combine(cleaned["date"], time(hour=12)),
                            hours=cleaned["hours"],
                            billable=cleaned["billable"],
                        )
                    )


# ------------------ WEEK ------------------

entries = st.session_state.time_entries
anchor = st.session_state.timesheet_anchor
days = week_days(anchor)

n1, n2, n3 = st.columns([1, 4, 1])
if n1.button("◀ Week", use_container_width=True):
    st.session_state.timesheet_anchor = anchor - timedelta(weeks=1)
    st.rerun()
n2.markdown(f"### {days[0].strftime('%b %d')} – {days[-1].strftime('%b %d, %Y')}")
if n3.button("Week ▶", use_container_width=True):
    st.session_state.timesheet_anchor = anchor + timedelta(weeks=1)
    st.rerun()

total = week_total(entries, days)
billable_hours = billable_total(entries, days)
m1, m2, m3 = st.columns(3)
m1.metric("This week", f"{total:.2f}h")
m2.metric("Billable", f"{billable_hours:.2f}h")
m3.metric("Non-billable", f"{total - billable_hours:.2f}h")

daily = pd.DataFrame({"day": [d.strftime("%a %d") for d in days], "hours": [day_total(entries, d) for d in days]})
fig = px.bar(daily, x="day", y="hours", template="plotly_white")
fig.update_layout(height=260, margin=dict(l=10, r=10, t=10, b=10), xaxis_title=None)
st.plotly_chart(fig, use_container_width=True)


def render_week(_items):
    for day in days:
        day_entries = entries_for_day(entries, day)
        if not day_entries:
            continue
        st.markdown(f"**{day.strftime('%A, %b %d')}** · {day_total(entries, day):.2f}h")
        for entry in day_entries:
            c1, c2, c3, c4 = st.columns([3, 4, 1, 1])
            c1.markdown(entry.project_name)
            c2.caption(entry.description)
            c3.markdown(f"{entry.hours:.2f}h{'' if entry.billable else ' ·nb'}")
            if c4.button("🗑", key=f"del_entry_{entry.id}"):
                try:
                    delete_time_entry(entry.id, actor=session.user_id)
                except StoreError as exc:
                    notify_failure(exc)
                else:
                    st.session_state.time_entries = cs.apply(st.session_state.time_entries, cs.Remove(entry.id))
                    notify_success("Entry deleted")
                st.rerun()


week_entries = [e for e in entries if e.date.date() in set(days)]
render_collection(
    week_entries,
    render_week,
    empty_title="No time logged this week",
    empty_message="Start the timer or add an entry manually.",
    key="timesheet",
)
