"""Calendar - project deadlines and task due dates, kept live by polling."""

from datetime import date

import streamlit as st

from src.settings import get_config
from src.store.projects import list_projects
from src.store.subscriptions import CollectionWatcher
from src.ui import page_header, require_session
from src.workspace.calendar import calendar_events, events_on, month_grid, shift, week_days


session = require_session()
cfg = get_config()

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

st.session_state.setdefault("calendar_anchor", date.today())
st.session_state.setdefault("calendar_view", "month")
if "calendar_watcher" not in st.session_state:
    watcher = CollectionWatcher("projects", lambda: list_projects(actor=session.user_id))
    watcher.subscribe(lambda items: st.session_state.__setitem__("calendar_projects", items))
    st.session_state.calendar_watcher = watcher

page_header("Calendar", "Deadlines and due dates at a glance")

c1, c2, c3, c4 = st.columns([1, 1, 3, 2])
view = c4.radio("View", ["month", "week"], horizontal=True, key="calendar_view", label_visibility="collapsed")
if c1.button("◀", use_container_width=True):
    st.session_state.calendar_anchor = shift(st.session_state.calendar_anchor, view, -1)
if c2.button("▶", use_container_width=True):
    st.session_state.calendar_anchor = shift(st.session_state.calendar_anchor, view, 1)
anchor = st.session_state.calendar_anchor
c3.markdown(f"### {anchor.strftime('%B %Y')}")


def _day_cell(day, events, outside=False):
    classes = "pm-day"
    if outside:
        classes += " pm-outside"
    if day == date.today():
        classes += " pm-today"
    chips = "".join(
        f'<div class="pm-event" style="background:{e.color}" title="{e.project_name}">'
        f'{"⏰" if e.type == "deadline" else "•"} {e.title}</div>'
        for e in events[:3]
    )
    more = f'<div class="pm-muted">+{len(events) - 3} more</div>' if len(events) > 3 else ""
    return f'<div class="{classes}"><strong>{day.day}</strong>{chips}{more}</div>'


@st.fragment(run_every=cfg.live_refresh_seconds)
def live_calendar():
    st.session_state.calendar_watcher.poll()
    events = calendar_events(st.session_state.get("calendar_projects", []))

    header = st.columns(7)
    for col, name in zip(header, WEEKDAY_NAMES):
        col.markdown(f"**{name}**")

    weeks = month_grid(anchor) if view == "month" else [week_days(anchor)]
    for week in weeks:
        cols = st.columns(7)
        for col, day in zip(cols, week):
            outside = view == "month" and day.month != anchor.month
            col.markdown(_day_cell(day, events_on(events, day), outside), unsafe_allow_html=True)

    upcoming = sorted((e for e in events if e.date.date() >= date.today()), key=lambda e: e.date)[:8]
    st.markdown("#### Coming up")
    if not upcoming:
        st.caption("No upcoming deadlines.")
    for event in upcoming:
        kind = "Deadline" if event.type == "deadline" else "Task due"
        st.markdown(f"- **{event.date.strftime('%b %d')}** · {kind}: {event.title} ({event.project_name})")


live_calendar()
