"""Inbox - recent workspace activity, newest first."""

import json
from datetime import datetime, timedelta

import pandas as pd
import streamlit as st

from src.activity_log import get_activity, get_activity_stats, get_recent_errors
from src.ui import page_header, render_collection, require_session


session = require_session()

OPERATION_LABELS = {
    "create": "created",
    "update": "updated",
    "delete": "deleted",
    "seed": "loaded sample data into",
    "add_task": "added a task to",
    "update_task": "edited a task in",
    "set_task_status": "moved a task in",
    "delete_task": "removed a task from",
}

page_header("Inbox", "What changed across your workspace")

with st.sidebar:
    st.markdown("### Inbox filters")
    window = st.selectbox("Window", ["24 hours", "7 days", "30 days"], index=1)
    only_mine = st.toggle("Only my changes", value=False)
    show_failures = st.toggle("Show failures only", value=False)

days = {"24 hours": 1, "7 days": 7, "30 days": 30}[window]
since = datetime.utcnow() - timedelta(days=days)

stats = get_activity_stats(since=since)
c1, c2, c3, c4 = st.columns(4)
c1.metric("Operations", stats.get("total", 0))
c2.metric("Succeeded", stats.get("succeeded", 0))
c3.metric("Failed", stats.get("failed", 0))
c4.metric("Success rate", f"{stats.get('success_rate', 0)}%")

records = get_activity(
    user_id=session.user_id if only_mine else None,
    success=False if show_failures else None,
    since=since,
    include_reads=False,
    limit=200,
)


def _describe(record):
    verb = OPERATION_LABELS.get(record["operation"], record["operation"])
    label = record.get("entity_label") or record["collection"].rstrip("s")
    detail = json.loads(record.get("detail_json") or "{}")
    extra = ""
    if record["operation"] == "set_task_status" and detail.get("status"):
        extra = f" → {detail['status']}"
    elif detail.get("task_name"):
        extra = f": {detail['task_name']}"
    return f"{verb} **{label}**{extra}"


def render_records(items):
    for record in items:
        icon = "✅" if record["success"] else "❌"
        who = record.get("user_id") or "system"
        when = pd.Timestamp(record["started_at"]).strftime("%b %d, %H:%M") if record.get("started_at") else ""
        with st.container(border=True):
            st.markdown(f"{icon} **{who}** {_describe(record)}")
            st.caption(f"{record['collection']} · {when} · {record.get('duration_ms') or 0} ms")
            if not record["success"] and record.get("error_message"):
                st.code(record["error_message"], language="text")


render_collection(
    records,
    render_records,
    empty_title="All quiet",
    empty_message="Changes to projects, tasks, clients and time entries will appear here.",
    key="inbox",
)

errors = get_recent_errors(limit=5)
if errors and not show_failures:
    with st.expander(f"Recent failures ({len(errors)})"):
        for record in errors:
            st.markdown(f"- `{record['collection']}.{record['operation']}`: {record.get('error_message') or 'unknown error'}")
