"""Reports - hours, profitability, utilization and a revenue forecast."""

from datetime import date

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from src.settings import get_config
from src.store.projects import list_projects
from src.store.time_entries import list_all_time_entries
from src.ui import page_header, require_session
from src.workspace.reports import build_report, demo_report


session = require_session()
cfg = get_config()

page_header("Reports", "Revenue, profitability and team utilization")

projects = list_projects(actor=session.user_id)
rates = dict(
    today=date.today(),
    hourly_rate=cfg.hourly_rate,
    hourly_cost=cfg.hourly_cost,
    capacity_hours=cfg.monthly_capacity_hours,
)
if cfg.reports_demo_mode:
    report = demo_report(projects, **rates)
else:
    report = build_report(projects, list_all_time_entries(actor=session.user_id), **rates)

if report.demo:
    st.markdown(
        '<div class="pm-demo-banner">🧪 Demo data: these figures are generated, not read from your time entries.</div>',
        unsafe_allow_html=True,
    )

summary = report.summary
k1, k2, k3, k4 = st.columns(4)
k1.metric("Revenue (6 mo)", f"${summary['total_revenue']:,.0f}", f"{summary['revenue_change']}% vs last month")
k2.metric("Hours logged", f"{summary['total_hours']:,.1f}", f"{summary['billable_hours']:,.1f} billable")
k3.metric("Avg utilization", f"{summary['avg_utilization']}%", f"{summary['utilization_change']} pts")
k4.metric("Next month forecast", f"${summary['next_month_forecast']:,.0f}")

tab_hours, tab_profit, tab_util, tab_forecast = st.tabs(["Hours", "Profitability", "Utilization", "Forecast"])

with tab_hours:
    monthly = pd.DataFrame(report.monthly)
    fig = go.Figure()
    fig.add_trace(go.Bar(x=monthly["month"], y=monthly["billable"], name="Billable", marker_color="#6366f1"))
    fig.add_trace(go.Bar(x=monthly["month"], y=monthly["non_billable"], name="Non-billable", marker_color="#cbd5e1"))
    fig.update_layout(template="plotly_white", barmode="stack", height=360, yaxis_title="Hours",
                      margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True)

with tab_profit:
    if not report.profitability:
        st.info("No projects to report on yet.")
    else:
        profit = pd.DataFrame(report.profitability)
        fig = go.Figure()
        fig.add_trace(go.Bar(x=profit["name"], y=profit["revenue"], name="Revenue", marker_color="#10b981"))
        fig.add_trace(go.Bar(x=profit["name"], y=profit["cost"], name="Cost", marker_color="#f59e0b"))
        fig.add_trace(go.Scatter(x=profit["name"], y=profit["profit"], name="Profit", mode="lines+markers",
                                 line=dict(color="#6366f1", width=3)))
        fig.update_layout(template="plotly_white", barmode="group", height=380, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(
            profit.rename(columns={"name": "Project", "revenue": "Revenue", "cost": "Cost", "profit": "Profit",
                                   "margin": "Margin %", "hours": "Hours"}),
            use_container_width=True,
            hide_index=True,
        )

with tab_util:
    if not report.utilization:
        st.info("No time logged this month.")
    else:
        util = pd.DataFrame(report.utilization)
        fig = go.Figure()
        fig.add_trace(go.Bar(y=util["name"], x=util["billable"], name="Billable", orientation="h", marker_color="#6366f1"))
        fig.add_trace(go.Bar(y=util["name"], x=util["non_billable"], name="Non-billable", orientation="h",
                             marker_color="#a5b4fc"))
        fig.add_trace(go.Bar(y=util["name"], x=util["available"], name="Available", orientation="h",
                             marker_color="#e2e8f0"))
        fig.update_layout(template="plotly_white", barmode="stack", height=max(240, 60 * len(util)),
                          xaxis_title=f"Hours of {cfg.monthly_capacity_hours:g}", margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)

with tab_forecast:
    fc = pd.DataFrame(report.forecast)
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=fc["month"], y=fc["projected"], name="Projected", mode="lines+markers",
                             line=dict(color="#6366f1", width=3)))
    fig.add_trace(go.Bar(x=fc["month"], y=fc["confirmed"], name="Confirmed", marker_color="#10b981"))
    fig.add_trace(go.Bar(x=fc["month"], y=fc["pipeline"], name="Pipeline", marker_color="#fbbf24"))
    fig.update_layout(template="plotly_white", height=380, yaxis_title="Revenue ($)", margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True)
