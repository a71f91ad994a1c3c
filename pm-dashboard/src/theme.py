import os

import streamlit as st
from streamlit.errors import StreamlitAPIException

THEME_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "assets")

PRIORITY_COLORS = {
    "low": "#64748b",
    "medium": "#3b82f6",
    "high": "#f59e0b",
    "urgent": "#ef4444",
}

STATUS_COLORS = {
    "backlog": "#94a3b8",
    "planned": "#6366f1",
    "active": "#10b981",
    "completed": "#0ea5e9",
    "cancelled": "#ef4444",
    "todo": "#94a3b8",
    "in-progress": "#f59e0b",
    "done": "#10b981",
    "lead": "#a855f7",
    "inactive": "#94a3b8",
}


def theme_css_files(theme: str = "system") -> list:
    """CSS files to inject for a theme preference, base stylesheet first."""
    files = [os.path.join(THEME_DIR, "custom_theme.css")]
    if theme == "dark":
        files.append(os.path.join(THEME_DIR, "dark_theme.css"))
    return files


def badge(label: str, color: str) -> str:
    """Small pill used on cards and tables (HTML, rendered with unsafe_allow_html)."""
    return f'<span class="pm-badge" style="background:{color}1f;color:{color};border-color:{color}55">{label}</span>'


def set_theme(
    page_title: str = "Project Dashboard",
    page_icon: str = "📁",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
    theme: str = "system",
):
    """Configure the page and inject the global stylesheet.

    Safe to call at the top of every page: a repeated set_page_config is
    ignored, while the CSS is (re)injected.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        # set_page_config can only be called once per run
        pass

    for theme_file in theme_css_files(theme):
        try:
            with open(theme_file, "r", encoding="utf-8") as f:
                st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
        except FileNotFoundError:
            st.error(f"Theme file not found at {theme_file}. Please check the file path.")
