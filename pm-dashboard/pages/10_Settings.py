"""Settings - profile, appearance, notifications and page visibility."""

from dataclasses import replace

import streamlit as st

from src.page_catalog import catalog_by_group, get_group_icon
from src.preferences import NOTIFICATION_LABELS, THEMES, load_preferences, save_preferences
from src.settings import get_config
from src.store.db import get_backend_name
from src.ui import notify_success, page_header, require_session


session = require_session()
cfg = get_config()
prefs = load_preferences()

page_header("Settings", "Your profile and how the dashboard behaves")

tab_profile, tab_appearance, tab_notifications, tab_pages = st.tabs(
    ["👤 Profile", "🎨 Appearance", "🔔 Notifications", "🧭 Pages"]
)

with tab_profile:
    c1, c2 = st.columns([1, 4])
    c1.markdown(
        f'<div class="pm-card" style="text-align:center;font-size:2rem;font-weight:700">{session.initials}</div>',
        unsafe_allow_html=True,
    )
    with c2:
        st.markdown(f"### {session.display_name}")
        st.caption(session.email)
        st.caption(f"Sign-in provider: {cfg.auth_provider} · storage: {get_backend_name()}")
    st.divider()
    if cfg.auth_provider == "oidc":
        st.button("Sign out", type="primary", on_click=st.logout)
    else:
        st.info("Dev sign-in is active; unset PM_AUTH_PROVIDER=dev to use the identity provider.")

with tab_appearance:
    theme = st.radio(
        "Theme",
        THEMES,
        index=THEMES.index(prefs.theme),
        format_func=str.capitalize,
        horizontal=True,
    )
    if theme != prefs.theme:
        save_preferences(replace(prefs, theme=theme))
        notify_success(f"Theme set to {theme}")
        st.rerun()

with tab_notifications:
    with st.form("notifications"):
        chosen = {}
        for key, (label, help_text) in NOTIFICATION_LABELS.items():
            chosen[key] = st.toggle(label, value=prefs.wants(key), help=help_text)
        if st.form_submit_button("Save preferences", type="primary"):
            save_preferences(replace(prefs, notifications=chosen))
            notify_success("Notification preferences saved")

with tab_pages:
    st.caption("Hide pages you don't use. Projects and Settings are always shown.")
    with st.form("page_visibility"):
        pages = dict(prefs.pages)
        for group, specs in catalog_by_group().items():
            st.markdown(f"**{get_group_icon(group)} {group}**")
            for spec in specs:
                pages[spec.path] = st.checkbox(
                    f"{spec.icon} {spec.title}",
                    value=spec.always_visible or prefs.is_page_enabled(spec.path),
                    disabled=spec.always_visible,
                    help=spec.description,
                    key=f"page_{spec.path}",
                )
        if st.form_submit_button("Save navigation", type="primary"):
            save_preferences(replace(prefs, pages=pages))
            notify_success("Navigation updated")
            st.rerun()
