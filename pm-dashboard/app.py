import streamlit as st

from src.page_catalog import get_group_icon, visible_pages
from src.ui import page_setup

session, cfg, prefs = page_setup("Projects", "📁")

with st.sidebar:
    st.markdown(f"**{session.display_name}**  \n<span class='pm-muted'>{session.email}</span>", unsafe_allow_html=True)
    if cfg.auth_provider == "oidc":
        st.button("Sign out", key="sidebar_sign_out", on_click=st.logout, use_container_width=True)

navigation = {
    f"{get_group_icon(group)} {group}": [
        st.Page(p.path, title=p.title, icon=p.icon, default=p.default)
        for p in pages
    ]
    for group, pages in visible_pages(prefs.is_page_enabled).items()
}

st.navigation(navigation).run()
