import streamlit as st

from src.errors import DashboardError
from src.store.projects import create_project
from src.ui import notify_failure, notify_success, page_header, require_session
from src.workspace.templates import TEMPLATES, search_templates, wizard_data_from_template


session = require_session()

page_header("Templates", "Start a project from a proven task list")

c1, c2 = st.columns([3, 1])
query = c1.text_input("Search templates", placeholder="Name or category", label_visibility="collapsed")
categories = sorted({t.category for t in TEMPLATES})
category = c2.selectbox("Category", ["All", *categories], label_visibility="collapsed")

templates = [t for t in search_templates(query) if category == "All" or t.category == category]

if not templates:
    st.info("No templates match your search.")

cols = st.columns(2)
for idx, template in enumerate(templates):
    with cols[idx % 2], st.container(border=True):
        st.markdown(f"### {template.icon} {template.name}")
        st.caption(f"{template.category} · {len(template.tasks)} tasks · used {template.usage_count} times")
        st.markdown(template.description)
        with st.expander("Tasks"):
            for number, name in enumerate(template.tasks, start=1):
                st.markdown(f"{number}. {name}")
        with st.popover("Use template", use_container_width=True):
            name = st.text_input("Project name", value=template.name, key=f"tpl_name_{template.id}")
            if st.button("Create project", key=f"tpl_create_{template.id}", type="primary"):
                data = wizard_data_from_template(template, name, owner_name=session.display_name)
                try:
                    create_project(data, actor=session.user_id)
                except DashboardError as exc:
                    notify_failure(exc)
                else:
                    st.session_state.pop("projects", None)
                    notify_success(f"Created {data['title']} with {len(data['tasks'])} tasks")
