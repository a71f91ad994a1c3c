import streamlit as st

from src.errors import StoreError
from src.store import ideas as idea_store
from src.ui import notify_failure, notify_success, page_header, render_collection, require_session, sync_collection
from src.workspace import collection_state as cs
from src.workspace import dialog
from src.workspace.validation import validate_idea_form


session = require_session()

sync_collection("ideas", lambda: idea_store.list_ideas(actor=session.user_id))
st.session_state.setdefault("idea_dialog", dialog.DialogState())


def _persist(fields, entity):
    if entity is None:
        idea_store.create_idea(fields["title"], fields["description"], actor=session.user_id)
    else:
        idea_store.update_idea(entity.id, title=fields["title"], description=fields["description"], actor=session.user_id)


@st.dialog("Idea")
def idea_dialog():
    state = st.session_state.idea_dialog
    creating = state.mode == dialog.CREATE
    if state.error:
        st.error(state.error)
    title = st.text_input("Title *", value=state.fields.get("title", ""))
    description = st.text_area("Description", value=state.fields.get("description", ""), height=160)
    b1, b2 = st.columns(2)
    if b1.button("Save", type="primary", use_container_width=True):
        new_state = dialog.submit(state, {"title": title, "description": description}, validate_idea_form, _persist)
        st.session_state.idea_dialog = new_state
        if new_state.refresh:
            st.session_state.idea_dialog = dialog.acknowledge_refresh(new_state)
            sync_collection("ideas", lambda: idea_store.list_ideas(actor=session.user_id))
            notify_success("Idea saved" if creating else "Idea updated")
        st.rerun()
    if b2.button("Cancel", use_container_width=True):
        st.session_state.idea_dialog = dialog.cancel(state)
        st.rerun()


page_header("Ideas", "Capture it now, shape it later")

if st.button("💡 New idea", type="primary"):
    st.session_state.idea_dialog = dialog.open_create()
    st.rerun()


def render_ideas(items):
    cols = st.columns(2)
    for idx, idea in enumerate(items):
        with cols[idx % 2], st.container(border=True):
            st.markdown(f"**{idea.title}**")
            if idea.description:
                st.markdown(idea.description)
            stamp = idea.updated_at or idea.created_at
            if stamp:
                st.caption(("Edited " if idea.updated_at else "Added ") + stamp.strftime("%b %d, %Y"))
            b1, b2 = st.columns(2)
            if b1.button("Edit", key=f"edit_idea_{idea.id}", use_container_width=True):
                st.session_state.idea_dialog = dialog.open_edit(idea, {"title": idea.title, "description": idea.description})
                st.rerun()
            if b2.button("Delete", key=f"del_idea_{idea.id}", use_container_width=True):
                try:
                    idea_store.delete_idea(idea.id, actor=session.user_id)
                except StoreError as exc:
                    notify_failure(exc)
                else:
                    st.session_state.ideas = cs.apply(st.session_state.ideas, cs.Remove(idea.id))
                    notify_success("Idea deleted")
                st.rerun()


render_collection(
    st.session_state.ideas,
    render_ideas,
    empty_title="No ideas yet",
    empty_message="Jot down the next big thing.",
    key="ideas",
)

if st.session_state.idea_dialog.is_open:
    idea_dialog()
