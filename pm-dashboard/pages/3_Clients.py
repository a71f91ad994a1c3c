import streamlit as st

from src.errors import StoreError
from src.store import clients as client_store
from src.theme import STATUS_COLORS, badge
from src.ui import notify_failure, notify_success, page_header, render_collection, require_session, sync_collection
from src.workspace import collection_state as cs
from src.workspace import dialog
from src.workspace.derive import filter_clients
from src.workspace.entities import CLIENT_STATUSES
from src.workspace.validation import validate_client_form


session = require_session()

st.session_state.setdefault("client_dialog", dialog.DialogState())


def _reload():
    sync_collection("clients", lambda: client_store.list_clients(actor=session.user_id))


_reload()


def _persist(fields, entity):
    if entity is None:
        client_store.create_client(fields, actor=session.user_id)
    else:
        client_store.update_client(entity.id, fields, actor=session.user_id)


@st.dialog("Client")
def client_dialog():
    state = st.session_state.client_dialog
    f = state.fields
    creating = state.mode == dialog.CREATE
    st.markdown("#### " + ("Add client" if creating else "Edit client"))
    if state.error:
        st.error(state.error)
    name = st.text_input("Contact name *", value=f.get("name", ""))
    email = st.text_input("Email *", value=f.get("email", ""))
    company = st.text_input("Company *", value=f.get("company", ""))
    c1, c2 = st.columns(2)
    phone = c1.text_input("Phone", value=f.get("phone", ""))
    status = c2.selectbox("Status", CLIENT_STATUSES, index=CLIENT_STATUSES.index(f.get("status", "lead")))
    notes = st.text_area("Notes", value=f.get("notes", ""))
    fields = {"name": name, "email": email, "company": company, "phone": phone, "status": status, "notes": notes}

    b1, b2 = st.columns(2)
    if b1.button("Save", type="primary", use_container_width=True):
        new_state = dialog.submit(state, fields, validate_client_form, _persist)
        st.session_state.client_dialog = new_state
        if new_state.refresh:
            st.session_state.client_dialog = dialog.acknowledge_refresh(new_state)
            notify_success("Client added" if creating else "Client updated")
            _reload()
        st.rerun()
    if b2.button("Cancel", use_container_width=True):
        st.session_state.client_dialog = dialog.cancel(state)
        st.rerun()


page_header("Clients", "Contacts, leads and what they are worth")

clients = st.session_state.clients
m1, m2, m3, m4 = st.columns(4)
m1.metric("Clients", len(clients))
m2.metric("Active", sum(1 for c in clients if c.status == "active"))
m3.metric("Leads", sum(1 for c in clients if c.status == "lead"))
m4.metric("Total value", f"${sum(c.total_value for c in clients):,.0f}")

t1, t2, t3 = st.columns([3, 1, 1])
query = t1.text_input("Search clients", placeholder="Name, company or email", label_visibility="collapsed")
status_filter = t2.selectbox("Status", ["all", *CLIENT_STATUSES], label_visibility="collapsed")
if t3.button("➕ Add client", type="primary", use_container_width=True):
    st.session_state.client_dialog = dialog.open_create({"status": "lead"})
    st.rerun()


def render_clients(items):
    for client in items:
        with st.container(border=True):
            c1, c2, c3 = st.columns([4, 2, 1])
            initials = "".join(part[:1] for part in client.name.split()[:2]).upper()
            c1.markdown(
                f"**{initials} · {client.name}** {badge(client.status, STATUS_COLORS.get(client.status, '#64748b'))}"
                f"<div class='pm-muted'>{client.company} · {client.email}"
                f"{' · ' + client.phone if client.phone else ''}</div>",
                unsafe_allow_html=True,
            )
            c2.markdown(f"**{client.project_count}** projects  \n**${client.total_value:,.0f}** value")
            with c3:
                if st.button("Edit", key=f"edit_client_{client.id}", use_container_width=True):
                    st.session_state.client_dialog = dialog.open_edit(
                        client,
                        {
                            "name": client.name,
                            "email": client.email,
                            "company": client.company,
                            "phone": client.phone,
                            "status": client.status,
                            "notes": client.notes,
                        },
                    )
                    st.rerun()
                with st.popover("🗑", use_container_width=True):
                    st.caption(f"Delete {client.name}? Projects are not affected.")
                    if st.button("Delete", key=f"del_client_{client.id}", type="primary"):
                        try:
                            client_store.delete_client(client.id, actor=session.user_id)
                        except StoreError as exc:
                            notify_failure(exc)
                        else:
                            st.session_state.clients = cs.apply(st.session_state.clients, cs.Remove(client.id))
                            notify_success("Client deleted")
                        st.rerun()
            if client.notes:
                st.caption(client.notes)


visible = filter_clients(clients, query, status_filter)
if clients and not visible:
    st.info("No clients match your search.")
else:
    seed = render_collection(
        visible,
        render_clients,
        empty_title="No clients yet",
        empty_message="Add your first client, or load a few sample clients.",
        action_label="Load sample clients",
        key="clients",
    )
    if seed:
        try:
            added = client_store.seed_clients(actor=session.user_id)
        except StoreError as exc:
            notify_failure(exc)
        else:
            notify_success(f"Added {added} sample clients")
            _reload()
            st.rerun()

if st.session_state.client_dialog.is_open:
    client_dialog()
