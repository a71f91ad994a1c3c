"""Streamlit glue shared by every page: sign-in gate, toasts, empty states."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Tuple

import streamlit as st

from src.activity_log import cleanup_old_activity
from src.auth import AuthDecision, Identity, Session, authorize
from src.errors import DashboardError, add_error_observer
from src.preferences import Preferences, load_preferences
from src.settings import DashboardConfig, get_config
from src.store import init_db
from src.theme import set_theme
from src.workspace import collection_state as cs
from src.workspace.view_state import EMPTY, LOADING, view_state


def _toast_error(message: str, exc: Optional[BaseException] = None) -> None:
    st.toast(f"⚠️ {message}")


@st.cache_resource(show_spinner=False)
def _bootstrap(database_url: str, retention_days: int) -> bool:
    """Create tables and prune old activity once per process and database."""
    init_db(database_url)
    cleanup_old_activity(retention_days, database_url=database_url)
    add_error_observer(_toast_error)
    return True


def current_identity(cfg: DashboardConfig) -> Optional[Identity]:
    """Who the identity provider says is signed in, if anyone."""
    if cfg.auth_provider == "dev":
        if not cfg.dev_user_email:
            return None
        return Identity(email=cfg.dev_user_email, name=cfg.dev_user_name)
    if not st.user.is_logged_in:
        return None
    return Identity(email=st.user.get("email"), name=st.user.get("name"))


def _render_sign_in(decision: AuthDecision, cfg: DashboardConfig) -> None:
    st.markdown(
        '<div class="pm-header"><h1>📁 Project Dashboard</h1>'
        "<p>Sign in with your work account to continue.</p></div>",
        unsafe_allow_html=True,
    )
    if decision.message:
        st.info(decision.message)
    if cfg.auth_provider == "dev":
        st.caption("Dev sign-in is enabled: set PM_DEV_USER_EMAIL to an allowed address.")
        return
    st.button("Sign in", type="primary", on_click=st.login)


def require_session() -> Session:
    """Return the signed-in, allow-listed Session or stop the script run.

    A signed-in identity that is not on the allow-list is signed out
    immediately and told why.
    """
    cfg = get_config()
    identity = current_identity(cfg)
    decision = authorize(identity, cfg.allowed_emails)
    if decision.allowed and decision.session is not None:
        return decision.session

    if identity is not None and cfg.auth_provider == "oidc":
        st.session_state["pm_auth_error"] = decision.message
        st.logout()
    denied = st.session_state.pop("pm_auth_error", None)
    if denied:
        st.error(denied)
    _render_sign_in(decision, cfg)
    st.stop()


def page_setup(title: str, icon: str) -> Tuple[Session, DashboardConfig, Preferences]:
    """Theme, bootstrap and sign-in for a page. Returns (session, config, preferences)."""
    cfg = get_config()
    prefs: Preferences = load_preferences()
    set_theme(page_title=f"{title} · Project Dashboard", page_icon=icon, theme=prefs.theme)
    _bootstrap(cfg.database_url, cfg.activity_log_retention_days)
    session = require_session()
    return session, cfg, prefs


def sync_collection(key: str, fetch: Callable[[], Sequence[Any]]) -> list:
    """Re-fetch a collection into session state on every script run.

    Lists cached in session state are shared by every page of the session, so
    a page fetches when it is shown instead of trusting a copy another page
    may have left behind before its own writes.

    Args:
        key: Session-state key holding the list.
        fetch: Store listing call, e.g. ``lambda: list_projects(actor=...)``.

    Returns:
        The refreshed list, also stored under ``key``.
    """
    st.session_state[key] = cs.apply(st.session_state.get(key) or [], cs.Replace(fetch()))
    return st.session_state[key]


def page_header(title: str, subtitle: str = "") -> None:
    sub = f"<p>{subtitle}</p>" if subtitle else ""
    st.markdown(f'<div class="pm-header"><h1>{title}</h1>{sub}</div>', unsafe_allow_html=True)


def empty_state(title: str, message: str, action_label: Optional[str] = None, key: str = "empty") -> bool:
    """Render the empty-state box; True when its creation action was clicked."""
    st.markdown(f'<div class="pm-empty"><h3>{title}</h3><p>{message}</p></div>', unsafe_allow_html=True)
    if action_label:
        return st.button(action_label, key=f"{key}_action", type="primary")
    return False


def render_collection(
    items: Optional[Sequence[Any]],
    render_items: Callable[[Sequence[Any]], None],
    *,
    loading: bool = False,
    empty_title: str = "Nothing here yet",
    empty_message: str = "",
    action_label: Optional[str] = None,
    key: str = "collection",
) -> bool:
    """Spinner, empty state or items, chosen by view_state. True if the empty action fired."""
    state = view_state(loading, items)
    if state == LOADING:
        st.caption("⏳ Loading...")
        return False
    if state == EMPTY:
        return empty_state(empty_title, empty_message, action_label, key=key)
    render_items(items)
    return False


def notify_failure(exc: DashboardError) -> None:
    """Transient notification for a failed write or rejected form."""
    st.toast(f"❌ {exc}")


def notify_success(message: str) -> None:
    st.toast(f"✅ {message}")
