"""Engine and session management for the document store."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from src.settings import get_config


_engine: Optional[Engine] = None
_engine_url: Optional[str] = None
_sessionmaker = None


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Get or create the SQLAlchemy engine.

    A call with a different URL disposes the cached engine and replaces it.

    Args:
        database_url: Optional database URL override. Defaults to the
            configured PM_DATABASE_URL / DATABASE_URL.

    Returns:
        The engine for that URL.
    """
    global _engine, _engine_url, _sessionmaker

    if database_url is None:
        database_url = get_config().database_url

    if _engine is not None and _engine_url == database_url:
        return _engine

    if _engine is not None:
        _engine.dispose()

    # Streamlit serves each session from its own thread
    connect_args = {}
    if database_url.startswith("sqlite:"):
        connect_args = {"check_same_thread": False}

    _engine = create_engine(
        database_url,
        future=True,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    _engine_url = database_url
    _sessionmaker = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False, future=True)
    return _engine


def get_session(database_url: Optional[str] = None) -> Session:
    """Create a new session bound to the engine for ``database_url``.

    Args:
        database_url: Optional database URL override.

    Returns:
        A new SQLAlchemy session. Callers close it (or use it as a context manager).
    """
    get_engine(database_url)
    return _sessionmaker()


def get_backend_name(database_url: Optional[str] = None) -> str:
    """Dialect name of the store, e.g. ``sqlite`` or ``postgresql``."""
    return get_engine(database_url).url.get_backend_name()


def reset_engine() -> None:
    """Dispose the cached engine so the next call reads the configuration again."""
    global _engine, _engine_url, _sessionmaker
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _engine_url = None
    _sessionmaker = None
