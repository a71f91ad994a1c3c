"""Document store for the dashboard's collections.

- projects (tasks embedded), clients, ideas, time_entries
- SQLite by default, PostgreSQL via PM_DATABASE_URL / DATABASE_URL
- listing calls never raise; writes raise StoreError
"""

from typing import Optional

from .db import get_engine
from .models import Base


def init_db(database_url: Optional[str] = None) -> None:
    """Create collection and activity tables. Safe to call multiple times."""
    from src.activity_log import init_db as init_activity_db

    Base.metadata.create_all(get_engine(database_url))
    init_activity_db(database_url)


__all__ = ["init_db"]
