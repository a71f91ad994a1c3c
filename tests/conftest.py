from datetime import datetime

import pytest

from src.errors import clear_error_observers
from src.settings import reset_config
from src.store import init_db
from src.store.db import reset_engine


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    """Fresh SQLite database per test, wired in as the configured store."""
    url = f"sqlite:///{(tmp_path / 'pm.db').as_posix()}"
    monkeypatch.setenv("PM_DATABASE_URL", url)
    monkeypatch.setenv("PM_PREFERENCES_PATH", str(tmp_path / "preferences.json"))
    reset_config()
    reset_engine()
    init_db(url)
    yield url
    clear_error_observers()
    reset_engine()
    reset_config()


@pytest.fixture
def error_spy():
    """Collects every (message, exc) passed to report_error."""
    from src.errors import add_error_observer, remove_error_observer

    calls = []

    def observer(message, exc=None):
        calls.append((message, exc))

    add_error_observer(observer)
    yield calls
    remove_error_observer(observer)


@pytest.fixture
def now():
    return datetime(2024, 5, 15, 10, 30)
