import json
from dataclasses import replace

from src.preferences import DEFAULT_NOTIFICATIONS, Preferences, load_preferences, save_preferences


def test_missing_file_gives_defaults(tmp_path):
    prefs = load_preferences(path=tmp_path / "prefs.json")
    assert prefs.theme == "system"
    assert prefs.notifications == DEFAULT_NOTIFICATIONS
    assert prefs.is_page_enabled("pages/3_Clients.py") is True


def test_save_and_load(tmp_path):
    path = tmp_path / "nested" / "prefs.json"
    prefs = replace(
        Preferences(),
        theme="dark",
        notifications=dict(DEFAULT_NOTIFICATIONS, weekly_digest=True, push=False),
        pages={"pages/7_Reports.py": False},
    )
    save_preferences(prefs, path=path)

    loaded = load_preferences(path=path)
    assert loaded.theme == "dark"
    assert loaded.wants("weekly_digest") is True
    assert loaded.wants("push") is False
    assert loaded.is_page_enabled("pages/7_Reports.py") is False


def test_corrupt_or_odd_values_fall_back(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_preferences(path=path).theme == "system"

    path.write_text(
        json.dumps({"theme": "neon", "notifications": {"email": "off", "bogus": True}, "pages": {"p.py": "no"}}),
        encoding="utf-8",
    )
    prefs = load_preferences(path=path)
    assert prefs.theme == "system"
    assert prefs.wants("email") is False
    assert "bogus" not in prefs.notifications
    assert prefs.is_page_enabled("p.py") is False


def test_default_path_comes_from_config(db_url, tmp_path):
    save_preferences(replace(Preferences(), theme="light"))
    assert (tmp_path / "preferences.json").exists()
    assert load_preferences().theme == "light"
