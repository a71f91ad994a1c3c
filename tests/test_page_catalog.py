from pathlib import Path

from src.page_catalog import (
    GROUP_ORDER,
    catalog_by_group,
    get_group_icon,
    get_page_catalog,
    known_page_paths,
    visible_pages,
)
from src.settings import APP_DIR


def test_every_page_file_exists():
    for path in known_page_paths():
        assert (APP_DIR / path).is_file(), path


def test_paths_are_unique_and_one_default():
    pages = get_page_catalog()
    assert len({p.path for p in pages}) == len(pages)
    assert [p.title for p in pages if p.default] == ["Projects"]


def test_groups_follow_order():
    assert list(catalog_by_group()) == GROUP_ORDER
    assert get_group_icon("Unknown") == "📁"


def test_hidden_pages_are_dropped_but_always_visible_stay():
    hidden = {"pages/0_Projects.py", "pages/7_Reports.py", "pages/10_Settings.py"}
    groups = visible_pages(lambda path: path not in hidden)
    paths = {p.path for pages in groups.values() for p in pages}
    assert "pages/7_Reports.py" not in paths
    assert {"pages/0_Projects.py", "pages/10_Settings.py"} <= paths


def test_group_with_nothing_visible_is_omitted():
    groups = visible_pages(lambda path: False)
    assert set(groups) == {"Workspace", "More"}
    assert [p.title for p in groups["Workspace"]] == ["Projects"]


def test_page_scripts_gate_on_session():
    for path in known_page_paths():
        source = (APP_DIR / path).read_text(encoding="utf-8")
        assert "require_session()" in source, path
    assert Path(APP_DIR / "app.py").is_file()
