"""Page catalog for the project dashboard.

Defines the navigation structure and page organization.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class PageSpec:
    """Specification for a navigation page."""

    path: str
    title: str
    icon: str
    group: str
    description: str = ""
    always_visible: bool = False
    default: bool = False


GROUP_ORDER = ["Workspace", "Insights", "More"]

GROUP_ICONS = {
    "Workspace": "🗂️",
    "Insights": "📈",
    "More": "⚙️",
}

GROUP_DESCRIPTIONS = {
    "Workspace": "Projects, tasks and the people you work with",
    "Insights": "Time, performance and financial views",
    "More": "Templates, preferences and help",
}


def get_page_catalog() -> List[PageSpec]:
    """Single source of truth for Streamlit navigation pages."""
    return [
        # =====================================================================
        # WORKSPACE
        # =====================================================================
        PageSpec(
            path="pages/0_Projects.py",
            title="Projects",
            icon="📁",
            group="Workspace",
            description="Project cards, wizard and task lists",
            always_visible=True,
            default=True,
        ),
        PageSpec(
            path="pages/1_Inbox.py",
            title="Inbox",
            icon="📥",
            group="Workspace",
            description="Recent activity across the workspace",
        ),
        PageSpec(
            path="pages/2_My_Tasks.py",
            title="My Tasks",
            icon="✅",
            group="Workspace",
            description="Overdue, today and upcoming work",
        ),
        PageSpec(
            path="pages/3_Clients.py",
            title="Clients",
            icon="🤝",
            group="Workspace",
            description="Client directory",
        ),
        PageSpec(
            path="pages/4_Calendar.py",
            title="Calendar",
            icon="📅",
            group="Workspace",
            description="Deadlines and task due dates",
        ),
        PageSpec(
            path="pages/8_Ideas.py",
            title="Ideas",
            icon="💡",
            group="Workspace",
            description="Free-form notes",
        ),
        # =====================================================================
        # INSIGHTS
        # =====================================================================
        PageSpec(
            path="pages/5_Time_Tracking.py",
            title="Time Tracking",
            icon="⏱️",
            group="Insights",
            description="Timer and weekly timesheet",
        ),
        PageSpec(
            path="pages/6_Performance.py",
            title="Performance",
            icon="📊",
            group="Insights",
            description="Project and task KPIs",
        ),
        PageSpec(
            path="pages/7_Reports.py",
            title="Reports",
            icon="💰",
            group="Insights",
            description="Profitability, utilization and forecast",
        ),
        # =====================================================================
        # MORE
        # =====================================================================
        PageSpec(
            path="pages/9_Templates.py",
            title="Templates",
            icon="🧩",
            group="More",
            description="Start a project from a template",
        ),
        PageSpec(
            path="pages/10_Settings.py",
            title="Settings",
            icon="⚙️",
            group="More",
            description="Profile, appearance and notifications",
            always_visible=True,
        ),
        PageSpec(
            path="pages/11_Help.py",
            title="Help",
            icon="❓",
            group="More",
            description="Frequently asked questions",
        ),
    ]


def catalog_by_group() -> Dict[str, List[PageSpec]]:
    """Pages organized by group, in GROUP_ORDER."""
    grouped: Dict[str, List[PageSpec]] = {}
    for p in get_page_catalog():
        grouped.setdefault(p.group, []).append(p)

    ordered: Dict[str, List[PageSpec]] = {}
    for group in GROUP_ORDER:
        if group in grouped:
            ordered[group] = grouped[group]

    for group, pages in grouped.items():
        if group not in ordered:
            ordered[group] = pages

    return ordered


def known_page_paths() -> List[str]:
    return [p.path for p in get_page_catalog()]


def visible_pages(is_enabled) -> Dict[str, List[PageSpec]]:
    """Grouped catalog minus pages the user hid; always-visible pages stay."""
    result: Dict[str, List[PageSpec]] = {}
    for group, pages in catalog_by_group().items():
        kept = [p for p in pages if p.always_visible or is_enabled(p.path)]
        if kept:
            result[group] = kept
    return result


def get_group_icon(group: str) -> str:
    return GROUP_ICONS.get(group, "📁")


def get_group_description(group: str) -> str:
    return GROUP_DESCRIPTIONS.get(group, "")
