from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from src.settings import get_config


SCHEMA_VERSION = 1
THEMES = ("light", "dark", "system")

DEFAULT_NOTIFICATIONS = {
    "email": True,
    "push": True,
    "project_updates": True,
    "task_assignments": True,
    "weekly_digest": False,
}

NOTIFICATION_LABELS = {
    "email": ("Email Notifications", "Receive email about your account activity"),
    "push": ("Push Notifications", "Receive push notifications on your devices"),
    "project_updates": ("Project Updates", "Get notified when projects are updated"),
    "task_assignments": ("Task Assignments", "Get notified when tasks are assigned to you"),
    "weekly_digest": ("Weekly Digest", "Receive a weekly summary of your activity"),
}


def _utc_now_iso() -> str:
    return datetime.utcnow().isoformat() + "Z"


def _safe_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        t = v.strip().lower()
        if t in {"1", "true", "yes", "y", "on"}:
            return True
        if t in {"0", "false", "no", "n", "off"}:
            return False
    return default


@dataclass
class Preferences:
    """Per-install UI preferences persisted to disk.

    - Missing or corrupt file: defaults.
    - Unknown keys are dropped on load.
    - New pages are visible unless explicitly hidden.
    """

    schema_version: int = SCHEMA_VERSION
    updated_at: str = field(default_factory=_utc_now_iso)
    theme: str = "system"
    notifications: Dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_NOTIFICATIONS))
    # Page visibility: key is the page file path (e.g. "pages/5_Clients.py")
    pages: Dict[str, bool] = field(default_factory=dict)

    def is_page_enabled(self, page_path: str, *, default: bool = True) -> bool:
        return _safe_bool(self.pages.get(page_path, default), default)

    def wants(self, notification: str) -> bool:
        return _safe_bool(self.notifications.get(notification), DEFAULT_NOTIFICATIONS.get(notification, False))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": int(self.schema_version),
            "updated_at": str(self.updated_at),
            "theme": self.theme,
            "notifications": dict(self.notifications),
            "pages": dict(self.pages),
        }


def _parse(raw: Any) -> Preferences:
    prefs = Preferences()
    if not isinstance(raw, dict):
        return prefs

    schema_version = raw.get("schema_version", SCHEMA_VERSION)
    if isinstance(schema_version, int) and schema_version > 0:
        prefs.schema_version = schema_version

    theme = raw.get("theme")
    if isinstance(theme, str) and theme.strip().lower() in THEMES:
        prefs.theme = theme.strip().lower()

    notifications = raw.get("notifications", {})
    if isinstance(notifications, dict):
        for key, default in DEFAULT_NOTIFICATIONS.items():
            prefs.notifications[key] = _safe_bool(notifications.get(key, default), default)

    pages = raw.get("pages", {})
    if isinstance(pages, dict):
        for k, v in pages.items():
            if isinstance(k, str):
                prefs.pages[k] = _safe_bool(v, True)

    updated_at = raw.get("updated_at")
    if isinstance(updated_at, str) and updated_at.strip():
        prefs.updated_at = updated_at.strip()

    return prefs


def _default_path() -> Path:
    return get_config().preferences_path


def load_preferences(*, path: Optional[Path] = None) -> Preferences:
    path = path or _default_path()
    if not path.exists():
        return Preferences()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return Preferences()
    return _parse(raw)


def save_preferences(prefs: Preferences, *, path: Optional[Path] = None) -> None:
    path = path or _default_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = prefs.to_dict()
    payload["updated_at"] = _utc_now_iso()
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
