"""Runtime configuration for the dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from src.config_utils import (
    env_bool,
    env_float,
    env_int,
    env_list,
    env_optional_str,
    env_str,
)


APP_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = APP_DIR / "data"
DEFAULT_ALLOWED_EMAILS = ("owner@example.com",)


def _default_database_url() -> str:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{(DATA_DIR / 'pm_dashboard.db').as_posix()}"


@dataclass(frozen=True)
class DashboardConfig:
    """Env-first configuration with local-dev defaults.

    Database:
    - PM_DATABASE_URL: dashboard-specific DB URL (preferred)
    - PLATFORM_DATABASE_URL / DATABASE_URL: shared DB URL
    - If none is set, defaults to SQLite at data/pm_dashboard.db

    Access:
    - PM_ALLOWED_EMAILS: comma-separated allow-list of signed-in emails
    - PM_AUTH_PROVIDER: oidc|dev (default: oidc)
    - PM_DEV_USER_EMAIL / PM_DEV_USER_NAME: identity used by the dev provider

    Reports:
    - PM_REPORTS_DEMO_MODE: synthetic report figures (default: false)
    - PM_DEFAULT_HOURLY_RATE (150), PM_DEFAULT_HOURLY_COST (75)
    - PM_MONTHLY_CAPACITY_HOURS (160)

    Misc:
    - PM_LIVE_REFRESH_SECONDS: live view polling period (default: 10)
    - PM_ACTIVITY_LOG_ENABLED (true), PM_ACTIVITY_LOG_RETENTION_DAYS (30)
    - PM_PREFERENCES_PATH: JSON file for UI preferences (default: data/preferences.json)
    """

    database_url: str
    allowed_emails: Tuple[str, ...] = DEFAULT_ALLOWED_EMAILS
    auth_provider: str = "oidc"
    dev_user_email: Optional[str] = None
    dev_user_name: str = "Developer"
    reports_demo_mode: bool = False
    hourly_rate: float = 150.0
    hourly_cost: float = 75.0
    monthly_capacity_hours: float = 160.0
    live_refresh_seconds: int = 10
    activity_log_enabled: bool = True
    activity_log_retention_days: int = 30
    preferences_path: Path = field(default=DATA_DIR / "preferences.json")

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        database_url = (
            env_optional_str("PM_DATABASE_URL")
            or env_optional_str("PLATFORM_DATABASE_URL")
            or env_optional_str("DATABASE_URL")
            or _default_database_url()
        )

        provider = env_str("PM_AUTH_PROVIDER", "oidc").lower()
        if provider not in ("oidc", "dev"):
            provider = "oidc"

        emails: List[str] = env_list("PM_ALLOWED_EMAILS", list(DEFAULT_ALLOWED_EMAILS))

        return cls(
            database_url=database_url,
            allowed_emails=tuple(e.lower() for e in emails),
            auth_provider=provider,
            dev_user_email=env_optional_str("PM_DEV_USER_EMAIL"),
            dev_user_name=env_str("PM_DEV_USER_NAME", "Developer"),
            reports_demo_mode=env_bool("PM_REPORTS_DEMO_MODE", False),
            hourly_rate=max(0.0, env_float("PM_DEFAULT_HOURLY_RATE", 150.0)),
            hourly_cost=max(0.0, env_float("PM_DEFAULT_HOURLY_COST", 75.0)),
            monthly_capacity_hours=max(1.0, env_float("PM_MONTHLY_CAPACITY_HOURS", 160.0)),
            live_refresh_seconds=max(1, env_int("PM_LIVE_REFRESH_SECONDS", 10)),
            activity_log_enabled=env_bool("PM_ACTIVITY_LOG_ENABLED", True),
            activity_log_retention_days=max(1, env_int("PM_ACTIVITY_LOG_RETENTION_DAYS", 30)),
            preferences_path=Path(env_str("PM_PREFERENCES_PATH", str(DATA_DIR / "preferences.json"))),
        )


_config: Optional[DashboardConfig] = None


def get_config() -> DashboardConfig:
    """Get the dashboard configuration (cached)."""
    global _config
    if _config is None:
        _config = DashboardConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None
