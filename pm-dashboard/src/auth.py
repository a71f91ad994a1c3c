"""Allow-list authorization over an external identity provider.

The provider (Streamlit OIDC, or the env-driven dev provider) only tells us
who signed in. Whether they may use the dashboard is decided here, and the
outcome is an explicit ``Session`` that pages receive as an argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


ACCESS_DENIED_MESSAGE = "Access Denied: Email not authorized."


@dataclass(frozen=True)
class Identity:
    """What the identity provider reports about the signed-in user."""

    email: Optional[str]
    name: Optional[str] = None


@dataclass(frozen=True)
class Session:
    email: str
    display_name: str

    @property
    def user_id(self) -> str:
        return self.email

    @property
    def initials(self) -> str:
        parts = [p for p in self.display_name.split() if p]
        if not parts:
            return self.email[:1].upper()
        return "".join(p[0] for p in parts[:2]).upper()


@dataclass(frozen=True)
class AuthDecision:
    allowed: bool
    session: Optional[Session] = None
    message: str = ""


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().casefold()


def is_allowed(email: Optional[str], allowed_emails: Iterable[str]) -> bool:
    """Exact match against the allow-list after trimming and case-folding."""
    wanted = normalize_email(email)
    if not wanted:
        return False
    return any(wanted == normalize_email(e) for e in allowed_emails)


def authorize(identity: Optional[Identity], allowed_emails: Iterable[str]) -> AuthDecision:
    if identity is None or not normalize_email(identity.email):
        return AuthDecision(allowed=False, message="Please sign in to continue.")
    if not is_allowed(identity.email, allowed_emails):
        return AuthDecision(allowed=False, message=ACCESS_DENIED_MESSAGE)
    email = identity.email.strip()
    name = (identity.name or "").strip() or email.split("@")[0]
    return AuthDecision(allowed=True, session=Session(email=email, display_name=name))
