from __future__ import annotations

from typing import Optional, Sequence


LOADING = "loading"
EMPTY = "empty"
READY = "ready"


def view_state(loading: bool, items: Optional[Sequence]) -> str:
    """Map (loading, data) to what a list view shows: spinner, empty state or items."""
    if loading:
        return LOADING
    if not items:
        return EMPTY
    return READY
