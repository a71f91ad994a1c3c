"""Live collection subscriptions by polling a cheap change token.

The SQL backends have no push channel, so a watcher compares a token (row
count plus the newest created/updated stamp) on each poll. When the token
moves, the whole collection is re-fetched and handed to every subscriber;
subscribers replace their local list, nothing is diffed.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from src.errors import report_error

from .db import get_session
from .models import ClientRecord, IdeaRecord, ProjectRecord, TimeEntryRecord


Subscriber = Callable[[List[Any]], None]

_STAMP_COLUMNS = {
    "projects": (ProjectRecord, ProjectRecord.updated_at),
    "clients": (ClientRecord, ClientRecord.updated_at),
    "ideas": (IdeaRecord, func.coalesce(IdeaRecord.updated_at, IdeaRecord.created_at)),
    "time_entries": (TimeEntryRecord, TimeEntryRecord.created_at),
}


def change_token(collection: str, database_url: Optional[str] = None) -> Optional[Hashable]:
    """(row count, newest stamp) for a collection, or None if the query failed."""
    model, stamp = _STAMP_COLUMNS[collection]
    try:
        with get_session(database_url) as session:
            count, newest = session.execute(select(func.count(model.id), func.max(stamp))).one()
    except SQLAlchemyError as exc:
        report_error(f"Failed to check {collection} for changes", exc)
        return None
    return (count, str(newest) if newest is not None else None)


class CollectionWatcher:
    """Re-fetch a collection whenever its change token moves."""

    def __init__(
        self,
        collection: str,
        fetch: Callable[[], Sequence[Any]],
        token_fn: Optional[Callable[[], Optional[Hashable]]] = None,
    ):
        if token_fn is None and collection not in _STAMP_COLUMNS:
            raise ValueError(f"No change token for collection: {collection}")
        self.collection = collection
        self._fetch = fetch
        self._token_fn = token_fn or (lambda: change_token(collection))
        self._token: Optional[Hashable] = None
        self._primed = False
        self._subscribers: Dict[int, Subscriber] = {}
        self._next_handle = 0
        self.items: List[Any] = []

    def subscribe(self, callback: Subscriber) -> int:
        """Register a callback; it immediately receives the current list."""
        handle = self._next_handle
        self._next_handle += 1
        self._subscribers[handle] = callback
        if self._primed:
            callback(list(self.items))
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._subscribers.pop(handle, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def poll(self) -> bool:
        """Fetch and push if the collection changed. Returns True when it pushed."""
        token = self._token_fn()
        if self._primed and (token is None or token == self._token):
            return False
        self.items = list(self._fetch())
        self._token = token
        self._primed = True
        for callback in list(self._subscribers.values()):
            callback(list(self.items))
        return True
