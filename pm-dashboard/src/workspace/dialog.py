"""Create/edit dialog lifecycle.

closed -> create | edit(entity) -> submit -> closed (refresh requested)
                                          \\-> same mode, error set, fields kept
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional

from src.errors import StoreError, ValidationError


CLOSED = "closed"
CREATE = "create"
EDIT = "edit"


@dataclass(frozen=True)
class DialogState:
    mode: str = CLOSED
    entity: Any = None
    fields: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    refresh: bool = False

    @property
    def is_open(self) -> bool:
        return self.mode in (CREATE, EDIT)


def open_create(defaults: Optional[Dict[str, Any]] = None) -> DialogState:
    return DialogState(mode=CREATE, fields=dict(defaults or {}))


def open_edit(entity: Any, fields: Dict[str, Any]) -> DialogState:
    return DialogState(mode=EDIT, entity=entity, fields=dict(fields))


def cancel(state: DialogState) -> DialogState:
    return DialogState()


def submit(
    state: DialogState,
    fields: Dict[str, Any],
    validate: Callable[[Dict[str, Any]], Dict[str, Any]],
    persist: Callable[[Dict[str, Any], Any], Any],
) -> DialogState:
    """Validate then persist.

    ``persist`` receives the cleaned fields and the entity under edit (None in
    create mode). Validation failures never reach ``persist``.
    """
    if not state.is_open:
        return state
    try:
        cleaned = validate(fields)
    except ValidationError as exc:
        return replace(state, fields=dict(fields), error=str(exc))
    try:
        persist(cleaned, state.entity)
    except StoreError as exc:
        return replace(state, fields=dict(fields), error=str(exc))
    return DialogState(refresh=True)


def acknowledge_refresh(state: DialogState) -> DialogState:
    return replace(state, refresh=False)
