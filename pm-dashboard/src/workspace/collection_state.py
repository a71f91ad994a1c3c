"""Reducer for per-view entity lists.

Pages keep the list they fetched in session state and apply every local
change through ``apply`` so the same invariants hold everywhere: ids are
unique, order is stable, and the input list is never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Sequence, Union


@dataclass(frozen=True)
class Replace:
    """Swap the whole list, e.g. after a re-fetch or a live push."""

    items: Sequence[Any]


@dataclass(frozen=True)
class Upsert:
    """Insert at the end, or replace in place when the id is already present."""

    item: Any


@dataclass(frozen=True)
class Remove:
    id: str


@dataclass(frozen=True)
class Patch:
    id: str
    changes: Dict[str, Any]


Action = Union[Replace, Upsert, Remove, Patch]


def _dedupe(items: Sequence[Any]) -> List[Any]:
    # last occurrence wins, position of the first is kept
    index: Dict[str, int] = {}
    result: List[Any] = []
    for item in items:
        if item.id in index:
            result[index[item.id]] = item
        else:
            index[item.id] = len(result)
            result.append(item)
    return result


def apply(items: Sequence[Any], action: Action) -> List[Any]:
    if isinstance(action, Replace):
        return _dedupe(action.items)
    if isinstance(action, Upsert):
        result = list(items)
        for i, existing in enumerate(result):
            if existing.id == action.item.id:
                result[i] = action.item
                return result
        result.append(action.item)
        return result
    if isinstance(action, Remove):
        return [item for item in items if item.id != action.id]
    if isinstance(action, Patch):
        # ids are immutable; a patch never renames an entity
        changes = {k: v for k, v in action.changes.items() if k != "id"}
        return [replace(item, **changes) if item.id == action.id else item for item in items]
    raise TypeError(f"Unsupported action: {type(action).__name__}")


def ids(items: Sequence[Any]) -> List[str]:
    return [item.id for item in items]
