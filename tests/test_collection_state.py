from dataclasses import dataclass

import pytest

from src.workspace.collection_state import Patch, Remove, Replace, Upsert, apply, ids


@dataclass
class Item:
    id: str
    label: str = ""


def test_replace_dedupes_keeping_first_position_and_last_value():
    result = apply([], Replace([Item("a", "1"), Item("b"), Item("a", "2")]))
    assert ids(result) == ["a", "b"]
    assert result[0].label == "2"


def test_upsert_appends_or_replaces_in_place():
    items = [Item("a"), Item("b")]
    assert ids(apply(items, Upsert(Item("c")))) == ["a", "b", "c"]
    replaced = apply(items, Upsert(Item("a", "new")))
    assert ids(replaced) == ["a", "b"]
    assert replaced[0].label == "new"
    assert items[0].label == ""


def test_remove_unknown_id_is_a_noop():
    items = [Item("a")]
    assert apply(items, Remove("zzz")) == items
    assert apply(items, Remove("a")) == []


def test_patch():
    result = apply([Item("a"), Item("b")], Patch("b", {"label": "done"}))
    assert [i.label for i in result] == ["", "done"]


def test_unknown_action():
    with pytest.raises(TypeError):
        apply([], "replace")


def test_patch_cannot_change_an_id():
    result = apply([Item("a"), Item("b")], Patch("b", {"id": "a", "label": "x"}))
    assert ids(result) == ["a", "b"]
    assert len(set(ids(result))) == len(result)
    assert result[1].label == "x"
