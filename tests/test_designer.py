from __future__ import annotations

import random

import pytest

from formbuilder.designer import Designer, DesignerSessions
from formbuilder.elements import ElementType
from formbuilder.errors import ElementValidationError


def ids(designer: Designer) -> list[str]:
    return [element.id for element in designer.elements]


def test_insert_constructs_and_selects() -> None:
    designer = Designer()
    element = designer.insert(ElementType.TEXT, 0)
    assert designer.elements == [element]
    assert designer.selected_id == element.id
    assert element.extra_attributes.label == "Text Field"


def test_insert_clamps_index() -> None:
    designer = Designer()
    first = designer.insert(ElementType.TITLE, 0)
    last = designer.insert(ElementType.TEXT, 99)
    head = designer.insert(ElementType.SPACER, -5)
    assert ids(designer) == [head.id, first.id, last.id]


def test_insert_without_index_appends() -> None:
    designer = Designer()
    first = designer.insert(ElementType.TITLE)
    second = designer.insert(ElementType.TEXT)
    assert ids(designer) == [first.id, second.id]


def test_insert_assigns_unique_ids() -> None:
    designer = Designer()
    for _ in range(50):
        designer.insert(ElementType.SEPARATOR)
    assert len(set(ids(designer))) == 50


def test_insert_unknown_type_fails() -> None:
    with pytest.raises(KeyError):
        Designer().insert("NumberField")


def test_move_repositions() -> None:
    designer = Designer()
    a = designer.insert(ElementType.TITLE)
    b = designer.insert(ElementType.TEXT)
    c = designer.insert(ElementType.DATE)
    designer.move(c.id, 0)
    assert ids(designer) == [c.id, a.id, b.id]
    designer.move(c.id, 10)
    assert ids(designer) == [a.id, b.id, c.id]


def test_move_unknown_id_is_noop() -> None:
    designer = Designer()
    a = designer.insert(ElementType.TITLE)
    designer.move("missing", 0)
    assert ids(designer) == [a.id]


def test_remove_clears_selection_of_removed_element() -> None:
    designer = Designer()
    a = designer.insert(ElementType.TITLE)
    b = designer.insert(ElementType.TEXT)
    designer.remove(a.id)
    assert designer.selected_id == b.id
    designer.remove(b.id)
    assert designer.selected is None
    assert designer.elements == []


def test_remove_unknown_id_is_noop() -> None:
    designer = Designer()
    designer.insert(ElementType.TITLE)
    designer.remove("missing")
    assert len(designer) == 1


@pytest.mark.parametrize("count", [0, 1, 5, 20])
def test_insert_then_remove_all_in_any_order(count: int) -> None:
    designer = Designer()
    tags = list(ElementType)
    for i in range(count):
        designer.insert(tags[i % len(tags)], random.randint(0, len(designer)))
    order = ids(designer)
    random.shuffle(order)
    for element_id in order:
        designer.remove(element_id)
    assert designer.elements == []
    assert designer.selected is None


def test_update_attributes_replaces_configuration() -> None:
    designer = Designer()
    element = designer.insert(ElementType.SPACER)
    updated = designer.update_attributes(element.id, {"height": 50})
    assert updated.id == element.id
    assert designer.get(element.id).extra_attributes.height == 50


def test_update_attributes_unknown_id_is_noop() -> None:
    designer = Designer()
    designer.insert(ElementType.TEXT)
    before = designer.serialize()
    assert designer.update_attributes("missing", {"label": "Other"}) is None
    assert designer.serialize() == before


def test_update_attributes_rejects_invalid_configuration() -> None:
    designer = Designer()
    element = designer.insert(ElementType.SPACER)
    with pytest.raises(ElementValidationError):
        designer.update_attributes(element.id, {"height": 1})
    assert designer.get(element.id).extra_attributes.height == 20


def test_select_sets_and_clears() -> None:
    designer = Designer()
    a = designer.insert(ElementType.TITLE)
    designer.insert(ElementType.TEXT)
    designer.select(a.id)
    assert designer.selected == a
    designer.select(None)
    assert designer.selected is None


def test_serialize_matches_elements() -> None:
    designer = Designer()
    element = designer.insert(ElementType.SEPARATOR)
    assert designer.serialize() == [{"id": element.id, "type": "SeparatorField"}]


def test_sessions_are_scoped_per_owner_and_form() -> None:
    sessions = DesignerSessions()
    first = sessions.open("user-1", 1, [])
    assert sessions.open("user-1", 1, []) is first
    assert sessions.open("user-2", 1, []) is not first
    first.insert(ElementType.TEXT)
    sessions.discard("user-1", 1)
    assert sessions.get("user-1", 1) is None
    assert len(sessions.open("user-1", 1, [])) == 0


def test_select_unknown_id_clears_selection() -> None:
    designer = Designer()
    element = designer.insert(ElementType.TEXT)
    designer.select("missing")
    assert designer.selected_id is None
    assert designer.selected is None
    designer.select(element.id)
    assert designer.selected_id == element.id
