"""
Designer surface: the editable working copy of one form's elements.

A ``Designer`` is single-writer, in-memory state. Nothing it does is stored
until the owner saves, at which point the whole element sequence overwrites
the stored content.

Operations addressing an element id that is not on the canvas (``move``,
``remove``, ``update_attributes``) are no-ops: an edit coming from the
properties panel can arrive after the element was deleted.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from formbuilder.content import dump_content
from formbuilder.elements import ElementInstance, ElementType, descriptor_for, resolve
from formbuilder.utils import new_element_id

logger = logging.getLogger(__name__)


def _clamp(index: int, upper: int) -> int:
    return max(0, min(index, upper))


class Designer:
    def __init__(self, elements: Iterable[ElementInstance] = ()) -> None:
        self._elements: list[ElementInstance] = list(elements)
        self._selected: str | None = None

    @property
    def elements(self) -> list[ElementInstance]:
        return list(self._elements)

    @property
    def selected(self) -> ElementInstance | None:
        if self._selected is None:
            return None
        return self.get(self._selected)

    @property
    def selected_id(self) -> str | None:
        return self._selected

    def __len__(self) -> int:
        return len(self._elements)

    def get(self, element_id: str) -> ElementInstance | None:
        for element in self._elements:
            if element.id == element_id:
                return element
        return None

    def index_of(self, element_id: str) -> int | None:
        for index, element in enumerate(self._elements):
            if element.id == element_id:
                return index
        return None

    def insert(self, element_type: ElementType | str, index: int | None = None) -> ElementInstance:
        descriptor = resolve(element_type)
        element = descriptor.construct(new_element_id({e.id for e in self._elements}))
        position = len(self._elements) if index is None else _clamp(index, len(self._elements))
        self._elements.insert(position, element)
        self._selected = element.id
        return element

    def move(self, element_id: str, index: int) -> None:
        current = self.index_of(element_id)
        if current is None:
            return
        element = self._elements.pop(current)
        self._elements.insert(_clamp(index, len(self._elements)), element)

    def remove(self, element_id: str) -> None:
        current = self.index_of(element_id)
        if current is None:
            return
        del self._elements[current]
        if self._selected == element_id:
            self._selected = None

    def update_attributes(
        self, element_id: str, attributes: dict[str, Any] | None
    ) -> ElementInstance | None:
        current = self.index_of(element_id)
        if current is None:
            logger.debug("Ignoring property update for missing element %s", element_id)
            return None
        element = self._elements[current]
        updated = descriptor_for(element).update_attributes(element, attributes)
        self._elements[current] = updated
        return updated

    def select(self, element_id: str | None) -> None:
        if element_id is None or self.get(element_id) is None:
            self._selected = None
            return
        self._selected = element_id

    def serialize(self) -> list[dict[str, Any]]:
        return dump_content(self._elements)


class DesignerSessions:
    """Open designer handles, one per owner and form.

    A handle lives from the first builder request until the form is saved or
    published.
    """

    def __init__(self) -> None:
        self._sessions: dict[tuple[str, int], Designer] = {}

    def get(self, owner_id: str, form_id: int) -> Designer | None:
        return self._sessions.get((owner_id, form_id))

    def open(
        self, owner_id: str, form_id: int, elements: Iterable[ElementInstance]
    ) -> Designer:
        key = (owner_id, form_id)
        designer = self._sessions.get(key)
        if designer is None:
            designer = Designer(elements)
            self._sessions[key] = designer
        return designer

    def discard(self, owner_id: str, form_id: int) -> None:
        self._sessions.pop((owner_id, form_id), None)
