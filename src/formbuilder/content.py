from __future__ import annotations

from typing import Any, Iterable

import orjson
from pydantic import ValidationError

from formbuilder.elements import ElementInstance, content_adapter
from formbuilder.elements.base import format_validation_errors
from formbuilder.errors import ElementValidationError


def parse_content(raw: Any) -> list[ElementInstance]:
    """Build element instances from a stored or submitted content document.

    Accepts a JSON string/bytes or an already decoded list. ``None`` and empty
    documents give an empty form.
    """
    if raw is None or raw == "" or raw == b"":
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise ElementValidationError("Form content is not valid JSON") from exc
    if not isinstance(raw, list):
        raise ElementValidationError("Form content must be a list of elements")
    try:
        elements: list[ElementInstance] = content_adapter.validate_python(raw)
    except ValidationError as exc:
        raise ElementValidationError(
            "Form content is invalid", errors=format_validation_errors(exc)
        ) from exc

    seen: set[str] = set()
    duplicates: list[dict[str, Any]] = []
    for element in elements:
        if element.id in seen:
            duplicates.append({"id": element.id, "message": "Duplicate element id"})
        seen.add(element.id)
    if duplicates:
        raise ElementValidationError("Form content is invalid", errors=duplicates)
    return elements


def dump_content(elements: Iterable[ElementInstance]) -> list[dict[str, Any]]:
    return [element.model_dump(mode="json", exclude_none=True) for element in elements]
