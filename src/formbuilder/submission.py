from __future__ import annotations

from typing import Any, Iterable

from jsonschema import Draft7Validator

from formbuilder.elements import ElementInstance, descriptor_for
from formbuilder.errors import ElementValidationError

SUBMISSION_PAYLOAD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": {"type": "string"},
}

_payload_validator = Draft7Validator(SUBMISSION_PAYLOAD_SCHEMA)


def check_payload(data: Any) -> dict[str, str]:
    errors = sorted(_payload_validator.iter_errors(data), key=lambda err: list(err.path))
    if errors:
        raise ElementValidationError(
            "Submission payload is invalid",
            errors=[
                {"id": ".".join(str(part) for part in error.path), "message": error.message}
                for error in errors
            ],
        )
    return data


def validate_submission(
    content: Iterable[ElementInstance], values: dict[str, str]
) -> list[str]:
    """Return the ids of elements whose submitted value is rejected."""
    invalid: list[str] = []
    for element in content:
        value = values.get(element.id, "")
        if not descriptor_for(element).validate(element, value):
            invalid.append(element.id)
    return invalid


def collect_submission(
    content: Iterable[ElementInstance], data: Any
) -> dict[str, str]:
    values = check_payload(data)
    invalid = validate_submission(content, values)
    if invalid:
        raise ElementValidationError(
            "Please check the highlighted fields",
            errors=[{"id": element_id, "message": "Value is required"} for element_id in invalid],
        )
    return values
