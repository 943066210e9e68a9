from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from formbuilder.content import dump_content, parse_content
from formbuilder.elements import ElementInstance
from formbuilder.elements.base import format_validation_errors
from formbuilder.errors import ElementValidationError, FormNotFoundError, PublishStateError
from formbuilder.protocols import Storage
from formbuilder.stats import FormStats, build_stats
from formbuilder.submission import collect_submission
from formbuilder.utils import to_iso

logger = logging.getLogger(__name__)


class FormCreate(BaseModel):
    name: str = Field(min_length=4, max_length=100)
    description: str = Field("", max_length=1000)


def parse_form_create(payload: Any) -> FormCreate:
    if not isinstance(payload, dict):
        raise ElementValidationError("Form not valid")
    try:
        return FormCreate.model_validate(
            {
                "name": str(payload.get("name") or "").strip(),
                "description": str(payload.get("description") or "").strip(),
            }
        )
    except ValidationError as exc:
        raise ElementValidationError(
            "Form not valid", errors=format_validation_errors(exc)
        ) from exc


def form_elements(form: dict[str, Any]) -> list[ElementInstance]:
    return parse_content(form.get("content"))


def sanitize_form_output(form: dict[str, Any]) -> dict[str, Any]:
    output = {
        "id": form["id"],
        "name": form.get("name", ""),
        "description": form.get("description", ""),
        "content": form.get("content", []),
        "share_url": form.get("share_url", ""),
        "published": bool(form.get("published")),
        "visits": form.get("visits", 0),
        "submissions": form.get("submissions", 0),
        "created_at": to_iso(form["created_at"]) if form.get("created_at") else None,
    }
    return output


def sanitize_submission_output(submission: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": submission["id"],
        "form_id": submission["form_id"],
        "content": submission.get("content", {}),
        "submitted_at": to_iso(submission["created_at"]),
    }


def create_form(storage: Storage, owner_id: str, payload: Any) -> int:
    data = parse_form_create(payload)
    form_id = storage.forms.create_form(owner_id, data.name, data.description)
    logger.info("Form %s created by %s", form_id, owner_id)
    return form_id


def list_forms(storage: Storage, owner_id: str) -> list[dict[str, Any]]:
    return storage.forms.list_forms(owner_id)


def get_form(storage: Storage, owner_id: str, form_id: int) -> dict[str, Any]:
    form = storage.forms.get_form(owner_id, form_id)
    if not form:
        raise FormNotFoundError()
    return form


def get_form_by_share_url(storage: Storage, share_url: str) -> dict[str, Any]:
    form = storage.forms.get_form_by_share_url(share_url)
    if not form:
        raise FormNotFoundError()
    return form


def update_form_content(
    storage: Storage, owner_id: str, form_id: int, content: Any
) -> list[ElementInstance]:
    elements = content if _is_element_list(content) else parse_content(content)
    form = get_form(storage, owner_id, form_id)
    if form["published"]:
        raise PublishStateError("Published forms can no longer be edited")
    if not storage.forms.update_form_content(owner_id, form_id, dump_content(elements)):
        raise FormNotFoundError()
    logger.info("Form %s saved with %d elements", form_id, len(elements))
    return elements


def publish_form(storage: Storage, owner_id: str, form_id: int) -> dict[str, Any]:
    form = get_form(storage, owner_id, form_id)
    if form["published"]:
        raise PublishStateError("Form is already published")
    if not storage.forms.publish_form(owner_id, form_id):
        raise FormNotFoundError()
    logger.info("Form %s published", form_id)
    return get_form(storage, owner_id, form_id)


def submit_form(storage: Storage, share_url: str, data: Any) -> dict[str, Any]:
    form = storage.forms.get_published_form(share_url)
    if not form:
        raise PublishStateError("This form is not accepting submissions")
    try:
        values = collect_submission(form_elements(form), data)
    except ElementValidationError:
        logger.warning("Rejected submission for form %s", form["id"])
        raise
    submission = storage.forms.submit_form(share_url, values)
    if submission is None:
        raise PublishStateError("This form is not accepting submissions")
    logger.info("Submission %s stored for form %s", submission["id"], form["id"])
    return submission


def get_form_with_submissions(
    storage: Storage, owner_id: str, form_id: int
) -> dict[str, Any]:
    form = get_form(storage, owner_id, form_id)
    form["submissions_list"] = storage.submissions.list_submissions(form_id)
    return form


def get_overall_stats(storage: Storage, owner_id: str) -> FormStats:
    totals = storage.forms.aggregate_stats(owner_id)
    return build_stats(totals.get("visits"), totals.get("submissions"))


def get_form_stats(form: dict[str, Any]) -> FormStats:
    return build_stats(form.get("visits"), form.get("submissions"))


def _is_element_list(content: Any) -> bool:
    return isinstance(content, list) and all(
        isinstance(item, ElementInstance) for item in content
    )
