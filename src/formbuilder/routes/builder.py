from __future__ import annotations

import typing
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from formbuilder import forms
from formbuilder.auth import require_identity
from formbuilder.designer import Designer
from formbuilder.elements import FORM_ELEMENTS, FormElement, descriptor_for, resolve
from formbuilder.errors import ElementValidationError, PublishStateError, wants_json

router = APIRouter()


def parse_bool(value: Any) -> bool:
    return str(value).lower() in {"1", "true", "on", "yes"}


def parse_index(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ElementValidationError(f"Invalid position: {value}") from exc


async def read_payload(request: Request) -> dict[str, Any]:
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError as exc:
            raise ElementValidationError("Request body is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise ElementValidationError("Request body must be an object")
        return payload
    form_data = await request.form()
    data: dict[str, Any] = {}
    for key in form_data.keys():
        values = form_data.getlist(key)
        data[key] = values if len(values) > 1 else values[0]
    return data


def attributes_from_form(descriptor: FormElement, payload: dict[str, Any]) -> dict[str, Any]:
    """Coerce HTML form values into the shape of an element's attributes."""
    if descriptor.attributes_model is None:
        return {}
    attributes: dict[str, Any] = {}
    for name, field in descriptor.attributes_model.model_fields.items():
        raw = payload.get(name)
        if field.annotation is bool:
            attributes[name] = parse_bool(raw) if raw is not None else False
        elif typing.get_origin(field.annotation) is list:
            items = raw if isinstance(raw, list) else str(raw or "").splitlines()
            attributes[name] = [str(item).strip() for item in items if str(item).strip()]
        elif raw is not None:
            attributes[name] = raw
    return attributes


def open_designer(request: Request, owner_id: str, form_id: int) -> Designer:
    storage = request.app.state.storage
    sessions = request.app.state.designer_sessions
    designer = sessions.get(owner_id, form_id)
    form = forms.get_form(storage, owner_id, form_id)
    if form["published"]:
        sessions.discard(owner_id, form_id)
        raise PublishStateError("Published forms can no longer be edited")
    if designer is None:
        designer = sessions.open(owner_id, form_id, forms.form_elements(form))
    return designer


def designer_response(request: Request, form_id: int, designer: Designer) -> Response:
    if wants_json(request):
        return JSONResponse(
            {"elements": designer.serialize(), "selected": designer.selected_id}
        )
    return RedirectResponse(f"/builder/{form_id}", status_code=303)


@router.get("/builder/{form_id}", response_class=HTMLResponse, tags=["builder"])
async def builder(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> Response:
    storage = request.app.state.storage
    form = forms.get_form(storage, owner_id, form_id)
    if form["published"]:
        return RedirectResponse(f"/forms/{form_id}", status_code=303)
    designer = open_designer(request, owner_id, form_id)
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "builder.html",
        {
            "form": form,
            "designer": designer,
            "palette": list(FORM_ELEMENTS.values()),
            "descriptor_for": descriptor_for,
        },
    )


@router.post("/builder/{form_id}/elements", tags=["builder"])
async def insert_element(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> Response:
    designer = open_designer(request, owner_id, form_id)
    payload = await read_payload(request)
    element_type = str(payload.get("type", ""))
    try:
        resolve(element_type)
    except KeyError as exc:
        raise ElementValidationError(f"Unknown element type: {element_type}") from exc
    designer.insert(element_type, parse_index(payload.get("index")))
    return designer_response(request, form_id, designer)


@router.post("/builder/{form_id}/elements/{element_id}/move", tags=["builder"])
async def move_element(
    request: Request, form_id: int, element_id: str, owner_id: str = Depends(require_identity)
) -> Response:
    designer = open_designer(request, owner_id, form_id)
    payload = await read_payload(request)
    index = parse_index(payload.get("index"))
    if index is not None:
        designer.move(element_id, index)
    return designer_response(request, form_id, designer)


@router.delete("/builder/{form_id}/elements/{element_id}", tags=["builder"])
@router.post("/builder/{form_id}/elements/{element_id}/delete", tags=["builder"])
async def remove_element(
    request: Request, form_id: int, element_id: str, owner_id: str = Depends(require_identity)
) -> Response:
    designer = open_designer(request, owner_id, form_id)
    designer.remove(element_id)
    return designer_response(request, form_id, designer)


@router.put("/builder/{form_id}/elements/{element_id}", tags=["builder"])
@router.post("/builder/{form_id}/elements/{element_id}", tags=["builder"])
async def update_element(
    request: Request, form_id: int, element_id: str, owner_id: str = Depends(require_identity)
) -> Response:
    designer = open_designer(request, owner_id, form_id)
    payload = await read_payload(request)
    element = designer.get(element_id)
    if element is not None:
        attributes = payload.get("extra_attributes", payload)
        if not request.headers.get("content-type", "").startswith("application/json"):
            attributes = attributes_from_form(descriptor_for(element), payload)
        designer.update_attributes(element_id, attributes)
    return designer_response(request, form_id, designer)


@router.post("/builder/{form_id}/select", tags=["builder"])
async def select_element(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> Response:
    designer = open_designer(request, owner_id, form_id)
    payload = await read_payload(request)
    designer.select(str(payload.get("element_id") or "") or None)
    return designer_response(request, form_id, designer)


@router.post("/builder/{form_id}/save", tags=["builder"])
async def save_form(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> Response:
    designer = open_designer(request, owner_id, form_id)
    forms.update_form_content(request.app.state.storage, owner_id, form_id, designer.elements)
    request.app.state.designer_sessions.discard(owner_id, form_id)
    return designer_response(request, form_id, designer)


@router.post("/builder/{form_id}/publish", tags=["builder"])
async def publish_form(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> Response:
    form = forms.publish_form(request.app.state.storage, owner_id, form_id)
    request.app.state.designer_sessions.discard(owner_id, form_id)
    if wants_json(request):
        return JSONResponse(forms.sanitize_form_output(form))
    return RedirectResponse(f"/forms/{form_id}", status_code=303)
