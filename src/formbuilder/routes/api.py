from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from formbuilder import forms
from formbuilder.auth import require_identity
from formbuilder.elements import palette
from formbuilder.errors import ElementValidationError
from formbuilder.utils import to_iso

router = APIRouter()


async def read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise ElementValidationError("Request body is not valid JSON") from exc


@router.get("/api/elements", tags=["api/forms"])
async def api_list_elements() -> JSONResponse:
    return JSONResponse(palette())


@router.get("/api/stats", tags=["api/forms"])
async def api_stats(request: Request, owner_id: str = Depends(require_identity)) -> JSONResponse:
    stats = forms.get_overall_stats(request.app.state.storage, owner_id)
    return JSONResponse(stats.to_dict())


@router.get("/api/forms", tags=["api/forms"])
async def api_list_forms(
    request: Request, owner_id: str = Depends(require_identity)
) -> JSONResponse:
    items = forms.list_forms(request.app.state.storage, owner_id)
    return JSONResponse([forms.sanitize_form_output(form) for form in items])


@router.post("/api/forms", tags=["api/forms"])
async def api_create_form(
    request: Request, owner_id: str = Depends(require_identity)
) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    form_id = forms.create_form(storage, owner_id, payload)
    form = forms.get_form(storage, owner_id, form_id)
    return JSONResponse(forms.sanitize_form_output(form), status_code=201)


@router.get("/api/forms/{form_id}", tags=["api/forms"])
async def api_get_form(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> JSONResponse:
    form = forms.get_form(request.app.state.storage, owner_id, form_id)
    output = forms.sanitize_form_output(form)
    output["stats"] = forms.get_form_stats(form).to_dict()
    return JSONResponse(output)


@router.put("/api/forms/{form_id}/content", tags=["api/forms"])
async def api_update_content(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    content = payload.get("content") if isinstance(payload, dict) else payload
    if not isinstance(content, list):
        raise ElementValidationError("Form content must be a list of elements")
    forms.update_form_content(storage, owner_id, form_id, content)
    request.app.state.designer_sessions.discard(owner_id, form_id)
    form = forms.get_form(storage, owner_id, form_id)
    return JSONResponse(forms.sanitize_form_output(form))


@router.post("/api/forms/{form_id}/publish", tags=["api/forms"])
async def api_publish_form(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> JSONResponse:
    form = forms.publish_form(request.app.state.storage, owner_id, form_id)
    request.app.state.designer_sessions.discard(owner_id, form_id)
    return JSONResponse(forms.sanitize_form_output(form))


@router.get("/api/forms/{form_id}/submissions", tags=["api/submissions"])
async def api_list_submissions(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> JSONResponse:
    form = forms.get_form_with_submissions(request.app.state.storage, owner_id, form_id)
    output = forms.sanitize_form_output(form)
    output["stats"] = forms.get_form_stats(form).to_dict()
    output["submissions_list"] = [
        forms.sanitize_submission_output(item) for item in form["submissions_list"]
    ]
    return JSONResponse(output)


@router.get("/api/public/forms/{share_url}", tags=["api/public"])
async def api_public_form(request: Request, share_url: str) -> JSONResponse:
    form = forms.get_form_by_share_url(request.app.state.storage, share_url)
    return JSONResponse({"name": form["name"], "content": form["content"]})


@router.post("/api/public/forms/{share_url}/submissions", tags=["api/public"])
async def api_submit_form(request: Request, share_url: str) -> JSONResponse:
    payload = await read_json(request)
    data = payload.get("content", payload) if isinstance(payload, dict) else payload
    submission = forms.submit_form(request.app.state.storage, share_url, data)
    return JSONResponse(
        {"submission_id": submission["id"], "submitted_at": to_iso(submission["created_at"])},
        status_code=201,
    )


@router.get("/healthz", tags=["system"])
async def healthz() -> dict[str, str]:
    return {"status": "ok"}
