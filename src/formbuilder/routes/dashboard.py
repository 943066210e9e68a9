from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from formbuilder import forms
from formbuilder.auth import require_identity
from formbuilder.errors import ElementValidationError

router = APIRouter()


def render_dashboard(
    request: Request,
    owner_id: str,
    errors: list[str] | None = None,
    values: dict[str, str] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    storage = request.app.state.storage
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "forms": forms.list_forms(storage, owner_id),
            "stats": forms.get_overall_stats(storage, owner_id),
            "errors": errors or [],
            "values": values or {},
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse, tags=["dashboard"])
async def dashboard(request: Request, owner_id: str = Depends(require_identity)) -> HTMLResponse:
    return render_dashboard(request, owner_id)


@router.post("/forms", tags=["dashboard"])
async def create_form(request: Request, owner_id: str = Depends(require_identity)) -> Response:
    form_data = await request.form()
    values = {
        "name": str(form_data.get("name", "")),
        "description": str(form_data.get("description", "")),
    }
    try:
        form_id = forms.create_form(request.app.state.storage, owner_id, values)
    except ElementValidationError as exc:
        messages = [f"{err['field']}: {err['message']}" for err in exc.errors] or [exc.message]
        return render_dashboard(request, owner_id, messages, values, status_code=400)
    return RedirectResponse(f"/builder/{form_id}", status_code=303)
