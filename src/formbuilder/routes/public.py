from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from formbuilder import forms
from formbuilder.errors import ElementValidationError, PublishStateError

router = APIRouter()


@router.get("/submit/{share_url}", response_class=HTMLResponse, tags=["public"])
async def public_form(request: Request, share_url: str) -> HTMLResponse:
    templates = request.app.state.templates
    form = forms.get_form_by_share_url(request.app.state.storage, share_url)
    return templates.TemplateResponse(
        request,
        "form_public.html",
        {
            "form": form,
            "elements": forms.form_elements(form),
            "values": {},
            "invalid": set(),
            "errors": [],
        },
    )


@router.post("/submit/{share_url}", response_class=HTMLResponse, tags=["public"])
async def submit_form(request: Request, share_url: str) -> HTMLResponse:
    storage = request.app.state.storage
    templates = request.app.state.templates
    form_data = await request.form()
    values = {key: str(value) for key, value in form_data.items() if isinstance(value, str)}

    try:
        forms.submit_form(storage, share_url, values)
    except ElementValidationError as exc:
        form = storage.forms.get_published_form(share_url)
        if not form:
            raise PublishStateError("This form is not accepting submissions") from exc
        return templates.TemplateResponse(
            request,
            "form_public.html",
            {
                "form": form,
                "elements": forms.form_elements(form),
                "values": values,
                "invalid": {err.get("id") for err in exc.errors},
                "errors": [exc.message],
            },
            status_code=400,
        )

    return templates.TemplateResponse(request, "submission_done.html", {})
