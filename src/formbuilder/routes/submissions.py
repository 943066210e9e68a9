from __future__ import annotations

import csv
import io
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from formbuilder import forms
from formbuilder.auth import require_identity
from formbuilder.elements import columns_for
from formbuilder.utils import to_iso

router = APIRouter()


def build_submission_rows(
    columns: list[dict[str, Any]], submissions: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for submission in submissions:
        content = submission.get("content", {})
        rows.append(
            {
                "values": [str(content.get(column["id"], "")) for column in columns],
                "submitted_at": submission["created_at"],
            }
        )
    return rows


@router.get("/forms/{form_id}", response_class=HTMLResponse, tags=["submissions"])
async def form_details(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> HTMLResponse:
    storage = request.app.state.storage
    templates = request.app.state.templates
    form = forms.get_form_with_submissions(storage, owner_id, form_id)
    columns = columns_for(forms.form_elements(form))
    return templates.TemplateResponse(
        request,
        "form_details.html",
        {
            "form": form,
            "stats": forms.get_form_stats(form),
            "columns": columns,
            "rows": build_submission_rows(columns, form["submissions_list"]),
            "share_link": str(request.url_for("public_form", share_url=form["share_url"])),
        },
    )


@router.get("/forms/{form_id}/export", tags=["submissions"])
async def export_submissions(
    request: Request, form_id: int, owner_id: str = Depends(require_identity)
) -> PlainTextResponse:
    form = forms.get_form_with_submissions(request.app.state.storage, owner_id, form_id)
    columns = columns_for(forms.form_elements(form))

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([column["label"] for column in columns] + ["Submitted at"])
    for row in build_submission_rows(columns, form["submissions_list"]):
        writer.writerow(row["values"] + [to_iso(row["submitted_at"])])

    return PlainTextResponse(
        output.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=form-{form_id}-submissions.csv"},
    )
