from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

logger = logging.getLogger(__name__)


class FormBuilderError(Exception):
    status_code = 400
    message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class MissingIdentityError(FormBuilderError):
    status_code = 401
    message = "Not signed in"


class FormNotFoundError(FormBuilderError):
    status_code = 404
    message = "Form not found"


class ElementValidationError(FormBuilderError):
    status_code = 400
    message = "Validation failed"

    def __init__(
        self, message: str | None = None, errors: list[dict[str, Any]] | None = None
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class PublishStateError(FormBuilderError):
    status_code = 400
    message = "Form is not accepting this operation"


def wants_json(request: Request) -> bool:
    if request.url.path.startswith("/api/"):
        return True
    accept = request.headers.get("accept", "")
    return "application/json" in accept and "text/html" not in accept


async def formbuilder_error_handler(request: Request, exc: FormBuilderError) -> Response:
    logger.info(
        "%s %s failed: %s (%s)",
        request.method,
        request.url.path,
        exc.message,
        exc.__class__.__name__,
    )
    if wants_json(request):
        content: dict[str, Any] = {"status_code": exc.status_code, "message": exc.message}
        if isinstance(exc, ElementValidationError) and exc.errors:
            content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    templates = request.app.state.templates
    response: HTMLResponse = templates.TemplateResponse(
        request,
        "error.html",
        {"message": exc.message},
        status_code=exc.status_code,
    )
    return response
