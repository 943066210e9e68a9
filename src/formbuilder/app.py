from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from formbuilder.auth import get_auth_provider
from formbuilder.config import BASE_DIR, Settings
from formbuilder.designer import DesignerSessions
from formbuilder.elements import ElementInstance, descriptor_for
from formbuilder.errors import FormBuilderError, formbuilder_error_handler
from formbuilder.logging_config import setup_logging
from formbuilder.routes.api import router as api_router
from formbuilder.routes.builder import router as builder_router
from formbuilder.routes.dashboard import router as dashboard_router
from formbuilder.routes.public import router as public_router
from formbuilder.routes.submissions import router as submissions_router
from formbuilder.storage import init_storage

logger = logging.getLogger(__name__)


def format_dt(value: Any) -> str:
    if isinstance(value, datetime):
        return value.astimezone().strftime("%Y-%m-%d %H:%M")
    return str(value or "")


def format_rate(value: float) -> str:
    return f"{value:.1f}%"


def render_designer(element: ElementInstance) -> str:
    return descriptor_for(element).render_designer(element)


def render_properties(element: ElementInstance, action: str = "") -> str:
    return descriptor_for(element).render_properties(element, action)


def render_form(element: ElementInstance, value: str = "", invalid: bool = False) -> str:
    return descriptor_for(element).render_form(element, value, invalid)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.log_level)
    storage = init_storage(settings)
    auth = get_auth_provider(settings)

    app = FastAPI(
        title="formbuilder",
        openapi_tags=[
            {"name": "dashboard", "description": "Owner dashboard (HTML)"},
            {"name": "builder", "description": "Form designer"},
            {"name": "submissions", "description": "Form details and submissions (HTML)"},
            {"name": "public", "description": "Published forms (HTML)"},
            {"name": "api/forms", "description": "REST API: forms"},
            {"name": "api/submissions", "description": "REST API: submissions"},
            {"name": "api/public", "description": "REST API: published forms"},
            {"name": "system", "description": "System"},
        ],
    )

    app.state.storage = storage
    app.state.settings = settings
    app.state.auth_provider = auth
    app.state.designer_sessions = DesignerSessions()

    templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
    app.state.templates = templates

    templates.env.globals["format_dt"] = format_dt
    templates.env.globals["format_rate"] = format_rate
    templates.env.globals["render_designer"] = render_designer
    templates.env.globals["render_properties"] = render_properties
    templates.env.globals["render_form"] = render_form

    app.add_exception_handler(FormBuilderError, formbuilder_error_handler)

    app.include_router(dashboard_router)
    app.include_router(builder_router)
    app.include_router(submissions_router)
    app.include_router(public_router)
    app.include_router(api_router)

    logger.info("formbuilder started with %s storage", settings.storage_backend)
    return app
