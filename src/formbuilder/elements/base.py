"""
Element type system.

Every element kind placed on a form is described by a ``FormElement``
descriptor: the tag it is stored under, the pydantic model holding its
configuration (whose defaults are the configuration of a freshly dropped
element), the instance model used as its tagged variant in a form's content,
a validation rule for submitted values and three renderers (designer
preview, properties editor, end-user input).

Renderers are Jinja2 macros named ``designer``, ``properties`` and ``form``
in ``templates/elements/<template>.html``.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any, ClassVar

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape
from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from formbuilder.config import BASE_DIR
from formbuilder.errors import ElementValidationError


class ElementType(str, Enum):
    TEXT = "TextField"
    TITLE = "TitleField"
    SUBTITLE = "SubtitleField"
    PARAGRAPH = "ParagraphField"
    SEPARATOR = "SeparatorField"
    SPACER = "SpacerField"
    DATE = "DateField"
    SELECT = "SelectField"

    def __str__(self) -> str:
        return self.value


class ElementAttributes(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ElementInstance(BaseModel):
    id: str = Field(min_length=1)
    type: str
    extra_attributes: ElementAttributes | None = None


def format_validation_errors(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


@lru_cache(maxsize=1)
def element_environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(BASE_DIR / "templates")),
        autoescape=select_autoescape(["html"]),
    )


class FormElement:
    type: ClassVar[ElementType]
    label: ClassVar[str]
    category: ClassVar[str] = "layout"
    template: ClassVar[str]
    attributes_model: ClassVar[type[ElementAttributes] | None] = None
    instance_model: ClassVar[type[ElementInstance]]

    def construct(self, element_id: str) -> ElementInstance:
        attributes = self.attributes_model() if self.attributes_model else None
        return self.instance_model(id=element_id, extra_attributes=attributes)

    def validate(self, element: ElementInstance, value: str) -> bool:
        return True

    def update_attributes(
        self, element: ElementInstance, raw: dict[str, Any] | None
    ) -> ElementInstance:
        if self.attributes_model is None:
            if raw:
                raise ElementValidationError(
                    f"{self.type} has no configurable attributes"
                )
            return element
        try:
            attributes = self.attributes_model.model_validate(raw or {})
        except ValidationError as exc:
            raise ElementValidationError(
                "Invalid element properties", errors=format_validation_errors(exc)
            ) from exc
        return element.model_copy(update={"extra_attributes": attributes})

    def schema(self) -> dict[str, Any]:
        if self.attributes_model is None:
            return {}
        return self.attributes_model.model_json_schema()

    def _template(self) -> Template:
        return element_environment().get_template(f"elements/{self.template}.html")

    def render_designer(self, element: ElementInstance) -> Markup:
        return Markup(self._template().module.designer(element))

    def render_properties(self, element: ElementInstance, action: str = "") -> Markup:
        return Markup(self._template().module.properties(element, action))

    def render_form(
        self, element: ElementInstance, value: str = "", invalid: bool = False
    ) -> Markup:
        return Markup(self._template().module.form(element, value, invalid))


class InputElement(FormElement):
    """Elements that collect a value from the person filling in the form."""

    category = "field"

    def validate(self, element: ElementInstance, value: str) -> bool:
        attributes = element.extra_attributes
        if attributes is not None and getattr(attributes, "required", False):
            return len(value or "") > 0
        return True
