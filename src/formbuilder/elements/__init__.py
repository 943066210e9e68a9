from formbuilder.elements.base import (
    ElementAttributes,
    ElementInstance,
    ElementType,
    FormElement,
    InputElement,
)
from formbuilder.elements.registry import (
    FORM_ELEMENTS,
    FormElementInstance,
    columns_for,
    content_adapter,
    descriptor_for,
    palette,
    resolve,
)

__all__ = [
    "FORM_ELEMENTS",
    "ElementAttributes",
    "ElementInstance",
    "ElementType",
    "FormElement",
    "FormElementInstance",
    "InputElement",
    "columns_for",
    "content_adapter",
    "descriptor_for",
    "palette",
    "resolve",
]
