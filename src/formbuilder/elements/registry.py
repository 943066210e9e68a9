from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import Field, TypeAdapter

from formbuilder.elements.base import ElementInstance, ElementType, FormElement
from formbuilder.elements.fields import (
    DateFieldElement,
    DateFieldInstance,
    SelectFieldElement,
    SelectFieldInstance,
    TextFieldElement,
    TextFieldInstance,
)
from formbuilder.elements.layout import (
    ParagraphFieldElement,
    ParagraphFieldInstance,
    SeparatorFieldElement,
    SeparatorFieldInstance,
    SpacerFieldElement,
    SpacerFieldInstance,
    SubtitleFieldElement,
    SubtitleFieldInstance,
    TitleFieldElement,
    TitleFieldInstance,
)

FormElementInstance = Annotated[
    Union[
        TextFieldInstance,
        TitleFieldInstance,
        SubtitleFieldInstance,
        ParagraphFieldInstance,
        SeparatorFieldInstance,
        SpacerFieldInstance,
        DateFieldInstance,
        SelectFieldInstance,
    ],
    Field(discriminator="type"),
]

content_adapter: TypeAdapter[list[Any]] = TypeAdapter(list[FormElementInstance])

FORM_ELEMENTS: dict[ElementType, FormElement] = {
    element.type: element
    for element in (
        TextFieldElement(),
        TitleFieldElement(),
        SubtitleFieldElement(),
        ParagraphFieldElement(),
        SeparatorFieldElement(),
        SpacerFieldElement(),
        DateFieldElement(),
        SelectFieldElement(),
    )
}

_missing = set(ElementType) - set(FORM_ELEMENTS)
if _missing:
    raise RuntimeError(f"element types without descriptor: {sorted(_missing)}")
for _tag, _element in FORM_ELEMENTS.items():
    if _element.instance_model.model_fields["type"].default != _tag.value:
        raise RuntimeError(f"instance model of {_tag} is tagged with another type")


def resolve(tag: ElementType | str) -> FormElement:
    try:
        return FORM_ELEMENTS[ElementType(tag)]
    except ValueError:
        raise KeyError(tag) from None


def descriptor_for(element: ElementInstance) -> FormElement:
    return resolve(element.type)


def palette() -> list[dict[str, Any]]:
    return [
        {
            "type": element.type.value,
            "label": element.label,
            "category": element.category,
            "schema": element.schema(),
        }
        for element in FORM_ELEMENTS.values()
    ]


def columns_for(content: list[ElementInstance]) -> list[dict[str, Any]]:
    columns: list[dict[str, Any]] = []
    for element in content:
        if descriptor_for(element).category != "field":
            continue
        attributes = element.extra_attributes
        columns.append(
            {
                "id": element.id,
                "label": getattr(attributes, "label", element.id),
                "required": bool(getattr(attributes, "required", False)),
                "type": element.type,
            }
        )
    return columns
