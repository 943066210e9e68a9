from __future__ import annotations

from typing import Literal

from pydantic import Field

from formbuilder.elements.base import (
    ElementAttributes,
    ElementInstance,
    ElementType,
    InputElement,
)


class TextFieldAttributes(ElementAttributes):
    label: str = Field("Text Field", min_length=2, max_length=50)
    helper_text: str = Field("Helper Text", max_length=200)
    required: bool = False
    placeholder: str = Field("Value here...", max_length=50)


class TextFieldInstance(ElementInstance):
    type: Literal["TextField"] = "TextField"
    extra_attributes: TextFieldAttributes = Field(default_factory=TextFieldAttributes)


class TextFieldElement(InputElement):
    type = ElementType.TEXT
    label = "Text Field"
    template = "text_field"
    attributes_model = TextFieldAttributes
    instance_model = TextFieldInstance


class DateFieldAttributes(ElementAttributes):
    label: str = Field("Date Field", min_length=2, max_length=50)
    helper_text: str = Field("Pick a date", max_length=200)
    required: bool = False


class DateFieldInstance(ElementInstance):
    type: Literal["DateField"] = "DateField"
    extra_attributes: DateFieldAttributes = Field(default_factory=DateFieldAttributes)


class DateFieldElement(InputElement):
    type = ElementType.DATE
    label = "Date Field"
    template = "date_field"
    attributes_model = DateFieldAttributes
    instance_model = DateFieldInstance


class SelectFieldAttributes(ElementAttributes):
    label: str = Field("Select Field", min_length=2, max_length=50)
    helper_text: str = Field("Helper Text", max_length=200)
    required: bool = False
    placeholder: str = Field("Value here...", max_length=50)
    options: list[str] = Field(default_factory=list)


class SelectFieldInstance(ElementInstance):
    type: Literal["SelectField"] = "SelectField"
    extra_attributes: SelectFieldAttributes = Field(
        default_factory=SelectFieldAttributes
    )


class SelectFieldElement(InputElement):
    type = ElementType.SELECT
    label = "Select Field"
    template = "select_field"
    attributes_model = SelectFieldAttributes
    instance_model = SelectFieldInstance
