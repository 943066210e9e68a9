from __future__ import annotations

from typing import Literal

from pydantic import Field

from formbuilder.elements.base import (
    ElementAttributes,
    ElementInstance,
    ElementType,
    FormElement,
)


class TitleFieldAttributes(ElementAttributes):
    title: str = Field("Title Field", min_length=2, max_length=50)


class TitleFieldInstance(ElementInstance):
    type: Literal["TitleField"] = "TitleField"
    extra_attributes: TitleFieldAttributes = Field(default_factory=TitleFieldAttributes)


class TitleFieldElement(FormElement):
    type = ElementType.TITLE
    label = "Title Field"
    template = "title_field"
    attributes_model = TitleFieldAttributes
    instance_model = TitleFieldInstance


class SubtitleFieldAttributes(ElementAttributes):
    title: str = Field("Subtitle Field", min_length=2, max_length=50)


class SubtitleFieldInstance(ElementInstance):
    type: Literal["SubtitleField"] = "SubtitleField"
    extra_attributes: SubtitleFieldAttributes = Field(
        default_factory=SubtitleFieldAttributes
    )


class SubtitleFieldElement(FormElement):
    type = ElementType.SUBTITLE
    label = "Subtitle Field"
    template = "subtitle_field"
    attributes_model = SubtitleFieldAttributes
    instance_model = SubtitleFieldInstance


class ParagraphFieldAttributes(ElementAttributes):
    text: str = Field("Text here...", min_length=2, max_length=500)


class ParagraphFieldInstance(ElementInstance):
    type: Literal["ParagraphField"] = "ParagraphField"
    extra_attributes: ParagraphFieldAttributes = Field(
        default_factory=ParagraphFieldAttributes
    )


class ParagraphFieldElement(FormElement):
    type = ElementType.PARAGRAPH
    label = "Paragraph Field"
    template = "paragraph_field"
    attributes_model = ParagraphFieldAttributes
    instance_model = ParagraphFieldInstance


class SeparatorFieldInstance(ElementInstance):
    type: Literal["SeparatorField"] = "SeparatorField"
    extra_attributes: None = None


class SeparatorFieldElement(FormElement):
    type = ElementType.SEPARATOR
    label = "Separator"
    template = "separator_field"
    instance_model = SeparatorFieldInstance


class SpacerFieldAttributes(ElementAttributes):
    height: int = Field(20, ge=5, le=200)


class SpacerFieldInstance(ElementInstance):
    type: Literal["SpacerField"] = "SpacerField"
    extra_attributes: SpacerFieldAttributes = Field(
        default_factory=SpacerFieldAttributes
    )


class SpacerFieldElement(FormElement):
    type = ElementType.SPACER
    label = "Spacer"
    template = "spacer_field"
    attributes_model = SpacerFieldAttributes
    instance_model = SpacerFieldInstance
