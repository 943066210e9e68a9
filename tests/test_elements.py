from __future__ import annotations

import pytest

from formbuilder.elements import FORM_ELEMENTS, ElementType, columns_for, palette, resolve
from formbuilder.errors import ElementValidationError

INPUT_TYPES = [ElementType.TEXT, ElementType.DATE, ElementType.SELECT]
LAYOUT_TYPES = [
    ElementType.TITLE,
    ElementType.SUBTITLE,
    ElementType.PARAGRAPH,
    ElementType.SEPARATOR,
    ElementType.SPACER,
]


def test_registry_covers_every_element_type() -> None:
    assert set(FORM_ELEMENTS) == set(ElementType)
    for tag in ElementType:
        assert resolve(tag).type is tag
        assert resolve(tag.value) is resolve(tag)


def test_resolve_unknown_type_fails_fast() -> None:
    with pytest.raises(KeyError):
        resolve("NumberField")


@pytest.mark.parametrize("tag", list(ElementType))
def test_construct_uses_default_attributes(tag: ElementType) -> None:
    descriptor = resolve(tag)
    element = descriptor.construct("42")
    assert element.id == "42"
    assert element.type == tag.value
    if descriptor.attributes_model is None:
        assert element.extra_attributes is None
    else:
        validated = descriptor.attributes_model.model_validate(
            element.extra_attributes.model_dump()
        )
        assert validated == element.extra_attributes


def test_text_field_defaults() -> None:
    attributes = resolve(ElementType.TEXT).construct("1").extra_attributes
    assert attributes.label == "Text Field"
    assert attributes.helper_text == "Helper Text"
    assert attributes.required is False
    assert attributes.placeholder == "Value here..."


def test_constructed_instances_do_not_share_attributes() -> None:
    descriptor = resolve(ElementType.SELECT)
    first = descriptor.construct("1")
    second = descriptor.construct("2")
    first.extra_attributes.options.append("Red")
    assert second.extra_attributes.options == []


@pytest.mark.parametrize("tag", INPUT_TYPES)
def test_required_input_rejects_empty_value(tag: ElementType) -> None:
    descriptor = resolve(tag)
    element = descriptor.update_attributes(
        descriptor.construct("1"), {"label": "Name", "required": True}
    )
    assert descriptor.validate(element, "") is False
    assert descriptor.validate(element, "x") is True


@pytest.mark.parametrize("tag", INPUT_TYPES + LAYOUT_TYPES)
def test_optional_elements_accept_anything(tag: ElementType) -> None:
    descriptor = resolve(tag)
    element = descriptor.construct("1")
    assert descriptor.validate(element, "") is True
    assert descriptor.validate(element, "anything") is True


def test_update_attributes_replaces_wholesale() -> None:
    descriptor = resolve(ElementType.TEXT)
    element = descriptor.construct("7")
    updated = descriptor.update_attributes(element, {"label": "Email"})
    assert updated.id == "7"
    assert updated.type == "TextField"
    assert updated.extra_attributes.label == "Email"
    assert updated.extra_attributes.placeholder == "Value here..."
    assert element.extra_attributes.label == "Text Field"


@pytest.mark.parametrize(
    "tag, attributes",
    [
        (ElementType.TEXT, {"label": "x"}),
        (ElementType.TEXT, {"label": "ok", "placeholder": "p" * 51}),
        (ElementType.TITLE, {"title": "t"}),
        (ElementType.PARAGRAPH, {"text": "p" * 501}),
        (ElementType.SPACER, {"height": 4}),
        (ElementType.SPACER, {"height": 201}),
        (ElementType.SELECT, {"label": "Colour", "options": "red"}),
    ],
)
def test_update_attributes_rejects_invalid_configuration(tag: ElementType, attributes: dict) -> None:
    descriptor = resolve(tag)
    with pytest.raises(ElementValidationError) as excinfo:
        descriptor.update_attributes(descriptor.construct("1"), attributes)
    assert excinfo.value.errors


def test_separator_has_no_attributes() -> None:
    descriptor = resolve(ElementType.SEPARATOR)
    element = descriptor.construct("1")
    assert descriptor.update_attributes(element, {}) is element
    with pytest.raises(ElementValidationError):
        descriptor.update_attributes(element, {"height": 10})


def test_renderers_escape_and_show_attributes() -> None:
    descriptor = resolve(ElementType.TEXT)
    element = descriptor.update_attributes(
        descriptor.construct("9"), {"label": "<b>Name</b>", "required": True}
    )
    designer = descriptor.render_designer(element)
    assert "&lt;b&gt;Name&lt;/b&gt;*" in designer
    assert "disabled" in designer

    form = descriptor.render_form(element, value="Ada", invalid=True)
    assert 'name="9"' in form
    assert 'value="Ada"' in form
    assert "invalid" in form

    properties = descriptor.render_properties(element, "/builder/1/elements/9")
    assert 'action="/builder/1/elements/9"' in properties
    assert "checked" in properties


def test_select_form_lists_options() -> None:
    descriptor = resolve(ElementType.SELECT)
    element = descriptor.update_attributes(
        descriptor.construct("3"), {"label": "Colour", "options": ["Red", "Blue"]}
    )
    html = descriptor.render_form(element, value="Blue")
    assert '<option value="Red">Red</option>' in html
    assert '<option value="Blue" selected>Blue</option>' in html


def test_spacer_renders_height() -> None:
    descriptor = resolve(ElementType.SPACER)
    element = descriptor.construct("1")
    assert "Spacer: 20px" in descriptor.render_designer(element)
    assert "height: 20px" in descriptor.render_form(element)


def test_palette_lists_every_type_with_schema() -> None:
    items = palette()
    assert [item["type"] for item in items] == [tag.value for tag in FORM_ELEMENTS]
    text = next(item for item in items if item["type"] == "TextField")
    assert text["category"] == "field"
    assert "label" in text["schema"]["properties"]
    separator = next(item for item in items if item["type"] == "SeparatorField")
    assert separator["category"] == "layout"
    assert separator["schema"] == {}


def test_columns_only_include_input_elements() -> None:
    content = [
        resolve(ElementType.TITLE).construct("1"),
        resolve(ElementType.TEXT).construct("2"),
        resolve(ElementType.SPACER).construct("3"),
        resolve(ElementType.DATE).construct("4"),
    ]
    columns = columns_for(content)
    assert [column["id"] for column in columns] == ["2", "4"]
    assert columns[0]["label"] == "Text Field"
