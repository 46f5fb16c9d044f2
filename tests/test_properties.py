"""
Tests for the generic property applier and the per-kind property tables.
"""

from __future__ import annotations

from datetime import datetime

import pytest
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_AUTO_SIZE, MSO_VERTICAL_ANCHOR, PP_ALIGN
from pptx.util import Pt

from deckform.core.errors import InvalidConfig, InvalidPropertyValue, UnsupportedProperty
from deckform.core.render.document import create_text
from deckform.core.render.properties import (
    DOCUMENT_PROPERTIES,
    FONT_PROPERTIES,
    SHAPE_PROPERTIES,
    PropertyTable,
    apply_properties,
    property_key,
    rgb_from_any,
)


class _Target:
    def __init__(self):
        self.calls = []


def _recording_table() -> PropertyTable:
    def setter(attr):
        def _set(target, value):
            target.calls.append((attr, value))
            setattr(target, attr, value)

        return _set

    return PropertyTable("thing", {"alpha": setter("alpha"), "beta_gamma": setter("beta_gamma")})


# ---------------------------------------------------------------------------
# Dispatch convention
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "name,expected",
    [
        ("title", "title"),
        ("offsetX", "offset_x"),
        ("offset_x", "offset_x"),
        ("lastModifiedBy", "last_modified_by"),
        ("superScript", "super_script"),
        ("Bold", "bold"),
    ],
)
def test_property_key(name, expected):
    assert property_key(name) == expected


def test_property_key_rejects_non_strings():
    with pytest.raises(InvalidConfig):
        property_key(3)
    with pytest.raises(InvalidConfig):
        property_key("  ")


def test_apply_in_mapping_order_and_returns_target():
    target = _Target()
    out = apply_properties(target, {"betaGamma": 1, "alpha": 2}, _recording_table())
    assert out is target
    assert target.calls == [("beta_gamma", 1), ("alpha", 2)]


def test_last_write_wins_across_spellings():
    target = _Target()
    _recording_table().apply(target, {"beta_gamma": "first", "betaGamma": "second"})
    assert target.beta_gamma == "second"


def test_unknown_property_fails_fast():
    target = _Target()
    with pytest.raises(UnsupportedProperty) as ei:
        _recording_table().apply(target, {"alpha": 1, "glorp": 2, "beta_gamma": 3})
    assert ei.value.kind == "thing"
    assert ei.value.name == "glorp"
    assert ei.value.known == ["alpha", "beta_gamma"]
    # applied entries stay applied; nothing after the failure runs
    assert target.calls == [("alpha", 1)]


def test_non_mapping_properties_rejected():
    with pytest.raises(InvalidConfig):
        _recording_table().apply(_Target(), [("alpha", 1)])


def test_none_properties_is_noop():
    target = _Target()
    assert _recording_table().apply(target, None) is target
    assert target.calls == []


def test_contains():
    table = _recording_table()
    assert "betaGamma" in table
    assert "glorp" not in table
    assert 5 not in table


# ---------------------------------------------------------------------------
# Document properties
# ---------------------------------------------------------------------------


def test_document_properties(document):
    props = document.core_properties
    DOCUMENT_PROPERTIES.apply(
        props,
        {
            "title": "Deck",
            "creator": "Ada",
            "description": "About things",
            "lastModifiedBy": "Bob",
            "created": "2024-05-01T10:30:00",
            "revision": 3,
        },
    )
    assert props.title == "Deck"
    assert props.author == "Ada"
    assert props.comments == "About things"
    assert props.last_modified_by == "Bob"
    assert props.created == datetime(2024, 5, 1, 10, 30)
    assert props.revision == 3


def test_document_property_bad_value(document):
    with pytest.raises(InvalidPropertyValue):
        DOCUMENT_PROPERTIES.apply(document.core_properties, {"title": 12})
    with pytest.raises(InvalidPropertyValue):
        DOCUMENT_PROPERTIES.apply(document.core_properties, {"created": "yesterday"})
    with pytest.raises(InvalidPropertyValue):
        DOCUMENT_PROPERTIES.apply(document.core_properties, {"revision": True})


def test_document_property_unknown(document):
    with pytest.raises(UnsupportedProperty) as ei:
        DOCUMENT_PROPERTIES.apply(document.core_properties, {"company": "ACME"})
    assert ei.value.kind == "document"


# ---------------------------------------------------------------------------
# Font properties
# ---------------------------------------------------------------------------


def test_font_properties(text_shape):
    run = create_text(text_shape, "Hi")
    FONT_PROPERTIES.apply(
        run.font,
        {"name": "Arial", "size": 18, "bold": True, "italic": False, "underline": True, "color": "#FF0000"},
    )
    font = run.font
    assert font.name == "Arial"
    assert font.size == Pt(18)
    assert font.bold is True
    assert font.italic is False
    assert font.underline is True
    assert font.color.rgb == RGBColor(0xFF, 0x00, 0x00)


def test_font_strike_and_baseline(text_shape):
    run = create_text(text_shape, "x2")
    FONT_PROPERTIES.apply(run.font, {"strikethrough": True, "superScript": True})
    assert run.font._rPr.get("strike") == "sngStrike"
    assert run.font._rPr.get("baseline") == "30000"

    FONT_PROPERTIES.apply(run.font, {"superScript": False, "subScript": True})
    assert run.font._rPr.get("baseline") == "-25000"


def test_font_bad_values(text_shape):
    run = create_text(text_shape, "Hi")
    with pytest.raises(InvalidPropertyValue):
        FONT_PROPERTIES.apply(run.font, {"size": -4})
    with pytest.raises(InvalidPropertyValue):
        FONT_PROPERTIES.apply(run.font, {"bold": "yes"})
    with pytest.raises(InvalidPropertyValue):
        FONT_PROPERTIES.apply(run.font, {"color": "red"})


def test_font_reapply_is_idempotent(document):
    slide = document.get_active_slide()
    props = {"name": "Arial", "size": 12, "bold": True, "color": [0, 128, 255], "strikethrough": True}

    once = create_text(slide.create_rich_text_shape(), "a").font
    twice = create_text(slide.create_rich_text_shape(), "a").font
    FONT_PROPERTIES.apply(once, props)
    FONT_PROPERTIES.apply(twice, props)
    FONT_PROPERTIES.apply(twice, props)

    assert dict(once._rPr.attrib) == dict(twice._rPr.attrib)
    assert (once.name, once.size, once.bold, once.color.rgb) == (twice.name, twice.size, twice.bold, twice.color.rgb)


# ---------------------------------------------------------------------------
# Shape properties
# ---------------------------------------------------------------------------


def test_shape_geometry_in_points(text_shape):
    SHAPE_PROPERTIES.apply(
        text_shape,
        {"name": "headline", "offsetX": 40, "offsetY": 20.5, "width": 300, "height": 50, "rotation": 15},
    )
    assert text_shape.name == "headline"
    assert text_shape.left == Pt(40)
    assert text_shape.top == Pt(20.5)
    assert text_shape.width == Pt(300)
    assert text_shape.height == Pt(50)
    assert text_shape.rotation == 15.0


def test_shape_text_frame_properties(text_shape):
    create_text(text_shape, "Hello")
    SHAPE_PROPERTIES.apply(
        text_shape,
        {
            "alignment": "center",
            "verticalAnchor": "middle",
            "wordWrap": True,
            "autoFit": "shape",
            "insetLeft": 6,
        },
    )
    tf = text_shape.text_frame
    assert tf.paragraphs[0].alignment == PP_ALIGN.CENTER
    assert tf.vertical_anchor == MSO_VERTICAL_ANCHOR.MIDDLE
    assert tf.word_wrap is True
    assert tf.auto_size == MSO_AUTO_SIZE.SHAPE_TO_FIT_TEXT
    assert tf.margin_left == Pt(6)


def test_shape_fill_and_line(text_shape):
    SHAPE_PROPERTIES.apply(text_shape, {"fill": "#112233", "lineColor": "445566", "lineWidth": 2})
    assert text_shape.fill.fore_color.rgb == RGBColor(0x11, 0x22, 0x33)
    assert text_shape.line.color.rgb == RGBColor(0x44, 0x55, 0x66)
    assert text_shape.line.width == Pt(2)


def test_shape_bad_values(text_shape):
    with pytest.raises(InvalidPropertyValue):
        SHAPE_PROPERTIES.apply(text_shape, {"width": -1})
    with pytest.raises(InvalidPropertyValue):
        SHAPE_PROPERTIES.apply(text_shape, {"alignment": "sideways"})
    with pytest.raises(InvalidPropertyValue):
        SHAPE_PROPERTIES.apply(text_shape, {"offsetX": True})


@pytest.mark.parametrize("value", ["inf", "-inf", "nan", float("inf")])
def test_shape_non_finite_numbers(text_shape, value):
    with pytest.raises(InvalidPropertyValue):
        SHAPE_PROPERTIES.apply(text_shape, {"width": value})


def test_shape_unknown_property(text_shape):
    with pytest.raises(UnsupportedProperty) as ei:
        SHAPE_PROPERTIES.apply(text_shape, {"glorp": 1})
    assert ei.value.kind == "shape"
    assert "offset_x" in ei.value.known


@pytest.mark.parametrize("value", ["#0A0B0C", "0a0b0c", [10, 11, 12], (10, 11, 12)])
def test_rgb_from_any(value):
    assert rgb_from_any(value) == RGBColor(10, 11, 12)


@pytest.mark.parametrize("value", ["#12345", [1, 2], [0, 0, 256], None, "zzzzzz"])
def test_rgb_from_any_rejects(value):
    with pytest.raises(ValueError):
        rgb_from_any(value)
