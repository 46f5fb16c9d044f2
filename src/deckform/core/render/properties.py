from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, TypeVar

from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_AUTO_SIZE, MSO_UNDERLINE, MSO_VERTICAL_ANCHOR, PP_ALIGN
from pptx.util import Pt

from deckform.core.errors import DeckformError, InvalidConfig, InvalidPropertyValue, UnsupportedProperty

logger = logging.getLogger(__name__)

Setter = Callable[[Any, Any], None]
T = TypeVar("T")

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def property_key(name: str) -> str:
    """Map a configuration key to its setter name.

    camelCase keys are split on capitals, so `offsetX`, `offset_x` and
    `OffsetX` all resolve to `offset_x`.
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidConfig(f"property name must be a non-empty string, got {name!r}")
    return _CAMEL_RE.sub("_", name.strip()).lower()


class PropertyTable:
    """Explicit name -> setter dispatch for one kind of target object."""

    def __init__(self, kind: str, setters: Mapping[str, Setter]) -> None:
        self.kind = kind
        self._setters: dict[str, Setter] = dict(setters)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(name.strip()) and property_key(name) in self._setters

    def names(self) -> list[str]:
        return sorted(self._setters)

    def setter_for(self, name: str) -> Setter:
        key = property_key(name)
        try:
            return self._setters[key]
        except KeyError:
            raise UnsupportedProperty(self.kind, name, self._setters) from None

    def apply(self, target: T, properties: Mapping[str, Any] | None) -> T:
        """Apply every entry of `properties` to `target`, in mapping order.

        Fails on the first unknown name or uninterpretable value; entries
        applied before the failure stay applied.
        """
        if properties is None:
            return target
        if not isinstance(properties, Mapping):
            raise InvalidConfig(f"{self.kind} properties must be a mapping, got {type(properties).__name__}")
        for name, value in properties.items():
            setter = self.setter_for(name)
            try:
                setter(target, value)
            except DeckformError:
                raise
            except (TypeError, ValueError) as e:
                raise InvalidPropertyValue(self.kind, name, value, str(e)) from e
            logger.debug("%s.%s = %r", self.kind, property_key(name), value)
        return target


def apply_properties(target: T, properties: Mapping[str, Any] | None, table: PropertyTable) -> T:
    return table.apply(target, properties)


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------


def _number(v: Any) -> float:
    if isinstance(v, bool):
        raise TypeError("expected a number, got a boolean")
    if isinstance(v, (int, float)):
        n = float(v)
    elif isinstance(v, str) and v.strip():
        n = float(v.strip())
    else:
        raise TypeError(f"expected a number, got {type(v).__name__}")
    if not math.isfinite(n):
        raise ValueError(f"expected a finite number, got {v!r}")
    return n


def _flag(v: Any) -> bool | None:
    """Tri-state boolean: None means inherit from the theme."""
    if v is None or isinstance(v, bool):
        return v
    raise TypeError(f"expected a boolean, got {type(v).__name__}")


def _text(v: Any) -> str:
    if not isinstance(v, str):
        raise TypeError(f"expected a string, got {type(v).__name__}")
    return v


def _datetime(v: Any) -> datetime:
    if isinstance(v, datetime):
        return v
    if isinstance(v, str):
        return datetime.fromisoformat(v.strip())
    raise TypeError(f"expected an ISO-8601 datetime string, got {type(v).__name__}")


def rgb_from_any(v: Any) -> RGBColor:
    """Parse RGB from '#RRGGBB' or 'RRGGBB' or [r,g,b]."""
    if isinstance(v, RGBColor):
        return v
    if isinstance(v, (list, tuple)) and len(v) == 3:
        r, g, b = (int(v[0]), int(v[1]), int(v[2]))
        if not all(0 <= c <= 255 for c in (r, g, b)):
            raise ValueError("color components must be within 0..255")
        return RGBColor(r, g, b)
    if isinstance(v, str):
        s = v.strip()
        if s.startswith("#"):
            s = s[1:]
        if len(s) == 6:
            return RGBColor.from_string(s.upper())
    raise ValueError("expected '#RRGGBB', 'RRGGBB' or [r, g, b]")


_ALIGN_TOKENS: dict[str, PP_ALIGN] = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "centre": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
    "justify": PP_ALIGN.JUSTIFY,
    "justified": PP_ALIGN.JUSTIFY,
    "distribute": PP_ALIGN.DISTRIBUTE,
}

_VANCHOR_TOKENS: dict[str, MSO_VERTICAL_ANCHOR] = {
    "top": MSO_VERTICAL_ANCHOR.TOP,
    "middle": MSO_VERTICAL_ANCHOR.MIDDLE,
    "center": MSO_VERTICAL_ANCHOR.MIDDLE,
    "centre": MSO_VERTICAL_ANCHOR.MIDDLE,
    "bottom": MSO_VERTICAL_ANCHOR.BOTTOM,
}

_AUTO_SIZE_TOKENS: dict[str, MSO_AUTO_SIZE] = {
    "none": MSO_AUTO_SIZE.NONE,
    "shape": MSO_AUTO_SIZE.SHAPE_TO_FIT_TEXT,
    "text": MSO_AUTO_SIZE.TEXT_TO_FIT_SHAPE,
}

_UNDERLINE_TOKENS: dict[str, MSO_UNDERLINE] = {
    "none": MSO_UNDERLINE.NONE,
    "single": MSO_UNDERLINE.SINGLE_LINE,
    "double": MSO_UNDERLINE.DOUBLE_LINE,
    "heavy": MSO_UNDERLINE.HEAVY_LINE,
    "dotted": MSO_UNDERLINE.DOTTED_LINE,
    "dash": MSO_UNDERLINE.DASH_LINE,
    "wavy": MSO_UNDERLINE.WAVY_LINE,
}


def _token(v: Any, tokens: Mapping[str, T]) -> T:
    if isinstance(v, str):
        s = v.strip().lower()
        if s in tokens:
            return tokens[s]
    raise ValueError(f"expected one of: {', '.join(tokens)}")


# ---------------------------------------------------------------------------
# Document properties (target: pptx CoreProperties)
# ---------------------------------------------------------------------------


def _core_text(attr: str) -> Setter:
    def setter(props: Any, value: Any) -> None:
        setattr(props, attr, _text(value))

    return setter


def _core_datetime(attr: str) -> Setter:
    def setter(props: Any, value: Any) -> None:
        setattr(props, attr, _datetime(value))

    return setter


def _set_revision(props: Any, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("revision must be a positive integer")
    props.revision = value


DOCUMENT_PROPERTIES = PropertyTable(
    "document",
    {
        "title": _core_text("title"),
        "subject": _core_text("subject"),
        "author": _core_text("author"),
        "creator": _core_text("author"),
        "comments": _core_text("comments"),
        "description": _core_text("comments"),
        "keywords": _core_text("keywords"),
        "category": _core_text("category"),
        "last_modified_by": _core_text("last_modified_by"),
        "content_status": _core_text("content_status"),
        "identifier": _core_text("identifier"),
        "language": _core_text("language"),
        "version": _core_text("version"),
        "revision": _set_revision,
        "created": _core_datetime("created"),
        "modified": _core_datetime("modified"),
        "last_printed": _core_datetime("last_printed"),
    },
)


# ---------------------------------------------------------------------------
# Font properties (target: pptx.text.text.Font)
# ---------------------------------------------------------------------------


def _set_font_name(font: Any, value: Any) -> None:
    font.name = _text(value)


def _set_font_size(font: Any, value: Any) -> None:
    size = _number(value)
    if size <= 0:
        raise ValueError("font size must be positive")
    font.size = Pt(size)


def _font_flag(attr: str) -> Setter:
    def setter(font: Any, value: Any) -> None:
        setattr(font, attr, _flag(value))

    return setter


def _set_underline(font: Any, value: Any) -> None:
    if value is None or isinstance(value, bool):
        font.underline = value
    else:
        font.underline = _token(value, _UNDERLINE_TOKENS)


def _set_strikethrough(font: Any, value: Any) -> None:
    # python-pptx has no API for strike; write a:rPr/@strike directly.
    rPr = font._rPr
    if _flag(value) is None:
        rPr.attrib.pop("strike", None)
    else:
        rPr.set("strike", "sngStrike" if value else "noStrike")


def _baseline_setter(offset: str) -> Setter:
    def setter(font: Any, value: Any) -> None:
        rPr = font._rPr
        if _flag(value):
            rPr.set("baseline", offset)
        elif rPr.get("baseline") == offset:
            rPr.attrib.pop("baseline", None)

    return setter


def _set_font_color(font: Any, value: Any) -> None:
    font.color.rgb = rgb_from_any(value)


FONT_PROPERTIES = PropertyTable(
    "font",
    {
        "name": _set_font_name,
        "size": _set_font_size,
        "bold": _font_flag("bold"),
        "italic": _font_flag("italic"),
        "underline": _set_underline,
        "strikethrough": _set_strikethrough,
        "super_script": _baseline_setter("30000"),
        "sub_script": _baseline_setter("-25000"),
        "color": _set_font_color,
    },
)


# ---------------------------------------------------------------------------
# Shape properties (target: pptx text box shape)
# ---------------------------------------------------------------------------


def _set_shape_name(shape: Any, value: Any) -> None:
    shape._element._nvXxPr.cNvPr.name = _text(value)


def _geometry(attr: str, *, allow_negative: bool) -> Setter:
    def setter(shape: Any, value: Any) -> None:
        pt = _number(value)
        if pt < 0 and not allow_negative:
            raise ValueError(f"{attr} must not be negative")
        setattr(shape, attr, Pt(pt))

    return setter


def _set_rotation(shape: Any, value: Any) -> None:
    shape.rotation = _number(value)


def _set_fill(shape: Any, value: Any) -> None:
    if isinstance(value, str) and value.strip().lower() in ("none", "transparent"):
        shape.fill.background()
        return
    rgb = rgb_from_any(value)
    shape.fill.solid()
    shape.fill.fore_color.rgb = rgb


def _set_line_color(shape: Any, value: Any) -> None:
    shape.line.color.rgb = rgb_from_any(value)


def _set_line_width(shape: Any, value: Any) -> None:
    w = _number(value)
    if w < 0:
        raise ValueError("line width must not be negative")
    shape.line.width = Pt(w)


def _set_alignment(shape: Any, value: Any) -> None:
    align = _token(value, _ALIGN_TOKENS)
    for p in shape.text_frame.paragraphs:
        p.alignment = align


def _set_vertical_anchor(shape: Any, value: Any) -> None:
    shape.text_frame.vertical_anchor = _token(value, _VANCHOR_TOKENS)


def _set_word_wrap(shape: Any, value: Any) -> None:
    shape.text_frame.word_wrap = _flag(value)


def _set_auto_fit(shape: Any, value: Any) -> None:
    shape.text_frame.auto_size = _token(value, _AUTO_SIZE_TOKENS)


def _inset(attr: str) -> Setter:
    def setter(shape: Any, value: Any) -> None:
        pt = _number(value)
        if pt < 0:
            raise ValueError("insets must not be negative")
        setattr(shape.text_frame, attr, Pt(pt))

    return setter


SHAPE_PROPERTIES = PropertyTable(
    "shape",
    {
        "name": _set_shape_name,
        "offset_x": _geometry("left", allow_negative=True),
        "offset_y": _geometry("top", allow_negative=True),
        "width": _geometry("width", allow_negative=False),
        "height": _geometry("height", allow_negative=False),
        "rotation": _set_rotation,
        "fill": _set_fill,
        "line_color": _set_line_color,
        "line_width": _set_line_width,
        "alignment": _set_alignment,
        "vertical_anchor": _set_vertical_anchor,
        "word_wrap": _set_word_wrap,
        "auto_fit": _set_auto_fit,
        "inset_left": _inset("margin_left"),
        "inset_right": _inset("margin_right"),
        "inset_top": _inset("margin_top"),
        "inset_bottom": _inset("margin_bottom"),
    },
)
