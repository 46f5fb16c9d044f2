from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any

from pptx import Presentation as PptxPresentation
from pptx.enum.dml import MSO_COLOR_TYPE, MSO_FILL
from pptx.util import Emu

from deckform.core.errors import InvalidPropertyValue

logger = logging.getLogger(__name__)

EMU_PER_UNIT: dict[str, int] = {
    "emu": 1,
    "cm": 360000,
    "mm": 36000,
    "in": 914400,
    "pt": 12700,
    "px": 9525,
}

_UNIT_ALIASES: dict[str, str] = {
    "centimeter": "cm",
    "millimeter": "mm",
    "inch": "in",
    "point": "pt",
    "pixel": "px",
}

# (width, height) in EMU
LAYOUT_PRESETS: dict[str, tuple[int, int]] = {
    "screen4x3": (9144000, 6858000),
    "screen16x10": (9144000, 5715000),
    "screen16x9": (9144000, 5143500),
    "35mm": (10287000, 6858000),
    "a3": (15120000, 10692000),
    "a4": (10692000, 7560000),
    "b4iso": (11880000, 8640000),
    "b5iso": (7920000, 5940000),
    "banner": (7315200, 914400),
    "letter": (9144000, 6858000),
    "overhead": (9144000, 6858000),
}

CUSTOM_LAYOUT = "custom"


def _unit_factor(unit: Any) -> int:
    if not isinstance(unit, str):
        raise InvalidPropertyValue("layout", "unit", unit, "expected a unit name")
    u = unit.strip().lower()
    u = _UNIT_ALIASES.get(u, u)
    if u not in EMU_PER_UNIT:
        raise InvalidPropertyValue("layout", "unit", unit, f"expected one of: {', '.join(EMU_PER_UNIT)}")
    return EMU_PER_UNIT[u]


class Layout:
    """Slide size of a document, in EMU."""

    def __init__(self, prs: Any) -> None:
        self._prs = prs

    @property
    def width(self) -> int:
        return int(self._prs.slide_width)

    @property
    def height(self) -> int:
        return int(self._prs.slide_height)

    @property
    def name(self) -> str:
        size = (self.width, self.height)
        for preset, dims in LAYOUT_PRESETS.items():
            if dims == size:
                return preset
        return CUSTOM_LAYOUT

    def _to_emu(self, field: str, value: Any, unit: Any) -> Emu:
        factor = _unit_factor(unit)
        numeric = isinstance(value, (int, float)) and not isinstance(value, bool)
        if not numeric or not math.isfinite(value) or value <= 0:
            raise InvalidPropertyValue("layout", field, value, "expected a positive finite number")
        return Emu(int(round(value * factor)))

    def set_width(self, value: Any, unit: Any = "emu") -> Layout:
        self._prs.slide_width = self._to_emu("width", value, unit)
        return self

    def set_height(self, value: Any, unit: Any = "emu") -> Layout:
        self._prs.slide_height = self._to_emu("height", value, unit)
        return self

    def set_document_layout(self, preset: Any) -> Layout:
        key = preset.strip().lower() if isinstance(preset, str) else None
        if key not in LAYOUT_PRESETS:
            raise InvalidPropertyValue("layout", "preset", preset, f"expected one of: {', '.join(LAYOUT_PRESETS)}")
        width, height = LAYOUT_PRESETS[key]
        self._prs.slide_width = Emu(width)
        self._prs.slide_height = Emu(height)
        return self


class Slide:
    """A python-pptx slide with a writable name."""

    def __init__(self, slide: Any) -> None:
        self._slide = slide

    @property
    def pptx_slide(self) -> Any:
        return self._slide

    @property
    def name(self) -> str:
        return self._slide._element.cSld.name

    @name.setter
    def name(self, value: str | None) -> None:
        # "" is the attribute default; assigning it removes cSld/@name.
        self._slide._element.cSld.name = value or ""

    @property
    def shapes(self) -> list[Any]:
        return list(self._slide.shapes)

    def create_rich_text_shape(self) -> Any:
        return self._slide.shapes.add_textbox(Emu(0), Emu(0), Emu(0), Emu(0))


def create_text(shape: Any, content: str) -> Any:
    """Append a text run to the last paragraph of `shape` and return it."""
    paragraph = shape.text_frame.paragraphs[-1]
    run = paragraph.add_run()
    run.text = content
    return run


class Document:
    """Capability surface the builder needs, over a python-pptx presentation.

    A new document always starts with one empty slide and the active cursor
    at index 0.
    """

    def __init__(self, prs: Any = None) -> None:
        self._prs = prs if prs is not None else PptxPresentation()
        self._active_index = 0
        if len(self._prs.slides) == 0:
            self.create_slide()

    @property
    def pptx(self) -> Any:
        return self._prs

    @property
    def core_properties(self) -> Any:
        return self._prs.core_properties

    @property
    def layout(self) -> Layout:
        return Layout(self._prs)

    @property
    def slides(self) -> list[Slide]:
        return [Slide(s) for s in self._prs.slides]

    @property
    def slide_count(self) -> int:
        return len(self._prs.slides)

    @property
    def active_slide_index(self) -> int:
        return self._active_index

    @active_slide_index.setter
    def active_slide_index(self, index: int) -> None:
        if not 0 <= index < self.slide_count:
            raise IndexError(f"active slide index {index} out of range (0..{self.slide_count - 1})")
        self._active_index = index

    def get_slide(self, index: int) -> Slide:
        if not 0 <= index < self.slide_count:
            raise IndexError(f"slide index {index} out of range (0..{self.slide_count - 1})")
        return Slide(self._prs.slides[index])

    def get_active_slide(self) -> Slide:
        return self.get_slide(self._active_index)

    def create_slide(self) -> Slide:
        layouts = self._prs.slide_layouts
        blank = layouts.get_by_name("Blank") or layouts[len(layouts) - 1]
        return Slide(self._prs.slides.add_slide(blank))

    def remove_slide_at(self, index: int) -> None:
        if not 0 <= index < self.slide_count:
            raise IndexError(f"slide index {index} out of range (0..{self.slide_count - 1})")
        sld_ids = self._prs.slides._sldIdLst
        sld_id = sld_ids[index]
        self._prs.part.drop_rel(sld_id.rId)
        sld_ids.remove(sld_id)
        if self._active_index >= self.slide_count:
            self._active_index = max(self.slide_count - 1, 0)
        logger.debug("removed slide %d (%d left)", index, self.slide_count)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data snapshot of the object graph."""
        layout = self.layout
        return {
            "document": _core_properties_dict(self.core_properties),
            "layout": {"name": layout.name, "width": layout.width, "height": layout.height},
            "slides": [
                {"name": slide.name, "shapes": [_shape_dict(shp) for shp in slide.shapes]}
                for slide in self.slides
            ],
        }


_CORE_FIELDS = (
    "title",
    "subject",
    "author",
    "comments",
    "keywords",
    "category",
    "last_modified_by",
    "content_status",
    "identifier",
    "language",
    "version",
    "revision",
    "created",
    "modified",
    "last_printed",
)


def _core_properties_dict(props: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for field in _CORE_FIELDS:
        v = getattr(props, field)
        if isinstance(v, datetime):
            v = v.isoformat()
        out[field] = v
    return out


def _pt(length: Any) -> float | None:
    return None if length is None else round(Emu(length).pt, 2)


def _font_dict(font: Any) -> dict[str, Any]:
    color = None
    # font.color would add a solid fill as a side effect; read through fill.
    if font.fill.type == MSO_FILL.SOLID and font.fill.fore_color.type == MSO_COLOR_TYPE.RGB:
        color = str(font.fill.fore_color.rgb)
    underline = font.underline
    if underline is not None and not isinstance(underline, bool):
        underline = underline.name
    return {
        "name": font.name,
        "size": None if font.size is None else font.size.pt,
        "bold": font.bold,
        "italic": font.italic,
        "underline": underline,
        "color": color,
    }


def _shape_dict(shape: Any) -> dict[str, Any]:
    out: dict[str, Any] = {
        "name": shape.name,
        "offset_x": _pt(shape.left),
        "offset_y": _pt(shape.top),
        "width": _pt(shape.width),
        "height": _pt(shape.height),
        "rotation": shape.rotation,
    }
    if getattr(shape, "has_text_frame", False) and shape.has_text_frame:
        out["text"] = shape.text_frame.text
        out["runs"] = [
            {"text": run.text, "font": _font_dict(run.font)}
            for p in shape.text_frame.paragraphs
            for run in p.runs
        ]
    return out
