"""Walks a presentation configuration and builds the document object graph.

Configuration shape (plain JSON-like data):

    {
      "document": {"title": "...", "author": "..."},          # optional
      "layout": {"width": 25.4, "height": 14.29, "unit": "cm"}  # or "screen16x9"
      "slides": [
        {
          "name": "intro",                                      # optional
          "content": [
            {"text": "Hello", "offsetX": 40, "width": 400, "height": 60},
            {"text": {"content": "Hi", "font": {"bold": true}}, "fill": "#EEEEEE"}
          ]
        }
      ]
    }

The builder is a small state machine holding the document and the index of
the slide about to be populated:

    EMPTY -> POPULATING(i) -> DONE

Each slide config fills the slide at the cursor, then appends a new slide and
advances the cursor to it. The terminal transition removes the one slide left
unpopulated at the cursor (the document's starter slide when there are no
slide configs).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from deckform.core.errors import InvalidConfig, MissingRequiredField, UnsupportedProperty
from deckform.core.render.document import Document, Slide, create_text
from deckform.core.render.formatter import Formatter
from deckform.core.render.properties import DOCUMENT_PROPERTIES, FONT_PROPERTIES, SHAPE_PROPERTIES

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_UNIT = "emu"
LAYOUT_FIELDS = ("width", "height", "unit")


class BuildState(Enum):
    EMPTY = "empty"
    POPULATING = "populating"
    DONE = "done"


def _as_list(v: Any, path: str) -> list[Any]:
    if v is None:
        return []
    if not isinstance(v, list):
        raise InvalidConfig(f"{path} must be a list, got {type(v).__name__}")
    return v


def _as_mapping(v: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(v, Mapping):
        raise InvalidConfig(f"{path} must be a mapping, got {type(v).__name__}")
    return v


class DeckBuilder:
    def __init__(self, document: Document, *, formatter: Formatter | None = None) -> None:
        self.document = document
        self.formatter = formatter if formatter is not None else Formatter()
        self.state = BuildState.EMPTY
        self.pending_index = document.active_slide_index

    def build(self, config: Mapping[str, Any] | None) -> Document:
        if self.state is not BuildState.EMPTY:
            raise InvalidConfig(f"builder already used (state={self.state.value})")
        config = _as_mapping(config if config is not None else {}, "$")

        if config.get("document") is not None:
            DOCUMENT_PROPERTIES.apply(self.document.core_properties, _as_mapping(config["document"], "document"))

        if config.get("layout") is not None:
            self._apply_layout(config["layout"])

        self.state = BuildState.POPULATING
        self.pending_index = self.document.active_slide_index
        for i, slide_cfg in enumerate(_as_list(config.get("slides"), "slides")):
            path = f"slides[{i}]"
            self._populate(self.document.get_active_slide(), _as_mapping(slide_cfg, path), path)
            self._advance()

        self._finish()
        return self.document

    def _apply_layout(self, layout: Any) -> None:
        target = self.document.layout
        if isinstance(layout, Mapping):
            for key in layout:
                if key not in LAYOUT_FIELDS:
                    raise UnsupportedProperty("layout", key, LAYOUT_FIELDS)
            for field in ("width", "height"):
                if layout.get(field) is None:
                    raise MissingRequiredField(f"layout.{field}")
            unit = layout.get("unit") or DEFAULT_LAYOUT_UNIT
            target.set_width(layout["width"], unit)
            target.set_height(layout["height"], unit)
        else:
            target.set_document_layout(layout)
        logger.debug("layout: %s (%dx%d emu)", target.name, target.width, target.height)

    def _populate(self, slide: Slide, slide_cfg: Mapping[str, Any], path: str) -> None:
        name = slide_cfg.get("name")
        if name is not None and not isinstance(name, str):
            raise InvalidConfig(f"{path}.name must be a string, got {type(name).__name__}")
        slide.name = name
        content = _as_list(slide_cfg.get("content"), f"{path}.content")
        for j, shape_cfg in enumerate(content):
            self._add_shape(slide, _as_mapping(shape_cfg, f"{path}.content[{j}]"), f"{path}.content[{j}]")
        logger.debug("populated slide %d %r with %d shapes", self.pending_index, slide.name, len(content))

    def _add_shape(self, slide: Slide, shape_cfg: Mapping[str, Any], path: str) -> None:
        properties = dict(shape_cfg)
        text = properties.pop("text", None)
        if text is None:
            raise MissingRequiredField(f"{path}.text")

        shape = slide.create_rich_text_shape()
        if isinstance(text, Mapping):
            if text.get("content") is None:
                raise MissingRequiredField(f"{path}.text.content")
            run = create_text(shape, self.formatter.format(text["content"]))
            FONT_PROPERTIES.apply(run.font, text.get("font"))
        else:
            create_text(shape, self.formatter.format(text))

        SHAPE_PROPERTIES.apply(shape, properties)

    def _advance(self) -> None:
        self.document.create_slide()
        self.document.active_slide_index = self.document.active_slide_index + 1
        self.pending_index = self.document.active_slide_index

    def _finish(self) -> None:
        self.document.remove_slide_at(self.pending_index)
        self.state = BuildState.DONE
        logger.debug("build done: %d slides", self.document.slide_count)


def build_document(
    config: Mapping[str, Any] | None,
    *,
    document: Document | None = None,
    formatter: Formatter | None = None,
) -> Document:
    return DeckBuilder(document if document is not None else Document(), formatter=formatter).build(config)
