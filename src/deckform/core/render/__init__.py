"""Presentation rendering package.

Turns a configuration tree (document metadata, layout, slides, text content)
into a python-pptx presentation and writes it out.

Public API:
- `Presentation(data, *, writer_type=None, formatter=None)` with `render()`,
  `save(filename)` and `send(attachment_name)`
- `build_document(config)` for the bare build step
- `apply_properties(target, properties, table)` and the property tables

    from deckform.core.render import Presentation
"""

from __future__ import annotations

from .builder import BuildState, DeckBuilder, build_document
from .document import Document, Layout, Slide, create_text
from .formatter import Formatter
from .presentation import Presentation
from .properties import (
    DOCUMENT_PROPERTIES,
    FONT_PROPERTIES,
    SHAPE_PROPERTIES,
    PropertyTable,
    apply_properties,
    property_key,
)
from .writers import DEFAULT_WRITER_TYPE, WRITER_TYPES, create_writer

__all__ = [
    "BuildState",
    "DeckBuilder",
    "build_document",
    "Document",
    "Layout",
    "Slide",
    "create_text",
    "Formatter",
    "Presentation",
    "DOCUMENT_PROPERTIES",
    "FONT_PROPERTIES",
    "SHAPE_PROPERTIES",
    "PropertyTable",
    "apply_properties",
    "property_key",
    "DEFAULT_WRITER_TYPE",
    "WRITER_TYPES",
    "create_writer",
]
