from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote

from fastapi import Response

from deckform.core.errors import IOFailure, ResourceUnavailable
from deckform.core.render.builder import DeckBuilder
from deckform.core.render.document import Document
from deckform.core.render.formatter import Formatter, formatter_from_mapping
from deckform.core.render.properties import (
    DOCUMENT_PROPERTIES,
    FONT_PROPERTIES,
    SHAPE_PROPERTIES,
    PropertyTable,
)
from deckform.core.render.writers import (
    create_writer,
    media_type_for,
    normalize_writer_type,
    writer_type_for_filename,
)

logger = logging.getLogger(__name__)


def content_disposition(filename: str, *, inline: bool = False) -> str:
    kind = "inline" if inline else "attachment"
    quoted = quote(filename)
    if quoted != filename:
        return f"{kind}; filename*=utf-8''{quoted}"
    return f'{kind}; filename="{filename}"'


class Presentation:
    """A presentation built from configuration data.

    The document is created on first access and built at most once by the
    output operations: `save` and `send` call `render` only while
    `is_rendered` is false. `render` itself does not check the flag, so
    calling it again re-walks `data` and appends duplicate slides.

    Usage:

        deck = Presentation({"slides": [{"name": "intro", "content": [{"text": "Hi"}]}]})
        deck.save("out/deck.pptx")
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        writer_type: str | None = None,
        formatter: Formatter | Mapping[str, Any] | None = None,
        document: Document | None = None,
    ) -> None:
        self._data = data
        self._writer_type: str | None = None
        self._formatter: Formatter | None = None
        self._document = document
        self._rendered = False
        self.writer_type = writer_type
        self.formatter = formatter

    @property
    def data(self) -> Mapping[str, Any] | None:
        return self._data

    @data.setter
    def data(self, value: Mapping[str, Any] | None) -> None:
        self._data = value
        if self._rendered:
            # New data means a new document on the next output call.
            self._document = None
            self._rendered = False

    @property
    def writer_type(self) -> str | None:
        return self._writer_type

    @writer_type.setter
    def writer_type(self, value: str | None) -> None:
        self._writer_type = None if value is None else normalize_writer_type(value)

    @property
    def formatter(self) -> Formatter:
        if self._formatter is None:
            self._formatter = Formatter()
        return self._formatter

    @formatter.setter
    def formatter(self, value: Formatter | Mapping[str, Any] | None) -> None:
        if isinstance(value, Mapping):
            value = formatter_from_mapping(value)
        self._formatter = value

    @property
    def document(self) -> Document:
        if self._document is None:
            self._document = Document()
        return self._document

    @document.setter
    def document(self, value: Document | None) -> None:
        self._document = value

    @property
    def is_rendered(self) -> bool:
        return self._rendered

    def configure(self, properties: Mapping[str, Any]) -> Presentation:
        """(Re-)configure this presentation from name -> value pairs."""
        return PRESENTATION_PROPERTIES.apply(self, properties)

    def set_document_properties(self, properties: Mapping[str, Any]) -> Presentation:
        DOCUMENT_PROPERTIES.apply(self.document.core_properties, properties)
        return self

    def set_font_properties(self, font: Any, properties: Mapping[str, Any]) -> Presentation:
        FONT_PROPERTIES.apply(font, properties)
        return self

    def set_shape_properties(self, shape: Any, properties: Mapping[str, Any]) -> Presentation:
        SHAPE_PROPERTIES.apply(shape, properties)
        return self

    def render(self) -> Presentation:
        """Build `data` into the document.

        On failure the partly built document is discarded, so the next call
        starts from a fresh one.
        """
        try:
            DeckBuilder(self.document, formatter=self.formatter).build(self._data)
        except BaseException:
            self._document = None
            raise
        self._rendered = True
        return self

    def save(self, filename: str | os.PathLike[str]) -> Path:
        """Write the document to `filename`, creating parent directories.

        The file is written next to its destination and moved into place, so
        a failed write leaves nothing at `filename`.
        """
        if not self._rendered:
            self.render()

        path = Path(filename).expanduser()
        writer = create_writer(self.document, self._writer_type)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        except OSError as e:
            raise IOFailure(f"cannot prepare {path}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                writer.save(fh)
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise IOFailure(f"cannot write {path}: {e}") from e
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info("saved %s (%s, %d slides)", path, writer.__class__.__name__, self.document.slide_count)
        return path

    def send(
        self,
        attachment_name: str,
        *,
        inline: bool = False,
        media_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Build a response carrying the document as a file named `attachment_name`.

        Without a configured writer type, the type is inferred from the
        attachment name's extension.
        """
        if not self._rendered:
            self.render()

        writer_type = self._writer_type or writer_type_for_filename(attachment_name)
        writer = create_writer(self.document, writer_type)

        try:
            tmp = tempfile.TemporaryFile()
        except OSError as e:
            raise ResourceUnavailable(f"unable to create temporary file: {e}") from e

        with tmp:
            writer.save(tmp)
            tmp.seek(0)
            content = tmp.read()

        response_headers = dict(headers or {})
        response_headers["Content-Disposition"] = content_disposition(attachment_name, inline=inline)
        logger.info("sending %s (%s, %d bytes)", attachment_name, writer_type, len(content))
        return Response(
            content=content,
            media_type=media_type or media_type_for(writer_type),
            headers=response_headers,
        )


def _set_data(p: Presentation, value: Any) -> None:
    if value is not None and not isinstance(value, Mapping):
        raise TypeError("data must be a mapping")
    p.data = value


def _set_writer_type(p: Presentation, value: Any) -> None:
    p.writer_type = value


def _set_formatter(p: Presentation, value: Any) -> None:
    if value is not None and not isinstance(value, (Formatter, Mapping)):
        raise TypeError("formatter must be a Formatter or a mapping of formatter options")
    p.formatter = value


def _set_document(p: Presentation, value: Any) -> None:
    if value is not None and not isinstance(value, Document):
        raise TypeError("document must be a Document")
    p.document = value


PRESENTATION_PROPERTIES = PropertyTable(
    "presentation",
    {
        "data": _set_data,
        "writer_type": _set_writer_type,
        "formatter": _set_formatter,
        "document": _set_document,
    },
)
