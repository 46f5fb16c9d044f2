from __future__ import annotations

from pathlib import Path, PurePath
from typing import IO, Any, Protocol, Union

import orjson

from deckform.core.errors import UnsupportedFormat
from deckform.core.render.document import Document

POWERPOINT_2007 = "PowerPoint2007"
SERIALIZED = "Serialized"

DEFAULT_WRITER_TYPE = POWERPOINT_2007

WRITER_TYPES: tuple[str, ...] = (POWERPOINT_2007, SERIALIZED)

EXTENSIONS: dict[str, str] = {
    "pptx": POWERPOINT_2007,
    "json": SERIALIZED,
}

MEDIA_TYPES: dict[str, str] = {
    POWERPOINT_2007: "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    SERIALIZED: "application/json",
}

Target = Union[str, Path, IO[bytes]]


class Writer(Protocol):
    def save(self, target: Target) -> None: ...


class PowerPoint2007Writer:
    """Office Open XML (.pptx) output via python-pptx."""

    def __init__(self, document: Document) -> None:
        self.document = document

    def save(self, target: Target) -> None:
        self.document.pptx.save(target)


class SerializedWriter:
    """JSON snapshot of the document object graph."""

    def __init__(self, document: Document) -> None:
        self.document = document

    def save(self, target: Target) -> None:
        data = orjson.dumps(self.document.to_dict(), option=orjson.OPT_INDENT_2)
        if isinstance(target, (str, PurePath)):
            Path(target).write_bytes(data)
        else:
            target.write(data)


_WRITERS: dict[str, Any] = {
    POWERPOINT_2007: PowerPoint2007Writer,
    SERIALIZED: SerializedWriter,
}


def normalize_writer_type(writer_type: str | None) -> str:
    if writer_type is None:
        return DEFAULT_WRITER_TYPE
    for known in WRITER_TYPES:
        if isinstance(writer_type, str) and writer_type.strip().lower() == known.lower():
            return known
    raise UnsupportedFormat(f"unsupported writer type: {writer_type!r} (use one of: {', '.join(WRITER_TYPES)})")


def create_writer(document: Document, writer_type: str | None = None) -> Writer:
    return _WRITERS[normalize_writer_type(writer_type)](document)


def writer_type_for_filename(filename: str | PurePath) -> str:
    ext = PurePath(filename).suffix.lower().lstrip(".")
    if not ext:
        return DEFAULT_WRITER_TYPE
    try:
        return EXTENSIONS[ext]
    except KeyError:
        raise UnsupportedFormat(
            f"cannot infer writer type from extension {ext!r} (known: {', '.join(EXTENSIONS)})"
        ) from None


def media_type_for(writer_type: str | None) -> str:
    return MEDIA_TYPES[normalize_writer_type(writer_type)]
