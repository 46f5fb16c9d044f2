"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Generator

import orjson
import pytest

from deckform.core.render.document import Document


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def document() -> Document:
    return Document()


@pytest.fixture
def text_shape(document: Document) -> Any:
    """A text box on the document's starter slide."""
    return document.get_active_slide().create_rich_text_shape()


@pytest.fixture
def sample_config() -> dict[str, Any]:
    return {
        "document": {"title": "Quarterly review", "creator": "Ops team"},
        "layout": "screen16x9",
        "slides": [
            {
                "name": "intro",
                "content": [
                    {
                        "text": {"content": "Q3 review", "font": {"bold": True, "size": 40}},
                        "offsetX": 40,
                        "offsetY": 40,
                        "width": 600,
                        "height": 80,
                    },
                    {"text": "Highlights and next steps", "offsetX": 40, "offsetY": 140, "width": 600, "height": 40},
                ],
            },
            {
                "name": "numbers",
                "content": [{"text": "Revenue up", "fill": "#EEEEEE", "alignment": "center"}],
            },
            {"content": [{"text": "Thanks"}]},
        ],
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: dict[str, Any]) -> Path:
    path = temp_dir / "deck.json"
    path.write_bytes(orjson.dumps(sample_config))
    return path
