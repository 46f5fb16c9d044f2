from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import orjson

from deckform.core.errors import ConfigValidationError, InvalidConfig
from deckform.core.render.presentation import Presentation
from deckform.core.validate.schema_validate import load_json, validate_instance

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "schemas" / "presentation.schema.json"


def load_schema() -> dict[str, Any]:
    return load_json(SCHEMA_PATH)


def validate_config(data: Any, *, source: str = "<config>") -> dict[str, Any]:
    """Validate configuration data against the presentation schema and return it."""
    errors = validate_instance(load_schema(), data)
    if errors:
        raise ConfigValidationError(source, errors)
    return data


def load_config(path: Path) -> dict[str, Any]:
    """Read and validate a JSON presentation configuration."""
    path = Path(path)
    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise InvalidConfig(f"{path}: invalid JSON ({e})") from e
    logger.debug("loaded config %s", path)
    return validate_config(data, source=str(path))


def presentation_from_config(data: dict[str, Any], *, writer_type: str | None = None) -> Presentation:
    """Create a Presentation whose formatter comes from the config's `formatter` section."""
    return Presentation(data, writer_type=writer_type, formatter=data.get("formatter"))
