from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
from jsonschema import Draft202012Validator


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def _json_path(error: Any) -> str:
    path = "$"
    for p in error.path:
        path += f"[{p!r}]" if isinstance(p, str) else f"[{p}]"
    return path


def _path_key(error: Any) -> list[tuple[int, int, str]]:
    # array indices compare numerically, so [2] sorts before [10]
    return [(0, p, "") if isinstance(p, int) else (1, 0, str(p)) for p in error.path]


def validate_instance(schema: Any, instance: Any) -> list[str]:
    """Validate `instance` against `schema`.

    Returns human-readable errors sorted by location, formatted as
    "<jsonpath>: <message>" (empty if valid).
    """
    v = Draft202012Validator(schema)
    errors = sorted(v.iter_errors(instance), key=_path_key)
    result: list[str] = []
    for e in errors:
        msg = f"{_json_path(e)}: {e.message}"
        if e.context:
            # oneOf: show the closest branch failures
            best = sorted(e.context, key=lambda c: -len(c.path))[:2]
            msg += " (" + "; ".join(f"{_json_path(c)}: {c.message}" for c in best) + ")"
        result.append(msg)
    return result
