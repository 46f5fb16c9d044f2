"""Error taxonomy for deckform.

Every error raised by the build/save/send pipeline derives from `DeckformError`.
Configuration problems also derive from `ValueError` so callers that only
care about "bad input" can catch that.
"""

from __future__ import annotations

from typing import Iterable


class DeckformError(Exception):
    """Base class for all deckform errors."""


class InvalidConfig(DeckformError, ValueError):
    """The configuration tree has the wrong shape."""


class UnsupportedProperty(InvalidConfig):
    """No setter is registered for a property name on the target kind."""

    def __init__(self, kind: str, name: str, known: Iterable[str] = ()) -> None:
        self.kind = kind
        self.name = name
        self.known = sorted(known)
        msg = f"unsupported {kind} property: {name!r}"
        if self.known:
            msg += f" (known: {', '.join(self.known)})"
        super().__init__(msg)


class InvalidPropertyValue(InvalidConfig):
    """A setter exists but cannot interpret the given value."""

    def __init__(self, kind: str, name: str, value: object, reason: str = "") -> None:
        self.kind = kind
        self.name = name
        self.value = value
        msg = f"invalid value for {kind} property {name!r}: {value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class MissingRequiredField(InvalidConfig):
    """A mandatory key is absent from the configuration."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"missing required field: {path}")


class ConfigValidationError(InvalidConfig):
    """Schema validation failed; `errors` holds `$path: message` lines."""

    def __init__(self, source: str, errors: list[str]) -> None:
        self.source = source
        self.errors = errors
        super().__init__(f"{source} does not conform to schema ({len(errors)} errors)")


class UnsupportedFormat(DeckformError, ValueError):
    """Unknown writer type or output file extension."""


class ResourceUnavailable(DeckformError, RuntimeError):
    """Temporary storage for streamed output could not be created."""


class IOFailure(DeckformError, OSError):
    """Directory creation or write failure while saving."""
