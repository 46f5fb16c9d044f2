from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from deckform.core.render.properties import PropertyTable


@dataclass
class Formatter:
    """Turns scalar text values into display strings.

    The builder passes every `text` value through `format`; strings come back
    unchanged.
    """

    null_display: str = ""
    boolean_format: tuple[str, str] = ("No", "Yes")
    decimals: int | None = None
    decimal_separator: str = "."
    thousand_separator: str = ""
    date_format: str = "%Y-%m-%d"
    datetime_format: str = "%Y-%m-%d %H:%M:%S"

    def format(self, value: Any) -> str:
        if value is None:
            return self.null_display
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return self.boolean_format[1] if value else self.boolean_format[0]
        if isinstance(value, int):
            return self._group(str(abs(value)), negative=value < 0)
        if isinstance(value, (float, Decimal)):
            return self.format_number(value)
        # datetime is a subclass of date; check it first.
        if isinstance(value, datetime):
            return value.strftime(self.datetime_format)
        if isinstance(value, date):
            return value.strftime(self.date_format)
        return str(value)

    def format_number(self, value: float | Decimal) -> str:
        if self.decimals is not None:
            s = f"{value:.{self.decimals}f}"
        else:
            s = str(value)
        negative = s.startswith("-")
        s = s.lstrip("-")
        whole, _, frac = s.partition(".")
        out = self._group(whole, negative=negative)
        if frac:
            out += self.decimal_separator + frac
        return out

    def _group(self, digits: str, *, negative: bool) -> str:
        if self.thousand_separator and digits.isdigit():
            groups = []
            while len(digits) > 3:
                groups.insert(0, digits[-3:])
                digits = digits[:-3]
            groups.insert(0, digits)
            digits = self.thousand_separator.join(groups)
        return f"-{digits}" if negative else digits


def _str_option(attr: str):
    def setter(fmt: Formatter, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeError(f"{attr} must be a string")
        setattr(fmt, attr, value)

    return setter


def _set_boolean_format(fmt: Formatter, value: Any) -> None:
    if not isinstance(value, (list, tuple)) or len(value) != 2 or not all(isinstance(v, str) for v in value):
        raise TypeError("boolean_format must be a pair of strings [false, true]")
    fmt.boolean_format = (value[0], value[1])


def _set_decimals(fmt: Formatter, value: Any) -> None:
    if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
        raise ValueError("decimals must be a non-negative integer or null")
    fmt.decimals = value


FORMATTER_PROPERTIES = PropertyTable(
    "formatter",
    {
        "null_display": _str_option("null_display"),
        "boolean_format": _set_boolean_format,
        "decimals": _set_decimals,
        "decimal_separator": _str_option("decimal_separator"),
        "thousand_separator": _str_option("thousand_separator"),
        "date_format": _str_option("date_format"),
        "datetime_format": _str_option("datetime_format"),
    },
)


def formatter_from_mapping(options: Any) -> Formatter:
    return FORMATTER_PROPERTIES.apply(Formatter(), options)
