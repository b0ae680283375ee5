"""Conversion between Python lists and PostgreSQL array literals."""

from __future__ import annotations

import enum
import re
from collections.abc import Sequence

_LEADING_INT = re.compile(r"[ \t\n\r\f\v]*([+-]?\d+)")


class ArrayElementType(enum.Enum):
    """Element type of a PostgreSQL array column."""

    INT = "int"
    STRING = "string"


def sanitize_hex_for_json(value: str | None) -> str:
    """Strip the ``\\x`` prefix PostgreSQL puts on BYTEA output."""
    if value is None:
        return "none"
    if value.startswith("\\x"):
        return value[2:]
    return value


def array_to_string(values: Sequence[int] | Sequence[str | None] | None, is_json: bool = False) -> str:
    """Render a list as a PostgreSQL array literal, or as a JSON array.

    A list of integers is written bare; anything else is written as quoted
    strings, with ``None`` written as ``"null"``. An empty list is always ``{}``.
    """
    if not values:
        return "{}"
    open_char, close_char = ("[", "]") if is_json else ("{", "}")
    if all(isinstance(item, int) for item in values):
        body = ",".join(str(int(item)) for item in values)
    else:
        parts = []
        for item in values:
            if item is None:
                text = "null"
            elif isinstance(item, str):
                text = item
            else:
                raise TypeError(f"array elements must be all int or str/None, got {type(item).__name__}")
            parts.append(f'"{text}"')
        body = ",".join(parts)
    return f"{open_char}{body}{close_char}"


def _atoi(token: str) -> int:
    match = _LEADING_INT.match(token)
    return int(match.group(1)) if match else 0


def _unquote(token: str) -> str:
    if token.startswith('"'):
        return token[1:-1]
    return token


def parse_array(value: str | None, element_type: ArrayElementType) -> list:
    """Parse a PostgreSQL array literal such as ``{1,2,3}`` into a list.

    Anything that does not start with ``{`` yields an empty list. Empty
    elements are skipped; integers are read like C's ``atoi``.
    """
    if not value or not value.startswith("{"):
        return []
    inner = value[1:].split("}", 1)[0]
    tokens = [token for token in inner.split(",") if token]
    if element_type is ArrayElementType.INT:
        return [_atoi(token) for token in tokens]
    if element_type is ArrayElementType.STRING:
        return [_unquote(token) for token in tokens]
    raise ValueError(f"unknown array element type: {element_type!r}")