# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Conversion between tag literals and typed field values.

This module is format-agnostic: it never looks at containers. It only turns
literal strings from config tags into values of a scalar field type,
coerces data parsed by codecs to field types and compares values for range
checks.

Supported scalar types are str, int, float and bool. Types implementing the
text capability are converted with their own parser:

- Any class with a ``from_text(cls, text)`` classmethod (and optionally a
  ``to_text(self)`` method for the reverse direction)
- pathlib.Path, datetime.datetime, datetime.date, datetime.time,
  decimal.Decimal and uuid.UUID
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import datetime
import decimal
from enum import Enum
from pathlib import Path, PurePath
from typing import Any
import uuid

SCALAR_TYPES: tuple[type, ...] = (str, int, float, bool)

# Types with an ordering that range checks understand. bool is a subclass of
# int and is excluded explicitly in compare().
ORDERED_TYPES: tuple[type, ...] = (str, int)

_TRUE_LITERALS = frozenset({"1", "t", "true", "yes", "y", "on"})
_FALSE_LITERALS = frozenset({"0", "f", "false", "no", "n", "off"})

_BUILTIN_TEXT_PARSERS: dict[type, Callable[[str], Any]] = {
    Path: Path,
    datetime.datetime: datetime.datetime.fromisoformat,
    datetime.date: datetime.date.fromisoformat,
    datetime.time: datetime.time.fromisoformat,
    decimal.Decimal: decimal.Decimal,
    uuid.UUID: uuid.UUID,
}


# ----------------------------
# Text capability
# ----------------------------


def is_text_type(tp: Any) -> bool:
    """Return True if tp converts from text through its own parser."""
    if not isinstance(tp, type):
        return False
    if callable(getattr(tp, "from_text", None)):
        return True
    return any(issubclass(tp, known) for known in _BUILTIN_TEXT_PARSERS)


def from_text(tp: type, text: str) -> Any:
    """Build a tp instance from text using its text capability.

    Raises:
        ValueError: If the text is rejected by the type's parser.
        TypeError: If tp has no text capability.

    """
    hook = getattr(tp, "from_text", None)
    if callable(hook):
        return hook(text)
    # datetime is a subclass of date and is listed first
    for known, parser in _BUILTIN_TEXT_PARSERS.items():
        if issubclass(tp, known):
            try:
                return parser(text)
            except decimal.InvalidOperation as err:
                raise ValueError(f"invalid decimal literal {text!r}") from err
    raise TypeError(f"type {tp.__name__} has no text capability")


def to_text(value: Any) -> str:
    """Render a text-capable value back to text."""
    hook = getattr(value, "to_text", None)
    if callable(hook):
        return str(hook())
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, PurePath):
        return value.as_posix()
    return str(value)


# ----------------------------
# Literal parsing
# ----------------------------


def parse_bool(literal: str) -> bool:
    """Parse a boolean literal (1/0, t/f, true/false, yes/no, on/off)."""
    lowered = literal.strip().lower()
    if lowered in _TRUE_LITERALS:
        return True
    if lowered in _FALSE_LITERALS:
        return False
    raise ValueError(f"cannot parse boolean value from {literal!r}")


def parse_literal(literal: str, target_type: Any) -> Any:
    """Parse a tag literal into a value of target_type.

    Args:
        literal: The literal string from a config tag.
        target_type: A scalar type (str, int, float, bool) or a text-capable
            type.

    Returns:
        The parsed value.

    Raises:
        ValueError: If the literal is malformed for target_type.
        TypeError: If target_type is not supported.

    Example:
        ```python
        >>> parse_literal("42", int)
        42
        >>> parse_literal("on", bool)
        True
        ```

    """
    if target_type is bool:
        return parse_bool(literal)
    if target_type is str:
        return literal
    if target_type is int:
        try:
            return int(literal.strip())
        except ValueError as err:
            raise ValueError(f"invalid integer literal {literal!r}") from err
    if target_type is float:
        try:
            return float(literal.strip())
        except ValueError as err:
            raise ValueError(f"invalid float literal {literal!r}") from err
    if is_text_type(target_type):
        return from_text(target_type, literal)
    if isinstance(target_type, type) and issubclass(target_type, SCALAR_TYPES):
        # str/int subclasses such as enum.IntEnum or user str types
        base = next(t for t in (bool, int, float, str) if issubclass(target_type, t))
        return target_type(parse_literal(literal, base))
    raise TypeError(f"unsupported literal target type: {target_type!r}")


# ----------------------------
# Comparison
# ----------------------------


def is_ordered(value: Any) -> bool:
    """Return True if value is of a kind range checks can compare."""
    return isinstance(value, ORDERED_TYPES) and not isinstance(value, bool)


def compare(a: Any, b: Any) -> int:
    """Compare two values of the same ordered kind.

    Strings compare lexicographically, integers numerically.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b.

    Raises:
        TypeError: For booleans, unordered kinds or mismatched kinds.

    """
    if not (is_ordered(a) and is_ordered(b)):
        raise TypeError(f"cannot compare {type(a).__name__} and {type(b).__name__}")
    if isinstance(a, str) != isinstance(b, str):
        raise TypeError(f"cannot compare {type(a).__name__} and {type(b).__name__}")
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


# ----------------------------
# Coercion of parsed data
# ----------------------------


def coerce_scalar(tp: type, raw: Any) -> Any:
    """Coerce a parsed scalar to a scalar field type.

    Raises:
        ValueError: If raw cannot represent a tp value.
        TypeError: If raw is of an incompatible kind.

    """
    if issubclass(tp, Enum):
        try:
            return tp(raw)
        except ValueError:
            # text formats carry every member value as a string
            if isinstance(raw, str):
                for member in tp:
                    if str(member.value) == raw:
                        return member
            raise
    if issubclass(tp, bool):
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            return parse_bool(raw)
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        raise TypeError(f"expected a boolean, got {raw!r}")
    if issubclass(tp, int):
        if isinstance(raw, bool):
            raise TypeError(f"expected an integer, got {raw!r}")
        if isinstance(raw, int):
            return tp(raw)
        if isinstance(raw, float) and raw.is_integer():
            return tp(int(raw))
        if isinstance(raw, str):
            return tp(int(raw.strip()))
        raise TypeError(f"expected an integer, got {raw!r}")
    if issubclass(tp, float):
        if isinstance(raw, bool):
            raise TypeError(f"expected a number, got {raw!r}")
        if isinstance(raw, (int, float, str)):
            return tp(raw)
        raise TypeError(f"expected a number, got {raw!r}")
    if issubclass(tp, str):
        if isinstance(raw, (Mapping, list)):
            raise TypeError(f"expected a string, got {type(raw).__name__}")
        return tp(raw)
    raise TypeError(f"unsupported scalar type {tp!r}")


def coerce_value(tp: type, raw: Any) -> Any:
    """Coerce parsed data to a scalar, enum or text-capable type.

    Text-capable types accept an instance of themselves or its text form;
    everything else goes through coerce_scalar().

    Example:
        ```python
        >>> coerce_value(uuid.UUID, "12345678-1234-5678-1234-567812345678")
        UUID('12345678-1234-5678-1234-567812345678')
        ```

    Raises:
        ValueError: If raw cannot represent a tp value.
        TypeError: If raw is of an incompatible kind or tp is unsupported.

    """
    if is_text_type(tp):
        if isinstance(raw, tp):
            return raw
        return from_text(tp, raw if isinstance(raw, str) else str(raw))
    return coerce_scalar(tp, raw)
