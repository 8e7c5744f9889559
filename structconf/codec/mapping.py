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

"""Conversion between dataclass trees and plain data.

Codecs for tree formats (JSON, YAML) share this bridge: to_mapping() turns
a container into dicts, lists and scalars the format libraries can dump,
and decode_into() lays parsed data over an existing container.

Decoding overlays rather than replaces:

- Keys missing from the data leave fields untouched; unknown keys are
  ignored
- Nested records and Interface wrappers already present are decoded in
  place, so typed values allocated by prepare_for_decode() are filled
- List elements and dict values that are records or wrappers are reused
  by position / key
- Scalars are coerced to the annotated type
- An Interface value that is not pre-allocated receives the raw parsed
  structure (a dict for records)

Private fields (leading underscore) are neither encoded nor decoded.
"""

from __future__ import annotations

import collections
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from structconf.exceptions import DecodeError, InvalidParameterError
from structconf.scalars import coerce_scalar, coerce_value, from_text, is_text_type, to_text
from structconf.schema import (
    UNKNOWN,
    NodeKind,
    TypeSpec,
    is_record,
    record_fields,
    resolve,
    runtime_spec,
    zero_record,
)
from structconf.types import Interface

__all__ = ["to_mapping", "decode_into"]

INTERFACE_TYPE_KEY = "type_name"
INTERFACE_VALUE_KEY = "value"


# -------------------------------
# Encoding
# -------------------------------


def to_mapping(config: Any) -> dict[str, Any]:
    """Convert a dataclass instance into plain dicts, lists and scalars.

    Raises:
        InvalidParameterError: If config is not a dataclass instance.

    """
    if not is_record(config):
        raise InvalidParameterError(
            f"expected a dataclass instance, got {type(config).__name__}"
        )
    return _encode_value(UNKNOWN, config)


def _encode_value(spec: TypeSpec, value: Any) -> Any:
    if value is None:
        return None
    spec = resolve(spec, value)
    kind = spec.kind
    if kind is NodeKind.RECORD:
        return {
            fs.name: _encode_value(fs.spec, getattr(value, fs.name))
            for fs in record_fields(type(value))
            if not fs.name.startswith("_")
        }
    if kind is NodeKind.INTERFACE:
        return {
            INTERFACE_TYPE_KEY: value.type_name,
            INTERFACE_VALUE_KEY: _encode_value(UNKNOWN, value.value),
        }
    if kind is NodeKind.SEQUENCE:
        return [_encode_value(spec.item or UNKNOWN, item) for item in value]
    if kind is NodeKind.MAPPING:
        return {
            _encode_key(key): _encode_value(spec.item or UNKNOWN, item)
            for key, item in value.items()
        }
    if kind is NodeKind.TEXT:
        return to_text(value)
    return _plain_scalar(value)


def _encode_key(key: Any) -> Any:
    if is_text_type(type(key)):
        return to_text(key)
    return _plain_scalar(key)


def _plain_scalar(value: Any) -> Any:
    """Strip enum and subclass wrappers so format libraries accept the value."""
    if isinstance(value, Enum):
        value = value.value
    for base in (bool, int, float, str):
        if isinstance(value, base):
            return base(value)
    return value


# -------------------------------
# Decoding
# -------------------------------


def decode_into(raw: Any, config: Any) -> None:
    """Overlay parsed data onto a dataclass instance.

    Args:
        raw: Parsed document, a mapping of field names to values.
        config: Dataclass instance. Modified in place, possibly even when an
            error is raised.

    Raises:
        InvalidParameterError: If config is not a dataclass instance.
        DecodeError: If raw is not a mapping or a value does not fit its
            field. The error names the field.

    """
    if not is_record(config):
        raise InvalidParameterError(
            f"expected a dataclass instance, got {type(config).__name__}"
        )
    if not isinstance(raw, Mapping):
        raise DecodeError("<root>", f"expected a mapping, got {type(raw).__name__}")
    _decode_record(raw, config)


def _decode_record(raw: Mapping[str, Any], record: Any) -> None:
    for fs in record_fields(type(record)):
        if fs.name not in raw or not fs.settable:
            continue
        current = getattr(record, fs.name)
        try:
            value = _decode_value(fs.spec, raw[fs.name], current, fs.name)
        except DecodeError:
            raise
        except (TypeError, ValueError) as err:
            raise DecodeError(fs.name, str(err)) from err
        setattr(record, fs.name, value)


def _decode_value(spec: TypeSpec, raw: Any, current: Any, name: str) -> Any:
    if raw is None:
        if spec.optional or spec.kind is NodeKind.UNKNOWN:
            return None
        return current
    if current is not None:
        spec = resolve(spec, current)
    kind = spec.kind

    if kind is NodeKind.RECORD:
        if not isinstance(raw, Mapping):
            raise DecodeError(name, f"expected a mapping, got {type(raw).__name__}")
        target = current if is_record(current) else zero_record(spec.type)
        _decode_record(raw, target)
        return target

    if kind is NodeKind.INTERFACE:
        if not isinstance(raw, Mapping):
            raise DecodeError(name, f"expected a mapping, got {type(raw).__name__}")
        wrapper = current if isinstance(current, Interface) else spec.type()
        if INTERFACE_TYPE_KEY in raw:
            type_name = str(raw[INTERFACE_TYPE_KEY] or "")
            if type_name != wrapper.type_name:
                # a value of another type cannot be decoded into
                wrapper.value = None
            wrapper.type_name = type_name
        if INTERFACE_VALUE_KEY in raw:
            wrapper.value = _decode_dynamic(raw[INTERFACE_VALUE_KEY], wrapper.value, name)
        return wrapper

    if kind is NodeKind.SEQUENCE:
        if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
            raise DecodeError(name, f"expected a sequence, got {type(raw).__name__}")
        existing = list(current) if isinstance(current, (list, tuple, collections.deque)) else []
        items = [
            _decode_value(
                spec.item or UNKNOWN,
                item,
                existing[i] if i < len(existing) else None,
                f"{name}[{i}]",
            )
            for i, item in enumerate(raw)
        ]
        return (spec.type or list)(items)

    if kind is NodeKind.MAPPING:
        if not isinstance(raw, Mapping):
            raise DecodeError(name, f"expected a mapping, got {type(raw).__name__}")
        existing = current if isinstance(current, Mapping) else {}
        out = (spec.type or dict)()
        for raw_key, item in raw.items():
            key = _decode_key(spec.key or UNKNOWN, raw_key)
            out[key] = _decode_value(
                spec.item or UNKNOWN, item, existing.get(key), f"{name}[{key!r}]"
            )
        return out

    if kind in (NodeKind.TEXT, NodeKind.SCALAR):
        return coerce_value(spec.type, raw)

    return _decode_dynamic(raw, current, name)


def _decode_dynamic(raw: Any, current: Any, name: str) -> Any:
    """Decode a value whose type is only known from what is already there."""
    if current is None or raw is None:
        return raw
    spec = runtime_spec(current)
    if spec.kind is NodeKind.UNKNOWN:
        if isinstance(current, Enum):
            return coerce_scalar(type(current), raw)
        return raw
    return _decode_value(spec, raw, current, name)


def _decode_key(spec: TypeSpec, raw_key: Any) -> Any:
    if spec.kind is NodeKind.SCALAR and isinstance(raw_key, str) and spec.type is not str:
        return coerce_scalar(spec.type, raw_key)
    if spec.kind is NodeKind.TEXT and isinstance(raw_key, str):
        return from_text(spec.type, raw_key)
    return raw_key
