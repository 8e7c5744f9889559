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

"""Preparing Interface wrappers for encoding and decoding.

Schema-less formats lose the class of an Interface value. The wrapper
protocol restores it in three steps around the codec:

Write path:
    1. prepare_for_encode() registers the type of every wrapped value and
       writes its name into Interface.type_name
    2. The codec encodes the container

Read path:
    1. The codec decodes the source once; wrapped values come out as plain
       dicts, lists and scalars
    2. prepare_for_decode() replaces every named wrapper's value with a fresh
       empty instance of the registered type, or converts it directly for
       scalar-like types
    3. If any wrapper was touched (DecodePlan.needs_second_pass), the codec
       decodes the same source again, this time into the typed values
    4. Wrappers inside those values are handled by repeating steps 2 and 3
       with the next level, until a level touches nothing

Both walks visit records, sequence elements, mapping values, present
optionals and the values of wrappers themselves, in depth-first order.

Example:
    ```python
    prepare_for_encode(cfg)
    data = codec.encode(cfg)

    fresh = Plugin()
    codec.decode(data, fresh)
    level = 0
    while prepare_for_decode(fresh, level=level).needs_second_pass:
        codec.decode(data, fresh)
        level += 1
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from structconf.exceptions import DecodeError, InvalidParameterError
from structconf.logging import Logger, resolve_logger
from structconf.registry import TypeRegistry, resolve_registry
from structconf.results import DecodePlan
from structconf.scalars import coerce_value
from structconf.schema import (
    UNKNOWN,
    NodeKind,
    TypeSpec,
    describe_type,
    is_record,
    record_fields,
    resolve,
)
from structconf.types import Interface

__all__ = ["Interface", "prepare_for_encode", "prepare_for_decode"]


def _check_root(config: Any) -> None:
    if not is_record(config):
        raise InvalidParameterError(
            f"expected a dataclass instance, got {type(config).__name__}"
        )


def _children(spec: TypeSpec, value: Any) -> list[tuple[TypeSpec, Any]]:
    """Return the (spec, value) pairs nested directly under a container node."""
    if spec.kind is NodeKind.RECORD:
        return [(fs.spec, getattr(value, fs.name)) for fs in record_fields(type(value))]
    if spec.kind is NodeKind.SEQUENCE:
        return [(spec.item or UNKNOWN, item) for item in value]
    if spec.kind is NodeKind.MAPPING:
        return [(spec.item or UNKNOWN, item) for item in value.values()]
    return []


# -------------------------------
# Write path
# -------------------------------


def prepare_for_encode(
    config: Any,
    *,
    registry: TypeRegistry | None = None,
    logger: Logger | None = None,
) -> None:
    """Register wrapped value types and record their names in the wrappers.

    Wrappers holding a value and an empty type_name get the value's type
    registered and its name written to type_name. Wrappers whose type_name
    is already set are left untouched, so repeated saves keep their names.

    Args:
        config: Dataclass instance to prepare. Modified in place.
        registry: Type registry. Defaults to the process-wide registry.
        logger: Logger. Defaults to the global logger.

    Raises:
        InvalidParameterError: If config is not a dataclass instance.
        DuplicateTypeError: If a value's derived name is registered for a
            different type.

    """
    _check_root(config)
    _encode_node(
        resolve(UNKNOWN, config), config, resolve_registry(registry), resolve_logger(logger)
    )


def _encode_node(spec: TypeSpec, value: Any, registry: TypeRegistry, log: Logger) -> None:
    if value is None:
        return
    spec = resolve(spec, value)
    if spec.kind is NodeKind.INTERFACE:
        _encode_interface(value, registry, log)
        return
    for child_spec, child in _children(spec, value):
        _encode_node(child_spec, child, registry, log)


def _encode_interface(wrapper: Interface, registry: TypeRegistry, log: Logger) -> None:
    if wrapper.value is None:
        return
    if not wrapper.type_name:
        wrapper.type_name = registry.register(wrapper.value)
        log.debug("INTERFACE", f"Recorded type {wrapper.type_name}")
    _encode_node(UNKNOWN, wrapper.value, registry, log)


# -------------------------------
# Read path
# -------------------------------



def prepare_for_decode(
    config: Any,
    *,
    level: int = 0,
    registry: TypeRegistry | None = None,
    logger: Logger | None = None,
) -> DecodePlan:
    """Allocate typed values into named wrappers after a decode pass.

    Every wrapper with a non-empty type_name at the given nesting level
    receives a fresh value of the registered type, replacing whatever it
    held, so a following decode pass fills a clean instance. Types that
    decode from a single scalar (str, int, float, bool, enums and
    text-capable types such as datetime or UUID) are converted from the
    raw value directly instead.

    Wrappers nested inside wrapper values only exist once their parent has
    been decoded with its proper type. ``level`` counts that nesting: pass
    0 after the first decode, 1 after the second, and so on. Wrappers above
    the level are walked into without being touched.

    Args:
        config: Dataclass instance decoded once. Modified in place, possibly
            even when an error is raised.
        level: Interface nesting depth to allocate at.
        registry: Type registry. Defaults to the process-wide registry.
        logger: Logger. Defaults to the global logger.

    Returns:
        A DecodePlan telling whether the source must be decoded again.

    Raises:
        InvalidParameterError: If config is not a dataclass instance.
        TypeNotRegisteredError: If a wrapper names an unregistered type.
            The walk stops at the first such wrapper.
        DecodeError: If a raw value cannot be converted to its scalar type.

    """
    _check_root(config)
    log = resolve_logger(logger)
    walk = _DecodeWalk(resolve_registry(registry), log, level)
    touched = walk.node(resolve(UNKNOWN, config), config, 0)
    if touched:
        log.debug(
            "INTERFACE",
            f"Allocated {touched} wrapped value(s) at level {level}; another pass needed",
        )
    return DecodePlan(needs_second_pass=touched > 0, wrappers=touched)


class _DecodeWalk:
    def __init__(self, registry: TypeRegistry, log: Logger, level: int) -> None:
        self.registry = registry
        self.log = log
        self.level = level

    def node(self, spec: TypeSpec, value: Any, depth: int) -> int:
        if value is None:
            return 0
        spec = resolve(spec, value)
        if spec.kind is NodeKind.INTERFACE:
            return self.interface(value, depth)
        touched = 0
        for child_spec, child in _children(spec, value):
            touched += self.node(child_spec, child, depth)
        return touched

    def interface(self, wrapper: Interface, depth: int) -> int:
        if not wrapper.type_name or depth < self.level:
            return self.node(UNKNOWN, wrapper.value, depth + 1)
        if depth > self.level:
            return 0
        tp = self.registry.lookup(wrapper.type_name)
        if describe_type(tp).is_leaf or issubclass(tp, Enum):
            wrapper.value = _convert(wrapper.type_name, tp, wrapper.value)
        else:
            wrapper.value = self.registry.create(wrapper.type_name)
        self.log.debug("INTERFACE", f"Allocated {wrapper.type_name}")
        return 1


def _convert(name: str, tp: type, raw: Any) -> Any:
    if raw is None:
        return None
    try:
        return coerce_value(tp, raw)
    except (TypeError, ValueError) as err:
        raise DecodeError(name, f"cannot convert {raw!r}: {err}") from err
