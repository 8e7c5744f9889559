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

"""Default value assignment for configuration containers.

apply_defaults() walks a dataclass instance depth-first and assigns the
``default`` literal from each leaf field's config tag when the field is
empty. A field is empty when:

- it holds None, or
- its tag defines ``nil`` and the field equals the parsed nil literal, or
- its tag defines no ``nil`` and the field holds its type's zero value
  ("", 0, 0.0, False). Optional fields are only empty when None.

With ``reset_all=True`` every leaf is treated as empty.

Fields of text-capable types (Path, datetime, classes with ``from_text``)
are always reset from the default literal, never checked for emptiness.

Sequences, mappings and Interface values are never defaulted themselves;
the walk descends into their elements. Private fields (leading underscore)
and fields of frozen dataclasses are skipped.

Problems with individual fields never stop the walk. They are collected and
returned as a FieldWarnings aggregate:

- NoTagError: leaf field without a config tag
- NoDefaultError: tag without a ``default`` key
- InvalidDefaultError: ``default`` or ``nil`` literal that does not parse
  (the nil literal is checked even with reset_all and for None values)

Example:
    ```python
    @dataclass
    class Person:
        name: str = tagged("default=foo")
        age: int = tagged("nil=-1;default=42")

    p = Person(name="", age=-1)
    assert apply_defaults(p) is None
    assert (p.name, p.age) == ("foo", 42)
    ```
"""

from __future__ import annotations

from typing import Any

from structconf.exceptions import (
    FieldError,
    FieldWarnings,
    InvalidDefaultError,
    InvalidParameterError,
    NoDefaultError,
    NoTagError,
)
from structconf.logging import Logger, resolve_logger
from structconf.scalars import from_text, parse_literal
from structconf.schema import (
    UNKNOWN,
    FieldSpec,
    NodeKind,
    TypeSpec,
    is_record,
    record_fields,
    resolve,
    zero_value,
)
from structconf.tags import DEFAULT_KEY, NIL_KEY

__all__ = ["apply_defaults", "assign_default", "is_empty"]


def apply_defaults(
    config: Any, reset_all: bool = False, *, logger: Logger | None = None
) -> FieldWarnings | None:
    """Assign tag defaults to empty fields at any depth of config.

    Args:
        config: Dataclass instance. Modified in place.
        reset_all: If True, every leaf field is reset to its default
            regardless of its current value.
        logger: Logger. Defaults to the global logger.

    Returns:
        None if every leaf field was processed cleanly, otherwise a
        FieldWarnings aggregate with the per-field errors in traversal order.
        Fields that had problems are left unchanged.

    Raises:
        InvalidParameterError: If config is not a dataclass instance.

    """
    if not is_record(config):
        raise InvalidParameterError(
            f"expected a dataclass instance, got {type(config).__name__}"
        )
    log = resolve_logger(logger)
    warnings: list[FieldError] = []
    _default_record(config, reset_all, warnings, log)
    if not warnings:
        return None
    log.verbose("DEFAULTS", f"{len(warnings)} field warning(s) in {type(config).__name__}")
    return FieldWarnings(warnings)


def _default_record(
    record: Any, reset_all: bool, warnings: list[FieldError], log: Logger
) -> None:
    for fs in record_fields(type(record)):
        value = getattr(record, fs.name)
        spec = resolve(fs.spec, value)
        if spec.is_container:
            _default_node(spec, value, reset_all, warnings, log)
        elif spec.is_leaf and fs.settable:
            assign_default(record, fs, spec, reset_all, warnings, log)


def _default_node(
    spec: TypeSpec, value: Any, reset_all: bool, warnings: list[FieldError], log: Logger
) -> None:
    if value is None:
        return
    spec = resolve(spec, value)
    if spec.kind is NodeKind.RECORD:
        _default_record(value, reset_all, warnings, log)
    elif spec.kind is NodeKind.SEQUENCE:
        for item in value:
            _default_node(spec.item or UNKNOWN, item, reset_all, warnings, log)
    elif spec.kind is NodeKind.MAPPING:
        for item in value.values():
            _default_node(spec.item or UNKNOWN, item, reset_all, warnings, log)
    elif spec.kind is NodeKind.INTERFACE:
        _default_node(UNKNOWN, value.value, reset_all, warnings, log)


def is_empty(fs: FieldSpec, spec: TypeSpec, value: Any) -> bool:
    """Return True if value counts as empty for the field.

    Raises:
        ValueError: If the field's nil literal does not parse.

    """
    if value is None:
        return True
    nil_literal = fs.tags.get(NIL_KEY)
    if nil_literal is not None:
        return value == parse_literal(nil_literal, spec.type)
    if spec.optional:
        return False
    return value == zero_value(spec)


def assign_default(
    record: Any,
    fs: FieldSpec,
    spec: TypeSpec,
    reset: bool,
    warnings: list[FieldError],
    log: Logger | None = None,
) -> bool:
    """Assign the default literal of one leaf field if it is empty.

    Args:
        record: Dataclass instance owning the field.
        fs: Field description.
        spec: Field node description, resolved against the current value.
        reset: Assign even if the field is not empty.
        warnings: Collected field errors; appended to on problems.
        log: Logger. Defaults to the global logger.

    Returns:
        True if the field was assigned.

    """
    log = resolve_logger(log)
    if fs.tag is None:
        warnings.append(NoTagError(fs.name))
        return False
    literal = fs.tags.get(DEFAULT_KEY)
    if literal is None:
        warnings.append(NoDefaultError(fs.name))
        return False

    if spec.kind is NodeKind.TEXT:
        try:
            new = from_text(spec.type, literal)
        except (ValueError, TypeError) as err:
            warnings.append(InvalidDefaultError(fs.name, literal, str(err)))
            return False
        setattr(record, fs.name, new)
        log.debug("DEFAULTS", f"{fs.name} = {literal!r}")
        return True

    nil_literal = fs.tags.get(NIL_KEY)
    if nil_literal is not None:
        try:
            parse_literal(nil_literal, spec.type)
        except (ValueError, TypeError) as err:
            warnings.append(InvalidDefaultError(fs.name, nil_literal, str(err)))
            return False

    if not reset and not is_empty(fs, spec, getattr(record, fs.name)):
        return False

    try:
        new = parse_literal(literal, spec.type)
    except (ValueError, TypeError) as err:
        warnings.append(InvalidDefaultError(fs.name, literal, str(err)))
        return False
    setattr(record, fs.name, new)
    log.debug("DEFAULTS", f"{fs.name} = {literal!r}")
    return True
