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

"""Range and choice enforcement for configuration containers.

apply_limits() walks a dataclass instance depth-first, like apply_defaults(),
and enforces the ``range`` key of each leaf field's config tag. Only str
and int fields take part (optional ones only when they hold a value); bool,
float and text-capable fields are skipped without a warning.

Range syntax:

Choices (``,`` separated; surrounding whitespace and blank items are
dropped; a single literal without ``:`` is a one-item choice list):
    range=foo,bar,baz

Bounds (inclusive; either side may be omitted):
    range=0:       (min:+infinity)
    range=:100     (-infinity:max)
    range=0:100    (min:max)

Strings compare lexicographically, integers numerically. A choice list wins
over bounds when a range contains both separators.

Out-of-range values:

- Choices: a value matching no choice is reset
- Bounds with clamp=True: the value is set to the bound it violated
- Bounds with clamp=False: the value is reset

Resetting assigns the tag's ``default`` literal when there is one, and the
type's zero value otherwise. A field whose type has no zero value (an enum)
is left unchanged and reported with NoDefaultError.

Per-field problems are collected, never raised:

- NoTagError / NoRangeError: nothing to enforce
- InvalidRangeError: a choice or bound literal does not parse
- InvalidRangeSyntaxError: a bound pair is not ``min:max``
- InvalidDefaultError: the reset default does not parse
- NoDefaultError: a reset field has neither a default nor a zero value

Example:
    ```python
    @dataclass
    class Person:
        name: str = tagged("range=foo,bar,baz;default=bar")
        age: int = tagged("range=0:150")

    p = Person(name="INVALID", age=210)
    apply_limits(p, clamp=True)
    assert (p.name, p.age) == ("bar", 150)
    ```
"""

from __future__ import annotations

from typing import Any

from structconf.defaults import assign_default
from structconf.exceptions import (
    FieldError,
    FieldWarnings,
    InvalidParameterError,
    InvalidRangeError,
    InvalidRangeSyntaxError,
    NoDefaultError,
    NoRangeError,
    NoTagError,
)
from structconf.logging import Logger, resolve_logger
from structconf.scalars import compare, parse_literal
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
from structconf.tags import BOUND_SEPARATOR, CHOICE_SEPARATOR, DEFAULT_KEY, RANGE_KEY

__all__ = ["apply_limits"]


def apply_limits(
    config: Any, clamp: bool = False, *, logger: Logger | None = None
) -> FieldWarnings | None:
    """Enforce tag ranges on fields at any depth of config.

    Args:
        config: Dataclass instance. Modified in place.
        clamp: If True, values outside min:max bounds are clamped to the
            violated bound. If False, they are reset to the default (or the
            zero value). Has no effect on choice lists.
        logger: Logger. Defaults to the global logger.

    Returns:
        None if every participating field was processed cleanly, otherwise
        a FieldWarnings aggregate with the per-field errors in traversal
        order.

    Raises:
        InvalidParameterError: If config is not a dataclass instance.

    """
    if not is_record(config):
        raise InvalidParameterError(
            f"expected a dataclass instance, got {type(config).__name__}"
        )
    log = resolve_logger(logger)
    warnings: list[FieldError] = []
    _limit_record(config, clamp, warnings, log)
    if not warnings:
        return None
    log.verbose("LIMITS", f"{len(warnings)} field warning(s) in {type(config).__name__}")
    return FieldWarnings(warnings)


def _participates(spec: TypeSpec, value: Any) -> bool:
    if value is None or spec.kind is not NodeKind.SCALAR:
        return False
    tp = spec.type
    return issubclass(tp, (str, int)) and not issubclass(tp, bool)


def _limit_record(record: Any, clamp: bool, warnings: list[FieldError], log: Logger) -> None:
    for fs in record_fields(type(record)):
        value = getattr(record, fs.name)
        spec = resolve(fs.spec, value)
        if spec.is_container:
            _limit_node(spec, value, clamp, warnings, log)
        elif fs.settable and _participates(spec, value):
            _limit_field(record, fs, spec, clamp, warnings, log)


def _limit_node(
    spec: TypeSpec, value: Any, clamp: bool, warnings: list[FieldError], log: Logger
) -> None:
    if value is None:
        return
    spec = resolve(spec, value)
    if spec.kind is NodeKind.RECORD:
        _limit_record(value, clamp, warnings, log)
    elif spec.kind is NodeKind.SEQUENCE:
        for item in value:
            _limit_node(spec.item or UNKNOWN, item, clamp, warnings, log)
    elif spec.kind is NodeKind.MAPPING:
        for item in value.values():
            _limit_node(spec.item or UNKNOWN, item, clamp, warnings, log)
    elif spec.kind is NodeKind.INTERFACE:
        _limit_node(UNKNOWN, value.value, clamp, warnings, log)


def _limit_field(
    record: Any,
    fs: FieldSpec,
    spec: TypeSpec,
    clamp: bool,
    warnings: list[FieldError],
    log: Logger,
) -> None:
    if fs.tag is None:
        warnings.append(NoTagError(fs.name))
        return
    rng = fs.tags.get(RANGE_KEY)
    if rng is None:
        warnings.append(NoRangeError(fs.name))
        return
    if not rng.strip():
        warnings.append(InvalidRangeSyntaxError(fs.name, rng))
        return
    if CHOICE_SEPARATOR in rng or BOUND_SEPARATOR not in rng:
        _limit_choices(record, fs, spec, rng, warnings, log)
    else:
        _limit_bounds(record, fs, spec, rng, clamp, warnings, log)


def _limit_choices(
    record: Any,
    fs: FieldSpec,
    spec: TypeSpec,
    rng: str,
    warnings: list[FieldError],
    log: Logger,
) -> None:
    current = getattr(record, fs.name)
    matched = False
    for literal in (item.strip() for item in rng.split(CHOICE_SEPARATOR)):
        if not literal:
            continue
        try:
            choice = parse_literal(literal, spec.type)
            if compare(current, choice) == 0:
                matched = True
        except (ValueError, TypeError) as err:
            warnings.append(InvalidRangeError(fs.name, literal, str(err)))
            return
    if not matched:
        log.debug("LIMITS", f"{fs.name}: {current!r} not in {rng!r}")
        _reset(record, fs, spec, warnings, log)


def _limit_bounds(
    record: Any,
    fs: FieldSpec,
    spec: TypeSpec,
    rng: str,
    clamp: bool,
    warnings: list[FieldError],
    log: Logger,
) -> None:
    bounds = rng.split(BOUND_SEPARATOR)
    if len(bounds) != 2:
        warnings.append(InvalidRangeSyntaxError(fs.name, rng))
        return
    # min is checked first, then max against the possibly updated value
    for literal, violated in ((bounds[0], -1), (bounds[1], 1)):
        literal = literal.strip()
        if not literal:
            continue
        current = getattr(record, fs.name)
        if current is None:
            return
        try:
            bound = parse_literal(literal, spec.type)
            outside = compare(current, bound) == violated
        except (ValueError, TypeError) as err:
            warnings.append(InvalidRangeError(fs.name, literal, str(err)))
            return
        if not outside:
            continue
        log.debug("LIMITS", f"{fs.name}: {current!r} outside {rng!r}")
        if clamp:
            setattr(record, fs.name, bound)
        else:
            _reset(record, fs, spec, warnings, log)


def _reset(
    record: Any, fs: FieldSpec, spec: TypeSpec, warnings: list[FieldError], log: Logger
) -> None:
    if DEFAULT_KEY in fs.tags:
        assign_default(record, fs, spec, True, warnings, log)
        return
    zero = zero_value(spec)
    if zero is None and not spec.optional:
        # enums have no zero member
        warnings.append(NoDefaultError(fs.name))
        return
    setattr(record, fs.name, zero)
