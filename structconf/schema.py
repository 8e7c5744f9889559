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

"""Node-kind descriptors for configuration containers.

Every traversal in structconf (defaults, limits, the Interface protocol and
the codecs) walks the same tree shape. Rather than inspecting annotations
on every call, each dataclass is described once into a tuple of FieldSpec
entries whose TypeSpec names one of a closed set of node kinds:

- RECORD: a dataclass
- SEQUENCE: list[T], tuple[T, ...] and other sequences
- MAPPING: dict[K, V] and other mappings (values are walked)
- INTERFACE: the Interface wrapper
- SCALAR: str, int, float, bool
- TEXT: types with a text capability (see structconf.scalars)
- UNKNOWN: anything else, including Any; resolved from the runtime value

``T | None`` is not a kind of its own: it sets TypeSpec.optional on the
spec of T. None is terminal for every walk.

Descriptions are cached per class.
"""

from __future__ import annotations

import collections
import collections.abc
from dataclasses import dataclass
import dataclasses
from enum import Enum
import functools
import sys
import types
import typing
from typing import Any

from structconf.scalars import SCALAR_TYPES, is_text_type
from structconf.tags import field_tag, parse_tag
from structconf.types import Interface

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)
_MAPPING_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)


class NodeKind(Enum):
    RECORD = "record"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    INTERFACE = "interface"
    SCALAR = "scalar"
    TEXT = "text"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TypeSpec:
    """Description of one node in a container tree.

    Attributes:
        kind: Node kind.
        type: Concrete class for RECORD, SCALAR, TEXT and INTERFACE nodes;
            the container class for SEQUENCE and MAPPING nodes; None for
            UNKNOWN.
        optional: True if the annotation admits None.
        item: Element spec of a SEQUENCE or value spec of a MAPPING.
        key: Key spec of a MAPPING.

    """

    kind: NodeKind
    type: Any = None
    optional: bool = False
    item: TypeSpec | None = None
    key: TypeSpec | None = None

    @property
    def is_container(self) -> bool:
        return self.kind in (
            NodeKind.RECORD,
            NodeKind.SEQUENCE,
            NodeKind.MAPPING,
            NodeKind.INTERFACE,
        )

    @property
    def is_leaf(self) -> bool:
        return self.kind in (NodeKind.SCALAR, NodeKind.TEXT)


UNKNOWN = TypeSpec(NodeKind.UNKNOWN)


@dataclass(frozen=True)
class FieldSpec:
    """Description of one dataclass field.

    Attributes:
        name: Field name.
        spec: Node description of the field's annotation.
        tag: Raw config tag, or None if the field is untagged.
        tags: Parsed tag mapping (empty when untagged).
        settable: False for private fields and fields of frozen dataclasses.

    """

    name: str
    spec: TypeSpec
    tag: str | None
    tags: dict[str, str]
    settable: bool


def is_record(value: Any) -> bool:
    """Return True if value is a dataclass instance (not a dataclass class)."""
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def describe_type(annotation: Any) -> TypeSpec:
    """Describe a type annotation as a TypeSpec."""
    try:
        return _describe_cached(annotation)
    except TypeError:
        # unhashable annotation objects
        return _describe(annotation)


@functools.lru_cache(maxsize=1024)
def _describe_cached(annotation: Any) -> TypeSpec:
    return _describe(annotation)


def _describe(annotation: Any) -> TypeSpec:
    if annotation is None or annotation is Any or isinstance(annotation, (str, typing.TypeVar)):
        return UNKNOWN

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Annotated:
        return _describe(args[0])

    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in args if a is not type(None)]
        if len(members) == 1:
            inner = _describe(members[0])
            return dataclasses.replace(inner, optional=True)
        return TypeSpec(NodeKind.UNKNOWN, optional=len(members) != len(args))

    if origin is not None:
        if origin in _SEQUENCE_ORIGINS:
            if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
                item = UNKNOWN
            else:
                item = _describe(args[0]) if args else UNKNOWN
            container = origin if isinstance(origin, type) and not _is_abstract(origin) else list
            return TypeSpec(NodeKind.SEQUENCE, container, item=item)
        if origin in _MAPPING_ORIGINS:
            key = _describe(args[0]) if args else UNKNOWN
            item = _describe(args[1]) if len(args) > 1 else UNKNOWN
            container = origin if isinstance(origin, type) and not _is_abstract(origin) else dict
            return TypeSpec(NodeKind.MAPPING, container, item=item, key=key)
        return UNKNOWN

    if not isinstance(annotation, type):
        return UNKNOWN
    if annotation is Interface or issubclass(annotation, Interface):
        return TypeSpec(NodeKind.INTERFACE, annotation)
    if is_text_type(annotation):
        return TypeSpec(NodeKind.TEXT, annotation)
    if dataclasses.is_dataclass(annotation):
        return TypeSpec(NodeKind.RECORD, annotation)
    if issubclass(annotation, SCALAR_TYPES):
        return TypeSpec(NodeKind.SCALAR, annotation)
    if annotation in (list, tuple, collections.deque):
        return TypeSpec(NodeKind.SEQUENCE, annotation, item=UNKNOWN)
    if annotation in (dict, collections.OrderedDict):
        return TypeSpec(NodeKind.MAPPING, annotation, item=UNKNOWN, key=UNKNOWN)
    return UNKNOWN


def _is_abstract(origin: type) -> bool:
    return origin.__module__ == "collections.abc"


def runtime_spec(value: Any) -> TypeSpec:
    """Describe a value whose declared type is unknown by its runtime type."""
    if value is None:
        return UNKNOWN
    if isinstance(value, Interface):
        return TypeSpec(NodeKind.INTERFACE, type(value))
    if is_record(value):
        return TypeSpec(NodeKind.RECORD, type(value))
    if isinstance(value, (list, tuple, collections.deque)):
        return TypeSpec(NodeKind.SEQUENCE, type(value), item=UNKNOWN)
    if isinstance(value, dict):
        return TypeSpec(NodeKind.MAPPING, type(value), item=UNKNOWN, key=UNKNOWN)
    return describe_type(type(value))


def resolve(spec: TypeSpec, value: Any) -> TypeSpec:
    """Refine spec with the runtime value where the declaration is vague.

    UNKNOWN specs are replaced by the runtime description; RECORD specs take
    the runtime class so subclasses contribute their own fields.
    """
    if spec.kind is NodeKind.UNKNOWN and value is not None:
        return runtime_spec(value)
    if spec.kind is NodeKind.RECORD and is_record(value) and type(value) is not spec.type:
        return dataclasses.replace(spec, type=type(value))
    return spec


def record_fields(cls: type) -> tuple[FieldSpec, ...]:
    """Describe the fields of a dataclass.

    Raises:
        TypeError: If cls is not a dataclass.

    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")
    return _record_fields(cls)


@functools.lru_cache(maxsize=512)
def _record_fields(cls: type) -> tuple[FieldSpec, ...]:
    hints = _type_hints(cls)
    frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    specs = []
    for f in dataclasses.fields(cls):
        tag = field_tag(f)
        specs.append(
            FieldSpec(
                name=f.name,
                spec=describe_type(hints.get(f.name, f.type)),
                tag=tag,
                tags=parse_tag(tag) if tag is not None else {},
                settable=not frozen and not f.name.startswith("_"),
            )
        )
    return tuple(specs)


def _type_hints(cls: type) -> dict[str, Any]:
    """Resolve field annotations, tolerating names that cannot be resolved.

    Classes defined inside functions may refer to other local names that
    typing.get_type_hints() cannot see; such fields fall back to UNKNOWN and
    are resolved from their runtime values.
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        pass
    module = sys.modules.get(cls.__module__)
    globalns = vars(module) if module is not None else {}
    localns = {cls.__name__: cls}
    hints: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not isinstance(f.type, str):
            hints[f.name] = f.type
            continue
        try:
            hints[f.name] = _resolve_annotation(f.name, f.type, globalns, localns)
        except (NameError, TypeError):
            hints[f.name] = Any
    return hints


def _resolve_annotation(
    name: str, annotation: str, globalns: dict[str, Any], localns: dict[str, Any]
) -> Any:
    """Resolve one string annotation the way typing.get_type_hints() does."""
    holder = type("_Field", (), {"__annotations__": {name: annotation}})
    return typing.get_type_hints(holder, globalns, localns, include_extras=True)[name]


# ----------------------------
# Zero values
# ----------------------------


def zero_value(spec: TypeSpec) -> Any:
    """Return the zero value for a node description.

    Zero values are "", 0, 0.0 and False for scalars, None for optional
    nodes and unknown types, empty containers for sequences and mappings,
    an empty Interface for wrappers and a zero-filled instance for records.
    """
    if spec.optional:
        return None
    kind = spec.kind
    if kind is NodeKind.RECORD:
        return zero_record(spec.type)
    if kind is NodeKind.INTERFACE:
        return spec.type()
    if kind is NodeKind.SEQUENCE:
        return (spec.type or list)()
    if kind is NodeKind.MAPPING:
        return (spec.type or dict)()
    if kind in (NodeKind.SCALAR, NodeKind.TEXT):
        try:
            return spec.type()
        except (TypeError, ValueError):
            return None
    return None


def zero_record(cls: type) -> Any:
    """Create an instance of dataclass cls.

    Fields with a declared default or default factory keep it; required
    init fields receive the zero value of their annotation.
    """
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        spec = next(s.spec for s in record_fields(cls) if s.name == f.name)
        kwargs[f.name] = zero_value(spec)
    return cls(**kwargs)


def zero_instance(tp: type) -> Any:
    """Create a fresh zero instance of any describable type."""
    return zero_value(describe_type(tp))
