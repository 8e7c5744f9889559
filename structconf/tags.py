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

"""Config tag parsing.

A config tag is a string stored in a dataclass field's metadata under the
``"config"`` key. It holds ``key=value`` pairs separated by ``;``:

    @dataclass
    class Server:
        port: int = tagged("default=8080;range=1:65535")
        mode: str = tagged("range=dev,prod;default=dev")
        retries: int = tagged("nil=-1;default=3")

Recognized keys:

- default: Literal assigned when the field is empty.
- nil: Literal that counts as empty instead of the type's zero value.
- range: Either choices separated by ``,`` or a ``min:max`` pair where
  either side may be left out.

Unknown keys are ignored. Segments that are empty or do not split into
exactly one key and one value are skipped.
"""

from __future__ import annotations

import dataclasses
from typing import Any

CONFIG_TAG = "config"

DEFAULT_KEY = "default"
NIL_KEY = "nil"
RANGE_KEY = "range"

CHOICE_SEPARATOR = ","
BOUND_SEPARATOR = ":"


def parse_tag(tag: str) -> dict[str, str]:
    """Parse a config tag into a key/value mapping.

    Later duplicate keys overwrite earlier ones.

    Args:
        tag: Raw tag string, e.g. ``"nil=-1;default=42"``.

    Returns:
        A possibly empty dict of tag keys to tag values.

    Example:
        ```python
        >>> parse_tag("default=foo;range=foo,bar")
        {'default': 'foo', 'range': 'foo,bar'}
        >>> parse_tag("default;=x;a=b=c")
        {}
        ```

    """
    result: dict[str, str] = {}
    for segment in tag.split(";"):
        if not segment:
            continue
        parts = segment.split("=")
        if len(parts) != 2:
            continue
        key, value = parts
        if not key:
            continue
        result[key] = value
    return result


def field_tag(f: dataclasses.Field) -> str | None:
    """Return the raw config tag of a dataclass field, or None if untagged."""
    tag = f.metadata.get(CONFIG_TAG)
    if tag is None:
        return None
    return str(tag)


def tagged(tag: str, **kwargs: Any) -> Any:
    """Declare a dataclass field carrying a config tag.

    A thin wrapper over dataclasses.field that stores tag in the field
    metadata. When neither default nor default_factory is given, the field
    defaults to None so containers can be created empty and filled by
    apply_defaults().

    Args:
        tag: Config tag string.
        **kwargs: Passed through to dataclasses.field.

    Returns:
        A dataclasses.Field.

    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[CONFIG_TAG] = tag
    if "default" not in kwargs and "default_factory" not in kwargs:
        kwargs["default"] = None
    return dataclasses.field(metadata=metadata, **kwargs)
