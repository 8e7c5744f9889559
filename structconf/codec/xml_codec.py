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

"""XML codec, registered as ``xml``.

The document element is named after the container class and holds one
child element per field. Values map to elements as follows:

- Records and mappings: one child per key. Keys that are not valid XML
  names (``80``, ``a b``) are written as ``<entry key="...">``
- Sequences: ``kind="list"`` with one ``<item>`` child per element
- None: ``nil="true"``
- Empty mappings: ``kind="map"``
- Scalars: element text (booleans as ``true`` / ``false``)

Example:
    ```xml
    <?xml version='1.0' encoding='utf-8'?>
    <Service>
      <name>api</name>
      <ports kind="list">
        <item>80</item>
      </ports>
      <owner nil="true" />
    </Service>
    ```

Element text is decoded as strings and coerced to the annotated field
types. Values under ``Any`` annotations keep the string form unless an
Interface names their type.
"""

from __future__ import annotations

from collections.abc import Mapping
import re
from typing import Any
import xml.etree.ElementTree as ET

from structconf.codec.base import register_codec
from structconf.codec.mapping import decode_into, to_mapping
from structconf.exceptions import CodecError

KIND_ATTR = "kind"
KEY_ATTR = "key"
NIL_ATTR = "nil"
ENTRY_TAG = "entry"
ITEM_TAG = "item"

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9._-]*$")


def _is_xml_name(key: Any) -> bool:
    return (
        isinstance(key, str)
        and _NAME_RE.match(key) is not None
        and not key.lower().startswith("xml")
    )


def _fill(element: ET.Element, value: Any) -> None:
    if value is None:
        element.set(NIL_ATTR, "true")
    elif isinstance(value, Mapping):
        if not value:
            element.set(KIND_ATTR, "map")
        for key, item in value.items():
            if _is_xml_name(key):
                child = ET.SubElement(element, key)
            else:
                child = ET.SubElement(element, ENTRY_TAG, {KEY_ATTR: str(key)})
            _fill(child, item)
    elif isinstance(value, list):
        element.set(KIND_ATTR, "list")
        for item in value:
            _fill(ET.SubElement(element, ITEM_TAG), item)
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    else:
        element.text = str(value)


def _key(element: ET.Element) -> str:
    if element.tag == ENTRY_TAG and KEY_ATTR in element.attrib:
        return element.attrib[KEY_ATTR]
    return element.tag


def _mapping(element: ET.Element) -> dict[str, Any]:
    return {_key(child): _value(child) for child in element}


def _value(element: ET.Element) -> Any:
    if element.get(NIL_ATTR) == "true":
        return None
    kind = element.get(KIND_ATTR)
    if kind == "list":
        return [_value(child) for child in element]
    if kind == "map" or len(element):
        return _mapping(element)
    return element.text or ""


class XmlCodec:
    """Encode containers as UTF-8 XML.

    Attributes:
        indent: Indentation per nesting level (None for compact output).
    """

    def __init__(self, indent: str | None = "  ") -> None:
        self.indent = indent

    def encode(self, config: Any) -> bytes:
        data = to_mapping(config)
        root = ET.Element(type(config).__name__)
        _fill(root, data)
        if self.indent is not None:
            ET.indent(root, space=self.indent)
        try:
            text = ET.tostring(root, encoding="utf-8", xml_declaration=True)
        except (TypeError, ValueError) as err:
            raise CodecError(f"cannot encode {type(config).__name__} as XML: {err}") from err
        return text + b"\n"

    def decode(self, data: bytes, config: Any) -> None:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as err:
            raise CodecError(f"invalid XML: {err}") from err
        decode_into(_mapping(root), config)


register_codec("xml", XmlCodec())
