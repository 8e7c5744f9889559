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

"""JSON codec, registered as ``json``."""

from __future__ import annotations

import json
from typing import Any

from structconf.codec.base import register_codec
from structconf.codec.mapping import decode_into, to_mapping
from structconf.exceptions import CodecError


class JsonCodec:
    """Encode containers as indented UTF-8 JSON.

    Attributes:
        indent: Indentation passed to json.dumps (None for compact output).
        sort_keys: Sort object keys when encoding.
    """

    def __init__(self, indent: int | None = 2, sort_keys: bool = False) -> None:
        self.indent = indent
        self.sort_keys = sort_keys

    def encode(self, config: Any) -> bytes:
        data = to_mapping(config)
        try:
            text = json.dumps(
                data, indent=self.indent, sort_keys=self.sort_keys, ensure_ascii=False
            )
        except (TypeError, ValueError) as err:
            raise CodecError(f"cannot encode {type(config).__name__} as JSON: {err}") from err
        return (text + "\n").encode("utf-8")

    def decode(self, data: bytes, config: Any) -> None:
        try:
            raw = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as err:
            raise CodecError(f"invalid JSON: {err}") from err
        decode_into(raw, config)


register_codec("json", JsonCodec())
