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

"""YAML codec, registered as ``yaml`` and ``yml``.

Uses PyYAML's safe loader and dumper, so documents never construct
arbitrary Python objects. An empty document is an error.
"""

from __future__ import annotations

from typing import Any

import yaml

from structconf.codec.base import register_codec
from structconf.codec.mapping import decode_into, to_mapping
from structconf.exceptions import CodecError


class YamlCodec:
    """Encode containers as block-style YAML, keeping field order."""

    def encode(self, config: Any) -> bytes:
        data = to_mapping(config)
        try:
            text = yaml.safe_dump(
                data, default_flow_style=False, sort_keys=False, allow_unicode=True
            )
        except yaml.YAMLError as err:
            raise CodecError(f"cannot encode {type(config).__name__} as YAML: {err}") from err
        return text.encode("utf-8")

    def decode(self, data: bytes, config: Any) -> None:
        try:
            raw = yaml.safe_load(data.decode("utf-8"))
        except (UnicodeDecodeError, yaml.YAMLError) as err:
            raise CodecError(f"invalid YAML: {err}") from err
        if raw is None:
            raise CodecError("YAML document is empty")
        decode_into(raw, config)


register_codec("yaml", YamlCodec())
register_codec("yml", YamlCodec())
