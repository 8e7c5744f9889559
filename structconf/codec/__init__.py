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

"""Configuration file codecs for structconf.

Codecs turn a dataclass container into bytes and decode bytes back into an
existing container. They are looked up by name, and names match file
extensions, so ``settings.yaml`` is read with the ``yaml`` codec.

Available Codecs:
    json : JsonCodec
        Indented UTF-8 JSON via the standard library.
    yaml, yml : YamlCodec
        Block-style YAML via PyYAML's safe loader/dumper.
    xml : XmlCodec
        Element-per-field XML via xml.etree.ElementTree.

Example:
    ```python
    from structconf.codec import get_codec

    codec = get_codec("yaml")
    data = codec.encode(cfg)
    codec.decode(data, fresh_cfg)
    ```

"""

# Import codec modules to trigger self-registration
from . import (
    json_codec,  # noqa: F401
    xml_codec,  # noqa: F401
    yaml_codec,  # noqa: F401
)
from .base import Codec, codec_names, get_codec, register_codec, unregister_codec
from .mapping import decode_into, to_mapping

__all__ = [
    "Codec",
    "codec_names",
    "get_codec",
    "register_codec",
    "unregister_codec",
    "decode_into",
    "to_mapping",
]
