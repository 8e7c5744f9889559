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

"""Container building blocks shared by the engines and codecs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Interface:
    """Wrapper carrying a value of dynamic type through schema-less formats.

    Formats such as JSON or YAML do not record which class a value was
    built from, so decoding them yields plain dicts. Interface stores the
    registered name of the value's type next to the value. Before encoding,
    prepare_for_encode() fills type_name; after a first decoding pass,
    prepare_for_decode() allocates an empty instance of the named type into
    value so a second pass can decode into it.

    Attributes:
        type_name: Registered name of the type held in value. Empty until
            the wrapper is prepared for encoding. Do not set it by hand.
        value: The wrapped value.

    Example:
        ```python
        @dataclass
        class Plugin:
            options: Interface = field(default_factory=Interface)

        cfg = Plugin(options=Interface(value=HttpOptions(timeout=5)))
        write_config_file("plugin.json", cfg)

        loaded = Plugin()
        read_config_file("plugin.json", loaded)
        assert isinstance(loaded.options.value, HttpOptions)
        ```

    """

    type_name: str = ""
    value: Any = None
