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

"""Codec protocol and registry for structconf.

This module defines the foundational components for reading and writing
configuration files:

- Codec protocol: Interface that all codecs must implement
- Codec registry: Global dict mapping codec names to instances
- Registration and lookup functions: register_codec() and get_codec()

Codec names double as file extensions: ``config.json`` is handled by the
codec registered as ``json``. Built-in codecs register themselves when
structconf.codec is imported.

Example:
    Implementing a custom codec:
        ```python
        import tomllib
        from structconf.codec.base import register_codec
        from structconf.codec.mapping import decode_into

        class TomlReader:
            def encode(self, config):
                raise NotImplementedError("read-only codec")

            def decode(self, data, config):
                decode_into(tomllib.loads(data.decode("utf-8")), config)

        register_codec("toml", TomlReader())
        ```

"""

from __future__ import annotations

import threading
from typing import Any, Protocol

from structconf.exceptions import CodecError, CodecNotRegisteredError

# -------------------------------
# Codec Protocol
# -------------------------------


class Codec(Protocol):
    """Protocol for configuration codecs."""

    def encode(self, config: Any) -> bytes:
        """Encode a dataclass instance to bytes.

        Raises:
            CodecError: If the container cannot be encoded.

        """
        ...

    def decode(self, data: bytes, config: Any) -> None:
        """Decode bytes into an existing dataclass instance.

        Values present in data overwrite the corresponding fields of config;
        fields absent from data keep their current values.

        Raises:
            CodecError: If data is malformed or does not fit config.

        """
        ...


# -------------------------------
# Codec Registry
# -------------------------------

_CODEC_REGISTRY: dict[str, Codec] = {}
_CODEC_LOCK = threading.Lock()


def register_codec(name: str, codec: Codec, *, replace: bool = False) -> None:
    """Register a codec by name in the global registry.

    Args:
        name: Codec name, also the file extension it handles (no dot).
        codec: Codec instance.
        replace: If True, overwrite an existing registration (useful in
            tests). Otherwise registering a taken name is an error.

    Raises:
        CodecError: If name is already registered and replace is False.

    """
    with _CODEC_LOCK:
        if name in _CODEC_REGISTRY and not replace:
            raise CodecError(f"codec {name!r} already registered")
        _CODEC_REGISTRY[name] = codec


def unregister_codec(name: str) -> None:
    """Remove a codec registration. Unknown names are ignored."""
    with _CODEC_LOCK:
        _CODEC_REGISTRY.pop(name, None)


def get_codec(name: str) -> Codec:
    """Get a registered codec by name.

    Raises:
        CodecNotRegisteredError: If the name is not registered. The error
            lists the available codecs for troubleshooting.

    """
    with _CODEC_LOCK:
        codec = _CODEC_REGISTRY.get(name)
        available = sorted(_CODEC_REGISTRY)
    if codec is None:
        raise CodecNotRegisteredError(name, available)
    return codec


def codec_names() -> list[str]:
    """Return the registered codec names, sorted."""
    with _CODEC_LOCK:
        return sorted(_CODEC_REGISTRY)
