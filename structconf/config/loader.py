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

"""
Reading and writing configuration files.

This module connects containers, codecs and the Interface protocol. The
codec is selected from the file extension (``app.yaml`` -> ``yaml``) and must
be registered (structconf.codec registers ``json``, ``xml``, ``yaml`` and
``yml``).

Write Path
----------
1. prepare_for_encode(): register Interface value types, record names
2. Encode with the codec selected by extension
3. Write bytes (parent directories are created)

Read Path
---------
1. Read bytes
2. Decode into the container (overlay: absent keys keep current values)
3. prepare_for_decode(): allocate typed values into named Interfaces
4. If anything was allocated, decode the same bytes again; repeat for
   Interfaces nested inside Interface values

Types held by Interfaces must be registered before reading. Writing
registers them automatically; in a fresh process use register_type().

Functions
---------
write_config_file : Prepare, encode and write a container.
read_config_file : Read, decode and rebuild Interface values.
file_extension : Extension of a filename without the dot.

Error Handling
--------------
- FileNotFoundError: File to read does not exist
- CodecNotRegisteredError: No codec for the file extension
- CodecError / DecodeError: Malformed data or data not fitting the container
- TypeNotRegisteredError: An Interface names an unknown type
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from structconf.codec import get_codec
from structconf.exceptions import CodecError, InvalidParameterError
from structconf.interface import prepare_for_decode, prepare_for_encode
from structconf.logging import Logger, resolve_logger
from structconf.registry import TypeRegistry
from structconf.results import ReadResult, WriteResult
from structconf.schema import is_record

# Each pass resolves one level of Interface nesting
MAX_DECODE_PASSES = 16


def file_extension(path: str | os.PathLike[str]) -> str:
    """Return the extension of path without the dot, or "" if there is none.

    The extension is whatever follows the last dot of the file name, so a
    file named only ``.json`` selects the json codec.

    Example:
        ```python
        >>> file_extension("conf/app.yaml")
        'yaml'
        >>> file_extension("conf/.json")
        'json'
        >>> file_extension("Makefile")
        ''
        ```

    """
    name = Path(path).name
    _, dot, ext = name.rpartition(".")
    return ext if dot else ""


def _check_config(config: Any) -> None:
    if not is_record(config):
        raise InvalidParameterError(
            f"expected a dataclass instance, got {type(config).__name__}"
        )


def write_config_file(
    path: str | os.PathLike[str],
    config: Any,
    *,
    registry: TypeRegistry | None = None,
    logger: Logger | None = None,
) -> WriteResult:
    """Write config to path using the codec selected by its extension.

    Interface values at any depth have their types registered and names
    recorded before encoding.

    Args:
        path: Destination file. Parent directories are created.
        config: Dataclass instance to write. Interface type names are
            filled in place.
        registry: Type registry. Defaults to the process-wide registry.
        logger: Logger. Defaults to the global logger.

    Returns:
        A WriteResult with the path, codec name and byte count.

    Raises:
        InvalidParameterError: If config is not a dataclass instance.
        CodecNotRegisteredError: If no codec handles the extension.
        CodecError: If encoding fails.
        OSError: If the file cannot be written.

    """
    log = resolve_logger(logger)
    path = Path(path)
    _check_config(config)
    prepare_for_encode(config, registry=registry, logger=logger)
    name = file_extension(path)
    codec = get_codec(name)
    data = codec.encode(config)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    log.verbose("CONFIG", f"Wrote {path} ({name}, {len(data)} bytes)")
    return WriteResult(path=path, codec=name, size=len(data))


def read_config_file(
    path: str | os.PathLike[str],
    config: Any,
    *,
    registry: TypeRegistry | None = None,
    logger: Logger | None = None,
) -> ReadResult:
    """Read path into config using the codec selected by its extension.

    The file is decoded once; if Interface wrappers were found naming
    registered types, their values are replaced by fresh instances and the
    same bytes are decoded again so the values are filled with their proper
    types. Wrapped values therefore never keep fields from before the read.

    Args:
        path: File to read.
        config: Dataclass instance to decode into. Fields absent from the
            file keep their values. Modified even if an error is raised.
        registry: Type registry. Defaults to the process-wide registry.
        logger: Logger. Defaults to the global logger.

    Returns:
        A ReadResult with the path, codec name and number of decode passes.

    Raises:
        InvalidParameterError: If config is not a dataclass instance.
        FileNotFoundError: If path does not exist.
        CodecNotRegisteredError: If no codec handles the extension.
        CodecError: If decoding fails or Interfaces nest too deeply.
        DecodeError: If a value does not fit its field or wrapped type.
        TypeNotRegisteredError: If an Interface names an unregistered type.

    """
    log = resolve_logger(logger)
    path = Path(path)
    _check_config(config)
    name = file_extension(path)
    codec = get_codec(name)
    data = path.read_bytes()

    codec.decode(data, config)
    passes = 1
    plan = prepare_for_decode(config, level=0, registry=registry, logger=logger)
    while plan.needs_second_pass:
        if passes >= MAX_DECODE_PASSES:
            raise CodecError(
                f"{path}: Interface values nested more than {MAX_DECODE_PASSES} levels deep"
            )
        codec.decode(data, config)
        plan = prepare_for_decode(config, level=passes, registry=registry, logger=logger)
        passes += 1

    log.verbose("CONFIG", f"Read {path} ({name}, {passes} pass(es))")
    return ReadResult(path=path, codec=name, passes=passes)
