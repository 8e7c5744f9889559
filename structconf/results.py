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

"""Public API return types for structconf.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Reading a file and checking how many decode passes it took:
        ```python
        from structconf.config import read_config_file

        result = read_config_file(Path("plugin.json"), cfg)
        print(result.passes)  # 1 without Interface values, 2 with
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DecodePlan:
    """Outcome of preparing a container's Interface wrappers for decoding.

    Attributes:
        needs_second_pass: True if at least one wrapper received a freshly
            allocated value, so the source must be decoded again to fill it.
        wrappers: Number of wrappers that received a fresh value.
    """

    needs_second_pass: bool
    wrappers: int = 0

    def __bool__(self) -> bool:
        return self.needs_second_pass


@dataclass(frozen=True)
class ReadResult:
    """Result from reading a configuration file into a container.

    Attributes:
        path: File that was read.
        codec: Name of the codec used (the file extension).
        passes: Number of decode passes performed over the file's bytes.
    """

    path: Path
    codec: str
    passes: int


@dataclass(frozen=True)
class WriteResult:
    """Result from writing a container to a configuration file.

    Attributes:
        path: File that was written.
        codec: Name of the codec used (the file extension).
        size: Number of bytes written.
    """

    path: Path
    codec: str
    size: int
