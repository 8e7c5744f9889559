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

"""Base configuration directories per operating system.

    OS                  system               user
    ------------------  -------------------  ---------------------
    darwin              /private/etc         $HOME/.config
    linux, BSDs, etc.   /etc                 $HOME/.config
    windows             %ALLUSERSPROFILE%    %USERPROFILE%

The program directory is the directory of the running program.
"""

from __future__ import annotations

import os
from pathlib import Path
import sys

from structconf.exceptions import UnsupportedOSError

_UNIX_PLATFORMS = (
    "linux",
    "freebsd",
    "openbsd",
    "netbsd",
    "dragonfly",
    "aix",
    "sunos",
    "illumos",
    "cygwin",
)


def _platform() -> str:
    return sys.platform


def _is_unix(platform: str) -> bool:
    return platform.startswith(_UNIX_PLATFORMS)


def _env_dir(name: str) -> Path:
    value = os.environ.get(name)
    if not value:
        raise UnsupportedOSError(f"{_platform()} (environment variable {name} not set)")
    return Path(value)


def get_system_config_path() -> Path:
    """Return the base system configuration directory.

    Raises:
        UnsupportedOSError: On an unsupported OS, or on Windows when
            ALLUSERSPROFILE is not set.

    """
    platform = _platform()
    if platform == "darwin":
        return Path("/private/etc")
    if _is_unix(platform):
        return Path("/etc")
    if platform == "win32":
        return _env_dir("ALLUSERSPROFILE")
    raise UnsupportedOSError(platform)


def get_user_config_path() -> Path:
    """Return the base user configuration directory.

    Raises:
        UnsupportedOSError: On an unsupported OS, or when the home
            directory variable is not set.

    """
    platform = _platform()
    if platform == "darwin" or _is_unix(platform):
        return _env_dir("HOME") / ".config"
    if platform == "win32":
        return _env_dir("USERPROFILE")
    raise UnsupportedOSError(platform)


def get_program_config_path() -> Path:
    """Return the directory of the running program."""
    return Path(sys.argv[0]).resolve().parent


def is_windows() -> bool:
    return _platform() == "win32"
