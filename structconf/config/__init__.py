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

"""Configuration files and directories for structconf.

This package reads and writes dataclass containers as files, selecting the
codec from the file extension, and locates configuration files in the
system, user and program locations of the current operating system.

Public API:

- read_config_file: Decode a file into a container (Interface aware)
- write_config_file: Encode a container into a file (Interface aware)
- file_extension: Extension of a file name without the dot
- ConfigDir: A prefixed directory in the system/user/program locations
- get_system_config_path, get_user_config_path, get_program_config_path:
  Base configuration locations for the running OS

Example:
    Basic usage:

        from structconf.config import ConfigDir

        cdir = ConfigDir("myapp")
        cdir.load_config("settings.json", settings)

"""

from .dirs import ConfigDir
from .loader import file_extension, read_config_file, write_config_file
from .paths import get_program_config_path, get_system_config_path, get_user_config_path

__all__ = [
    "ConfigDir",
    "file_extension",
    "read_config_file",
    "write_config_file",
    "get_program_config_path",
    "get_system_config_path",
    "get_user_config_path",
]
