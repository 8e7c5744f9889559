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
Configuration directory spread over system, user and program locations.

A ConfigDir takes a prefix naming a subdirectory inside each location. The
prefix may itself be a relative path. File names passed to the load and save
methods may contain subdirectories too; they are rooted at the location
being accessed, and their extension selects the codec.

Locations
---------
- system:  get_system_config_path() / prefix
- user:    get_user_config_path() / prefix (created on construction)
- program: get_program_config_path(), prefix ignored, Windows only

Lookup Order
------------
load_config(name, out) loads the first file found in program, user, system
order. With override=True every file found is loaded in system, user,
program order so later files override values loaded before them.

Example:
    ```python
    from structconf.config import ConfigDir

    cdir = ConfigDir("myapp")
    cdir.save_user_config("settings.yaml", settings)
    loaded = cdir.load_config("settings.yaml", settings, override=True)
    ```

"""

from __future__ import annotations

import os
from pathlib import Path
import shutil
from typing import Any

from structconf.config.loader import read_config_file, write_config_file
from structconf.config.paths import (
    get_program_config_path,
    get_system_config_path,
    get_user_config_path,
    is_windows,
)
from structconf.exceptions import NoConfigLoadedError, ProgramDirError
from structconf.logging import Logger, resolve_logger
from structconf.registry import TypeRegistry
from structconf.results import ReadResult, WriteResult


class ConfigDir:
    """A named configuration directory in the system, user and program locations.

    Args:
        prefix: Subdirectory name (or relative path) inside each location.
        system_root: Base system directory. Defaults to
            get_system_config_path().
        user_root: Base user directory. Defaults to get_user_config_path().
        program_root: Program directory. Defaults to
            get_program_config_path().
        registry: Type registry passed to the config file functions.
        logger: Logger for this directory. Defaults to the global logger.

    Raises:
        UnsupportedOSError: If a default root cannot be determined.
        OSError: If the user directory cannot be created.

    """

    def __init__(
        self,
        prefix: str | os.PathLike[str],
        *,
        system_root: str | os.PathLike[str] | None = None,
        user_root: str | os.PathLike[str] | None = None,
        program_root: str | os.PathLike[str] | None = None,
        registry: TypeRegistry | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.prefix = Path(prefix)
        system_base = Path(system_root) if system_root is not None else get_system_config_path()
        user_base = Path(user_root) if user_root is not None else get_user_config_path()
        self._system = system_base / self.prefix
        self._user = user_base / self.prefix
        self._program = Path(program_root) if program_root is not None else None
        self._registry = registry
        self._logger = logger

        self._user.mkdir(parents=True, exist_ok=True)
        resolve_logger(logger).debug("DIR", f"User configuration directory: {self._user}")

    @property
    def system(self) -> Path:
        """System location of this directory."""
        return self._system

    @property
    def user(self) -> Path:
        """User location of this directory."""
        return self._user

    def _program_dir(self) -> Path:
        if not is_windows():
            raise ProgramDirError()
        if self._program is not None:
            return self._program
        return get_program_config_path()

    def _read(self, path: Path, out: Any) -> ReadResult:
        return read_config_file(path, out, registry=self._registry, logger=self._logger)

    def _write(self, path: Path, config: Any) -> WriteResult:
        return write_config_file(path, config, registry=self._registry, logger=self._logger)

    def load_system_config(self, name: str, out: Any) -> ReadResult:
        """Load name from the system location into out."""
        return self._read(self._system / name, out)

    def load_user_config(self, name: str, out: Any) -> ReadResult:
        """Load name from the user location into out."""
        return self._read(self._user / name, out)

    def load_program_config(self, name: str, out: Any) -> ReadResult:
        """Load name from the program directory into out.

        Raises:
            ProgramDirError: If not running on Windows.

        """
        return self._read(self._program_dir() / name, out)

    def load_config(self, name: str, out: Any, override: bool = False) -> list[Path]:
        """Search for name in every location and load it into out.

        Args:
            name: File name including the extension, optionally with a
                relative path.
            out: Dataclass instance to decode into.
            override: Load every file found, least specific first, instead of
                only the first one found.

        Returns:
            The paths that were loaded, in load order.

        Raises:
            NoConfigLoadedError: If the file exists in none of the locations.
            CodecError, DecodeError, TypeNotRegisteredError: If a found file
                cannot be loaded. Missing files are skipped.

        """
        log = resolve_logger(self._logger)
        if override:
            loaders = [
                self.load_system_config,
                self.load_user_config,
                self.load_program_config,
            ]
        else:
            loaders = [
                self.load_program_config,
                self.load_user_config,
                self.load_system_config,
            ]

        loaded: list[Path] = []
        for load in loaders:
            try:
                result = load(name, out)
            except (FileNotFoundError, ProgramDirError) as err:
                log.debug("DIR", f"Skipping {name}: {err}")
                continue
            loaded.append(result.path)
            if not override:
                break

        if not loaded:
            raise NoConfigLoadedError(name)
        log.verbose("DIR", f"Loaded {name} from {len(loaded)} location(s)")
        return loaded

    def save_system_config(self, name: str, config: Any) -> WriteResult:
        """Save config as name in the system location.

        The process needs permission to write to system locations.
        """
        return self._write(self._system / name, config)

    def save_user_config(self, name: str, config: Any) -> WriteResult:
        """Save config as name in the user location."""
        return self._write(self._user / name, config)

    def save_program_config(self, name: str, config: Any) -> WriteResult:
        """Save config as name in the program directory, ignoring the prefix.

        Raises:
            ProgramDirError: If not running on Windows.

        """
        return self._write(self._program_dir() / name, config)

    def remove_user(self) -> None:
        """Remove the user location of this directory and everything in it."""
        if self._user.exists():
            shutil.rmtree(self._user)
        resolve_logger(self._logger).verbose("DIR", f"Removed {self._user}")
