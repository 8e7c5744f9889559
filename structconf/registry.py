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

"""Dynamic-type registry for Interface values.

Interface wrappers record the name of their value's type so the value can be
rebuilt after decoding a format that carries no type information. This
module maps those names back to types and to factories producing fresh,
empty instances of them.

Design:
    - TypeRegistry is an explicit object; functions that need one accept a
      ``registry`` keyword and fall back to the process-wide
      ``default_registry``
    - Names are derived from the type: builtins by bare name (``int``),
      everything else as ``module.qualname``
    - Registering the same type under the same name again is a no-op, so
      configurations can be saved and loaded repeatedly
    - Registering a different type under a taken name is an error
    - A single lock guards the name map; factories run outside of it

Example:
    Register types up front so files can be read in a fresh process:
        ```python
        from structconf.registry import register_type

        register_type(HttpOptions)
        register_type(FileOptions)
        ```

    Use a private registry:
        ```python
        from structconf.registry import TypeRegistry

        registry = TypeRegistry()
        registry.register_named("http", HttpOptions)
        read_config_file("plugin.yaml", cfg, registry=registry)
        ```

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import threading
from typing import Any

from structconf.exceptions import DuplicateTypeError, RegistryError, TypeNotRegisteredError
from structconf.logging import Logger, resolve_logger
from structconf.schema import zero_instance

__all__ = [
    "TypeRegistry",
    "default_registry",
    "type_name_of",
    "register_type",
    "register_named_type",
    "lookup_type",
    "list_registered_type_names",
    "resolve_registry",
]


def type_name_of(value_or_type: Any) -> str:
    """Derive the canonical registry name for a value or a type.

    Example:
        ```python
        >>> type_name_of(42)
        'int'
        >>> type_name_of(Path)
        'pathlib.Path'
        ```

    """
    tp = _as_type(value_or_type)
    if tp.__module__ == "builtins":
        return tp.__qualname__
    return f"{tp.__module__}.{tp.__qualname__}"


def _as_type(value_or_type: Any) -> type:
    if isinstance(value_or_type, type):
        return value_or_type
    return type(value_or_type)


@dataclass(frozen=True)
class _Entry:
    type: type
    factory: Callable[[], Any]


class TypeRegistry:
    """Thread-safe mapping of type names to types and instance factories.

    Attributes:
        logger: Logger used for registration messages, or None to use the
            global logger.

    """

    def __init__(self, logger: Logger | None = None) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}
        self.logger = logger

    def register(
        self, value_or_type: Any, factory: Callable[[], Any] | None = None
    ) -> str:
        """Register the type of a value (or a type) under its derived name.

        Args:
            value_or_type: An instance or a class.
            factory: Callable returning a fresh empty instance. Defaults to
                building the type's zero value.

        Returns:
            The name the type is registered under.

        Raises:
            DuplicateTypeError: If the name is taken by a different type.

        """
        tp = _as_type(value_or_type)
        return self.register_named(type_name_of(tp), tp, factory)

    def register_named(
        self,
        name: str,
        value_or_type: Any,
        factory: Callable[[], Any] | None = None,
    ) -> str:
        """Register the type of a value (or a type) under an explicit name.

        Returns:
            name.

        Raises:
            RegistryError: If name is empty.
            DuplicateTypeError: If the name is taken by a different type.

        """
        if not name:
            raise RegistryError("type name must not be empty")
        tp = _as_type(value_or_type)
        entry = _Entry(tp, factory or (lambda: zero_instance(tp)))
        with self._lock:
            existing = self._entries.get(name)
            if existing is None:
                self._entries[name] = entry
            elif existing.type is not tp:
                raise DuplicateTypeError(name, existing.type, tp)
        if existing is None:
            resolve_logger(self.logger).debug("REGISTRY", f"Registered {name}")
        return name

    def lookup(self, name: str) -> type:
        """Return the type registered under name.

        Raises:
            TypeNotRegisteredError: If name is not registered.

        """
        return self._entry(name).type

    def create(self, name: str) -> Any:
        """Return a fresh empty instance of the type registered under name.

        Raises:
            TypeNotRegisteredError: If name is not registered.

        """
        return self._entry(name).factory()

    def names(self) -> list[str]:
        """Return the registered names, sorted."""
        with self._lock:
            return sorted(self._entries)

    def _entry(self, name: str) -> _Entry:
        with self._lock:
            entry = self._entries.get(name)
            if entry is None:
                available = sorted(self._entries)
        if entry is None:
            raise TypeNotRegisteredError(name, available)
        return entry

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Process-wide registry used when no registry is passed explicitly
default_registry = TypeRegistry()


def resolve_registry(registry: TypeRegistry | None) -> TypeRegistry:
    """Return registry if given, otherwise the process-wide registry."""
    return registry if registry is not None else default_registry


def register_type(value_or_type: Any, *, registry: TypeRegistry | None = None) -> str:
    """Register a type with the (default) registry. See TypeRegistry.register."""
    return resolve_registry(registry).register(value_or_type)


def register_named_type(
    name: str, value_or_type: Any, *, registry: TypeRegistry | None = None
) -> str:
    """Register a type under name with the (default) registry."""
    return resolve_registry(registry).register_named(name, value_or_type)


def lookup_type(name: str, *, registry: TypeRegistry | None = None) -> type:
    """Look up a type by name in the (default) registry."""
    return resolve_registry(registry).lookup(name)


def list_registered_type_names(*, registry: TypeRegistry | None = None) -> list[str]:
    """Return the names registered with the (default) registry, sorted."""
    return resolve_registry(registry).names()
