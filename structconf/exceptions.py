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

"""Exception hierarchy for structconf.

This module defines the exceptions raised and collected by the library so
callers can tell structural failures apart from per-field warnings:

- InvalidParameterError: The container passed in is not a dataclass instance
- FieldError: A problem with a single field's tag or value (collected, not raised)
- FieldWarnings: Aggregate of FieldError instances returned by the engines
- RegistryError: Dynamic-type registry failures (unknown or conflicting types)
- CodecError: Encoding/decoding failures and unknown codecs
- ConfigPathError: Configuration directory resolution and loading failures

All exceptions inherit from StructConfError, allowing users to catch all
library errors with a single except clause if needed.

Example:
    Inspecting warnings after applying defaults:
        ```python
        from structconf import apply_defaults
        from structconf.exceptions import NoDefaultError

        warnings = apply_defaults(config)
        if warnings is not None:
            for err in warnings:
                if isinstance(err, NoDefaultError):
                    print(f"{err.field_name} has no default")
        ```

    Treating any warning as fatal:
        ```python
        warnings = apply_limits(config, clamp=True)
        if warnings:
            raise warnings
        ```
"""

from __future__ import annotations

from collections.abc import Iterator

__all__ = [
    "StructConfError",
    "InvalidParameterError",
    "FieldError",
    "NoTagError",
    "NoDefaultError",
    "NoRangeError",
    "InvalidDefaultError",
    "InvalidRangeError",
    "InvalidRangeSyntaxError",
    "FieldWarnings",
    "RegistryError",
    "TypeNotRegisteredError",
    "DuplicateTypeError",
    "CodecError",
    "CodecNotRegisteredError",
    "DecodeError",
    "ConfigPathError",
    "UnsupportedOSError",
    "ProgramDirError",
    "NoConfigLoadedError",
]


class StructConfError(Exception):
    """Base exception for all structconf errors."""

    pass


class InvalidParameterError(StructConfError):
    """Raised when a function receives something that is not a dataclass instance."""

    pass


# -------------------------------
# Per-field errors
# -------------------------------


class FieldError(StructConfError):
    """Base class for errors tied to a single container field.

    Field errors are not raised by the engines. They are collected in
    traversal order and handed back inside a FieldWarnings aggregate.

    Attributes:
        field_name: Name of the offending field. Only the immediate field
            name is recorded, not the dotted path from the root container.

    """

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name


class NoTagError(FieldError):
    """Raised when a leaf field carries no config tag."""

    def __init__(self, field_name: str) -> None:
        super().__init__(field_name, f"no config tag defined on field {field_name!r}")


class NoDefaultError(FieldError):
    """Raised when a leaf field's tag has no default key."""

    def __init__(self, field_name: str) -> None:
        super().__init__(
            field_name, f"no default value defined for field {field_name!r}"
        )


class NoRangeError(FieldError):
    """Raised when a leaf field's tag has no range key."""

    def __init__(self, field_name: str) -> None:
        super().__init__(field_name, f"no range value defined for field {field_name!r}")


class InvalidDefaultError(FieldError):
    """Raised when a default or nil literal cannot be parsed into the field type."""

    def __init__(self, field_name: str, literal: str, reason: str = "") -> None:
        message = f"invalid default value {literal!r} defined for field {field_name!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(field_name, message)
        self.literal = literal


class InvalidRangeError(FieldError):
    """Raised when a range bound or choice cannot be parsed into the field type."""

    def __init__(self, field_name: str, literal: str, reason: str = "") -> None:
        message = f"invalid range value {literal!r} defined for field {field_name!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(field_name, message)
        self.literal = literal


class InvalidRangeSyntaxError(FieldError):
    """Raised when a range tag is neither a choice list nor a min:max pair."""

    def __init__(self, field_name: str, range_value: str) -> None:
        super().__init__(
            field_name, f"invalid range {range_value!r} for field {field_name!r}"
        )
        self.range_value = range_value


class FieldWarnings(StructConfError):
    """Aggregate of per-field errors collected during one traversal.

    The library treats warnings as a normal outcome. Callers decide whether
    any of them is fatal; the aggregate is an exception so it can simply be
    raised when it is.

    Attributes:
        errors: Field errors in the order they were encountered.

    Example:
        Iterate warnings:
            ```python
            warnings = apply_defaults(config)
            for err in warnings or []:
                print(err.field_name, err)
            ```

    """

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} field warning(s)")

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        lines = [f"{len(self.errors)} field warning(s):"]
        lines.extend(f"  - {err}" for err in self.errors)
        return "\n".join(lines)

    def field_names(self) -> list[str]:
        """Return the names of the offending fields, in order."""
        return [err.field_name for err in self.errors]

    def of_kind(self, kind: type[FieldError]) -> list[FieldError]:
        """Return only the errors that are instances of kind."""
        return [err for err in self.errors if isinstance(err, kind)]


# -------------------------------
# Registry errors
# -------------------------------


class RegistryError(StructConfError):
    """Base class for dynamic-type registry errors."""

    pass


class TypeNotRegisteredError(RegistryError):
    """Raised when a type name is looked up but was never registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        listing = ", ".join(available or []) or "(none)"
        super().__init__(f"type {name!r} not registered. Available: {listing}")
        self.name = name


class DuplicateTypeError(RegistryError):
    """Raised when a different type is registered under an existing name."""

    def __init__(self, name: str, existing: type, new: type) -> None:
        super().__init__(
            f"type name {name!r} already registered for {existing!r}, "
            f"cannot register {new!r}"
        )
        self.name = name


# -------------------------------
# Codec errors
# -------------------------------


class CodecError(StructConfError):
    """Raised for encoding/decoding errors and codec registration problems."""

    pass


class CodecNotRegisteredError(CodecError):
    """Raised when no codec is registered for a name or file extension."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        listing = ", ".join(available or []) or "(none)"
        super().__init__(f"codec {name!r} not registered. Available: {listing}")
        self.name = name


class DecodeError(CodecError):
    """Raised when decoded data cannot be applied to a container field."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"cannot decode field {field_name!r}: {message}")
        self.field_name = field_name


# -------------------------------
# Config location errors
# -------------------------------


class ConfigPathError(StructConfError):
    """Base class for configuration location errors."""

    pass


class UnsupportedOSError(ConfigPathError):
    """Raised when configuration directories are requested on an unknown OS."""

    def __init__(self, os_name: str) -> None:
        super().__init__(f"unsupported OS {os_name!r}")
        self.os_name = os_name


class ProgramDirError(ConfigPathError):
    """Raised when the program directory is used on a platform other than Windows."""

    def __init__(self) -> None:
        super().__init__(
            "program directory configuration not supported on this os"
        )


class NoConfigLoadedError(ConfigPathError):
    """Raised when a configuration file was found in none of the locations."""

    def __init__(self, name: str) -> None:
        super().__init__(f"no configuration files loaded for {name!r}")
        self.name = name
