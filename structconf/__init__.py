"""
structconf - Struct-Tag Driven Configuration

A Python library for defining configuration as dataclasses whose fields
carry a small tag language, and for reading and writing those containers
as configuration files.

structconf provides:
  - Tag-driven defaults for empty fields (``default=`` and ``nil=`` keys)
  - Range and choice enforcement with optional clamping (``range=`` key)
  - A named type registry for polymorphic ``Interface`` values
  - JSON and YAML codecs selected by file extension
  - System, user and program configuration directories per OS

Quick Start
-----------
    from dataclasses import dataclass
    from structconf import apply_defaults, apply_limits, tagged

    @dataclass
    class Server:
        host: str = tagged("default=localhost")
        port: int = tagged("default=8080;range=1:65535")

    server = Server(host="", port=0)
    apply_defaults(server)   # host="localhost", port=8080
    server.port = 70000
    apply_limits(server, clamp=True)   # port=65535

Package Structure
-----------------
tags : module
    Tag grammar and the ``tagged()`` field helper.
scalars : module
    Literal parsing and ordering for tagged leaf values.
schema : module
    Cached field/type descriptions of dataclass containers.
defaults : module
    The default engine.
limits : module
    The limit engine.
registry : module
    Named type registry for Interface values.
interface : module
    Interface wrapper and encode/decode preparation.
codec : package
    Codec registry, JSON and YAML codecs.
config : package
    Config file reading/writing and configuration directories.

Both engines return a FieldWarnings aggregate (or None) instead of raising
for per-field problems, so a single bad tag never stops the walk.
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Struct-tag driven configuration defaults, limits and files"

# Re-export commonly used functions for convenience
from structconf.config import ConfigDir, read_config_file, write_config_file
from structconf.defaults import apply_defaults
from structconf.exceptions import FieldWarnings, StructConfError
from structconf.interface import Interface, prepare_for_decode, prepare_for_encode
from structconf.limits import apply_limits
from structconf.registry import (
    TypeRegistry,
    list_registered_type_names,
    lookup_type,
    register_named_type,
    register_type,
)
from structconf.tags import tagged

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "apply_defaults",
    "apply_limits",
    "tagged",
    "Interface",
    "prepare_for_encode",
    "prepare_for_decode",
    "TypeRegistry",
    "register_type",
    "register_named_type",
    "lookup_type",
    "list_registered_type_names",
    "read_config_file",
    "write_config_file",
    "ConfigDir",
    "FieldWarnings",
    "StructConfError",
]
