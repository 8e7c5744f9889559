"""
Tests for structconf.interface module.

Tests the Interface wrapper protocol including:
- Recording type names before encoding
- Allocating typed values after a first decode pass
- The multi-pass decode through a codec, one nesting level per pass
- Nested wrappers and wrappers inside containers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import uuid

import pytest

from structconf.codec import get_codec
from structconf.exceptions import DecodeError, InvalidParameterError, TypeNotRegisteredError
from structconf.interface import Interface, prepare_for_decode, prepare_for_encode
from structconf.registry import type_name_of
from structconf.tags import tagged


class Mode(str, Enum):
    SAFE = "safe"
    FAST = "fast"


@dataclass
class HttpOptions:
    url: str = tagged("default=http://localhost")
    timeout: int = tagged("default=30")


@dataclass
class Chain:
    label: str = tagged("default=chain")
    next: Interface = field(default_factory=Interface)


@dataclass
class Plugin:
    name: str = tagged("default=plugin")
    options: Interface = field(default_factory=Interface)


@dataclass
class Host:
    plugins: list[Plugin] = field(default_factory=list)
    by_name: dict[str, Interface] = field(default_factory=dict)
    extra: Optional[Interface] = None


class TestPrepareForEncode:
    """Tests for prepare_for_encode()."""

    def test_records_type_name(self, registry):
        """Test that the wrapped value's type is registered and named."""
        cfg = Plugin(options=Interface(value=HttpOptions(url="x", timeout=1)))

        prepare_for_encode(cfg, registry=registry)

        assert cfg.options.type_name == type_name_of(HttpOptions)
        assert registry.lookup(cfg.options.type_name) is HttpOptions

    def test_is_idempotent(self, registry):
        """Test that preparing twice changes nothing."""
        cfg = Plugin(options=Interface(value=HttpOptions()))

        prepare_for_encode(cfg, registry=registry)
        prepare_for_encode(cfg, registry=registry)

        assert cfg.options.type_name == type_name_of(HttpOptions)
        assert len(registry) == 1

    def test_existing_name_is_kept(self, registry):
        """Test that a wrapper with a name is left untouched."""
        cfg = Plugin(options=Interface(type_name="custom", value=HttpOptions()))

        prepare_for_encode(cfg, registry=registry)

        assert cfg.options.type_name == "custom"
        assert len(registry) == 0

    def test_empty_wrapper_is_skipped(self, registry):
        """Test that wrappers without a value get no name."""
        cfg = Plugin()

        prepare_for_encode(cfg, registry=registry)

        assert cfg.options.type_name == ""

    def test_wrappers_inside_containers(self, registry):
        """Test wrappers in list elements, dict values and optionals."""
        cfg = Host(
            plugins=[Plugin(options=Interface(value=HttpOptions()))],
            by_name={"n": Interface(value=5)},
            extra=Interface(value="text"),
        )

        prepare_for_encode(cfg, registry=registry)

        assert cfg.plugins[0].options.type_name == type_name_of(HttpOptions)
        assert cfg.by_name["n"].type_name == "int"
        assert cfg.extra.type_name == "str"

    def test_nested_wrappers(self, registry):
        """Test that wrappers inside wrapped values are named."""
        cfg = Chain(next=Interface(value=Chain(next=Interface(value=HttpOptions()))))

        prepare_for_encode(cfg, registry=registry)

        assert cfg.next.type_name == type_name_of(Chain)
        assert cfg.next.value.next.type_name == type_name_of(HttpOptions)

    def test_non_dataclass_raises(self, registry):
        """Test that the root must be a dataclass instance."""
        with pytest.raises(InvalidParameterError):
            prepare_for_encode({"a": 1}, registry=registry)


class TestPrepareForDecode:
    """Tests for prepare_for_decode()."""

    def test_allocates_registered_type(self, registry):
        """Test that a named wrapper receives a fresh typed value."""
        name = registry.register(HttpOptions)
        cfg = Plugin(options=Interface(type_name=name, value={"url": "x"}))

        plan = prepare_for_decode(cfg, registry=registry)

        assert plan.needs_second_pass
        assert plan.wrappers == 1
        assert cfg.options.value == HttpOptions()

    def test_nothing_to_allocate(self, registry):
        """Test that containers without named wrappers need one pass."""
        plan = prepare_for_decode(Plugin(), registry=registry)

        assert not plan.needs_second_pass
        assert not plan

    def test_typed_value_is_replaced(self, registry):
        """Test that a value already of the registered type is reallocated."""
        name = registry.register(HttpOptions)
        value = HttpOptions(url="stale", timeout=5)
        cfg = Plugin(options=Interface(type_name=name, value=value))

        plan = prepare_for_decode(cfg, registry=registry)

        assert plan.wrappers == 1
        assert cfg.options.value is not value
        assert cfg.options.value == HttpOptions()

    def test_scalar_like_types_are_converted(self, registry):
        """Test that scalar, enum and text types are built from the raw value."""
        uuid_name = registry.register(uuid.UUID)
        mode_name = registry.register(Mode)
        registry.register(int)
        cfg = Host(
            by_name={
                "id": Interface(type_name=uuid_name, value="12345678-1234-5678-1234-567812345678"),
                "mode": Interface(type_name=mode_name, value="fast"),
                "count": Interface(type_name="int", value="7"),
            }
        )

        plan = prepare_for_decode(cfg, registry=registry)

        assert plan.wrappers == 3
        assert cfg.by_name["id"].value == uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert cfg.by_name["mode"].value is Mode.FAST
        assert cfg.by_name["count"].value == 7

    def test_unconvertible_scalar_raises(self, registry):
        """Test that a raw value unfit for its scalar type raises DecodeError."""
        name = registry.register(uuid.UUID)
        cfg = Plugin(options=Interface(type_name=name, value="not-a-uuid"))

        with pytest.raises(DecodeError):
            prepare_for_decode(cfg, registry=registry)

    def test_level_skips_outer_wrappers(self, registry):
        """Test that wrappers above the level are walked but not reallocated."""
        chain_name = registry.register(Chain)
        options_name = registry.register(HttpOptions)
        inner = Chain(label="inner", next=Interface(type_name=options_name, value={"timeout": 1}))
        cfg = Chain(next=Interface(type_name=chain_name, value=inner))

        plan = prepare_for_decode(cfg, level=1, registry=registry)

        assert plan.wrappers == 1
        assert cfg.next.value is inner
        assert inner.next.value == HttpOptions()

    def test_level_ignores_deeper_wrappers(self, registry):
        """Test that wrappers below the level are left for a later pass."""
        chain_name = registry.register(Chain)
        options_name = registry.register(HttpOptions)
        deep = Interface(type_name=options_name, value={"timeout": 1})
        cfg = Chain(next=Interface(type_name=chain_name, value=Chain(next=deep)))

        prepare_for_decode(cfg, registry=registry)

        assert deep.value == {"timeout": 1}
        assert cfg.next.value == Chain()

    def test_unregistered_name_raises(self, registry):
        """Test that unknown type names stop the walk."""
        cfg = Plugin(options=Interface(type_name="nope", value={}))

        with pytest.raises(TypeNotRegisteredError):
            prepare_for_decode(cfg, registry=registry)


class TestTwoPassDecode:
    """Tests for the encode / decode / prepare / decode pipeline."""

    @pytest.mark.parametrize("codec_name", ["json", "yaml", "xml"])
    def test_wrapped_record_round_trip(self, registry, codec_name):
        """Test that a wrapped record is rebuilt with its type and fields."""
        codec = get_codec(codec_name)
        original = Plugin(name="p", options=Interface(value=HttpOptions(url="http://h", timeout=9)))
        prepare_for_encode(original, registry=registry)
        data = codec.encode(original)

        fresh = Plugin()
        codec.decode(data, fresh)
        assert fresh.options.type_name == type_name_of(HttpOptions)
        assert isinstance(fresh.options.value, dict)

        plan = prepare_for_decode(fresh, registry=registry)
        assert plan.needs_second_pass
        codec.decode(data, fresh)

        assert isinstance(fresh.options.value, HttpOptions)
        assert fresh.options.value == HttpOptions(url="http://h", timeout=9)
        assert fresh.name == "p"

    def test_scalar_values_settle_after_one_level(self, registry):
        """Test that wrapped scalars are converted and need no further level."""
        codec = get_codec("json")
        original = Host(
            by_name={"a": Interface(value=3), "b": Interface(value="s"), "m": Interface(value=Mode.SAFE)}
        )
        prepare_for_encode(original, registry=registry)
        data = codec.encode(original)

        fresh = Host()
        codec.decode(data, fresh)
        assert prepare_for_decode(fresh, registry=registry).wrappers == 3
        codec.decode(data, fresh)

        assert not prepare_for_decode(fresh, level=1, registry=registry).needs_second_pass
        assert fresh.by_name["a"].value == 3
        assert fresh.by_name["b"].value == "s"
        assert fresh.by_name["m"].value is Mode.SAFE

    def test_nested_wrappers_need_one_pass_per_level(self, registry):
        """Test that each level of nesting is filled by another pass."""
        codec = get_codec("json")
        original = Chain(
            label="outer",
            next=Interface(value=Chain(label="inner", next=Interface(value=HttpOptions(timeout=4)))),
        )
        prepare_for_encode(original, registry=registry)
        data = codec.encode(original)

        fresh = Chain()
        codec.decode(data, fresh)
        passes = 1
        while prepare_for_decode(fresh, level=passes - 1, registry=registry).needs_second_pass:
            codec.decode(data, fresh)
            passes += 1

        assert passes == 3
        assert fresh.next.value.label == "inner"
        assert fresh.next.value.next.value == HttpOptions(timeout=4)
