"""
Tests for structconf.defaults module.

Tests default assignment including:
- Empty detection via zero values and nil literals
- reset_all behavior
- Nested records, sequences, mappings, optionals and Interface values
- Text-capable fields
- Collected warnings and invalid parameters
"""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import pytest

from structconf.defaults import apply_defaults
from structconf.exceptions import (
    FieldWarnings,
    InvalidDefaultError,
    InvalidParameterError,
    NoDefaultError,
    NoTagError,
)
from structconf.tags import tagged
from structconf.types import Interface


@dataclass
class Person:
    name: str = tagged("default=foo")
    age: int = tagged("nil=-1;default=42")


@dataclass
class Flags:
    enabled: bool = tagged("default=true")
    ratio: float = tagged("default=0.5")
    retries: int = tagged("default=3")


@dataclass
class Optionals:
    nickname: Optional[str] = tagged("default=anon")
    limit: Optional[int] = tagged("default=10")


class Mode(str, Enum):
    DEV = "dev"
    PROD = "prod"


@dataclass
class WithEnum:
    mode: Optional[Mode] = tagged("default=prod")


@dataclass
class Paths:
    root: Path = tagged("default=/srv/app")
    since: datetime.date = tagged("default=2024-01-01")


@dataclass
class Team:
    lead: Person = field(default_factory=Person)
    members: list[Person] = field(default_factory=list)
    by_role: dict[str, Person] = field(default_factory=dict)
    backup: Optional[Person] = None


@dataclass
class Broken:
    untagged: str = ""
    no_default: int = tagged("range=0:10", default=0)
    bad_default: int = tagged("default=abc", default=0)
    bad_nil: int = tagged("nil=xyz;default=5", default=0)
    good: str = tagged("default=ok", default="")


@dataclass
class Hidden:
    _internal: str = tagged("default=set", default="")
    visible: str = tagged("default=set", default="")


@dataclass(frozen=True)
class FrozenPerson:
    name: str = tagged("default=foo", default="")


@dataclass
class Holder:
    frozen: FrozenPerson = field(default_factory=FrozenPerson)
    plugin: Interface = field(default_factory=Interface)


class TestApplyDefaults:
    """Tests for basic default assignment."""

    def test_zero_and_nil_values_are_defaulted(self):
        """Test defaults for a zero string and an int equal to its nil literal."""
        p = Person(name="", age=-1)

        warnings = apply_defaults(p)

        assert warnings is None
        assert (p.name, p.age) == ("foo", 42)

    def test_nil_replaces_zero_as_empty_marker(self):
        """Test that with nil defined, the zero value is a real value."""
        p = Person(name="bob", age=0)

        apply_defaults(p)

        assert p.age == 0

    def test_set_values_are_kept(self):
        """Test that non-empty fields are left unchanged."""
        p = Person(name="bob", age=30)

        apply_defaults(p)

        assert (p.name, p.age) == ("bob", 30)

    def test_none_is_empty(self):
        """Test that None counts as empty for every field."""
        p = Person()

        apply_defaults(p)

        assert (p.name, p.age) == ("foo", 42)

    def test_reset_all_overwrites_set_values(self):
        """Test that reset_all assigns defaults regardless of value."""
        p = Person(name="bob", age=30)

        apply_defaults(p, reset_all=True)

        assert (p.name, p.age) == ("foo", 42)

    def test_bool_and_float_defaults(self):
        """Test defaults for bool and float fields."""
        f = Flags(enabled=False, ratio=0.0, retries=0)

        apply_defaults(f)

        assert f.enabled is True
        assert f.ratio == 0.5
        assert f.retries == 3

    def test_enum_default(self):
        """Test that enum fields are defaulted from the member value."""
        obj = WithEnum()

        apply_defaults(obj)

        assert obj.mode is Mode.PROD


class TestOptionalFields:
    """Tests for optional leaf fields."""

    def test_none_is_defaulted(self):
        """Test that absent optionals receive their default."""
        obj = Optionals()

        apply_defaults(obj)

        assert obj.nickname == "anon"
        assert obj.limit == 10

    def test_present_zero_is_a_value(self):
        """Test that an optional holding its zero value is not empty."""
        obj = Optionals(nickname="", limit=0)

        apply_defaults(obj)

        assert obj.nickname == ""
        assert obj.limit == 0


class TestTextFields:
    """Tests for text-capable fields."""

    def test_text_fields_are_parsed(self):
        """Test that Path and date fields are built from their literals."""
        obj = Paths()

        assert apply_defaults(obj) is None
        assert obj.root == Path("/srv/app")
        assert obj.since == datetime.date(2024, 1, 1)

    def test_text_fields_are_always_reset(self):
        """Test that text fields are reset even when already set."""
        obj = Paths(root=Path("/other"), since=datetime.date(2000, 1, 1))

        apply_defaults(obj)

        assert obj.root == Path("/srv/app")
        assert obj.since == datetime.date(2024, 1, 1)


class TestNesting:
    """Tests for traversal into nested containers."""

    def test_nested_record(self):
        """Test that nested records are defaulted."""
        team = Team(lead=Person(name="", age=-1))

        apply_defaults(team)

        assert (team.lead.name, team.lead.age) == ("foo", 42)

    def test_sequence_elements(self):
        """Test that records inside lists are defaulted."""
        team = Team(members=[Person(name="", age=5), Person(name="amy", age=-1)])

        apply_defaults(team)

        assert [(m.name, m.age) for m in team.members] == [("foo", 5), ("amy", 42)]

    def test_mapping_values(self):
        """Test that records inside dict values are defaulted."""
        team = Team(by_role={"ops": Person(name="", age=-1)})

        apply_defaults(team)

        assert team.by_role["ops"].name == "foo"

    def test_absent_optional_record_is_skipped(self):
        """Test that a None optional record is left as None."""
        team = Team()

        assert apply_defaults(team) is None
        assert team.backup is None

    def test_present_optional_record_is_walked(self):
        """Test that a present optional record is defaulted."""
        team = Team(backup=Person(name="", age=-1))

        apply_defaults(team)

        assert team.backup.name == "foo"

    def test_interface_value_is_walked(self):
        """Test that the value held by an Interface is defaulted."""
        holder = Holder(plugin=Interface(value=Person(name="", age=-1)))

        apply_defaults(holder)

        assert holder.plugin.value.age == 42

    def test_private_and_frozen_fields_are_skipped(self):
        """Test that unsettable fields are not assigned and not reported."""
        hidden = Hidden()
        holder = Holder()

        assert apply_defaults(hidden) is None
        assert hidden._internal == ""
        assert hidden.visible == "set"
        assert apply_defaults(holder) is None
        assert holder.frozen.name == ""


class TestWarnings:
    """Tests for collected per-field warnings."""

    def test_warnings_in_traversal_order(self):
        """Test that each broken field is reported once, in order."""
        obj = Broken()

        warnings = apply_defaults(obj)

        assert isinstance(warnings, FieldWarnings)
        assert warnings.field_names() == ["untagged", "no_default", "bad_default", "bad_nil"]
        kinds = [type(err) for err in warnings]
        assert kinds == [NoTagError, NoDefaultError, InvalidDefaultError, InvalidDefaultError]

    def test_warnings_do_not_stop_the_walk(self):
        """Test that healthy fields after broken ones are still defaulted."""
        obj = Broken()

        apply_defaults(obj)

        assert obj.good == "ok"

    def test_broken_fields_are_unchanged(self):
        """Test that fields with problems keep their values."""
        obj = Broken(bad_default=7, bad_nil=0)

        apply_defaults(obj)

        assert obj.bad_default == 7
        assert obj.bad_nil == 0

    def test_bad_nil_is_reported_with_reset_all(self):
        """Test that a malformed nil literal is reported when resetting every field."""
        obj = Broken(bad_nil=3)

        warnings = apply_defaults(obj, reset_all=True)

        bad_nil = [err for err in warnings if err.field_name == "bad_nil"]
        assert [type(err) for err in bad_nil] == [InvalidDefaultError]
        assert bad_nil[0].literal == "xyz"
        assert obj.bad_nil == 3

    def test_bad_nil_is_reported_for_none(self):
        """Test that a malformed nil literal is reported even when the field is None."""
        obj = Broken(bad_nil=None)

        warnings = apply_defaults(obj)

        assert "bad_nil" in warnings.field_names()
        assert obj.bad_nil is None

    def test_invalid_default_records_literal(self):
        """Test that the offending literal is kept on the error."""
        warnings = apply_defaults(Broken())

        err = warnings.of_kind(InvalidDefaultError)[0]
        assert err.literal == "abc"
        assert "bad_default" in str(err)

    def test_warnings_can_be_raised(self):
        """Test that the aggregate is an exception."""
        warnings = apply_defaults(Broken())

        with pytest.raises(FieldWarnings):
            raise warnings


class TestInvalidParameters:
    """Tests for rejected roots."""

    @pytest.mark.parametrize("value", [None, 1, "x", {"a": 1}, Person])
    def test_non_dataclass_instance_raises(self, value):
        """Test that only dataclass instances are accepted."""
        with pytest.raises(InvalidParameterError):
            apply_defaults(value)

    def test_logger_receives_messages(self, debug_logger, log_stream):
        """Test that assignments are reported to an injected logger."""
        apply_defaults(Person(), logger=debug_logger)

        assert "[DEFAULTS] name = 'foo'" in log_stream.getvalue()
