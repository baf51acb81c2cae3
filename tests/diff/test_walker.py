"""Tests for Walker shape detection and member discovery."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from uuid import uuid4

import pytest

from model_diff.diff.Change import MISSING
from model_diff.diff.ComparatorRegistry import ComparatorRegistry
from model_diff.diff.DiffConfig import DiffConfig
from model_diff.diff.DiffSession import DiffSession
from model_diff.diff.Snapshot import Snapshot
from model_diff.diff.Walker import Entry, Walker
from model_diff.diff.errors import ConfigurationError, TraversalError


class Color(Enum):
    RED = "red"


class Point:
    __slots__ = ("x", "y", "_hidden")

    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y


class Partial:
    __slots__ = ("a", "b")

    def __init__(self) -> None:
        self.a = 1


class Person:
    def __init__(self, first: str, last: str) -> None:
        self.last = last
        self.first = first
        self._secret = 1

    @property
    def full_name(self) -> str:
        return f"{self.first} {self.last}"

    @property
    def _internal(self) -> int:
        return 0


@dataclass(eq=False)
class Row:
    id: int
    label: str
    _cache: dict[str, int] | None = None


class Money:
    def __init__(self, cents: int) -> None:
        self.cents = cents

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Money) and other.cents == self.cents


@dataclass(eq=False)
class Wallet:
    balance: Money


def walker(config: DiffConfig | None = None) -> Walker:
    return Walker(ComparatorRegistry(config))


class TestShapes:
    """Tests for scalar and collection detection."""

    @pytest.mark.parametrize(
        "value",
        [None, True, 3, 1.5, "s", b"b", Decimal("1.1"), Color.RED, datetime.now(), uuid4(), Path("/tmp"), int, MISSING],
    )
    def test_scalars(self, value: object) -> None:
        assert walker().is_scalar(value)
        assert walker().as_collection(value, "") is None

    def test_objects_are_not_scalars(self) -> None:
        assert not walker().is_scalar(Person("a", "b"))

    def test_mapping_becomes_entries(self) -> None:
        assert walker().as_collection({"k": 1}, "") == (Entry("k", 1),)

    def test_iterables_are_materialized(self) -> None:
        assert walker().as_collection([1, 2], "") == (1, 2)
        assert walker().as_collection((n for n in range(3)), "") == (0, 1, 2)
        assert walker().as_collection(frozenset({4}), "") == (4,)

    def test_failing_iteration_raises_traversal_error(self) -> None:
        def broken():
            yield 1
            raise OSError("gone")

        with pytest.raises(TraversalError) as exc_info:
            walker().as_collection(broken(), ".items")
        assert exc_info.value.path == ".items"

    def test_configured_scalar_types(self) -> None:
        """Extra scalar types are compared whole instead of expanded."""
        config = DiffConfig(scalar_types=(Money,))
        data = Wallet(balance=Money(5))
        session = DiffSession(config)
        snapshot = session.snapshot(data)

        data.balance = Money(5)

        assert snapshot.paths == ("", ".balance")
        assert snapshot.get_changes(data) == []


class TestMembers:
    """Tests for Walker.member_names()"""

    def test_dataclass_fields_in_declaration_order(self) -> None:
        assert walker().member_names(Row(id=1, label="x")) == ("id", "label")

    def test_slots_skip_private_and_unset(self) -> None:
        assert walker().member_names(Point(1, 2)) == ("x", "y")
        assert walker().member_names(Partial()) == ("a",)

    def test_instance_attributes_then_properties(self) -> None:
        """Attributes follow assignment order; public properties come after."""
        assert walker().member_names(Person("Ada", "Lovelace")) == (
            "last",
            "first",
            "full_name",
        )

    def test_properties_can_be_disabled(self) -> None:
        config = DiffConfig(include_properties=False)

        assert walker(config).member_names(Person("Ada", "Lovelace")) == ("last", "first")

    def test_registered_members_take_precedence(self) -> None:
        session = DiffSession().register_members(Person, ["first"])

        result = Snapshot.to_dictionary(Person("Ada", "Lovelace"), session.registry)

        assert list(result) == ["", ".first"]

    def test_registered_members_must_be_identifiers(self) -> None:
        with pytest.raises(ConfigurationError):
            DiffSession().register_members(Person, ["first name"])

    def test_property_change_detected(self) -> None:
        """Derived properties are diffed like fields."""
        data = Person("Ada", "Lovelace")
        snapshot = DiffSession().snapshot(data)

        data.last = "King"

        assert [change.path for change in snapshot.get_changes(data)] == [
            ".last",
            ".full_name",
        ]


class TestDiffConfig:
    """Tests for DiffConfig validation."""

    def test_defaults(self) -> None:
        config = DiffConfig()

        assert config.duplicate_policy == "reject"
        assert config.include_properties is True
        assert config.scalar_types == ()

    def test_invalid_policy(self) -> None:
        with pytest.raises(ConfigurationError):
            DiffConfig(duplicate_policy="ignore")  # type: ignore[arg-type]

    def test_invalid_scalar_type(self) -> None:
        with pytest.raises(ConfigurationError):
            DiffConfig(scalar_types=("Money",))  # type: ignore[arg-type]

    def test_config_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DiffConfig().include_properties = False  # type: ignore[misc]
