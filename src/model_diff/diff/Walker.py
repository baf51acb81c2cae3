"""Structural view of arbitrary Python values.

Every value reached during traversal is one of three shapes:

- scalar: compared as a whole, never expanded (numbers, text, None, enums, ...)
- collection: any iterable other than text or bytes, expanded by position. A
  bytearray is mutable, so it is a collection of ints. Mappings are
  expanded as a sequence of `Entry(key, value)` pairs in `items()` order.
- composite: everything else, expanded by its public members.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from types import BuiltinFunctionType, FunctionType, MethodType, ModuleType
from typing import Any
from uuid import UUID

from model_diff.diff.Change import MISSING
from model_diff.diff.ComparatorRegistry import ComparatorRegistry
from model_diff.diff.errors import TraversalError

SCALAR_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    Decimal,
    Fraction,
    Enum,
    date,
    time,
    timedelta,
    UUID,
    PurePath,
    type,
    FunctionType,
    BuiltinFunctionType,
    MethodType,
    ModuleType,
)


@dataclass(frozen=True)
class Entry:
    """One key/value pair of a mapping."""

    key: Any
    value: Any


class Walker:
    """Answers shape questions about values for one traversal.

    Member lists pinned on the registry take precedence over discovery.
    """

    _registry: ComparatorRegistry
    _scalar_types: tuple[type, ...]
    _class_members: dict[type, tuple[tuple[str, ...], tuple[str, ...]]]

    def __init__(self, registry: ComparatorRegistry) -> None:
        self._registry = registry
        self._scalar_types = SCALAR_TYPES + registry.config.scalar_types
        self._class_members = {}

    def is_scalar(self, value: Any) -> bool:
        return value is MISSING or isinstance(value, self._scalar_types)

    def as_collection(self, value: Any, path: str) -> tuple[Any, ...] | None:
        """Materialize the elements of a collection, or return None for other shapes."""
        if self.is_scalar(value) or not isinstance(value, Iterable):
            return None
        try:
            if isinstance(value, Mapping):
                return tuple(Entry(key, item) for key, item in value.items())
            return tuple(value)
        except Exception as e:
            raise TraversalError(path, f"iteration failed with {type(e).__name__}: {e}") from e

    def member_names(self, value: Any) -> tuple[str, ...]:
        """Public member names of a composite, in a deterministic order."""
        cls = type(value)
        pinned = self._registry.members_for(cls)
        if pinned is not None:
            return pinned

        slots, properties = self._members_of_class(cls)
        names: list[str] = []
        if dataclasses.is_dataclass(value):
            names.extend(f.name for f in dataclasses.fields(value))
        else:
            names.extend(slot for slot in slots if hasattr(value, slot))
            instance_dict = getattr(value, "__dict__", None)
            if isinstance(instance_dict, dict):
                names.extend(name for name in instance_dict if isinstance(name, str))
        if self._registry.config.include_properties:
            names.extend(properties)

        return tuple(
            dict.fromkeys(name for name in names if not name.startswith("_"))
        )

    def read_member(self, value: Any, name: str, path: str) -> Any:
        try:
            return getattr(value, name)
        except Exception as e:
            raise TraversalError(path, f"{type(e).__name__}: {e}") from e

    def _members_of_class(self, cls: type) -> tuple[tuple[str, ...], tuple[str, ...]]:
        cached = self._class_members.get(cls)
        if cached is not None:
            return cached

        slots: list[str] = []
        properties: list[str] = []
        for klass in reversed(cls.__mro__):
            declared = vars(klass).get("__slots__", ())
            if isinstance(declared, str):
                declared = (declared,)
            slots.extend(s for s in declared if s not in ("__dict__", "__weakref__"))
            properties.extend(
                name for name, attr in vars(klass).items() if isinstance(attr, property)
            )

        members = (tuple(slots), tuple(properties))
        self._class_members[cls] = members
        return members
