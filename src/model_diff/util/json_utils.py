from __future__ import annotations

import json as _json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from model_diff.diff.Change import MISSING
from model_diff.diff.ComparatorRegistry import ComparatorRegistry
from model_diff.diff.Walker import Walker


type JSONPyPrimitive = str | int | float | bool | None
"""Python primitives that convert to JSON without special treatment."""

type JSONPyDict = dict[str, JSONPyValue]

type JSONPyList = list[JSONPyValue]

type JSONPyValue = JSONPyPrimitive | JSONPyDict | JSONPyList

# Returned in place of a value that loops back to one of its ancestors
_LOOP = object()


def to_jsonable(value: Any, registry: ComparatorRegistry | None = None) -> JSONPyValue:
    """Convert an arbitrary object graph into JSON-compatible data.

    Objects become dicts of their public members, collections become lists and
    mappings become dicts with string keys. A reference back to an object that
    is still being converted is left out, so cyclic graphs serialize without
    error. MISSING converts to None.

    Args:
        value: Any value, including cyclic graphs
        registry: Supplies pinned member lists. Defaults to an empty registry.
    """
    walker = Walker(registry if registry is not None else ComparatorRegistry())
    result = _convert(value, walker, set())
    return None if result is _LOOP else result  # type: ignore[return-value]


def _convert(value: Any, walker: Walker, ancestors: set[int]) -> Any:
    if value is MISSING or value is None:
        return None
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Enum):
        return _convert(value.value, walker, ancestors)
    if walker.is_scalar(value):
        return str(value)
    if id(value) in ancestors:
        return _LOOP

    ancestors.add(id(value))
    try:
        if isinstance(value, Mapping):
            converted = {
                str(key): _convert(item, walker, ancestors) for key, item in value.items()
            }
            return {key: item for key, item in converted.items() if item is not _LOOP}

        items = walker.as_collection(value, "")
        if items is not None:
            converted_items = [_convert(item, walker, ancestors) for item in items]
            return [item for item in converted_items if item is not _LOOP]

        members: dict[str, Any] = {}
        for name in walker.member_names(value):
            converted_member = _convert(
                walker.read_member(value, name, f".{name}"), walker, ancestors
            )
            if converted_member is not _LOOP:
                members[name] = converted_member
        return members
    finally:
        ancestors.discard(id(value))


class json:
    """Typed wrapper around the standard json module."""

    JSONPyPrimitive = JSONPyPrimitive
    JSONPyValue = JSONPyValue
    JSONDecodeError = _json.JSONDecodeError

    @staticmethod
    def to_string(value: Any, indent: int | None = None) -> str:
        """Serialize any value, converting object graphs with `to_jsonable` first.

        Args:
            value: Any Python value, including cyclic object graphs
            indent: Passed through to `json.dumps`

        Returns:
            The JSON string representation
        """
        return _json.dumps(to_jsonable(value), indent=indent)

    @staticmethod
    def parse(json_str: str) -> JSONPyValue:
        """Parse a JSON string into a Python value.

        Args:
            json_str: A valid JSON string

        Returns:
            The parsed Python value
        """
        return _json.loads(json_str)  # type: ignore[return-value]
