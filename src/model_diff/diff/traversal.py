"""Depth-first traversal that flattens a graph into a path -> value map.

The same walk runs in two modes:

- materialize: record every reachable path, in pre-order, with its value. A
  collection is recorded as the tuple of its elements.
- diff: walk a new state of the graph against a previously materialized map and
  collect a Change wherever the values differ.

Each object is expanded at most once per call (tracked by identity), so cycles
terminate and shared substructure is flattened under the first path that
reaches it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from model_diff.diff.Change import MISSING, Change
from model_diff.diff.ComparatorRegistry import ComparatorRegistry
from model_diff.diff.Walker import Walker
from model_diff.util.paths import ROOT, index_path, member_path


def materialize(graph: Any, registry: ComparatorRegistry) -> dict[str, Any]:
    """Flatten `graph` into an insertion-ordered path -> value dict."""
    traversal = _Traversal(registry, {}, diffing=False)
    traversal.visit(graph, ROOT)
    return traversal.values  # type: ignore[return-value]


def diff(
    graph: Any, stored: Mapping[str, Any], registry: ComparatorRegistry
) -> list[Change]:
    """Compare `graph` against a map produced by `materialize`.

    `stored` is only read, never modified.

    Returns:
        Changes in pre-order traversal order, root first
    """
    traversal = _Traversal(registry, stored, diffing=True)
    traversal.visit(graph, ROOT)
    return traversal.changes


class _Traversal:
    """State of a single materialize or diff call."""

    registry: ComparatorRegistry
    walker: Walker
    values: Mapping[str, Any]
    diffing: bool
    changes: list[Change]
    # id -> object; holding the object keeps its id from being reused mid-walk
    visited: dict[int, Any]

    def __init__(
        self, registry: ComparatorRegistry, values: Mapping[str, Any], diffing: bool
    ) -> None:
        self.registry = registry
        self.walker = Walker(registry)
        self.values = values
        self.diffing = diffing
        self.changes = []
        self.visited = {}

    def visit(self, value: Any, path: str) -> None:
        items = self.walker.as_collection(value, path)
        old: Any = None

        if path in self.values:
            old = self.values[path]
            if items is None and not self.registry.equals(old, value, self._type_of(value)):
                self.changes.append(Change(path, old, value))
        elif self.diffing:
            # New element of a collection: reported once, never expanded
            self.changes.append(Change(path, MISSING, value))
            return
        else:
            self.values[path] = items if items is not None else value  # type: ignore[index]

        if self.walker.is_scalar(value) or id(value) in self.visited:
            return
        self.visited[id(value)] = value

        if items is None:
            self._visit_members(value, path)
        elif not self.diffing:
            self._visit_elements(items, path)
        else:
            self._reconcile(value, items, old, path)

    def _visit_members(self, value: Any, path: str) -> None:
        for name in self.walker.member_names(value):
            child_path = member_path(path, name)
            self.visit(self.walker.read_member(value, name, child_path), child_path)

    def _visit_elements(self, items: tuple[Any, ...], path: str) -> None:
        for index, item in enumerate(items):
            self.visit(item, index_path(path, index))

    def _reconcile(
        self, value: Any, items: tuple[Any, ...], old: Any, path: str
    ) -> None:
        """Pair stored elements with current ones, greedily and in stored order.

        Matched and removed elements keep their stored index. Unmatched current
        elements are appended after the last stored index.
        """
        if not isinstance(old, tuple):
            if old is not None:
                self.changes.append(Change(path, old, value))
            old = ()

        pool = list(items)
        element_type = self._element_type(old) or self._element_type(pool)

        index = 0
        for old_item in old:
            position = self._find(old_item, pool, element_type)
            current = MISSING if position is None else pool.pop(position)
            self.visit(current, index_path(path, index))
            index += 1

        for item in pool:
            self.visit(item, index_path(path, index))
            index += 1

    def _find(
        self, old_item: Any, pool: list[Any], element_type: type | None
    ) -> int | None:
        """Position of the first pooled element equal to `old_item`."""
        for position, candidate in enumerate(pool):
            if self.registry.equals(candidate, old_item, element_type):
                return position
        return None

    @staticmethod
    def _element_type(elements: Any) -> type | None:
        """Runtime type of the first element that is not None."""
        for element in elements:
            if element is not None:
                return type(element)
        return None

    @staticmethod
    def _type_of(value: Any) -> type | None:
        if value is None or value is MISSING:
            return None
        return type(value)
