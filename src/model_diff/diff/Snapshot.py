from __future__ import annotations

import logging
from collections.abc import Iterator
from types import MappingProxyType
from typing import Any

from model_diff.diff import traversal
from model_diff.diff.Change import Change
from model_diff.diff.ComparatorRegistry import ComparatorRegistry

logger = logging.getLogger(__name__)


class Snapshot:
    """Flattened, read-only record of one state of an object graph.

    The snapshot keeps references to the values it saw, not copies. Scalars are
    immutable so they preserve the old state; composite objects are compared by
    the registry rules (identity by default) and expanded again on every diff.

    A snapshot can be diffed against any number of later states.
    """

    _registry: ComparatorRegistry
    _values: MappingProxyType[str, Any]

    def __init__(self, graph: Any, registry: ComparatorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else ComparatorRegistry()
        self._values = MappingProxyType(traversal.materialize(graph, self._registry))
        logger.debug("Snapshot taken with %d paths", len(self._values))

    @staticmethod
    def to_dictionary(
        graph: Any, registry: ComparatorRegistry | None = None
    ) -> dict[str, Any]:
        """Flatten a graph without keeping a Snapshot around.

        Args:
            graph: Root of the object graph
            registry: Supplies pinned member lists and config. Defaults to an empty one.

        Returns:
            Path -> value dict in pre-order. Collections map to a tuple of their elements.
        """
        return traversal.materialize(
            graph, registry if registry is not None else ComparatorRegistry()
        )

    def get_changes(self, graph: Any) -> list[Change]:
        """Diff a later state of the graph against this snapshot.

        Returns:
            Changes in pre-order, root first. A changed object can produce both a
            change at its own path and changes for its members. An element added
            to a collection is reported once at its own path.
        """
        changes = traversal.diff(graph, self._values, self._registry)
        logger.debug("Diff found %d changes", len(changes))
        return changes

    @property
    def registry(self) -> ComparatorRegistry:
        return self._registry

    @property
    def values(self) -> MappingProxyType[str, Any]:
        return self._values

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(self._values)

    def __getitem__(self, path: str) -> Any:
        return self._values[path]

    def __contains__(self, path: object) -> bool:
        return path in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
