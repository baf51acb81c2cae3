from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from model_diff.diff.ComparatorRegistry import ComparatorRegistry, Equality, by_projection
from model_diff.diff.DiffConfig import DiffConfig
from model_diff.diff.errors import ConfigurationError
from model_diff.diff.Snapshot import Snapshot


class DiffSession:
    """Entry point for change tracking.

    Register how instances of your types are identified, then take snapshots
    and diff them against later states.

    Example:
        session = DiffSession().register_comparison(Order, lambda o: o.id)
        before = session.snapshot(orders)
        orders[0].total = 12
        for change in before.get_changes(orders):
            print(change)

    The session and every snapshot it takes share one ComparatorRegistry.
    Rules registered after a snapshot was taken apply to that snapshot's
    later diffs as well.
    """

    _registry: ComparatorRegistry

    def __init__(
        self,
        config: DiffConfig | None = None,
        registry: ComparatorRegistry | None = None,
    ) -> None:
        if registry is not None and config is not None:
            raise ConfigurationError("Pass either config or registry, not both")
        self._registry = registry if registry is not None else ComparatorRegistry(config)

    @property
    def registry(self) -> ComparatorRegistry:
        return self._registry

    @property
    def config(self) -> DiffConfig:
        return self._registry.config

    def register_comparison[T, K](
        self, type_: type[T], project: Callable[[T], K]
    ) -> DiffSession:
        """Treat two instances of `type_` as equal when `project` returns equal keys."""
        self._registry.register(type_, by_projection(project))
        return self

    def register_equality[T](self, type_: type[T], predicate: Equality[T]) -> DiffSession:
        """Treat two instances of `type_` as equal when `predicate(a, b)` is true."""
        self._registry.register(type_, predicate)
        return self

    def register_members(self, type_: type, names: Iterable[str]) -> DiffSession:
        """Walk only `names`, in this order, for instances of `type_`."""
        self._registry.register_members(type_, names)
        return self

    def snapshot(self, graph: Any) -> Snapshot:
        return Snapshot(graph, self._registry)
