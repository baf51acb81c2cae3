"""Per-type equality rules used to decide whether two values are "the same".

The registry is shared, mutable configuration: a DiffSession and every Snapshot
taken from it hold the same instance, so a registration made after a snapshot
was taken is visible to that snapshot's later get_changes calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from model_diff.diff.Change import MISSING
from model_diff.diff.DiffConfig import DiffConfig
from model_diff.diff.errors import (
    ComparisonError,
    ConfigurationError,
    DuplicateComparisonError,
)

logger = logging.getLogger(__name__)

type Equality[T] = Callable[[T, T], bool]


def by_projection[T, K](project: Callable[[T], K]) -> Equality[T]:
    """Build an equality predicate comparing `project(a) == project(b)`.

    Args:
        project: Extracts the identifying value of an instance, e.g. `lambda a: a.id`

    Returns:
        A predicate that treats `None` as equal only to itself
    """

    def equals(a: T, b: T) -> bool:
        if a is b:
            return True
        if a is None or b is None:
            return False
        return project(a) == project(b)

    return equals


class ComparatorRegistry:
    """Maps a runtime type to the predicate deciding equality for it.

    Also holds explicit member lists for types whose members should not be
    discovered automatically.
    """

    config: DiffConfig
    _comparisons: dict[type, Equality[Any]]
    _members: dict[type, tuple[str, ...]]

    def __init__(self, config: DiffConfig | None = None) -> None:
        self.config = config if config is not None else DiffConfig()
        self._comparisons = {}
        self._members = {}

    def register[T](self, type_: type[T], predicate: Equality[T]) -> None:
        """Add an equality rule for exactly `type_` (subclasses are not matched).

        Raises:
            ConfigurationError: If `type_` is not a type or `predicate` is not callable
            DuplicateComparisonError: If a rule exists and the policy is "reject"
        """
        if not isinstance(type_, type):
            raise ConfigurationError(f"Expected a type, got {type_!r}")
        if not callable(predicate):
            raise ConfigurationError(
                f"Comparison for {type_.__qualname__} must be callable, got {predicate!r}"
            )
        if type_ in self._comparisons:
            if self.config.duplicate_policy == "reject":
                raise DuplicateComparisonError(type_)
            logger.debug("Replacing comparison for %s", type_.__qualname__)
        else:
            logger.debug("Registered comparison for %s", type_.__qualname__)
        self._comparisons[type_] = predicate

    def register_members(self, type_: type, names: Iterable[str]) -> None:
        """Pin the members walked for instances of `type_`, in the given order."""
        if not isinstance(type_, type):
            raise ConfigurationError(f"Expected a type, got {type_!r}")
        members = tuple(names)
        for name in members:
            if not isinstance(name, str) or not name.isidentifier():
                raise ConfigurationError(
                    f"Member names for {type_.__qualname__} must be identifiers, got {name!r}"
                )
        if type_ in self._members and self.config.duplicate_policy == "reject":
            raise DuplicateComparisonError(type_, "member list")
        self._members[type_] = members

    def members_for(self, type_: type) -> tuple[str, ...] | None:
        return self._members.get(type_)

    def __contains__(self, type_: object) -> bool:
        return type_ in self._comparisons

    def __len__(self) -> int:
        return len(self._comparisons)

    def equals(self, a: Any, b: Any, type_: type | None = None) -> bool:
        """Decide whether `a` and `b` are the same value.

        Identical objects are equal without consulting any rule. MISSING and None
        are only equal to themselves. Otherwise the rule registered for `type_`
        (defaulting to the runtime type of `a`) decides when both values are
        instances of that type. Everything else falls back to `==`, so values of
        different types are an ordinary inequality.

        Raises:
            ComparisonError: If the registered predicate raises
        """
        if a is b:
            return True
        if a is MISSING or b is MISSING or a is None or b is None:
            return False

        type_ = type_ if type_ is not None else type(a)
        predicate = self._comparisons.get(type_)
        if predicate is None or not (isinstance(a, type_) and isinstance(b, type_)):
            return bool(a == b)

        try:
            return bool(predicate(a, b))
        except Exception as e:
            raise ComparisonError(type_, f"{type(e).__name__}: {e}") from e
