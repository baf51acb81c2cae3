"""Exceptions raised by the diff engine.

Configuration errors are programmer mistakes and surface at registration or
comparison time. Traversal errors mean a member could not be read; the engine
never returns partial results for a node it could not read.
"""

from __future__ import annotations


class DiffError(Exception):
    """Base class for all model_diff errors."""


class ConfigurationError(DiffError, ValueError):
    """Raised for invalid registrations or config values."""


class DuplicateComparisonError(ConfigurationError):
    """Raised when a comparison is registered twice for the same type."""

    def __init__(self, type_: type, kind: str = "comparison") -> None:
        self.type = type_
        super().__init__(
            f"A {kind} is already registered for {type_.__qualname__}. "
            "Use DiffConfig(duplicate_policy='replace') to allow overriding it."
        )


class ComparisonError(ConfigurationError):
    """Raised when a registered equality predicate fails."""

    def __init__(self, type_: type, message: str) -> None:
        self.type = type_
        super().__init__(f"Comparison for {type_.__qualname__} raised: {message}")


class TraversalError(DiffError):
    """Raised when a member of a node cannot be read during traversal."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Cannot read '{path}': {message}")
