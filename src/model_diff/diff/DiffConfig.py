from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from model_diff.diff.errors import ConfigurationError

type DuplicatePolicy = Literal["reject", "replace"]


@dataclass(frozen=True, kw_only=True)
class DiffConfig:
    """Settings shared by a DiffSession and every Snapshot it takes.

    Attributes:
        duplicate_policy: What registering a second comparison for a type does.
            "reject" raises DuplicateComparisonError, "replace" keeps the last one.
        include_properties: Walk public `property` descriptors as members, after
            the instance fields.
        scalar_types: Extra types treated as terminal leaves and compared as a whole.
    """

    duplicate_policy: DuplicatePolicy = "reject"
    include_properties: bool = True
    scalar_types: tuple[type, ...] = ()

    def __post_init__(self) -> None:
        if self.duplicate_policy not in ("reject", "replace"):
            raise ConfigurationError(
                f"duplicate_policy must be 'reject' or 'replace', got {self.duplicate_policy!r}"
            )
        for scalar_type in self.scalar_types:
            if not isinstance(scalar_type, type):
                raise ConfigurationError(
                    f"scalar_types must contain types, got {scalar_type!r}"
                )
