from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final


class _Missing:
    """Marks a value that does not exist on one side of a change."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


@dataclass(frozen=True)
class Change:
    """One difference between a snapshot and a later state of the graph.

    Attributes:
        path: Location of the value, e.g. ".items[0].name". The root is "".
        old_value: The value recorded in the snapshot, or MISSING for an addition.
        value: The current value, or MISSING for a removal.
    """

    path: str
    old_value: Any
    value: Any

    @property
    def is_addition(self) -> bool:
        return self.old_value is MISSING

    @property
    def is_removal(self) -> bool:
        return self.value is MISSING

    def __str__(self) -> str:
        return f"{self.path}: {self.old_value!r}=>{self.value!r}"
