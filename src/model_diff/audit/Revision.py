from __future__ import annotations

from dataclasses import dataclass

from model_diff.diff.Change import Change
from model_diff.util.paths import is_under


@dataclass(frozen=True)
class Revision:
    """The changes recorded by one ChangeLog.commit().

    Attributes:
        number: 1-based position in the log.
        label: Optional caller-supplied description, e.g. "rename customer".
        changes: Changes since the previous revision, in traversal order.
    """

    number: int
    label: str | None
    changes: tuple[Change, ...]

    def changes_under(self, path: str) -> tuple[Change, ...]:
        """Changes at `path` or beneath it."""
        return tuple(change for change in self.changes if is_under(change.path, path))

    def touches(self, path: str) -> bool:
        """True if a change is at, beneath or above `path`."""
        return any(
            is_under(change.path, path) or is_under(path, change.path)
            for change in self.changes
        )
