"""Audit trail for a single object graph.

Each commit diffs the graph against the state recorded at the previous commit,
stores the result as a Revision and starts again from the current state.
Collection indexes in a revision follow the previous revision's layout, so the
same path can name different elements in different revisions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from model_diff.audit.Revision import Revision
from model_diff.diff.Change import Change
from model_diff.diff.DiffSession import DiffSession
from model_diff.diff.Snapshot import Snapshot

logger = logging.getLogger(__name__)

type RevisionListener = Callable[[Revision], None]


class ChangeLog[G]:
    """Records what changed in `graph` between successive commits.

    Example:
        log = ChangeLog(order, DiffSession().register_comparison(Line, lambda l: l.sku))
        order.lines[0].quantity = 3
        log.commit("bump quantity")
        log.history(".lines")  # -> [(revision 1, Change(".lines[0].quantity", 1, 3))]
    """

    _graph: G
    _session: DiffSession
    _baseline: Snapshot
    _revisions: list[Revision]
    _listeners: list[RevisionListener]

    def __init__(self, graph: G, session: DiffSession | None = None) -> None:
        self._graph = graph
        self._session = session if session is not None else DiffSession()
        self._baseline = self._session.snapshot(graph)
        self._revisions = []
        self._listeners = []

    @property
    def graph(self) -> G:
        return self._graph

    @property
    def session(self) -> DiffSession:
        return self._session

    @property
    def revisions(self) -> tuple[Revision, ...]:
        return tuple(self._revisions)

    def pending(self) -> list[Change]:
        """Changes made since the last commit, without recording them."""
        return self._baseline.get_changes(self._graph)

    def commit(self, label: str | None = None) -> Revision | None:
        """Record the changes since the last commit.

        Returns:
            The new Revision, or None when nothing changed (no revision is added)
        """
        changes = self.pending()
        if not changes:
            return None

        revision = Revision(len(self._revisions) + 1, label, tuple(changes))
        self._revisions.append(revision)
        self._baseline = self._session.snapshot(self._graph)
        logger.debug(
            "Committed revision %d (%s) with %d changes",
            revision.number,
            label,
            len(changes),
        )

        for listener in list(self._listeners):
            listener(revision)
        return revision

    def history(self, path: str) -> list[tuple[Revision, Change]]:
        """Every recorded change at `path` or beneath it, oldest first."""
        return [
            (revision, change)
            for revision in self._revisions
            for change in revision.changes_under(path)
        ]

    def subscribe(self, listener: RevisionListener) -> Callable[[], None]:
        """Call `listener` with each new revision.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._revisions)

    def __getitem__(self, number: int) -> Revision:
        """Revision by its 1-based number."""
        if not 1 <= number <= len(self._revisions):
            raise KeyError(f"Revision {number} does not exist")
        return self._revisions[number - 1]

    def __repr__(self) -> str:
        return f"ChangeLog(revisions={len(self._revisions)}, graph={type(self._graph).__name__})"
