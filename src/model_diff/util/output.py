"""Human-readable rendering of changes, for logs and debugging."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from model_diff.diff.Change import Change
from model_diff.util.json_utils import json


def format_change(change: Change, indent: int | None = None) -> str:
    """Render a change as `<path>: <old json>=><new json>`."""
    return (
        f"{change.path}: "
        f"{json.to_string(change.old_value, indent)}=>{json.to_string(change.value, indent)}"
    )


def write_changes(
    changes: Iterable[Change], file: TextIO | None = None, indent: int | None = None
) -> None:
    """Print one formatted change per line to `file` (stdout by default)."""
    out = file if file is not None else sys.stdout
    for change in changes:
        print(format_change(change, indent), file=out)
