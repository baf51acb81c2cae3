"""Helpers for the path strings that address values in a graph.

The root is "". Member access appends ".name" and positional access appends
"[index]", e.g. ".orders[2].lines[0].sku". This is the attribute/item notation
deepdiff uses minus its leading "root", so parsing is delegated to deepdiff.
"""

from __future__ import annotations

from deepdiff import parse_path as _parse_deepdiff_path

ROOT = ""

type Segment = str | int


def member_path(path: str, name: str) -> str:
    return f"{path}.{name}"


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def parse_path(path: str) -> list[Segment]:
    """Split a path into member names and indexes.

    Example:
        parse_path(".orders[2].sku") == ["orders", 2, "sku"]
    """
    if path == ROOT:
        return []
    return list(_parse_deepdiff_path(f"root{path}"))


def is_under(path: str, prefix: str) -> bool:
    """True if `path` is `prefix` itself or lies somewhere beneath it."""
    prefix_segments = parse_path(prefix)
    return parse_path(path)[: len(prefix_segments)] == prefix_segments
