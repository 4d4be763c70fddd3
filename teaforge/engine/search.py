from __future__ import annotations

"""
Substring search over a snapshot.

A path matches when its object key contains the query, or when it holds a
scalar whose rendering contains the query (case-insensitive). Containers never
match by value, the root is never reported, and array indices are not field
names. Results come in pre-order: object keys in order, then array indices.
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Set, Tuple

from .paths import Path, ancestors, child, to_dotted
from .values import ValueKind, kind_of, render_scalar

__all__ = ["SearchResult", "search", "build_visible_paths", "value_contains"]


@dataclass
class SearchResult:
    matches: List[Path] = field(default_factory=list)
    match_count: int = 0
    paths_with_matches: Set[str] = field(default_factory=set)

    @property
    def dotted_matches(self) -> List[str]:
        return [to_dotted(p) for p in self.matches]


def _walk(root: Any, needle: str, out: List[Path]) -> None:
    # (path, key, value); key is None for the root and for array elements
    stack: List[Tuple[Path, Optional[str], Any]] = [((), None, root)]
    while stack:
        path, key, value = stack.pop()
        kind = kind_of(value)
        if path:
            hit = key is not None and needle in key.lower()
            if not hit and kind not in (ValueKind.OBJECT, ValueKind.ARRAY):
                hit = needle in render_scalar(value).lower()
            if hit:
                out.append(path)
        if kind is ValueKind.OBJECT:
            stack.extend(reversed([(child(path, k), k, v) for k, v in value.items()]))
        elif kind is ValueKind.ARRAY:
            stack.extend(reversed([(child(path, i), None, v) for i, v in enumerate(value)]))


def search(query: str, value: Any, *, limit: int = 0) -> SearchResult:
    """Find paths in `value` matching `query`; `limit` > 0 caps the matches kept."""
    if not query or not query.strip():
        return SearchResult()
    needle = query.lower()
    found: List[Path] = []
    _walk(value, needle, found)
    if limit > 0:
        found = found[:limit]
    return SearchResult(
        matches=found,
        match_count=len(found),
        paths_with_matches=build_visible_paths(found),
    )


def build_visible_paths(matching: Iterable[Sequence[str]]) -> Set[str]:
    """Dotted strict prefixes of every path (root "" included) to expand in a tree view."""
    visible: Set[str] = set()
    for p in matching:
        for a in ancestors(p):
            visible.add(to_dotted(a))
    return visible


def value_contains(value: Any, needle: str) -> bool:
    """Deep, scalar-only, case-insensitive containment (no key matching)."""
    needle = needle.lower()
    stack = [value]
    while stack:
        v = stack.pop()
        kind = kind_of(v)
        if kind is ValueKind.OBJECT:
            stack.extend(v.values())
        elif kind is ValueKind.ARRAY:
            stack.extend(v)
        elif needle in render_scalar(v).lower():
            return True
    return False
