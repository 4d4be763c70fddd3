"""Structural diff, patch, search and filter engine over decoded log snapshots."""
from __future__ import annotations

from .diff import ChangeKind, DiffResult, compare
from .filters import ActiveFilter, ActiveFilters, fuzzy_match, matches_entry
from .patch import AddOp, RemoveOp, ReplaceOp, apply_patch
from .search import SearchResult, build_visible_paths, search
from .session import IngestSession

__all__ = [
    "ActiveFilter",
    "ActiveFilters",
    "AddOp",
    "ChangeKind",
    "DiffResult",
    "IngestSession",
    "RemoveOp",
    "ReplaceOp",
    "SearchResult",
    "apply_patch",
    "build_visible_paths",
    "compare",
    "fuzzy_match",
    "matches_entry",
    "search",
]
