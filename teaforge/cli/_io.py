from __future__ import annotations

import json
import sys
from typing import Any, Iterable, List, Mapping, Sequence

from ..engine.values import TreeValue, render_scalar

# Verbosity gates
VERBOSE = False
QUIET = False

# Table cells longer than this are cut with "..."
MAX_CELL = 60


def set_verbosity(verbose: bool = False, quiet: bool = False) -> None:
    global VERBOSE, QUIET
    VERBOSE, QUIET = bool(verbose), bool(quiet)


def eprint_once(msg: str) -> None:
    if not QUIET:
        print(msg, file=sys.stderr)


def print_json(obj: Any) -> None:
    """One JSON document per line, compact separators."""
    sys.stdout.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False) + "\n")


def print_json_lines(rows: Iterable[Mapping[str, Any]]) -> None:
    for row in rows:
        print_json(dict(row))


def preview(value: TreeValue) -> str:
    """Short rendering of a model value: composites collapse to a bracket marker."""
    if isinstance(value, dict):
        return "{...}" if value else "{}"
    if isinstance(value, (list, tuple)):
        return "[...]" if value else "[]"
    return render_scalar(value)


def _cell(x: Any) -> str:
    s = "" if x is None else str(x)
    if len(s) > MAX_CELL:
        return s[: MAX_CELL - 3] + "..."
    return s


def print_table(rows: Iterable[Mapping[str, Any]], headers: Sequence[str]) -> None:
    """Plain ASCII table (no color); missing keys render as empty cells."""
    matrix: List[List[str]] = [[_cell(r.get(h)) for h in headers] for r in rows]
    if not matrix:
        return
    widths = [max(len(h), *(len(r[i]) for r in matrix)) for i, h in enumerate(headers)]

    def fmt(row: Sequence[str]) -> str:
        return "  ".join(s.ljust(w) for s, w in zip(row, widths)).rstrip()

    print(fmt(headers))
    print("  ".join("-" * w for w in widths))
    for r in matrix:
        print(fmt(r))
