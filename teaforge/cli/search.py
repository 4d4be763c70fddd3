"""search: find keys and values in an entry's model snapshot."""

from __future__ import annotations

import argparse

from ..engine.paths import to_dotted
from ..engine.search import search
from ..engine.types import entry_model
from ._exit import OK, USER_ERR
from ._io import eprint_once, preview, print_json, print_table, set_verbosity
from ._util import add_log_subparser, load_entries, pick_entry

_HELP = "Search an entry's model for a key or value"


def register(subparsers: argparse._SubParsersAction) -> None:
    sp = add_log_subparser(subparsers, name="search", help_text=_HELP, description=__doc__)
    sp.add_argument("query", metavar="QUERY", help="case-insensitive substring")
    sp.add_argument(
        "--entry",
        type=int,
        default=None,
        metavar="N",
        help="entry index as listed by replay (default: last entry with a model)",
    )
    sp.set_defaults(command="search", func=_run)


def _value_at(model, path):
    cur = model
    for seg in path:
        cur = cur[int(seg)] if isinstance(cur, list) else cur[seg]
    return cur


def _run(ns: argparse.Namespace) -> int:
    set_verbosity(ns.verbose, ns.quiet)
    try:
        entries = load_entries(ns.log, ns.cfg)
    except OSError as e:
        eprint_once(f"cannot read {ns.log}: {e}")
        return USER_ERR

    entry = pick_entry(entries, ns.entry)
    model = entry_model(entry) if entry is not None else None
    if entry is None or model is None:
        eprint_once("no entry with a model to search")
        return USER_ERR

    result = search(ns.query, model, limit=ns.cfg.max_search_results)
    rows = []
    for path in result.matches:
        value = _value_at(model, path)
        rows.append({"path": to_dotted(path), "value": preview(value)})
    if ns.json:
        print_json(
            {
                "query": ns.query,
                "match_count": result.match_count,
                "matches": rows,
                "expand": sorted(result.paths_with_matches),
            }
        )
        return OK
    print_table(rows, headers=["path", "value"])
    eprint_once(f"{result.match_count} match(es)")
    return OK
