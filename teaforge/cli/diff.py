"""diff: show how one update entry changed the model."""

from __future__ import annotations

import argparse

from ..engine.diff import compare
from ..engine.types import UpdateEntry, entry_kind
from ._exit import OK, USER_ERR
from ._io import eprint_once, print_json, print_table, set_verbosity
from ._util import add_log_subparser, load_entries, pick_entry

_HELP = "Show the model changes made by one update entry"


def register(subparsers: argparse._SubParsersAction) -> None:
    sp = add_log_subparser(subparsers, name="diff", help_text=_HELP, description=__doc__)
    sp.add_argument("--entry", type=int, required=True, metavar="N", help="entry index as listed by replay")
    sp.set_defaults(command="diff", func=_run)


def _run(ns: argparse.Namespace) -> int:
    set_verbosity(ns.verbose, ns.quiet)
    try:
        entries = load_entries(ns.log, ns.cfg)
    except OSError as e:
        eprint_once(f"cannot read {ns.log}: {e}")
        return USER_ERR

    entry = pick_entry(entries, ns.entry)
    if entry is None:
        eprint_once(f"no entry {ns.entry} (log has {len(entries)})")
        return USER_ERR
    if not isinstance(entry, UpdateEntry):
        eprint_once(f"entry {ns.entry} is a {entry_kind(entry)} entry; only updates have a diff")
        return USER_ERR

    result = compare(entry.model_before, entry.model_after)
    if ns.json:
        print_json(result.to_dict())
        return OK
    print_table(
        [{"path": p or "<root>", "change": k.value} for p, k in result.changes.items()],
        headers=["path", "change"],
    )
    eprint_once(
        f"{result.added_count} added, {result.removed_count} removed, {result.modified_count} modified"
    )
    return OK
