"""replay: list the entries of a log that pass the active filters.

Filters come from the config's `filters` list plus any `--filter` given on the
command line (serialized form, JSON). Init and error entries are always listed.
"""

from __future__ import annotations

import argparse
import json
import logging

from ..engine.diff import compare
from ..engine.filters import ActiveFilters, active_filter_from_dict, describe
from ..engine.types import UpdateEntry
from ..errors import FilterError, format_error
from ._exit import OK, USER_ERR
from ._io import eprint_once, print_json_lines, print_table, set_verbosity
from ._util import add_log_subparser, entry_summary, load_entries

logger = logging.getLogger(__name__)

_HELP = "List log entries that pass the active filters"


def register(subparsers: argparse._SubParsersAction) -> None:
    sp = add_log_subparser(subparsers, name="replay", help_text=_HELP, description=__doc__)
    sp.add_argument(
        "--filter",
        dest="filters",
        action="append",
        default=[],
        metavar="JSON",
        help='extra filter, e.g. \'{"status":"enabled","filter":{"kind":"has-effects"}}\'',
    )
    sp.add_argument("--changes", action="store_true", help="include per-entry model change counts")
    sp.set_defaults(command="replay", func=_run)


def _build_filters(ns: argparse.Namespace) -> ActiveFilters:
    active = ns.cfg.active_filters()
    for raw in ns.filters:
        try:
            record = json.loads(raw)
        except ValueError as e:
            raise FilterError(f"--filter is not valid JSON: {e}") from e
        af = active_filter_from_dict(record)
        active.add(af.filter, af.enabled)
    return active


def _run(ns: argparse.Namespace) -> int:
    set_verbosity(ns.verbose, ns.quiet)
    try:
        active = _build_filters(ns)
    except FilterError as e:
        eprint_once(format_error(e))
        return USER_ERR

    if ns.verbose:
        for af in active:
            state = "on " if af.enabled else "off"
            eprint_once(f"[teaforge] filter {state} {describe(af.filter)}")

    try:
        entries = load_entries(ns.log, ns.cfg)
    except OSError as e:
        eprint_once(f"cannot read {ns.log}: {e}")
        return USER_ERR

    rows = []
    for i, entry in enumerate(entries):
        if not active.matches(entry):
            continue
        row = entry_summary(i, entry)
        if ns.changes and isinstance(entry, UpdateEntry):
            result = compare(entry.model_before, entry.model_after)
            row.update(added=result.added_count, removed=result.removed_count, modified=result.modified_count)
        rows.append(row)
    logger.info("%d of %d entries visible", len(rows), len(entries))

    if ns.json:
        print_json_lines(rows)
    else:
        headers = ["index", "kind", "timestamp", "label", "effects"]
        if ns.changes:
            headers += ["added", "removed", "modified"]
        print_table(rows, headers=headers)
    return OK
