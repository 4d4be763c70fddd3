from __future__ import annotations

import argparse
from typing import Any, Dict, List, Optional

from ..engine.types import (
    ErrorEntry,
    InitEntry,
    LogEntry,
    SubscriptionChangeEntry,
    UpdateEntry,
    entry_kind,
    entry_model,
)
from ..io.config import Config
from ..io.reader import read_entries

__all__ = [
    "add_log_subparser",
    "load_entries",
    "pick_entry",
    "entry_label",
    "entry_summary",
]


def add_log_subparser(
    subparsers: argparse._SubParsersAction,
    name: str,
    help_text: str,
    description: str,
) -> argparse.ArgumentParser:
    """
    Create a subparser that reads one log file.

    Wires the flags every log command shares:
    - LOG positional path
    - --json / --table (mutually exclusive): JSON lines or plain ASCII table output
    - --quiet / --verbose: control stderr verbosity; stdout remains reserved for command output
    """
    sp = subparsers.add_parser(name, help=help_text, description=description)
    sp.add_argument("log", metavar="LOG", help="TeaForge log file (.log/.json/.jsonl, optionally .zst)")
    fmt = sp.add_mutually_exclusive_group()
    fmt.add_argument("--json", action="store_true", help="JSON output (stable, machine-readable)")
    fmt.add_argument("--table", action="store_true", help="Plain table output (no color; default)")
    sp.add_argument("--quiet", action="store_true", help="suppress non-essential stderr")
    sp.add_argument("--verbose", action="store_true", help="increase stderr verbosity")
    return sp


def load_entries(path: str, cfg: Config) -> List[LogEntry]:
    return list(read_entries(path, cfg.new_session()))


def pick_entry(entries: List[LogEntry], index: Optional[int]) -> Optional[LogEntry]:
    """Entry at `index` (negative counts from the end); None picks the last entry with a model."""
    if index is None:
        for entry in reversed(entries):
            if entry_model(entry) is not None:
                return entry
        return None
    try:
        return entries[index]
    except IndexError:
        return None


def entry_label(entry: LogEntry) -> str:
    if isinstance(entry, UpdateEntry):
        return entry.message.name
    if isinstance(entry, SubscriptionChangeEntry):
        names = [f"+{s.name}" for s in entry.started] + [f"-{s.name}" for s in entry.stopped]
        return " ".join(names)
    if isinstance(entry, ErrorEntry):
        return f"line {entry.line_number}: {entry.reason}"
    return "init"


def entry_summary(index: int, entry: LogEntry) -> Dict[str, Any]:
    out: Dict[str, Any] = {"index": index, "kind": entry_kind(entry), "label": entry_label(entry)}
    if isinstance(entry, (InitEntry, UpdateEntry, SubscriptionChangeEntry)):
        out["timestamp"] = entry.timestamp
    if isinstance(entry, (InitEntry, UpdateEntry)):
        out["effects"] = len(entry.effects)
    return out
