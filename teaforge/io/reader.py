from __future__ import annotations

"""
Streaming log reader.

Reads a TeaForge log one line at a time (plain text, or zstd-compressed when
the name ends in ".zst") and feeds it to an IngestSession. Opening a file
starts a new source on the session, which clears its snapshot chain and
string table.
"""
import logging
import os
from pathlib import Path
from typing import Iterator, Union

from ..engine.session import IngestSession
from ..engine.types import LogEntry
from ..optional.zstd_support import open_text_stream

__all__ = ["LOG_SUFFIXES", "iter_lines", "read_entries"]

logger = logging.getLogger(__name__)

LOG_SUFFIXES = (".log", ".json", ".jsonl")

PathLike = Union[str, os.PathLike]


def iter_lines(path: PathLike) -> Iterator[str]:
    """Yield the lines of `path` without trailing newlines.

    Invalid UTF-8 is replaced with U+FFFD rather than raised, so one bad line
    only spoils that line.
    """
    p = Path(path)
    if p.suffix == ".zst":
        with open(p, "rb") as raw, open_text_stream(raw) as text:
            for line in text:
                yield line.rstrip("\r\n")
        return
    if p.suffix not in LOG_SUFFIXES:
        logger.debug("%s: unrecognized suffix, reading as plain text", p)
    with open(p, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            yield line.rstrip("\r\n")


def read_entries(path: PathLike, session: IngestSession) -> Iterator[LogEntry]:
    """Open `path` as a new source on `session` and yield its entries in order."""
    resolved = Path(path).resolve()
    session.open_source(str(resolved))
    yield from session.iter_entries(iter_lines(resolved))
