"""Ingestion session: turns raw log lines into LogEntry values in arrival order.

The session owns the only long-lived mutable state of the engine:

- `last_model`: the snapshot left by the latest init/update entry; it is the
  `model_before` of the next update and the base of its `modelDiff`;
- `strings`: the string-interning table.

Both must be cleared together when a new input source starts (`open_source`
or `reset`). Lines must be fed strictly in order; there is no locking, so one
session serves one stream.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Iterator, Optional

from ..errors import DecodeError
from .decode import decode_entry
from .strings import StringTable, is_dictionary_record
from .types import ErrorEntry, InitEntry, LogEntry, UpdateEntry, entry_model

__all__ = ["IngestSession", "DEFAULT_RAW_TEXT_LIMIT"]

logger = logging.getLogger(__name__)

DEFAULT_RAW_TEXT_LIMIT = 200


class IngestSession:
    def __init__(self, raw_text_limit: int = DEFAULT_RAW_TEXT_LIMIT, skip_blank_lines: bool = True):
        self.raw_text_limit = int(raw_text_limit)
        self.skip_blank_lines = bool(skip_blank_lines)
        self.strings = StringTable()
        self.last_model: Any = None
        self.entry_count = 0
        self.source: Optional[str] = None

    def reset(self) -> None:
        self.strings.clear()
        self.last_model = None
        self.entry_count = 0

    def open_source(self, name: str) -> None:
        logger.info("opening input source %s", name)
        self.reset()
        self.source = name

    def _error(self, line_number: int, text: str, reason: str) -> ErrorEntry:
        logger.debug("line %d rejected: %s", line_number, reason)
        return ErrorEntry(line_number, text[: self.raw_text_limit], reason)

    def ingest_line(self, line_number: int, text: str) -> Optional[LogEntry]:
        """Decode one raw line. Returns None for blank lines and dictionary records."""
        trimmed = text.strip()
        if not trimmed:
            if self.skip_blank_lines:
                return None
            return self._error(line_number, text, "empty line")
        try:
            record = json.loads(trimmed)
        except ValueError as e:
            return self._error(line_number, trimmed, str(e))
        return self.ingest_record(line_number, record, raw_text=trimmed)

    def ingest_record(self, line_number: int, record: Any, raw_text: Optional[str] = None) -> Optional[LogEntry]:
        if is_dictionary_record(record):
            table = record["strings"]
            if not isinstance(table, dict):
                return self._error(line_number, raw_text or json.dumps(record), "'strings' must be an object")
            n = self.strings.merge(table)
            logger.debug("line %d: merged %d interned strings (table size %d)", line_number, n, len(self.strings))
            return None
        try:
            entry = decode_entry(self.strings.expand(record), self.last_model)
        except DecodeError as e:
            return self._error(line_number, raw_text or json.dumps(record), str(e))
        if isinstance(entry, (InitEntry, UpdateEntry)):
            self.last_model = entry_model(entry)
        self.entry_count += 1
        return entry

    def iter_entries(self, lines: Iterable[str], start: int = 1) -> Iterator[LogEntry]:
        """Number `lines` from `start` and yield every decoded entry."""
        for n, line in enumerate(lines, start):
            entry = self.ingest_line(n, line)
            if entry is not None:
                yield entry
