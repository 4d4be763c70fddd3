from __future__ import annotations

"""
String-interning reversal.

A log may carry dictionary records `{"strings": {"<id>": "<literal>"}}`; after
the first one, any string value of the exact form "@<digits>" is a reference
into the dictionary. Unknown references, and all references while no
dictionary has been seen, are left untouched. Object keys are never expanded.
"""
import re
from typing import Any, Dict, Mapping, Optional

__all__ = ["StringTable", "is_dictionary_record"]

_REF = re.compile(r"@(\d+)")


def is_dictionary_record(record: Any) -> bool:
    return isinstance(record, dict) and "strings" in record and "type" not in record


class StringTable:
    """Compression state for one ingestion session.

    Disabled until the first `merge`; enabled from then on. Later dictionary
    entries win on id collisions.
    """

    __slots__ = ("_enabled", "_table")

    def __init__(self) -> None:
        self._enabled = False
        self._table: Dict[str, str] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    def __len__(self) -> int:
        return len(self._table)

    def lookup(self, ref_id: str) -> Optional[str]:
        return self._table.get(ref_id)

    def merge(self, entries: Mapping[str, Any]) -> int:
        """Merge dictionary entries; non-string literals are skipped. Returns count merged."""
        n = 0
        for k, v in entries.items():
            if isinstance(v, str):
                self._table[str(k)] = v
                n += 1
        self._enabled = True
        return n

    def clear(self) -> None:
        self._enabled = False
        self._table = {}

    def expand_string(self, s: str) -> str:
        if not self._enabled:
            return s
        m = _REF.fullmatch(s)
        if m is None:
            return s
        return self._table.get(m.group(1), s)

    def expand(self, value: Any) -> Any:
        """Return `value` with every string reference replaced; inputs are not mutated."""
        if not self._enabled:
            return value
        if isinstance(value, str):
            return self.expand_string(value)
        if not isinstance(value, (dict, list)):
            return value
        root: Any = {} if isinstance(value, dict) else []
        # (source container, its copy); copies are linked into place before being filled
        stack = [(value, root)]
        while stack:
            src, dst = stack.pop()
            items = src.items() if isinstance(src, dict) else enumerate(src)
            for k, v in items:
                if isinstance(v, (dict, list)):
                    copied: Any = {} if isinstance(v, dict) else []
                    stack.append((v, copied))
                elif isinstance(v, str):
                    copied = self.expand_string(v)
                else:
                    copied = v
                if isinstance(dst, dict):
                    dst[k] = copied
                else:
                    dst.append(copied)
        return root
