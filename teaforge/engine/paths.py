from __future__ import annotations

"""
Path addressing for tree values.

A path is a tuple of string segments; array steps use the decimal index.
Two text forms exist and each round-trips on its own:

  dotted   "a.b.2.c"    display form, ancestor computation, filter keys
  pointer  "/a/b/2/c"   wire form used by patch records (RFC 6901 escaping)

Malformed pointers (non-empty, no leading "/") resolve to the root path.
"""
from typing import Iterator, Sequence, Tuple

__all__ = [
    "Path",
    "ROOT",
    "APPEND_TOKEN",
    "to_dotted",
    "parse_dotted",
    "to_pointer",
    "parse_pointer",
    "escape_segment",
    "unescape_segment",
    "child",
    "ancestors",
    "is_within",
]

Path = Tuple[str, ...]

ROOT: Path = ()

# Final segment meaning "append" when the parent is an array.
APPEND_TOKEN = "-"


def to_dotted(path: Sequence[str]) -> str:
    return ".".join(path)


def parse_dotted(text: str) -> Path:
    if not text:
        return ROOT
    return tuple(text.split("."))


def escape_segment(segment: str) -> str:
    # "~" first, otherwise the "~" introduced by "~1" would be escaped again
    return segment.replace("~", "~0").replace("/", "~1")


def unescape_segment(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def to_pointer(path: Sequence[str]) -> str:
    return "".join("/" + escape_segment(s) for s in path)


def parse_pointer(text: str) -> Path:
    if not text.startswith("/"):
        return ROOT
    return tuple(unescape_segment(s) for s in text[1:].split("/"))


def child(path: Path, segment: object) -> Path:
    return path + (str(segment),)


def ancestors(path: Sequence[str]) -> Iterator[Path]:
    """Yield every strict prefix of `path`, root first."""
    p = tuple(path)
    for i in range(len(p)):
        yield p[:i]


def is_within(dotted: str, prefix: str) -> bool:
    """True if `dotted` equals `prefix` or lies beneath it."""
    if not prefix:
        return True
    return dotted == prefix or dotted.startswith(prefix + ".")
