"""Optional zstandard support for compressed `.zst` logs (`pip install 'teaforge[zstd]'`)."""

from __future__ import annotations

import importlib
import io
from typing import BinaryIO, TextIO


def _zstd():
    try:
        return importlib.import_module("zstandard")
    except ImportError as e:
        raise ImportError(
            "reading .zst logs needs the optional 'zstandard' package. "
            "Install with: pip install 'teaforge[zstd]'"
        ) from e


def compress_bytes(data: bytes, level: int = 3) -> bytes:
    return _zstd().ZstdCompressor(level=level).compress(data)


def open_text_stream(raw: BinaryIO, encoding: str = "utf-8", errors: str = "replace") -> TextIO:
    """Wrap a zstd-compressed binary file in a streaming text reader.

    Frames are decoded incrementally, so long logs are never held in memory.
    Undecodable bytes become U+FFFD, as in plain-text logs.
    """
    reader = _zstd().ZstdDecompressor().stream_reader(raw)
    return io.TextIOWrapper(reader, encoding=encoding, errors=errors)


__all__ = [
    "compress_bytes",
    "open_text_stream",
]
