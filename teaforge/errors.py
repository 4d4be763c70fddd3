from __future__ import annotations

"""Typed error taxonomy.

Only `teaforge` and `teaforge.errors` are public import roots. Everything else is internal.
This module exposes the error classes and a small helper `format_error`.
"""

__all__ = [
    "TeaForgeError",
    "ConfigError",
    "DecodeError",
    "FilterError",
    "CLIError",
    "format_error",
]


class TeaForgeError(Exception):
    """Base class for all typed errors in TeaForge."""
    pass


class ConfigError(TeaForgeError):
    """Configuration invalid, unknown keys, wrong types, etc."""
    pass


class DecodeError(TeaForgeError):
    """A log record could not be decoded (unknown op or type, missing field)."""
    pass


class FilterError(TeaForgeError):
    """Serialized filter malformed, or a filter list edited at a bad index."""
    pass


class CLIError(TeaForgeError):
    """Generic CLI failure wrapper for unexpected errors in CLI code paths."""
    pass


def format_error(e: BaseException) -> str:
    """Return a short, uniform message like 'DecodeError: detail'."""
    name = e.__class__.__name__
    msg = str(e).strip()
    return f"{name}: {msg}" if msg else name


# Keep star-export order deterministic for tests and tooling
__all__ = sorted(__all__)
