"""TeaForge: public API surface.

Only `teaforge` and `teaforge.errors` are public. Everything else is internal.
This module also resolves `__version__` across installs.
"""
from __future__ import annotations

from typing import Any as _Any
from . import errors as errors  # re-export for star-import; noqa: F401

from importlib.metadata import version as _pkg_version, PackageNotFoundError


def _version_from_metadata() -> str | None:
    try:
        return _pkg_version("teaforge")
    except PackageNotFoundError:
        return None


__version__ = _version_from_metadata() or "0+unknown"

# ---------------------------------------------------------------------------
# Public re-exports
# ---------------------------------------------------------------------------
# Engine entry points and the config validator are lazy-loaded via __getattr__

_ENGINE_EXPORTS = (
    "ActiveFilters",
    "IngestSession",
    "apply_patch",
    "compare",
    "matches_entry",
    "search",
)


def __getattr__(name: str) -> _Any:  # PEP 562 lazy exports to avoid import-time cycles
    if name in _ENGINE_EXPORTS:
        from . import engine as _engine

        value = getattr(_engine, name)
        globals()[name] = value
        return value
    if name == "validate_config":
        # `configs` is a top-level package, not `teaforge.configs`
        from configs.validate import validate_config as _validate_config

        globals()["validate_config"] = _validate_config
        return _validate_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return list(__all__)


# Star-export surface (deterministic ordering)
__all__ = sorted(
    [
        "__version__",
        "errors",
        "validate_config",
        *_ENGINE_EXPORTS,
    ]
)
