"""
Lightweight configuration validation and normalization for TeaForge.

Public API:
    validate_config(cfg: dict) -> dict
    validate_config_verbose(cfg: dict) -> (dict, warnings)

- Raises ConfigError with clear messages (field paths + constraints) on invalid input.
- Returns a **new** normalized dict; the input is not mutated.
"""
from __future__ import annotations
from typing import Any, Dict, List, Tuple

from teaforge.engine.filters import active_filter_from_dict, active_filter_to_dict
from teaforge.errors import ConfigError, FilterError

__all__ = ["validate_config", "validate_config_verbose", "DEFAULTS", "CONFIG_VERSION"]

CONFIG_VERSION = "v1"


# ------------------------------
# Utilities
# ------------------------------

def _ensure_dict(x: Any) -> Dict[str, Any]:
    if isinstance(x, dict):
        return dict(x)
    return {}


def _coerce_bool(v: Any) -> bool | None:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in {"1", "true", "yes", "on"}:
            return True
        if s in {"0", "false", "no", "off"}:
            return False
    return None


def _coerce_int(v: Any) -> int | None:
    if isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


# ------------------------------
# Defaults
# ------------------------------

DEFAULTS: Dict[str, Any] = {
    "version": CONFIG_VERSION,
    "ingest": {
        "raw_text_limit": 200,
        "skip_blank_lines": True,
    },
    "search": {
        "max_results": 0,  # 0 = unlimited
    },
    "logging": {
        "level": "WARNING",
    },
    "filters": [],
}

ALLOWED_TOP = {"version", "ingest", "search", "logging", "filters"}
ALLOWED_INGEST = {"raw_text_limit", "skip_blank_lines"}
ALLOWED_SEARCH = {"max_results"}
ALLOWED_LOGGING = {"level"}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _lev(a: str, b: str) -> int:
    """Tiny Levenshtein distance (edit distance) for did-you-mean suggestions."""
    la, lb = len(a), len(b)
    dp = list(range(lb + 1))
    for i, ca in enumerate(a, 1):
        prev = dp[0]
        dp[0] = i
        for j, cb in enumerate(b, 1):
            ins = dp[j] + 1
            dele = dp[j - 1] + 1
            sub = prev + (0 if ca == cb else 1)
            prev, dp[j] = dp[j], min(ins, dele, sub)
    return dp[-1]


def _suggest_key(bad: str, allowed: set[str]) -> str | None:
    """Return closest allowed key within distance <=2, else None."""
    best_key, best_dist = None, 99
    for k in sorted(allowed):
        d = _lev(bad, k)
        if d < best_dist:
            best_key, best_dist = k, d
    return best_key if best_dist <= 2 else None


# ------------------------------
# Validation helpers
# ------------------------------

def _err(errors: List[str], path: str, msg: str) -> None:
    errors.append(f"{path} {msg}")


def _check_keys(errors: List[str], prefix: str, raw: Dict[str, Any], allowed: set[str]) -> None:
    for k in raw:
        if k not in allowed:
            hint = _suggest_key(str(k), allowed)
            suffix = f" (did you mean '{hint}'?)" if hint else ""
            _err(errors, f"{prefix}{k}", f"unknown key{suffix}")


# ------------------------------
# Main validator
# ------------------------------

def _validate_config_normalize_impl(cfg: Dict[str, Any]) -> Dict[str, Any]:
    if cfg is not None and not isinstance(cfg, dict):
        raise ConfigError("config must be a mapping at the top level")
    cfg_in = _ensure_dict(cfg)
    errors: List[str] = []

    _check_keys(errors, "", cfg_in, ALLOWED_TOP)

    version = cfg_in.get("version", CONFIG_VERSION)
    if version != CONFIG_VERSION:
        _err(errors, "version", f"must be '{CONFIG_VERSION}' (got {version!r})")

    # ---- ingest ----
    raw_ingest = cfg_in.get("ingest", {})
    if not isinstance(raw_ingest, dict):
        _err(errors, "ingest", "must be a mapping")
        raw_ingest = {}
    _check_keys(errors, "ingest.", raw_ingest, ALLOWED_INGEST)
    ingest = dict(DEFAULTS["ingest"])
    if "raw_text_limit" in raw_ingest:
        n = _coerce_int(raw_ingest["raw_text_limit"])
        if n is None or n < 1:
            _err(errors, "ingest.raw_text_limit", "must be an integer >= 1")
        else:
            ingest["raw_text_limit"] = n
    if "skip_blank_lines" in raw_ingest:
        b = _coerce_bool(raw_ingest["skip_blank_lines"])
        if b is None:
            _err(errors, "ingest.skip_blank_lines", "must be a boolean")
        else:
            ingest["skip_blank_lines"] = b

    # ---- search ----
    raw_search = cfg_in.get("search", {})
    if not isinstance(raw_search, dict):
        _err(errors, "search", "must be a mapping")
        raw_search = {}
    _check_keys(errors, "search.", raw_search, ALLOWED_SEARCH)
    search = dict(DEFAULTS["search"])
    if "max_results" in raw_search:
        n = _coerce_int(raw_search["max_results"])
        if n is None or n < 0:
            _err(errors, "search.max_results", "must be an integer >= 0")
        else:
            search["max_results"] = n

    # ---- logging ----
    raw_logging = cfg_in.get("logging", {})
    if not isinstance(raw_logging, dict):
        _err(errors, "logging", "must be a mapping")
        raw_logging = {}
    _check_keys(errors, "logging.", raw_logging, ALLOWED_LOGGING)
    log_cfg = dict(DEFAULTS["logging"])
    if "level" in raw_logging:
        lvl = str(raw_logging["level"]).strip().upper()
        if lvl not in LOG_LEVELS:
            _err(errors, "logging.level", f"must be one of {list(LOG_LEVELS)}")
        else:
            log_cfg["level"] = lvl

    # ---- filters ----
    raw_filters = cfg_in.get("filters", [])
    filters: List[Dict[str, Any]] = []
    if raw_filters is None:
        raw_filters = []
    if not isinstance(raw_filters, list):
        _err(errors, "filters", "must be a list")
        raw_filters = []
    for i, rec in enumerate(raw_filters):
        try:
            filters.append(active_filter_to_dict(active_filter_from_dict(rec)))
        except FilterError as e:
            _err(errors, f"filters[{i}]", str(e))

    # If we collected errors, raise a single ConfigError with all messages (stable order)
    if errors:
        raise ConfigError("\n".join(errors))

    return {
        "version": CONFIG_VERSION,
        "ingest": ingest,
        "search": search,
        "logging": log_cfg,
        "filters": filters,
    }


# ------------------------------
# Verbose API: return warnings as a second value
# ------------------------------

def validate_config_verbose(cfg: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize configuration, returning (normalized_cfg, warnings).

    Warnings currently include:
    - Filters present but every one of them disabled.
    - The same filter listed more than once.
    """
    normalized = _validate_config_normalize_impl(cfg)  # will raise ConfigError on errors

    warnings: List[str] = []
    filters = normalized["filters"]
    if filters and all(f["status"] == "disabled" for f in filters):
        warnings.append("W[filters]: all filters are disabled; every entry will be shown.")
    seen: List[Dict[str, Any]] = []
    for i, f in enumerate(filters):
        if f["filter"] in seen:
            warnings.append(f"W[filters[{i}]]: duplicate of an earlier filter ({f['filter']['kind']}).")
        seen.append(f["filter"])
    return normalized, warnings


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Validate configuration; return the normalized dict or raise ConfigError."""
    return _validate_config_normalize_impl(cfg)
