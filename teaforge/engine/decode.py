from __future__ import annotations

"""
Decode one (already string-expanded) log record into a LogEntry.

Record shapes:
  {"type": "init",   "timestamp": n, "model": v | "modelDiff": [ops], "effects"?: [...]}
  {"type": "update", "timestamp": n, "message": {...}, "model": v | "modelDiff": [ops], "effects"?: [...]}
  {"type": "subscriptionChange", "timestamp": n, "started"?: [...], "stopped"?: [...]}

`previous` is the snapshot left by the preceding init/update record. It becomes
the update's `model_before` and the base any `modelDiff` is applied to. A full
`model` wins when a record carries both.
"""
from typing import Any, Callable, Tuple, TypeVar

from ..errors import DecodeError
from .patch import apply_patch, decode_patch
from .types import (
    Effect,
    InitEntry,
    LogEntry,
    Message,
    Subscription,
    SubscriptionChangeEntry,
    UpdateEntry,
)

__all__ = ["decode_entry", "decode_model", "ENTRY_TYPES"]

ENTRY_TYPES = ("init", "update", "subscriptionChange")

T = TypeVar("T")


def _timestamp(record: dict) -> float:
    ts = record.get("timestamp")
    if isinstance(ts, bool) or not isinstance(ts, (int, float)):
        raise DecodeError("missing numeric 'timestamp'")
    return ts


def _named(value: Any, what: str, factory: Callable[[str, Any], T]) -> T:
    if isinstance(value, str):
        return factory(value, None)
    if isinstance(value, dict) and isinstance(value.get("name"), str):
        return factory(value["name"], value.get("payload" if what == "message" else "data"))
    raise DecodeError(f"{what} must be a name or an object with a string 'name'")


def _named_list(record: dict, field_name: str, what: str, factory: Callable[[str, Any], T]) -> Tuple[T, ...]:
    raw = record.get(field_name)
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise DecodeError(f"'{field_name}' must be a list")
    return tuple(_named(v, what, factory) for v in raw)


def decode_model(record: dict, previous: Any) -> Any:
    """Return the full snapshot carried by `record`, rebuilding it from `modelDiff` if needed."""
    if "model" in record:
        return record["model"]
    if "modelDiff" in record:
        return apply_patch(previous, decode_patch(record["modelDiff"]))
    raise DecodeError("record carries neither 'model' nor 'modelDiff'")


def decode_entry(record: Any, previous: Any = None) -> LogEntry:
    if not isinstance(record, dict):
        raise DecodeError(f"log record must be an object, got {type(record).__name__}")
    kind = record.get("type")
    if kind == "init":
        return InitEntry(
            timestamp=_timestamp(record),
            model=decode_model(record, previous),
            effects=_named_list(record, "effects", "effect", Effect),
        )
    if kind == "update":
        if "message" not in record:
            raise DecodeError("update record is missing 'message'")
        return UpdateEntry(
            timestamp=_timestamp(record),
            message=_named(record["message"], "message", Message),
            model_before=previous,
            model_after=decode_model(record, previous),
            effects=_named_list(record, "effects", "effect", Effect),
        )
    if kind == "subscriptionChange":
        return SubscriptionChangeEntry(
            timestamp=_timestamp(record),
            started=_named_list(record, "started", "subscription", Subscription),
            stopped=_named_list(record, "stopped", "subscription", Subscription),
        )
    raise DecodeError(f"unknown entry type: {kind!r}")
