from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

__all__ = [
    "Message",
    "Effect",
    "Subscription",
    "InitEntry",
    "UpdateEntry",
    "SubscriptionChangeEntry",
    "ErrorEntry",
    "LogEntry",
    "entry_kind",
    "entry_model",
]

# ---- Payload records ----


@dataclass(frozen=True)
class Message:
    name: str
    payload: Any = None


@dataclass(frozen=True)
class Effect:
    name: str
    data: Any = None


@dataclass(frozen=True)
class Subscription:
    name: str
    data: Any = None


# ---- Log entries ----


@dataclass(frozen=True)
class InitEntry:
    timestamp: float
    model: Any
    effects: Tuple[Effect, ...] = ()


@dataclass(frozen=True)
class UpdateEntry:
    timestamp: float
    message: Message
    model_before: Any
    model_after: Any
    effects: Tuple[Effect, ...] = ()


@dataclass(frozen=True)
class SubscriptionChangeEntry:
    timestamp: float
    started: Tuple[Subscription, ...] = ()
    stopped: Tuple[Subscription, ...] = ()


@dataclass(frozen=True)
class ErrorEntry:
    line_number: int
    raw_text: str
    reason: str


LogEntry = Union[InitEntry, UpdateEntry, SubscriptionChangeEntry, ErrorEntry]


def entry_kind(entry: LogEntry) -> str:
    if isinstance(entry, InitEntry):
        return "init"
    if isinstance(entry, UpdateEntry):
        return "update"
    if isinstance(entry, SubscriptionChangeEntry):
        return "subscriptionChange"
    return "error"


def entry_model(entry: LogEntry) -> Optional[Any]:
    """Snapshot after the entry, or None for entries that carry no model."""
    if isinstance(entry, InitEntry):
        return entry.model
    if isinstance(entry, UpdateEntry):
        return entry.model_after
    return None


