from __future__ import annotations

"""
Entry filters.

Ten closed filter variants, each a frozen dataclass with a `matches(entry)`
predicate. Filters are paired with an enabled flag (`ActiveFilter`) and combined
by `matches_entry`:

- init and error entries always pass;
- disabled filters are dropped before evaluation;
- the remaining predicates are ANDed.

Categories only group filters for display; they take no part in evaluation.

Serialized form:
    {"status": "enabled" | "disabled", "filter": {"kind": "<tag>", ...fields}}
"""
import enum
from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Tuple, Type, Union

from ..errors import FilterError
from .diff import compare
from .paths import is_within, parse_dotted
from .search import value_contains
from .types import (
    ErrorEntry,
    InitEntry,
    LogEntry,
    SubscriptionChangeEntry,
    UpdateEntry,
)
from .values import ValueKind, is_composite, kind_of, render_scalar

__all__ = [
    "Category",
    "MessageNameFilter",
    "MessageFieldFilter",
    "ModelChangedFilter",
    "ModelFieldChangedFilter",
    "ModelValueFilter",
    "HasEffectsFilter",
    "EffectNameFilter",
    "EffectFieldFilter",
    "SubscriptionNameFilter",
    "SubscriptionFieldFilter",
    "Filter",
    "FILTER_TYPES",
    "ActiveFilter",
    "ActiveFilters",
    "matches_entry",
    "fuzzy_match",
    "field_matches",
    "describe",
    "filter_to_dict",
    "filter_from_dict",
    "active_filter_to_dict",
    "active_filter_from_dict",
]

WILDCARD_KEY = "*"


class Category(enum.Enum):
    MESSAGE = "Message"
    MODEL = "Model"
    EFFECTS = "Effects"
    SUBSCRIPTIONS = "Subscriptions"


# ---- matching primitives --------------------------------------------------

def fuzzy_match(query: str, target: str) -> bool:
    """Case-insensitive subsequence test: every query char appears in order in target."""
    q = query.lower()
    t = target.lower()
    qi = 0
    for ch in t:
        if qi == len(q):
            break
        if ch == q[qi]:
            qi += 1
    return qi == len(q)


_MISSING = object()


def _lookup(value: Any, key: str) -> Any:
    cur = value
    for seg in parse_dotted(key):
        kind = kind_of(cur)
        if kind is ValueKind.OBJECT and seg in cur:
            cur = cur[seg]
        elif kind is ValueKind.ARRAY and seg.isascii() and seg.isdigit() and int(seg) < len(cur):
            cur = cur[int(seg)]
        else:
            return _MISSING
    return cur


def _scalar_contains(value: Any, needle: str) -> bool:
    return needle.lower() in render_scalar(value).lower()


def field_matches(payload: Any, key: str, value: str) -> bool:
    """Match `value` at dotted `key` of `payload`; "*" searches the whole payload.

    A composite target is searched one level deep: its immediate scalar
    children are tested, grandchildren are not.
    """
    if key == WILDCARD_KEY:
        return value_contains(payload, value)
    target = _lookup(payload, key)
    if target is _MISSING:
        return False
    if is_composite(target):
        children = target.values() if isinstance(target, dict) else target
        return any(not is_composite(c) and _scalar_contains(c, value) for c in children)
    return _scalar_contains(target, value)


# ---- filter variants ------------------------------------------------------

@dataclass(frozen=True)
class MessageNameFilter:
    query: str
    kind: ClassVar[str] = "message-name"
    category: ClassVar[Category] = Category.MESSAGE

    def matches(self, entry: LogEntry) -> bool:
        return isinstance(entry, UpdateEntry) and fuzzy_match(self.query, entry.message.name)


@dataclass(frozen=True)
class MessageFieldFilter:
    key: str
    value: str
    kind: ClassVar[str] = "message-field"
    category: ClassVar[Category] = Category.MESSAGE

    def matches(self, entry: LogEntry) -> bool:
        return isinstance(entry, UpdateEntry) and field_matches(
            entry.message.payload, self.key, self.value
        )


@dataclass(frozen=True)
class ModelChangedFilter:
    kind: ClassVar[str] = "model-changed"
    category: ClassVar[Category] = Category.MODEL

    def matches(self, entry: LogEntry) -> bool:
        if not isinstance(entry, UpdateEntry):
            return False
        return not compare(entry.model_before, entry.model_after).is_empty


@dataclass(frozen=True)
class ModelFieldChangedFilter:
    field_path: str
    kind: ClassVar[str] = "model-field-changed"
    category: ClassVar[Category] = Category.MODEL

    def matches(self, entry: LogEntry) -> bool:
        if not isinstance(entry, UpdateEntry):
            return False
        result = compare(entry.model_before, entry.model_after)
        return any(is_within(p, self.field_path) for p in result.changed_paths)


@dataclass(frozen=True)
class ModelValueFilter:
    key: str
    value: str
    kind: ClassVar[str] = "model-value"
    category: ClassVar[Category] = Category.MODEL

    def matches(self, entry: LogEntry) -> bool:
        return isinstance(entry, UpdateEntry) and field_matches(
            entry.model_after, self.key, self.value
        )


@dataclass(frozen=True)
class HasEffectsFilter:
    kind: ClassVar[str] = "has-effects"
    category: ClassVar[Category] = Category.EFFECTS

    def matches(self, entry: LogEntry) -> bool:
        return isinstance(entry, UpdateEntry) and len(entry.effects) > 0


@dataclass(frozen=True)
class EffectNameFilter:
    query: str
    kind: ClassVar[str] = "effect-name"
    category: ClassVar[Category] = Category.EFFECTS

    def matches(self, entry: LogEntry) -> bool:
        if not isinstance(entry, UpdateEntry):
            return False
        return any(fuzzy_match(self.query, e.name) for e in entry.effects)


@dataclass(frozen=True)
class EffectFieldFilter:
    key: str
    value: str
    kind: ClassVar[str] = "effect-field"
    category: ClassVar[Category] = Category.EFFECTS

    def matches(self, entry: LogEntry) -> bool:
        if not isinstance(entry, UpdateEntry):
            return False
        return any(field_matches(e.data, self.key, self.value) for e in entry.effects)


def _subscriptions(entry: SubscriptionChangeEntry):
    return entry.started + entry.stopped


@dataclass(frozen=True)
class SubscriptionNameFilter:
    query: str
    kind: ClassVar[str] = "subscription-name"
    category: ClassVar[Category] = Category.SUBSCRIPTIONS

    def matches(self, entry: LogEntry) -> bool:
        if not isinstance(entry, SubscriptionChangeEntry):
            return False
        return any(fuzzy_match(self.query, s.name) for s in _subscriptions(entry))


@dataclass(frozen=True)
class SubscriptionFieldFilter:
    key: str
    value: str
    kind: ClassVar[str] = "subscription-field"
    category: ClassVar[Category] = Category.SUBSCRIPTIONS

    def matches(self, entry: LogEntry) -> bool:
        if not isinstance(entry, SubscriptionChangeEntry):
            return False
        return any(field_matches(s.data, self.key, self.value) for s in _subscriptions(entry))


Filter = Union[
    MessageNameFilter,
    MessageFieldFilter,
    ModelChangedFilter,
    ModelFieldChangedFilter,
    ModelValueFilter,
    HasEffectsFilter,
    EffectNameFilter,
    EffectFieldFilter,
    SubscriptionNameFilter,
    SubscriptionFieldFilter,
]

FILTER_TYPES: Dict[str, Type[Any]] = {
    cls.kind: cls
    for cls in (
        MessageNameFilter,
        MessageFieldFilter,
        ModelChangedFilter,
        ModelFieldChangedFilter,
        ModelValueFilter,
        HasEffectsFilter,
        EffectNameFilter,
        EffectFieldFilter,
        SubscriptionNameFilter,
        SubscriptionFieldFilter,
    )
}


# ---- active filters -------------------------------------------------------

@dataclass(frozen=True)
class ActiveFilter:
    filter: Filter
    enabled: bool = True

    def toggled(self) -> "ActiveFilter":
        return replace(self, enabled=not self.enabled)


def matches_entry(active: Iterable[ActiveFilter], entry: LogEntry) -> bool:
    if isinstance(entry, (ErrorEntry, InitEntry)):
        return True
    enabled = [af.filter for af in active if af.enabled]
    return all(f.matches(entry) for f in enabled)


class ActiveFilters:
    """Ordered, editable list of active filters for one application session."""

    def __init__(self, items: Iterable[ActiveFilter] = ()) -> None:
        self._items: List[ActiveFilter] = list(items)

    def __iter__(self) -> Iterator[ActiveFilter]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> ActiveFilter:
        return self._items[self._check(index)]

    def _check(self, index: int) -> int:
        if not 0 <= index < len(self._items):
            raise FilterError(f"no filter at index {index} (have {len(self._items)})")
        return index

    def add(self, f: Filter, enabled: bool = True) -> ActiveFilter:
        af = ActiveFilter(f, enabled)
        self._items.append(af)
        return af

    def remove(self, index: int) -> ActiveFilter:
        return self._items.pop(self._check(index))

    def replace(self, index: int, f: Filter) -> ActiveFilter:
        i = self._check(index)
        self._items[i] = replace(self._items[i], filter=f)
        return self._items[i]

    def set_enabled(self, index: int, enabled: bool) -> ActiveFilter:
        i = self._check(index)
        self._items[i] = replace(self._items[i], enabled=bool(enabled))
        return self._items[i]

    def toggle(self, index: int) -> ActiveFilter:
        i = self._check(index)
        self._items[i] = self._items[i].toggled()
        return self._items[i]

    def clear(self) -> None:
        self._items = []

    def enabled_count(self) -> int:
        return sum(1 for af in self._items if af.enabled)

    def matches(self, entry: LogEntry) -> bool:
        return matches_entry(self._items, entry)

    def to_list(self) -> List[Dict[str, Any]]:
        return [active_filter_to_dict(af) for af in self._items]

    @classmethod
    def from_list(cls, records: Iterable[Any]) -> "ActiveFilters":
        return cls(active_filter_from_dict(r) for r in records)


# ---- display --------------------------------------------------------------

def describe(f: Filter) -> str:
    if isinstance(f, (MessageNameFilter, EffectNameFilter, SubscriptionNameFilter)):
        return f"{f.category.value.lower()} name ~ {f.query!r}"
    if isinstance(f, ModelFieldChangedFilter):
        return f"model changed at {f.field_path or '<root>'}"
    if isinstance(f, ModelChangedFilter):
        return "model changed"
    if isinstance(f, HasEffectsFilter):
        return "has effects"
    return f"{f.category.value.lower()} {f.key} = {f.value!r}"


# ---- serialization --------------------------------------------------------

def _wire_name(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def filter_to_dict(f: Filter) -> Dict[str, Any]:
    out: Dict[str, Any] = {"kind": f.kind}
    for fd in fields(f):
        out[_wire_name(fd.name)] = getattr(f, fd.name)
    return out


def filter_from_dict(record: Any) -> Filter:
    if not isinstance(record, dict):
        raise FilterError("filter must be an object")
    kind = record.get("kind")
    cls = FILTER_TYPES.get(kind) if isinstance(kind, str) else None
    if cls is None:
        raise FilterError(f"unknown filter kind: {kind!r}")
    kwargs: Dict[str, str] = {}
    for fd in fields(cls):
        wire = _wire_name(fd.name)
        v = record.get(wire)
        if not isinstance(v, str):
            raise FilterError(f"filter {kind!r} requires string field {wire!r}")
        kwargs[fd.name] = v
    return cls(**kwargs)


_STATUS: Tuple[str, str] = ("enabled", "disabled")


def active_filter_to_dict(af: ActiveFilter) -> Dict[str, Any]:
    return {"status": _STATUS[0] if af.enabled else _STATUS[1], "filter": filter_to_dict(af.filter)}


def active_filter_from_dict(record: Any) -> ActiveFilter:
    if not isinstance(record, dict):
        raise FilterError("active filter must be an object")
    status = record.get("status", "enabled")
    if status not in _STATUS:
        raise FilterError(f"filter status must be one of {list(_STATUS)}, got {status!r}")
    return ActiveFilter(filter_from_dict(record.get("filter")), status == "enabled")
