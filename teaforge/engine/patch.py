from __future__ import annotations

"""
Patch engine: rebuild snapshots from add/replace/remove operations.

Operations are addressed by JSON pointers and applied left to right. Every
step is copy-on-write: the containers along the path are rebuilt, untouched
siblings are shared, and neither the base nor the operation values are
mutated.

Navigation is permissive. A path that cannot be followed (a scalar where a
container is expected, a non-numeric or out-of-range array index, a missing
intermediate key) leaves the value unchanged instead of failing. Add and
Replace are interchangeable: neither checks whether the target exists.
"""
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from ..errors import DecodeError
from .paths import APPEND_TOKEN, Path, parse_pointer, to_pointer
from .values import ValueKind, kind_of

__all__ = [
    "AddOp",
    "ReplaceOp",
    "RemoveOp",
    "PatchOp",
    "apply_patch",
    "apply_operation",
    "set_at_path",
    "remove_at_path",
    "decode_operation",
    "decode_patch",
    "encode_operation",
]


@dataclass(frozen=True)
class AddOp:
    path: Path
    value: Any


@dataclass(frozen=True)
class ReplaceOp:
    path: Path
    value: Any


@dataclass(frozen=True)
class RemoveOp:
    path: Path


PatchOp = Union[AddOp, ReplaceOp, RemoveOp]


# ---- navigation -----------------------------------------------------------

_UNREACHABLE = object()


def _array_index(segment: str, length: int) -> Optional[int]:
    if not (segment.isascii() and segment.isdigit()):
        return None
    idx = int(segment)
    return idx if idx < length else None


def _navigate(current: Any, segment: str) -> Any:
    """Return the child of `current` at `segment`, or `_UNREACHABLE`.

    This is the only place that descends into a value.
    """
    kind = kind_of(current)
    if kind is ValueKind.OBJECT:
        return current[segment] if segment in current else _UNREACHABLE
    if kind is ValueKind.ARRAY:
        idx = _array_index(segment, len(current))
        return _UNREACHABLE if idx is None else current[idx]
    return _UNREACHABLE


def _replace_child(current: Any, segment: str, value: Any) -> Any:
    # `segment` was reached through _navigate
    if isinstance(current, dict):
        out = dict(current)
        out[segment] = value
        return out
    out_list = list(current)
    out_list[int(segment)] = value
    return out_list


def _rewrite(path: Sequence[str], current: Any, edit: Callable[[Any, str], Any]) -> Any:
    """Apply `edit(parent, last_segment)` at the end of `path`, copying every container above it.

    Iterative, so the depth of `path` is not limited by the recursion limit.
    When an intermediate segment cannot be followed, `current` is returned as-is.
    """
    trail = []
    node = current
    for segment in path[:-1]:
        nxt = _navigate(node, segment)
        if nxt is _UNREACHABLE:
            return current
        trail.append((node, segment))
        node = nxt
    updated = edit(node, path[-1])
    if updated is node:
        return current
    for parent, segment in reversed(trail):
        updated = _replace_child(parent, segment, updated)
    return updated


def _set_child(current: Any, segment: str, value: Any) -> Any:
    kind = kind_of(current)
    if kind is ValueKind.OBJECT:
        return _replace_child(current, segment, value)
    if kind is ValueKind.ARRAY:
        if segment == APPEND_TOKEN:
            return list(current) + [value]
        if _navigate(current, segment) is _UNREACHABLE:
            return current
        return _replace_child(current, segment, value)
    return current


def _remove_child(current: Any, segment: str) -> Any:
    kind = kind_of(current)
    if kind is ValueKind.OBJECT:
        if segment not in current:
            return current
        return {k: v for k, v in current.items() if k != segment}
    if kind is ValueKind.ARRAY:
        idx = _array_index(segment, len(current))
        if idx is None:
            return current
        return list(current[:idx]) + list(current[idx + 1 :])
    return current


# ---- operations -----------------------------------------------------------

def set_at_path(path: Sequence[str], value: Any, current: Any) -> Any:
    """Write `value` at `path`; the empty path replaces the whole value."""
    if not path:
        return value
    return _rewrite(path, current, lambda parent, last: _set_child(parent, last, value))


def remove_at_path(path: Sequence[str], current: Any) -> Any:
    """Delete the key or element at `path`; removing the root is a no-op."""
    if not path:
        return current
    return _rewrite(path, current, _remove_child)


def apply_operation(current: Any, op: PatchOp) -> Any:
    if isinstance(op, RemoveOp):
        return remove_at_path(op.path, current)
    return set_at_path(op.path, op.value, current)


def apply_patch(base: Any, ops: Iterable[PatchOp]) -> Any:
    acc = base
    for op in ops:
        acc = apply_operation(acc, op)
    return acc


# ---- wire codec -----------------------------------------------------------

def decode_operation(record: Any) -> PatchOp:
    """Decode one `{"op", "path", "value"?}` record; raises DecodeError."""
    if not isinstance(record, dict):
        raise DecodeError(f"patch operation must be an object, got {type(record).__name__}")
    op = record.get("op")
    raw_path = record.get("path")
    if not isinstance(raw_path, str):
        raise DecodeError(f"patch operation {op!r} is missing a string 'path'")
    path = parse_pointer(raw_path)
    if op == "remove":
        return RemoveOp(path)
    if op in ("add", "replace"):
        if "value" not in record:
            raise DecodeError(f"patch operation {op!r} at {raw_path!r} is missing 'value'")
        cls = AddOp if op == "add" else ReplaceOp
        return cls(path, record["value"])
    raise DecodeError(f"unknown patch op: {op!r}")


def decode_patch(records: Any) -> List[PatchOp]:
    if not isinstance(records, list):
        raise DecodeError("modelDiff must be a list of patch operations")
    return [decode_operation(r) for r in records]


def encode_operation(op: PatchOp) -> dict:
    if isinstance(op, RemoveOp):
        return {"op": "remove", "path": to_pointer(op.path)}
    name = "add" if isinstance(op, AddOp) else "replace"
    return {"op": name, "path": to_pointer(op.path), "value": op.value}
