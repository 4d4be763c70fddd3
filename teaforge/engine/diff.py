from __future__ import annotations

"""
Structural diff between two snapshots.

compare(before, after) walks both trees together and records, per dotted path,
how that path changed:

  TYPE_CHANGED  shapes differ (object/array/string/number/boolean/null); the
                subtree below is not visited
  ADDED         key/index only present in `after`
  REMOVED       key/index only present in `before`
  MODIFIED      scalars whose canonical encodings differ

Object keys that appear or disappear are reported together with every node of
their subtree, because consumers highlight leaf paths. Array elements that
appear or disappear (growth/truncation) are reported at the index only. Callers
rely on this asymmetry; changing it changes the result contract.
"""
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .paths import Path, child, to_dotted
from .values import ValueKind, encode_scalar, kind_of

__all__ = ["ChangeKind", "DiffResult", "compare", "compare_values"]


class ChangeKind(enum.Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    TYPE_CHANGED = "type_changed"


@dataclass
class DiffResult:
    changes: Dict[str, ChangeKind] = field(default_factory=dict)

    @property
    def changed_paths(self) -> List[str]:
        return list(self.changes)

    @property
    def added_count(self) -> int:
        return sum(1 for k in self.changes.values() if k is ChangeKind.ADDED)

    @property
    def removed_count(self) -> int:
        return sum(1 for k in self.changes.values() if k is ChangeKind.REMOVED)

    @property
    def modified_count(self) -> int:
        return sum(
            1
            for k in self.changes.values()
            if k in (ChangeKind.MODIFIED, ChangeKind.TYPE_CHANGED)
        )

    @property
    def is_empty(self) -> bool:
        return not self.changes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "changes": {p: k.value for p, k in self.changes.items()},
            "added": self.added_count,
            "removed": self.removed_count,
            "modified": self.modified_count,
        }


# Work items on the explicit stack: (step, path, x, y)
_COMPARE = 0  # x=before, y=after
_MARK = 1  # x=subtree value, y=kind; marks every node of the subtree
_SET = 2  # y=kind at path only


def _mark_steps(path: Path, value: Any, kind: ChangeKind) -> List[tuple]:
    vk = kind_of(value)
    if vk is ValueKind.OBJECT:
        return [(_MARK, child(path, k), v, kind) for k, v in value.items()]
    if vk is ValueKind.ARRAY:
        return [(_MARK, child(path, i), v, kind) for i, v in enumerate(value)]
    return []


def _object_steps(path: Path, before: dict, after: dict) -> List[tuple]:
    steps = []
    for k, bv in before.items():
        if k in after:
            steps.append((_COMPARE, child(path, k), bv, after[k]))
        else:
            steps.append((_MARK, child(path, k), bv, ChangeKind.REMOVED))
    for k, av in after.items():
        if k not in before:
            steps.append((_MARK, child(path, k), av, ChangeKind.ADDED))
    return steps


def _array_steps(path: Path, before: list, after: list) -> List[tuple]:
    nb, na = len(before), len(after)
    steps = []
    for i in range(max(nb, na)):
        p = child(path, i)
        if i < nb and i < na:
            steps.append((_COMPARE, p, before[i], after[i]))
        elif i < nb:
            steps.append((_SET, p, None, ChangeKind.REMOVED))
        else:
            steps.append((_SET, p, None, ChangeKind.ADDED))
    return steps


def compare_values(path: Path, before: Any, after: Any, out: Dict[str, ChangeKind]) -> None:
    """Record the changes between `before` and `after` below `path` into `out`.

    Walks with an explicit stack, so nesting depth is not bounded by the
    interpreter's recursion limit. Paths are recorded in pre-order.
    """
    stack: List[tuple] = [(_COMPARE, path, before, after)]
    while stack:
        step, p, x, y = stack.pop()
        if step == _SET:
            out[to_dotted(p)] = y
            continue
        if step == _MARK:
            out[to_dotted(p)] = y
            stack.extend(reversed(_mark_steps(p, x, y)))
            continue
        kb, ka = kind_of(x), kind_of(y)
        if kb is not ka:
            out[to_dotted(p)] = ChangeKind.TYPE_CHANGED
        elif kb is ValueKind.OBJECT:
            stack.extend(reversed(_object_steps(p, x, y)))
        elif kb is ValueKind.ARRAY:
            stack.extend(reversed(_array_steps(p, x, y)))
        elif kb is not ValueKind.NULL and encode_scalar(x) != encode_scalar(y):
            out[to_dotted(p)] = ChangeKind.MODIFIED


def compare(before: Any, after: Any) -> DiffResult:
    out: Dict[str, ChangeKind] = {}
    compare_values((), before, after, out)
    return DiffResult(out)
