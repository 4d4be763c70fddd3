from __future__ import annotations

"""
Tree value model.

Tree values are plain decoded JSON: dict (ordered, string keys), list, str,
int/float, bool and None. `kind_of` is the one place that classifies a value's
shape; every engine dispatches on its result.

Note: `bool` is a subclass of `int` in Python, so it is tested before Number.
"""
import enum
import json
import math
from typing import Any, Dict, List, Union

__all__ = [
    "TreeValue",
    "ValueKind",
    "kind_of",
    "is_composite",
    "equal",
    "encode_scalar",
    "render_scalar",
]

TreeValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]


class ValueKind(enum.Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


def kind_of(value: Any) -> ValueKind:
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    raise TypeError(f"not a tree value: {type(value).__name__}")


def is_composite(value: Any) -> bool:
    return kind_of(value) in (ValueKind.OBJECT, ValueKind.ARRAY)


def equal(a: Any, b: Any) -> bool:
    """Structural equality that keeps booleans and numbers apart (True != 1)."""
    pending = [(a, b)]
    while pending:
        x, y = pending.pop()
        kx = kind_of(x)
        if kx is not kind_of(y):
            return False
        if kx is ValueKind.OBJECT:
            if x.keys() != y.keys():
                return False
            pending.extend((x[k], y[k]) for k in x)
        elif kx is ValueKind.ARRAY:
            if len(x) != len(y):
                return False
            pending.extend(zip(x, y))
        elif kx is ValueKind.NUMBER:
            if encode_scalar(x) != encode_scalar(y):
                return False
        elif x != y:
            return False
    return True


def _encode_number(n: Union[int, float]) -> str:
    if isinstance(n, float):
        if math.isfinite(n) and n.is_integer():
            return str(int(n))
        return repr(n)
    return str(n)


def encode_scalar(value: Any) -> str:
    """Canonical text encoding of a scalar; integral floats drop their fraction."""
    kind = kind_of(value)
    if kind is ValueKind.STRING:
        return json.dumps(value, ensure_ascii=False)
    if kind is ValueKind.NUMBER:
        return _encode_number(value)
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.NULL:
        return "null"
    # composites are compared structurally, but keep this total for callers
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def render_scalar(value: Any) -> str:
    """Text a scalar is searched by: strings verbatim, everything else canonical."""
    if isinstance(value, str):
        return value
    return encode_scalar(value)
