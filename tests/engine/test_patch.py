import copy

import pytest

from teaforge.engine.patch import (
    AddOp,
    RemoveOp,
    ReplaceOp,
    apply_patch,
    decode_operation,
    decode_patch,
    encode_operation,
    remove_at_path,
    set_at_path,
)
from teaforge.errors import DecodeError


# ------------- helpers -------------


def ops(*records):
    return decode_patch(list(records))


# ------------- apply -------------


def test_append_to_array():
    out = apply_patch({"items": [1, 2]}, ops({"op": "add", "path": "/items/-", "value": 3}))
    assert out == {"items": [1, 2, 3]}


def test_empty_patch_is_identity():
    base = {"a": [1, {"b": None}]}
    assert apply_patch(base, []) == base


def test_inputs_are_not_mutated():
    base = {"a": {"b": [1, 2]}, "c": 1}
    snapshot = copy.deepcopy(base)
    out = apply_patch(
        base,
        ops(
            {"op": "replace", "path": "/a/b/0", "value": 10},
            {"op": "remove", "path": "/c"},
            {"op": "add", "path": "/d", "value": {"e": 1}},
        ),
    )
    assert base == snapshot
    assert out == {"a": {"b": [10, 2]}, "d": {"e": 1}}


def test_untouched_siblings_are_shared():
    sibling = {"deep": [1, 2, 3]}
    base = {"keep": sibling, "edit": 1}
    out = set_at_path(("edit",), 2, base)
    assert out["keep"] is sibling


def test_existing_key_keeps_its_position():
    out = set_at_path(("b",), 20, {"a": 1, "b": 2, "c": 3})
    assert list(out) == ["a", "b", "c"]
    assert out["b"] == 20


def test_new_key_is_appended():
    out = set_at_path(("z",), 0, {"b": 1, "a": 2})
    assert list(out) == ["b", "a", "z"]


def test_add_and_replace_behave_the_same():
    base = {"a": 1}
    for cls in (AddOp, ReplaceOp):
        assert apply_patch(base, [cls(("a",), 2)]) == {"a": 2}
        assert apply_patch(base, [cls(("b",), 2)]) == {"a": 1, "b": 2}


def test_root_add_replaces_whole_value():
    assert apply_patch({"a": 1}, ops({"op": "add", "path": "", "value": [1]})) == [1]
    assert apply_patch(None, ops({"op": "replace", "path": "", "value": {"x": 1}})) == {"x": 1}


def test_array_index_overwrites_in_place():
    assert set_at_path(("1",), "x", ["a", "b", "c"]) == ["a", "x", "c"]


def test_remove_array_element_reindexes():
    assert remove_at_path(("1",), ["a", "b", "c"]) == ["a", "c"]


def test_remove_root_is_noop():
    base = {"a": 1}
    assert apply_patch(base, ops({"op": "remove", "path": ""})) == base


@pytest.mark.parametrize(
    "base,op",
    [
        ({"a": "text"}, {"op": "add", "path": "/a/b", "value": 1}),  # into a string
        ({"a": [1]}, {"op": "replace", "path": "/a/x", "value": 1}),  # non-numeric index
        ({"a": [1]}, {"op": "replace", "path": "/a/5", "value": 1}),  # out of range
        ({"a": [1]}, {"op": "add", "path": "/a/-/b", "value": 1}),  # append mid-path
        ({"a": {}}, {"op": "add", "path": "/missing/b", "value": 1}),  # missing parent
        ({"a": 1}, {"op": "remove", "path": "/nope"}),
        ({"a": [1]}, {"op": "remove", "path": "/a/3"}),
        ({"a": 1}, {"op": "remove", "path": "/a/b"}),
        (5, {"op": "add", "path": "/a", "value": 1}),
    ],
)
def test_unreachable_paths_are_silent_noops(base, op):
    assert apply_patch(base, ops(op)) == base


def test_malformed_pointer_targets_root():
    # no leading slash: treated as the root path
    assert apply_patch({"a": 1}, ops({"op": "add", "path": "a", "value": 7})) == 7


def test_escaped_keys():
    out = apply_patch({}, ops({"op": "add", "path": "/a~1b", "value": 1}, {"op": "add", "path": "/c~0d", "value": 2}))
    assert out == {"a/b": 1, "c~d": 2}


def test_sequential_application_is_associative():
    base = {"items": [1, 2, 3], "user": {"name": "ann"}}
    ops1 = ops(
        {"op": "add", "path": "/items/-", "value": 4},
        {"op": "replace", "path": "/user/name", "value": "bob"},
    )
    ops2 = ops(
        {"op": "remove", "path": "/items/0"},
        {"op": "add", "path": "/user/age", "value": 30},
        {"op": "remove", "path": "/nothing"},
    )
    assert apply_patch(apply_patch(base, ops1), ops2) == apply_patch(base, ops1 + ops2)


# ------------- decode -------------


def test_decode_operations():
    assert decode_operation({"op": "add", "path": "/a", "value": None}) == AddOp(("a",), None)
    assert decode_operation({"op": "replace", "path": "/a/0", "value": 1}) == ReplaceOp(("a", "0"), 1)
    assert decode_operation({"op": "remove", "path": "/a"}) == RemoveOp(("a",))


@pytest.mark.parametrize(
    "record",
    [
        {"op": "move", "path": "/a", "from": "/b"},
        {"op": "test", "path": "/a", "value": 1},
        {"path": "/a", "value": 1},
        {"op": "add", "value": 1},
        {"op": "add", "path": "/a"},
        {"op": "remove", "path": 3},
        ["add", "/a"],
    ],
)
def test_decode_rejects_malformed_operations(record):
    with pytest.raises(DecodeError):
        decode_operation(record)


def test_decode_patch_requires_list():
    with pytest.raises(DecodeError):
        decode_patch({"op": "add"})


def test_encode_operation_uses_pointer_form():
    assert encode_operation(AddOp(("a/b", "-"), 1)) == {"op": "add", "path": "/a~1b/-", "value": 1}
    assert encode_operation(RemoveOp(("x",))) == {"op": "remove", "path": "/x"}


def test_deep_pointer_paths():
    depth = 2000
    base = 1
    for _ in range(depth):
        base = {"n": base}
    path = ("n",) * depth
    out = set_at_path(path, 2, base)
    cur = out
    for _ in range(depth):
        cur = cur["n"]
    assert cur == 2
    # base is untouched
    cur = base
    for _ in range(depth):
        cur = cur["n"]
    assert cur == 1
    stripped = remove_at_path(path, out)
    for _ in range(depth - 1):
        stripped = stripped["n"]
    assert stripped == {}


def test_unreachable_path_returns_base_unchanged():
    base = {"a": {"b": 1}}
    assert set_at_path(("a", "x", "y"), 2, base) is base
    assert remove_at_path(("a", "b", "c"), base) is base
