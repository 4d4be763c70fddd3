import pytest

from teaforge.engine.values import ValueKind, encode_scalar, equal, kind_of, render_scalar


@pytest.mark.parametrize(
    "value,kind",
    [
        ({}, ValueKind.OBJECT),
        ([], ValueKind.ARRAY),
        ("", ValueKind.STRING),
        (0, ValueKind.NUMBER),
        (1.5, ValueKind.NUMBER),
        (True, ValueKind.BOOLEAN),
        (None, ValueKind.NULL),
    ],
)
def test_kind_of(value, kind):
    assert kind_of(value) is kind


def test_kind_of_rejects_non_tree_values():
    with pytest.raises(TypeError):
        kind_of(object())


def test_bool_is_not_a_number():
    assert not equal(True, 1)
    assert not equal({"a": False}, {"a": 0})


def test_integral_floats_encode_like_ints():
    assert encode_scalar(1.0) == encode_scalar(1) == "1"
    assert encode_scalar(2.5) == "2.5"
    assert equal([1, 2.0], [1.0, 2])


def test_render_scalar():
    assert render_scalar("Hello") == "Hello"
    assert render_scalar(True) == "true"
    assert render_scalar(None) == "null"
    assert render_scalar(3.0) == "3"


def test_structural_equality_respects_key_sets():
    assert equal({"a": [1, {"b": None}]}, {"a": [1, {"b": None}]})
    assert not equal({"a": 1}, {"a": 1, "b": 2})
    assert not equal([1, 2], [1, 2, 3])


def test_equal_handles_deep_nesting():
    a, b, c = 1, 1, True
    for _ in range(2000):
        a, b, c = {"n": [a]}, {"n": [b]}, {"n": [c]}
    assert equal(a, b)
    assert not equal(a, c)
