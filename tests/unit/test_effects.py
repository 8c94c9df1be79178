"""Unit tests for effect descriptors and their constructors."""

import dataclasses

import pytest

from fxplan.effects import (
    All,
    Call,
    CallMethod,
    Itself,
    Race,
    all_,
    call,
    call_method,
    describe_effect,
    itself,
    race,
)


def test_constructors_build_tagged_descriptors():
    """Test that each constructor returns the matching variant with its kind tag."""
    assert call(max, [1, 2]) == Call(max, [1, 2], None, {})
    assert call(max, [1, 2]).kind == "call"
    assert call_method("abc", "upper") == CallMethod("abc", "upper", (), {})
    assert call_method("abc", "upper").kind == "call_method"
    assert all_([itself(1)]).kind == "all"
    assert race([itself(1)]).kind == "race"
    assert itself(1) == Itself(1)
    assert itself(1).kind == "itself"


def test_constructors_are_idempotent():
    """Test that identical arguments produce value-equal descriptors."""
    assert call(max, [1, 2], context=None, default=0) == call(max, [1, 2], default=0)
    assert call_method(str, "join", [",", ["a"]]) == call_method(str, "join", [",", ["a"]])
    assert all_([itself(1), itself(2)]) == All([Itself(1), Itself(2)])
    assert race([itself(1)]) == Race([Itself(1)])
    assert itself("x") == itself("x")
    assert itself("x") != itself("y")


def test_arguments_are_stored_as_given():
    """Test that constructors store their arguments without validation or copying."""
    args = [1, 2]
    effect = call("not callable", args)
    assert effect.func == "not callable"
    assert effect.args is args


def test_itself_does_not_unwrap_effects_or_plans():
    """Test that itself() keeps effects and plans as opaque payloads."""
    inner = call(max, [1, 2])
    assert itself(inner).value is inner

    plan = (inner, None)
    assert itself(plan).value is plan


def test_effects_are_immutable():
    """Test that effect descriptors cannot be mutated after construction."""
    effect = itself(1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        effect.value = 2  # type: ignore[misc]


def test_describe_effect():
    """Test the short labels used in logs and error messages."""
    assert describe_effect(call(max, [1])) == "call(max)"
    assert describe_effect(call_method(str, "upper")) == "call_method(str.upper)"
    assert describe_effect(call_method("abc", "upper")) == "call_method(str.upper)"
    assert describe_effect(all_([itself(1), itself(2)])) == "all[2]"
    assert describe_effect(race([])) == "race[0]"
    assert describe_effect(itself("x")) == "itself('x')"
    assert describe_effect(42) == "42"
