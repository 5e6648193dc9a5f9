## lamfl — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import dataclasses

from lamfl.types import Ref, Primitive, Lambda, Tuple, Const, Ident, TupleExpr, unit
from lamfl.types import UnlinkedLambda, LinkedLambda, Closure

import pytest


def test_ref_is_an_offset_with_compact_repr():
    r = Ref(3)
    assert r == 3 and isinstance(r, int)
    assert repr(r) == "@3"
    assert repr([Ref(0), Ref(1)]) == "[@0, @1]"


def test_default_value_is_the_empty_tuple():
    assert unit == Tuple(())
    assert len(unit) == 0
    assert Tuple() == unit


def test_sequences_are_normalized_to_tuples():
    t = Tuple([Primitive("a"), Primitive("b")])
    assert isinstance(t.items, tuple)
    assert [p.text for p in t] == ["a", "b"]
    assert t[1] == Primitive("b")

    e = TupleExpr([Ident("x")])
    assert e.fields == (Ident("x"),)

    fn = LinkedLambda([Ref(0)], Ident(Ref(0)))
    assert fn.captures == (Ref(0),)
    assert fn.frame_size == 2


def test_model_is_immutable():
    lam = UnlinkedLambda("x", Ident("x"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        lam.parameter = "y"
    with pytest.raises(dataclasses.FrozenInstanceError):
        Primitive("a").text = "b"


def test_tuple_order_is_part_of_equality():
    a, b = Primitive("a"), Primitive("b")
    assert Tuple((a, b)) != Tuple((b, a))
    assert Const(Tuple((a, b))) == Const(Tuple([a, b]))


def test_closure_environment_matches_captures():
    fn = LinkedLambda((Ref(0), Ref(2)), Ident(Ref(0)))
    Closure(fn, (Primitive("a"), Primitive("b")))
    with pytest.raises(AssertionError):
        Closure(fn, (Primitive("a"),))


def test_lambda_value_wraps_either_phase():
    unlinked = Lambda(UnlinkedLambda("x", Ident("x")))
    linked = Lambda(LinkedLambda((), Ident(Ref(0))))
    assert unlinked != linked
    assert isinstance(unlinked.function, UnlinkedLambda)
    assert isinstance(linked.function, LinkedLambda)
