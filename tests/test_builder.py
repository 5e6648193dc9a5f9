## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from lamfl.types import Primitive, Lambda, Const, Ident, UnlinkedLambda, unit
from lamfl.builder import as_expr, ident, lit, lam, tup, call
from lamfl.parser import parse

import pytest


def test_builders_match_parsed_source():
    assert lam("x", "y", tup("x", "y")) == parse("x y => {x, y}")
    assert call("f", "a", "b") == parse("f a b")
    assert call(lam("x", "x"), lit("A")) == parse('(x => x) "A"')
    assert tup() == parse("{}")


def test_coercions():
    assert as_expr("x") == ident("x")
    assert as_expr(Primitive("a")) == lit("a")
    assert as_expr(unit) == Const(unit)
    fn = UnlinkedLambda("x", Ident("x"))
    assert as_expr(fn) == Const(Lambda(fn))


def test_invalid_builds_are_rejected():
    with pytest.raises(TypeError):
        lam(tup())
    with pytest.raises(TypeError):
        lam(1, "x")
    with pytest.raises(TypeError):
        call("f")
    with pytest.raises(TypeError):
        as_expr(3)
