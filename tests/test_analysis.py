## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from lamfl.types import Primitive, Lambda, Tuple, Const, Ident, UnlinkedLambda
from lamfl.analysis import free_names
from lamfl.parser import parse

import pytest


def test_identifier_is_free():
    assert free_names(Ident("x")) == {"x"}


def test_literals_have_no_free_names():
    assert free_names(Const(Primitive("x"))) == frozenset()
    assert free_names(parse('{"a", {}}')) == frozenset()


def test_call_and_tuple_are_unions():
    assert free_names(parse("f a")) == {"f", "a"}
    assert free_names(parse("{a, b, a}")) == {"a", "b"}


def test_lambda_removes_only_its_own_parameter():
    assert free_names(parse("x => {x, y}")) == {"y"}
    assert free_names(UnlinkedLambda("x", parse("{x, y}"))) == {"y"}


def test_nested_lambdas_bind_their_own_scope():
    assert free_names(parse("x => y => {x, y, z}")) == {"z"}
    # `y` is bound in the inner lambda only, so the argument `y` stays free.
    assert free_names(parse("x => (y => x) y")) == {"y"}


def test_shadowed_parameter_still_binds():
    assert free_names(parse("x => x => x")) == frozenset()


def test_lambdas_inside_constant_tuples_are_analyzed():
    value = Tuple((Primitive("a"), Lambda(UnlinkedLambda("y", parse("{x, y}")))))
    assert free_names(Const(value)) == {"x"}


def test_unknown_nodes_are_rejected():
    with pytest.raises(NotImplementedError):
        free_names(42)
