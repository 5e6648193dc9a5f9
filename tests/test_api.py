## lamfl — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lamfl.api as L


def test_run_string():
    assert L.run('(x => x) "a"') == L.Primitive("a")


def test_values_convert_to_python():
    assert L.from_value(L.run('{"a", {"b"}, {}}')) == ("a", ("b",), ())
    assert L.to_value(["a", ("b",)]) == L.Tuple((L.Primitive("a"), L.Tuple((L.Primitive("b"),))))
    assert L.to_value(None) == L.unit


def test_program_building_and_eval():
    expr = L.call(L.lam("x", "y", L.tup("y", "x")), L.lit("a"), L.lit("b"))
    assert L.from_value(L.eval(L.link(expr))) == ("b", "a")


def test_apply_lambda_from_host():
    dup = L.run("x => {x, x}")
    assert L.from_value(L.apply(dup, L.to_value("v"))) == ("v", "v")

    pair_with_a = L.run('(x => y => {x, y}) "a"')
    assert L.from_value(L.apply(pair_with_a, L.to_value("b"))) == ("a", "b")


def test_apply_non_function_fails():
    try:
        L.apply(L.to_value("a"), L.unit)
    except L.TypeMismatch as exc:
        assert exc.value == L.Primitive("a")
    else:
        assert False, "expected a type mismatch"


def test_validation_helpers():
    linked = L.link(L.parse("x => y => x"))
    assert L.can_eval(linked) == (True, "")
    assert L.validate(linked) is linked


def test_format_round_trip():
    assert L.format(L.parse("f (x => x) {}")) == "f (x => x) {}"
