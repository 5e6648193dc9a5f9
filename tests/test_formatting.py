## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from lamfl.types import Primitive, Tuple, unit
from lamfl.formatting import format_value, format_expr, show_frame, write_without_ansi
from lamfl.linker import link_program
from lamfl.interpreter import evaluate
from lamfl.parser import parse

import pytest


def test_values():
    assert format_value(Primitive("a")) == '"a"'
    assert format_value(Primitive('say "hi"')) == '"say \\"hi\\""'
    assert format_value(Tuple((Primitive("a"), unit))) == '{"a", {}}'


@pytest.mark.parametrize("source", [
    'x => y => {x, y}',
    'f a b',
    'f (g x)',
    '(x => x) "A"',
    'f (x => x)',
    '{x => x, {}}',
])
def test_unlinked_trees_print_as_source(source):
    assert format_expr(parse(source)) == source


def test_linked_trees_show_offsets_and_captures():
    assert format_expr(link_program(parse("x => y => {x, y}"))) == "λ[] => λ[@0] => {@0, @1}"


def test_closures_show_their_environment():
    closure = evaluate(link_program(parse('(x => y => x) "A"')))
    assert format_value(closure) == 'λ<"A"> => @0'
    assert format_value(closure, abbreviate=True) == '≪closure:1≫'


def test_long_text_is_abbreviated():
    assert format_value(Primitive("x" * 40), abbreviate=True) == '≪text:40≫'


def test_show_frame(capsys):
    show_frame([], width=None)
    show_frame([Primitive("a"), unit], width=None)
    assert capsys.readouterr().out == '∅\n< "a" {} >\n'


def test_write_without_ansi():
    out = []
    write_without_ansi(out.append)("\033[97mplain\033[0m")
    assert out == ["plain"]
