## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from lamfl.types import Ref, Primitive, Lambda, Const, Ident, Call, TupleExpr, LinkedLambda
from lamfl.errors import InternalConsistency
from lamfl.linker import link_program
from lamfl.parser import parse
from lamfl.validating import iter_references, check_linked, validate_linked

import pytest


def _linked(source: str):
    return link_program(parse(source))


@pytest.mark.parametrize("source", [
    '"A"',
    '(x => x) "A"',
    'x => y => z => {z, y, x}',
    '(x => {x, y => {y, x => {x, y}}}) "A"',
    'a => b => c => (d => {a, c, d}) b',
])
def test_linked_programs_have_no_out_of_range_offsets(source):
    linked = _linked(source)
    assert check_linked(linked) == (True, "")
    assert validate_linked(linked) is linked


def test_references_report_the_stack_they_read():
    refs = [(ref, depth) for ref, depth, _ in iter_references(_linked("x => y => {x, y}"))]
    # Capture of `x` reads the outer lambda's stack (1 slot), the body reads its own (2 slots).
    assert refs == [(Ref(0), 1), (Ref(0), 2), (Ref(1), 2)]


def test_out_of_range_body_offset_is_detected():
    bad = Const(Lambda(LinkedLambda((), Ident(Ref(1)))))
    ok, message = check_linked(bad)
    assert not ok and "@1" in message
    with pytest.raises(InternalConsistency) as info:
        validate_linked(bad)
    assert info.value.ref == Ref(1) and info.value.depth == 1


def test_out_of_range_capture_is_detected():
    bad = Const(Lambda(LinkedLambda((Ref(0),), Ident(Ref(0)))))
    assert check_linked(bad)[0] is False
    assert check_linked(bad, depth=1) == (True, "")


def test_unresolved_names_are_detected():
    ok, message = check_linked(Call(Ident("f"), TupleExpr((Const(Primitive("a")),))))
    assert not ok and "not a stack offset" in message


def test_unexpected_nodes_are_rejected():
    with pytest.raises(InternalConsistency):
        check_linked(Const(object()))
