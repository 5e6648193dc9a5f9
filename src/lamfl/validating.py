## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# lamfl — Static checks over linked trees, run before evaluation when `--validate` is set.
#

from typing import Iterator

from .types import Ref, Primitive, Lambda, Tuple, Const, Ident, Call, TupleExpr, LinkedLambda
from .errors import InternalConsistency


def iter_references(node, depth: int = 0) -> Iterator[tuple[Ref, int, object]]:
    """Yield `(ref, depth, node)` for every stack reference, with the depth of the stack it reads.

    Capture lists read the stack of the defining scope; a lambda's body reads its own stack,
    which holds one slot per capture plus one for the parameter.
    """
    match node:
        case Ident(key=ref):
            yield ref, depth, node
        case Call(target=target, argument=argument):
            yield from iter_references(target, depth)
            yield from iter_references(argument, depth)
        case TupleExpr(fields=items) | Tuple(items=items):
            for it in items:
                yield from iter_references(it, depth)
        case Const(value=value):
            yield from iter_references(value, depth)
        case Lambda(function=LinkedLambda() as fn):
            yield from iter_references(fn, depth)
        case LinkedLambda(captures=captures, body=body):
            for ref in captures:
                yield ref, depth, node
            yield from iter_references(body, len(captures) + 1)
        case Primitive():
            return
        case _:
            raise InternalConsistency(f"Unexpected `{type(node).__name__}` in linked tree.", lam_node=node)


def _problem(ref, size: int) -> str | None:
    if not isinstance(ref, Ref):
        return f"Reference `{ref!r}` is not a stack offset; the tree was not linked."
    if not (0 <= ref < size):
        return f"Offset {ref!r} is out of range for a stack with {size} item(s)."
    return None


def check_linked(expr, depth: int = 0) -> tuple[bool, str]:
    """Check all references of a linked tree are in range for a stack of `depth` items."""
    for ref, size, _ in iter_references(expr, depth):
        if (problem := _problem(ref, size)) is not None:
            return False, problem
    return True, ""


def validate_linked(expr, depth: int = 0):
    for ref, size, node in iter_references(expr, depth):
        if (problem := _problem(ref, size)) is not None:
            raise InternalConsistency(problem, ref=ref, depth=size, lam_node=node)
    return expr
