## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# lamfl — Helpers to assemble unlinked expression trees from Python without going via text.
#

from .types import Primitive, Lambda, Tuple, Const, Ident, Call, TupleExpr, UnlinkedLambda, UnlinkedExpr


def as_expr(node) -> UnlinkedExpr:
    """Coerce builder arguments: strings are identifiers, values and lambdas become constants."""
    match node:
        case str():
            return Ident(node)
        case UnlinkedLambda():
            return Const(Lambda(node))
        case Primitive() | Lambda() | Tuple():
            return Const(node)
        case Const() | Ident() | Call() | TupleExpr():
            return node
    raise TypeError(f"Cannot build an expression from {type(node).__name__}.")


def ident(name: str) -> Ident:
    return Ident(name)

def lit(text: str) -> Const:
    return Const(Primitive(text))


def lam(*parts) -> Const:
    """`lam("x", "y", body)` is the curried lambda `x => y => body`."""
    *params, body = parts
    if not params:
        raise TypeError("A lambda needs at least one parameter.")
    if not all(isinstance(p, str) for p in params):
        raise TypeError("Lambda parameters must be names.")

    expr = as_expr(body)
    for p in reversed(params):
        expr = Const(Lambda(UnlinkedLambda(p, expr)))
    return expr


def tup(*fields) -> TupleExpr:
    return TupleExpr(tuple(as_expr(f) for f in fields))


def call(target, *arguments) -> Call:
    """Left-associative application: `call(f, a, b)` is `(f a) b`."""
    if not arguments:
        raise TypeError("A call needs at least one argument.")
    expr = as_expr(target)
    for arg in arguments:
        expr = Call(expr, as_expr(arg))
    return expr
