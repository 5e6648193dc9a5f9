## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Sequence

from .types import Ref, Primitive, Lambda, Tuple, Const, Ident, Call, TupleExpr
from .types import UnlinkedLambda, LinkedLambda, UnlinkedExpr, LinkedExpr
from .errors import UnboundIdentifier
from .analysis import free_names


def _describe(names) -> str:
    return ', '.join(f"`{n}`" for n in sorted(names))


def link_lambda(lambda_: UnlinkedLambda, outer_scope: Sequence[str]) -> LinkedLambda:
    """Convert a lambda into a closure whose body only refers to its own stack.

    `outer_scope` lists the names bound in the defining scope, outermost first, so that
    position `i` of the scope is also position `i` of the stack the lambda is evaluated on.
    """
    unbound = set(free_names(lambda_))
    inner_scope, captures = [], []

    # Walk from the innermost binding outwards; captures are ordered by discovery.
    for depth, name in enumerate(reversed(outer_scope)):
        if not unbound: break
        if name in unbound:
            unbound.remove(name)
            inner_scope.append(name)
            captures.append(Ref(len(outer_scope) - 1 - depth))

    if unbound:
        raise UnboundIdentifier(
            f"Unbound identifier {_describe(unbound)} in lambda `{lambda_.parameter} => ...`.",
            names=unbound, scope=outer_scope, lam_node=lambda_)

    inner_scope.append(lambda_.parameter)
    return LinkedLambda(captures=tuple(captures), body=link_expr(lambda_.body, inner_scope))


def _resolve(name: str, scope: Sequence[str], node) -> Ref:
    # Innermost (rightmost) binding wins, which is how shadowing works.
    for i in range(len(scope) - 1, -1, -1):
        if scope[i] == name:
            return Ref(i)
    raise UnboundIdentifier(f"Unbound identifier `{name}`.", names=(name,), scope=scope, lam_node=node)


def link_value(value, scope: Sequence[str]):
    match value:
        case Primitive():
            return value
        case Lambda(function=UnlinkedLambda() as function):
            return Lambda(link_lambda(function, scope))
        case Tuple(items=items):
            return Tuple(tuple(link_value(it, scope) for it in items))
    raise NotImplementedError(f"Cannot link value of type {type(value).__name__}.")


def link_expr(expr: UnlinkedExpr, scope: Sequence[str]) -> LinkedExpr:
    match expr:
        case Ident(key=name):
            return Ident(_resolve(name, scope, expr))
        case Call(target=target, argument=argument):
            return Call(link_expr(target, scope), link_expr(argument, scope))
        case TupleExpr(fields=fields):
            return TupleExpr(tuple(link_expr(f, scope) for f in fields))
        case Const(value=value):
            return Const(link_value(value, scope))
    raise NotImplementedError(f"Cannot link expression of type {type(expr).__name__}.")


def link_program(expr: UnlinkedExpr) -> LinkedExpr:
    """Link a whole program against an empty scope; every identifier must be bound inside it."""
    if unbound := free_names(expr):
        raise UnboundIdentifier(f"Unbound identifier {_describe(unbound)} at top level.",
                                names=unbound, scope=(), lam_node=expr)
    return link_expr(expr, ())
