## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Primitive, Lambda, Tuple, Const, Ident, Call, TupleExpr, UnlinkedLambda


def free_names(node) -> frozenset[str]:
    """Names referenced inside `node` that are not bound by a lambda parameter within it.

    Accepts an unresolved expression, a value, or an `UnlinkedLambda`.  Pure; the result
    only drives the linker's capture computation.
    """
    names: set[str] = set()
    _collect(node, names)
    return frozenset(names)


def _collect(node, names: set[str]) -> None:
    match node:
        case UnlinkedLambda(parameter=parameter, body=body):
            inner: set[str] = set()
            _collect(body, inner)
            inner.discard(parameter)
            names |= inner
        case Ident(key=name):
            names.add(name)
        case Call(target=target, argument=argument):
            _collect(target, names)
            _collect(argument, names)
        case TupleExpr(fields=fields):
            for f in fields: _collect(f, names)
        case Const(value=value):
            _collect(value, names)
        case Lambda(function=function):
            _collect(function, names)
        case Tuple(items=items):
            for it in items: _collect(it, names)
        case Primitive():
            pass
        case _:
            raise NotImplementedError(f"Cannot analyze {type(node).__name__} for free names.")
