## lamfl — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Generic, TypeVar, Union
from dataclasses import dataclass

I = TypeVar('I')    # Identifier representation: `str` before linking, `Ref` after.
L = TypeVar('L')    # Lambda representation: `UnlinkedLambda`, `LinkedLambda` or `Closure`.


class Ref(int):
    """Stack-offset reference, counted from the base of the stack (0 = oldest entry)."""
    __slots__ = ()

    def __repr__(self):
        return f"@{int(self)}"


# Values ──────────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Primitive:
    text: str


@dataclass(frozen=True)
class Lambda(Generic[L]):
    function: L


@dataclass(frozen=True)
class Tuple(Generic[L]):
    items: tuple = ()

    def __post_init__(self):
        # Frozen, so normalize any sequence handed in by a builder to a tuple.
        if not isinstance(self.items, tuple):
            object.__setattr__(self, 'items', tuple(self.items))

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]


Value = Primitive | Lambda | Tuple

# The default value; all checks for "nothing" should compare against this.
unit = Tuple(())


# Expressions ─────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Const(Generic[L]):
    value: Value


@dataclass(frozen=True)
class Ident(Generic[I]):
    key: I


@dataclass(frozen=True)
class Call(Generic[I, L]):
    target: "Expr"
    argument: "Expr"


@dataclass(frozen=True)
class TupleExpr(Generic[I, L]):
    fields: tuple = ()

    def __post_init__(self):
        if not isinstance(self.fields, tuple):
            object.__setattr__(self, 'fields', tuple(self.fields))


Expr = Const | Ident | Call | TupleExpr


# Lambdas ─────────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class UnlinkedLambda:
    """Lambda before scope resolution; its body may name variables of enclosing scopes."""
    parameter: str
    body: "UnlinkedExpr"


@dataclass(frozen=True)
class LinkedLambda:
    """Closure-converted lambda.

    `captures` holds, for each free variable of the body, its offset in the stack of the
    scope that defines the lambda, nearest binding first.  The body only refers to the
    lambda's own stack: the captured values, in that order, followed by the parameter.
    """
    captures: tuple[Ref, ...]
    body: "LinkedExpr"

    def __post_init__(self):
        if not isinstance(self.captures, tuple):
            object.__setattr__(self, 'captures', tuple(self.captures))

    @property
    def frame_size(self) -> int:
        return len(self.captures) + 1

    def call(self, outer_stack, argument: Value, **kwargs) -> Value:
        from .interpreter import call_lambda
        return call_lambda(self, outer_stack, argument, **kwargs)


@dataclass(frozen=True)
class Closure:
    """Runtime form of a lambda: the linked code plus the values of its captures."""
    function: LinkedLambda
    environment: tuple = ()

    def __post_init__(self):
        assert len(self.environment) == len(self.function.captures)

    def call(self, argument: Value, **kwargs) -> Value:
        from .interpreter import call_closure
        return call_closure(self, argument, **kwargs)


UnlinkedExpr = Union[Const[UnlinkedLambda], Ident[str], Call[str, UnlinkedLambda], TupleExpr[str, UnlinkedLambda]]
LinkedExpr = Union[Const[LinkedLambda], Ident[Ref], Call[Ref, LinkedLambda], TupleExpr[Ref, LinkedLambda]]
