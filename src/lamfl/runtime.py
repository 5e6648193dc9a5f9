## lamfl — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import sys
from typing import Any

from .types import Primitive, Lambda, Tuple, Value, UnlinkedExpr, LinkedExpr, unit
from .errors import TypeMismatch
from .parser import parse
from .linker import link_program
from .validating import check_linked, validate_linked
from .interpreter import Evaluator, evaluate
from .formatting import format_expr, format_value
from . import builder


class Runtime:
    """Minimal runtime facade focused on embedding: parse, link, validate and evaluate."""

    def __init__(self, verbosity: int = 0, validate: bool = False):
        self.verbosity = verbosity
        self.validating = validate

    # Assembly ────────────────────────────────────────────────────────────────────────────────
    ident = staticmethod(builder.ident)
    lit = staticmethod(builder.lit)
    lam = staticmethod(builder.lam)
    tup = staticmethod(builder.tup)
    call = staticmethod(builder.call)

    def parse(self, source: str, filename: str | None = None) -> UnlinkedExpr:
        return parse(source, filename=filename)

    def link(self, expr: UnlinkedExpr) -> LinkedExpr:
        return link_program(expr)

    def validate(self, expr: LinkedExpr) -> LinkedExpr:
        return validate_linked(expr)

    def can_eval(self, expr: LinkedExpr, depth: int = 0) -> tuple[bool, str]:
        return check_linked(expr, depth)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def eval(self, expr: LinkedExpr, stack: list | None = None, verbosity: int | None = None,
             stats: dict | None = None) -> Value:
        verbosity = self.verbosity if verbosity is None else verbosity
        return evaluate(expr, stack, verbosity=verbosity, stats=stats)

    def run(self, source: str, filename: str | None = None, verbosity: int | None = None,
            validate: bool | None = None, stats: dict | None = None) -> Value:
        debug = bool(os.environ.get('LAMFL_DEBUG'))
        expr = self.parse(source, filename=filename)
        if debug: print(f"\033[90mparsed:\033[0m {format_expr(expr)}", file=sys.stderr)

        linked = self.link(expr)
        if debug: print(f"\033[90mlinked:\033[0m {format_expr(linked)}", file=sys.stderr)

        if self.validating if validate is None else validate:
            self.validate(linked)
        return self.eval(linked, verbosity=verbosity, stats=stats)

    def apply(self, function: Value, argument: Value, stats: dict | None = None) -> Value:
        """Call a lambda value produced by `eval` or `run` from the host side."""
        if not isinstance(function, Lambda):
            raise TypeMismatch(f"Called a non-function value `{format_value(function)}`.", value=function)
        evaluator = Evaluator(verbosity=self.verbosity)
        try:
            return evaluator.invoke(function.function, (), argument)
        finally:
            evaluator.record(stats)

    # Conversion ──────────────────────────────────────────────────────────────────────────────
    def to_value(self, obj: Any) -> Value:
        if isinstance(obj, (Primitive, Lambda, Tuple)): return obj
        if isinstance(obj, str): return Primitive(obj)
        if isinstance(obj, (tuple, list)): return Tuple(tuple(self.to_value(o) for o in obj))
        if obj is None: return unit
        raise TypeError(f"No value representation for {type(obj).__name__}.")

    def from_value(self, value: Value) -> Any:
        if isinstance(value, Primitive): return value.text
        if isinstance(value, Tuple): return tuple(self.from_value(v) for v in value.items)
        return value

    def format(self, node) -> str:
        return format_expr(node)
