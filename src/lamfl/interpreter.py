## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Sequence

from .types import Ref, Primitive, Lambda, Tuple, Const, Ident, Call, TupleExpr
from .types import LinkedLambda, Closure, Value, LinkedExpr
from .errors import TypeMismatch, InternalConsistency
from .formatting import format_expr, format_value, show_frame


def duplicate(value: Value) -> Value:
    """Structural copy of a value; reads from the stack never hand out the stored instance."""
    match value:
        case Primitive(text=text):
            return Primitive(text)
        case Tuple(items=items):
            return Tuple(tuple(duplicate(it) for it in items))
        case Lambda(function=function):
            # Closures are immutable and copy their environment on every call.
            return Lambda(function)
    raise TypeError(f"Not a runtime value: {value!r}")


def read_slot(stack: Sequence[Value], ref: Ref, node=None) -> Value:
    if not isinstance(ref, Ref) or not (0 <= ref < len(stack)):
        raise InternalConsistency(
            f"Offset {ref!r} is outside of a stack with {len(stack)} item(s); the linked tree is invalid.",
            ref=ref, depth=len(stack), lam_node=node)
    return duplicate(stack[ref])


def close(function: LinkedLambda, stack: Sequence[Value]) -> Closure:
    """Capture the values a lambda needs from the stack of the scope that defines it."""
    return Closure(function, tuple(read_slot(stack, r, function) for r in function.captures))


class Evaluator:
    """Recursive tree walk over a linked expression, with optional tracing and statistics."""

    def __init__(self, verbosity: int = 0):
        self.verbosity = verbosity
        self.steps = 0
        self.calls = 0
        self.depth = 0
        self.max_depth = 0

    def _trace(self, expr, stack) -> None:
        print(f"\033[90m{self.steps:>3} :\033[0m  {'  ' * self.depth}", end='')
        show_frame(stack, end='')
        print(f" \033[36m <=> \033[0m {format_expr(expr)}")

    def instantiate(self, value: Value, stack: Sequence[Value]) -> Value:
        match value:
            case Lambda(function=LinkedLambda() as function):
                return Lambda(close(function, stack))
            case Tuple(items=items):
                return Tuple(tuple(self.instantiate(it, stack) for it in items))
        return duplicate(value)

    def eval(self, expr: LinkedExpr, stack: Sequence[Value]) -> Value:
        self.steps += 1
        if self.verbosity == 2 or (self.verbosity == 1 and isinstance(expr, Call)):
            self._trace(expr, stack)

        match expr:
            case Const(value=value):
                return self.instantiate(value, stack)
            case Ident(key=ref):
                return read_slot(stack, ref, expr)
            case Call(target=target, argument=argument):
                function = self.eval(target, stack)
                if not isinstance(function, Lambda):
                    raise TypeMismatch(f"Called a non-function value `{format_value(function)}`.",
                                       value=function, lam_node=expr)
                return self.invoke(function.function, stack, self.eval(argument, stack))
            case TupleExpr(fields=fields):
                # Left to right, in the order written.
                return Tuple(tuple(self.eval(f, stack) for f in fields))
        raise InternalConsistency(f"Unknown node `{type(expr).__name__}` in linked tree.", lam_node=expr)

    def invoke(self, callee, outer_stack: Sequence[Value], argument: Value) -> Value:
        match callee:
            case Closure(function=function, environment=environment):
                frame = [duplicate(v) for v in environment]
            case LinkedLambda(captures=captures):
                function = callee
                frame = [read_slot(outer_stack, r, callee) for r in captures]
            case _:
                raise TypeMismatch(f"Called a non-function value `{callee!r}`.", value=callee)
        frame.append(argument)

        self.calls += 1
        self.depth += 1
        self.max_depth = max(self.max_depth, self.depth)
        try:
            return self.eval(function.body, frame)
        finally:
            self.depth -= 1

    def record(self, stats: dict | None) -> None:
        if stats is None: return
        stats['steps'] = stats.get('steps', 0) + self.steps
        stats['calls'] = stats.get('calls', 0) + self.calls
        stats['depth'] = max(stats.get('depth', 0), self.max_depth)


def evaluate(expr: LinkedExpr, stack: Sequence[Value] | None = None, *, verbosity=0, stats=None) -> Value:
    evaluator = Evaluator(verbosity=verbosity)
    try:
        result = evaluator.eval(expr, list(stack or ()))
    finally:
        evaluator.record(stats)

    if verbosity > 0:
        print(f"\033[90m{evaluator.steps:>3} :\033[0m  {format_value(result)}")
    return result


def call_lambda(function: LinkedLambda, outer_stack: Sequence[Value], argument: Value, *, verbosity=0, stats=None) -> Value:
    evaluator = Evaluator(verbosity=verbosity)
    try:
        return evaluator.invoke(function, outer_stack, argument)
    finally:
        evaluator.record(stats)


def call_closure(closure: Closure, argument: Value, *, verbosity=0, stats=None) -> Value:
    evaluator = Evaluator(verbosity=verbosity)
    try:
        return evaluator.invoke(closure, (), argument)
    finally:
        evaluator.record(stats)
