## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Ref, Primitive, Lambda, Tuple, Const, Ident, Call, TupleExpr
from .types import UnlinkedLambda, LinkedLambda, Closure


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def _format_lambda(fn, abbreviate: bool) -> str:
    match fn:
        case UnlinkedLambda(parameter=parameter, body=body):
            return f"{parameter} => {_format(body, abbreviate=abbreviate)}"
        case LinkedLambda(captures=captures, body=body):
            return f"λ[{' '.join(map(repr, captures))}] => {_format(body, abbreviate=abbreviate)}"
        case Closure(function=function, environment=environment):
            if abbreviate:
                return f"≪closure:{len(environment)}≫"
            env = ' '.join(_format(v, abbreviate=abbreviate) for v in environment)
            return f"λ<{env}> => {_format(function.body, abbreviate=abbreviate)}"
    return repr(fn)


def _format(it, nested: bool = False, abbreviate: bool = False) -> str:
    match it:
        case Primitive(text=text):
            if abbreviate and len(text) > 32: return f'≪text:{len(text)}≫'
            return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'
        case Tuple(items=items) | TupleExpr(fields=items):
            return '{' + ', '.join(_format(i, abbreviate=abbreviate) for i in items) + '}'
        case Lambda(function=fn):
            text = _format_lambda(fn, abbreviate)
            return f"({text})" if nested and not text.startswith('≪') else text
        case Const(value=value):
            return _format(value, nested, abbreviate)
        case Ident(key=Ref() as ref):
            return repr(ref)
        case Ident(key=name):
            return str(name)
        case Call(target=target, argument=argument):
            # Application is left-associative, so only the argument needs grouping when it's a call.
            lhs = _format(target, nested=True, abbreviate=abbreviate)
            rhs = _format(argument, nested=True, abbreviate=abbreviate)
            if isinstance(argument, Call): rhs = f"({rhs})"
            return f"{lhs} {rhs}"
    return repr(it)


def format_value(value, abbreviate: bool = False) -> str:
    return _format(value, abbreviate=abbreviate)

def format_expr(expr, abbreviate: bool = False) -> str:
    return _format(expr, abbreviate=abbreviate)


def show_frame(stack, width=72, end='\n', file=None, abbreviate: bool = True):
    if not stack:
        frame_str = '∅'
    else:
        frame_str = '< ' + ' '.join(_format(s, nested=True, abbreviate=abbreviate) for s in stack) + ' >'

    if width is not None and len(frame_str) > width:
        frame_str = '… ' + frame_str[-width+2:]
    print(f"{frame_str:>{width}}" if width else frame_str, end=end, file=file)
