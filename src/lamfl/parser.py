## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import ast

import lark
from .types import Primitive, Lambda, Const, Ident, Call, TupleExpr, UnlinkedLambda, UnlinkedExpr
from .errors import LamParseError, LamIncompleteParse


GRAMMAR = r"""?start: expr
?expr: function | application
function: NAME+ "=>" expr
?application: atom+
?atom: NAME                        -> ident
     | STRING                      -> literal
     | "{" [expr ("," expr)*] "}"  -> record
     | "(" expr ")"

// TOKENS
STRING: /"(?:[^"\\]|\\.)*"/
NAME: /[A-Za-z_][A-Za-z0-9_']*/

// COMMENTS & WHITESPACE
COMMENT: /#[^\r\n]*/
%import common.WS
%ignore WS
%ignore COMMENT
"""


class _TreeBuilder(lark.Transformer):
    """Turns the parse tree into unlinked expressions, bottom-up."""

    def ident(self, children):
        (token,) = children
        return Ident(str(token))

    def literal(self, children):
        (token,) = children
        try:
            text = ast.literal_eval(token)
        except (SyntaxError, ValueError) as exc:
            raise LamParseError(f"Invalid escape in text literal {token}: {exc}",
                                line=token.line, column=token.column, token=str(token)) from None
        return Const(Primitive(text))

    def record(self, children):
        # An empty `{}` comes through as a single `None` placeholder.
        return TupleExpr(tuple(c for c in children if c is not None))

    def application(self, children):
        target, *arguments = children
        for arg in arguments:
            target = Call(target, arg)
        return target

    def function(self, children):
        *params, body = children
        for p in reversed(params):
            body = Const(Lambda(UnlinkedLambda(str(p), body)))
        return body


_PARSER: lark.Lark | None = None

def _get_parser() -> lark.Lark:
    global _PARSER
    if _PARSER is None:
        _PARSER = lark.Lark(GRAMMAR, start='start', parser="earley", lexer="basic", propagate_positions=True)
    return _PARSER


def parse(source: str, filename=None) -> UnlinkedExpr:
    """Parse a single expression into an unlinked tree."""
    try:
        tree = _get_parser().parse(source)
    except lark.exceptions.UnexpectedInput as exc:
        def attr(k): return getattr(exc, k, None)
        if isinstance(exc, lark.exceptions.UnexpectedCharacters):
            token_val = attr('char') or ''
        else:
            token_val = getattr(token, 'value', '') if (token := attr('token')) is not None else ''

        if isinstance(exc, lark.exceptions.UnexpectedEOF) or token_val == '':
            lines = source.splitlines() or ['']
            raise LamIncompleteParse(str(exc), filename=filename, line=len(lines), column=len(lines[-1]) + 1, token='') from None
        raise LamParseError(str(exc), filename=filename, line=attr('line'), column=attr('column'), token=token_val) from None
    try:
        return _TreeBuilder().transform(tree)
    except lark.exceptions.VisitError as exc:
        if not isinstance(exc.orig_exc, LamParseError): raise
        err = exc.orig_exc
        err.filename = filename
        raise err from None


def format_parse_error_context(filename, line, column, token_value, source=None):
    lines = source.splitlines(keepends=True) if source is not None else open(filename, 'r').readlines()
    if not lines: lines = ['']
    line = max(1, min(line or 1, len(lines)))
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i].rstrip('\n')
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column and 0 < column <= len(line_content):
                width = max(1, len(token_value or ''))
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+width-1]}\033[0m" +
                    line_content[column+width-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'


def find_identifier(source: str, name: str) -> tuple[int, int] | None:
    """Locate the first use of `name` outside of string literals, as 1-based (line, column)."""
    pattern = re.compile(r'"(?:[^"\\]|\\.)*"|#[^\r\n]*|' + r"(?<![\w'])" + re.escape(name) + r"(?![\w'])")
    for number, text in enumerate(source.splitlines(), start=1):
        for match in pattern.finditer(text):
            if match.group(0) == name:
                return number, match.start() + 1
    return None


def format_identifier_context(filename, source: str, name: str) -> str:
    if (position := find_identifier(source, name)) is None: return ''
    line, column = position
    return format_parse_error_context(filename, line, column, name, source=source)
