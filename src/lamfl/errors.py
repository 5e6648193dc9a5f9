## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class LamError(Exception):
    def __init__(self, message: str = "", *, lam_node=None, lam_token=None, lam_meta=None):
        """Base class for all errors raised while parsing, linking or evaluating."""
        super().__init__(message)
        self.lam_node: object = lam_node
        self.lam_token: str = lam_token
        self.lam_meta: dict = lam_meta

class LamParseError(LamError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message)
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class LamIncompleteParse(LamParseError, lark.exceptions.ParseError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, filename=filename, line=line, column=column, token=token)


class UnboundIdentifier(LamError, NameError):
    """Link-time: a free variable has no binding in any enclosing scope."""
    def __init__(self, message: str = "", *, names=(), scope=(), lam_node=None, lam_meta=None):
        names = tuple(sorted(names))
        super().__init__(message, lam_node=lam_node, lam_token=names[0] if names else None, lam_meta=lam_meta)
        self.names: tuple[str, ...] = names
        self.scope: tuple[str, ...] = tuple(scope)


class TypeMismatch(LamError, TypeError):
    """Eval-time: a value was used in a way its type does not allow, e.g. called as a function."""
    def __init__(self, message: str = "", *, value=None, lam_node=None, lam_meta=None):
        super().__init__(message, lam_node=lam_node, lam_meta=lam_meta)
        self.value = value


class InternalConsistency(LamError, RuntimeError):
    """A linked tree refers outside of its stack, which means the linker is broken."""
    def __init__(self, message: str = "", *, ref=None, depth=None, lam_node=None, lam_meta=None):
        super().__init__(message, lam_node=lam_node, lam_meta=lam_meta)
        self.ref = ref
        self.depth = depth
