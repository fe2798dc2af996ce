"""
Errors raised by the scope and type model.

These are shared by the analyzer and the interpreter, which translate them
into their own phase errors before they reach the host.
"""

from typing import List, Optional

from ..errors import PlcError


class ScopeError(PlcError):
    """Base class for name resolution failures."""

    phase = "environment"


class UndefinedSymbolError(ScopeError):
    """A variable or function was not found in any enclosing scope."""

    def __init__(self, kind: str, name: str, arity: Optional[int] = None,
                 suggestions: Optional[List[str]] = None):
        self.kind = kind
        self.name = name
        self.arity = arity
        if arity is None:
            message = f"The {kind} '{name}' is not defined in this scope."
        else:
            message = f"The {kind} '{name}/{arity}' is not defined in this scope."
        super().__init__(message, code="S010", suggestions=suggestions)


class DuplicateSymbolError(ScopeError):
    """A name (or name and arity) was defined twice in the same scope."""

    def __init__(self, kind: str, name: str, arity: Optional[int] = None):
        self.kind = kind
        self.name = name
        self.arity = arity
        if arity is None:
            message = f"The {kind} '{name}' is already defined in this scope."
        else:
            message = f"The {kind} '{name}/{arity}' is already defined in this scope."
        super().__init__(message, code="S011")


class UnknownTypeError(ScopeError):
    """A type name does not name one of the built-in types."""

    def __init__(self, name: str, suggestions: Optional[List[str]] = None):
        self.name = name
        super().__init__(f"Unknown type '{name}'.", code="S002", suggestions=suggestions)
