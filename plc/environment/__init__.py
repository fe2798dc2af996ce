"""
PLC Environment Package

The scope, symbol, type and value model shared by the analyzer and the
interpreter.
"""

from .errors import ScopeError, UndefinedSymbolError, DuplicateSymbolError, UnknownTypeError
from .symbols import Variable, Function
from .scope import Scope
from .types import (
    Type, ANY, NIL, COMPARABLE, BOOLEAN, INTEGER, DECIMAL, CHARACTER, STRING,
    get_type, is_assignable
)
from . import values
from .values import PlcObject, create

__all__ = [
    "Scope",
    "Variable",
    "Function",
    "Type",
    "ANY",
    "NIL",
    "COMPARABLE",
    "BOOLEAN",
    "INTEGER",
    "DECIMAL",
    "CHARACTER",
    "STRING",
    "get_type",
    "is_assignable",
    "values",
    "PlcObject",
    "create",
    "ScopeError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "UnknownTypeError",
]
