"""
The closed set of PLC types.

Types are singletons compared by identity. Each one carries the name used in
source code, the name of the matching Java type, and a member scope holding
the fields and methods reachable through a receiver of that type. The
built-in types currently expose no members.
"""

from typing import Dict

from ..lexer.errors import ErrorRecovery
from .errors import UnknownTypeError
from .scope import Scope


class Type:
    """A PLC type."""

    def __init__(self, name: str, jvm_name: str, scope: Scope):
        self.name = name
        self.jvm_name = jvm_name
        self.scope = scope

    def get_field(self, name: str):
        """Look up a field reachable through a value of this type."""
        return self.scope.lookup_variable(name)

    def get_function(self, name: str, arity: int):
        """Look up a method reachable through a value of this type."""
        return self.scope.lookup_function(name, arity)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Type({self.name})"


ANY = Type("Any", "Object", Scope(None))
NIL = Type("Nil", "Void", Scope(None))
COMPARABLE = Type("Comparable", "Comparable", Scope(None))
BOOLEAN = Type("Boolean", "boolean", Scope(None))
INTEGER = Type("Integer", "int", Scope(None))
DECIMAL = Type("Decimal", "double", Scope(None))
CHARACTER = Type("Character", "char", Scope(None))
STRING = Type("String", "String", Scope(None))

TYPES: Dict[str, Type] = {
    t.name: t for t in (ANY, NIL, COMPARABLE, BOOLEAN, INTEGER, DECIMAL, CHARACTER, STRING)
}

COMPARABLE_TYPES = frozenset({INTEGER, DECIMAL, CHARACTER, STRING})
NUMERIC_TYPES = frozenset({INTEGER, DECIMAL})


def get_type(name: str) -> Type:
    """
    Map a source type name to its Type.

    Raises:
        UnknownTypeError: If ``name`` is not a built-in type
    """
    if name in TYPES:
        return TYPES[name]
    suggestions = [f"Did you mean '{known}'?" for known in TYPES
                   if ErrorRecovery.edit_distance(name.lower(), known.lower()) <= 2]
    raise UnknownTypeError(name, suggestions or None)


def is_assignable(target: Type, source: Type) -> bool:
    """
    Check whether a value of type ``source`` may be stored in a ``target`` slot.

    Every type accepts itself, Any accepts everything, and Comparable also
    accepts the four comparable types.
    """
    if target is ANY or target is source:
        return True
    if target is COMPARABLE:
        return source in COMPARABLE_TYPES
    return False
