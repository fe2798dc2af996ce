"""
Runtime values.

Every value the interpreter handles is a PlcObject wrapping a host value:
``None`` for Nil, ``bool``, ``str`` for characters and strings, ``int`` for
integers and ``Decimal`` for decimals. A PlcObject also owns a scope of
fields and methods, reachable through ``get_field`` and ``call_method``.
"""

from decimal import Decimal
from typing import Any, List

from .scope import Scope
from .symbols import Variable

# Host representations a PlcObject may wrap
VALUE_TYPES = (type(None), bool, str, int, Decimal)


class PlcObject:
    """A runtime value and the scope of members it exposes."""

    __slots__ = ("scope", "value")

    def __init__(self, scope: Scope, value: Any):
        self.scope = scope
        self.value = value

    def get_field(self, name: str) -> Variable:
        return self.scope.lookup_variable(name)

    def call_method(self, name: str, arguments: List['PlcObject']) -> 'PlcObject':
        """Call a member method; the receiver is passed as the first argument."""
        function = self.scope.lookup_function(name, len(arguments) + 1)
        return function.invoke([self, *arguments])

    def __eq__(self, other) -> bool:
        if not isinstance(other, PlcObject):
            return NotImplemented
        if type(self.value) is not type(other.value) or self.value != other.value:
            return False
        # Decimals are equal only at the same scale: 2.5 != 2.50
        if isinstance(self.value, Decimal):
            return self.value.as_tuple().exponent == other.value.as_tuple().exponent
        return True

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))

    def __repr__(self) -> str:
        return f"PlcObject({self.value!r})"


NIL = PlcObject(Scope(None), None)


def create(value: Any) -> PlcObject:
    """Wrap a host value in a PlcObject with an empty member scope."""
    if value is None:
        return NIL
    if not isinstance(value, VALUE_TYPES):
        raise TypeError(f"Cannot create a PLC value from {type(value).__name__}")
    return PlcObject(Scope(None), value)
