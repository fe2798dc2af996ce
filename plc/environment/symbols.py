"""
Symbols bound in a Scope.

The same classes serve both scope trees: at analysis time a Variable's
``value`` is just NIL and a Function's implementation is a placeholder; at
run time they hold the live value and the callable closure.
"""

from typing import TYPE_CHECKING, Any, Callable, List, Sequence

if TYPE_CHECKING:
    from .types import Type
    from .values import PlcObject

Implementation = Callable[[List['PlcObject']], 'PlcObject']


class Variable:
    """A named, typed, mutable value cell."""

    def __init__(self, name: str, jvm_name: str, type: 'Type', constant: bool, value: 'PlcObject'):
        self.name = name
        self.jvm_name = jvm_name
        self.type = type
        self.constant = constant
        self.value = value

    def __repr__(self) -> str:
        qualifier = "const " if self.constant else ""
        return f"Variable({qualifier}{self.name}: {self.type}, value={self.value!r})"


class Function:
    """
    A named function with a fixed parameter list.

    Functions are looked up by (name, arity), so the parameter count is part
    of a function's identity.
    """

    def __init__(self, name: str, jvm_name: str, parameter_types: Sequence['Type'],
                 return_type: 'Type', implementation: Implementation):
        self.name = name
        self.jvm_name = jvm_name
        self.parameter_types = tuple(parameter_types)
        self.return_type = return_type
        self.implementation = implementation

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    def invoke(self, arguments: List['PlcObject']) -> Any:
        return self.implementation(arguments)

    def __repr__(self) -> str:
        parameters = ", ".join(str(t) for t in self.parameter_types)
        return f"Function({self.name}({parameters}) -> {self.return_type})"
