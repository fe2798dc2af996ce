"""
Hierarchical scopes for PLC.

A Scope binds variables by name and functions by (name, arity). Lookups walk
outward through the parent chain; definitions only ever touch the innermost
scope, so an inner declaration shadows an outer one.

The analyzer and the interpreter each build their own tree of scopes with
this class: one binds declared types, the other live values.
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from ..lexer.errors import ErrorRecovery
from .errors import DuplicateSymbolError, UndefinedSymbolError
from .symbols import Function, Implementation, Variable

if TYPE_CHECKING:
    from .types import Type
    from .values import PlcObject


class Scope:
    """Represents a lexical scope."""

    def __init__(self, parent: Optional['Scope'] = None):
        self.parent = parent
        self.variables: Dict[str, Variable] = {}
        self.functions: Dict[Tuple[str, int], Function] = {}

    def define_variable(self, name: str, jvm_name: str, type: 'Type', constant: bool,
                        value: 'PlcObject') -> Variable:
        """Define a variable in this scope."""
        if name in self.variables:
            raise DuplicateSymbolError("variable", name)
        variable = Variable(name, jvm_name, type, constant, value)
        self.variables[name] = variable
        return variable

    def lookup_variable(self, name: str) -> Variable:
        """Look up a variable in this scope and parent scopes."""
        scope = self
        while scope is not None:
            if name in scope.variables:
                return scope.variables[name]
            scope = scope.parent
        raise UndefinedSymbolError("variable", name, suggestions=self.get_similar_names(name))

    def define_function(self, name: str, jvm_name: str, parameter_types: Sequence['Type'],
                        return_type: 'Type', implementation: Implementation) -> Function:
        """Define a function in this scope, keyed by name and arity."""
        key = (name, len(parameter_types))
        if key in self.functions:
            raise DuplicateSymbolError("function", name, len(parameter_types))
        function = Function(name, jvm_name, parameter_types, return_type, implementation)
        self.functions[key] = function
        return function

    def lookup_function(self, name: str, arity: int) -> Function:
        """Look up a function by name and arity in this scope and parent scopes."""
        scope = self
        while scope is not None:
            if (name, arity) in scope.functions:
                return scope.functions[(name, arity)]
            scope = scope.parent
        raise UndefinedSymbolError("function", name, arity,
                                   suggestions=self.get_similar_names(name, functions=True))

    def get_similar_names(self, name: str, functions: bool = False, max_distance: int = 2) -> List[str]:
        """Get visible names similar to ``name`` (for error suggestions)."""
        candidates = set()
        scope = self
        while scope is not None:
            if functions:
                candidates.update(f"{fn_name}/{arity}" for fn_name, arity in scope.functions)
            else:
                candidates.update(scope.variables)
            scope = scope.parent

        similar = []
        for candidate in candidates:
            distance = ErrorRecovery.edit_distance(name.lower(), candidate.split("/")[0].lower())
            if distance <= max_distance:
                similar.append((distance, candidate))

        similar.sort()
        return [f"Did you mean '{candidate}'?" for _, candidate in similar[:3]]

    def __repr__(self) -> str:
        depth = 0
        scope = self.parent
        while scope is not None:
            depth += 1
            scope = scope.parent
        return f"Scope(depth={depth}, {len(self.variables)} variables, {len(self.functions)} functions)"
