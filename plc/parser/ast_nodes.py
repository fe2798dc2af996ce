"""
Abstract Syntax Tree node definitions for PLC.

The parser builds the tree once; after that its structure never changes.
Nodes that need semantic information (types, bound variables, bound
functions) have a decoration slot that the analyzer fills in exactly once.
Structural equality compares node kinds and fields only, never decorations
or source locations, which keeps parser tests readable.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from ..lexer.tokens import SourceLocation

if TYPE_CHECKING:
    from ..environment.symbols import Function, Variable
    from ..environment.types import Type


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    SOURCE = "Source"
    FIELD = "Field"
    METHOD = "Method"

    # Statements
    EXPRESSION_STMT = "ExpressionStatement"
    DECLARATION = "Declaration"
    ASSIGNMENT = "Assignment"
    IF_STATEMENT = "IfStatement"
    FOR_LOOP = "ForLoop"
    WHILE_LOOP = "WhileLoop"
    RETURN_STATEMENT = "ReturnStatement"

    # Expressions
    LITERAL = "Literal"
    GROUP = "Group"
    BINARY_OP = "BinaryOp"
    ACCESS = "Access"
    FUNCTION_CALL = "FunctionCall"


class DecorationError(RuntimeError):
    """Raised when a decoration slot is read before or written after analysis."""


class ASTNode(ABC):
    """Base class for all AST nodes."""

    # Structural fields, used for equality and repr
    _fields: Tuple[str, ...] = ()

    def __init__(self, node_type: ASTNodeType, location: Optional[SourceLocation] = None):
        self.node_type = node_type
        self.location = location

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""

    def _get_decoration(self, slot: str) -> Any:
        value = getattr(self, slot)
        if value is None:
            raise DecorationError(f"{self.node_type.value} has not been analyzed yet")
        return value

    def _set_decoration(self, slot: str, value: Any):
        if getattr(self, slot) is not None:
            raise DecorationError(f"{self.node_type.value} is already decorated")
        setattr(self, slot, value)

    def __eq__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self._fields)

    __hash__ = None

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in self._fields)
        return f"{self.__class__.__name__}({fields})"


# ============================================================================
# Top-level nodes
# ============================================================================

class Source(ASTNode):
    """Root AST node: every field, then every method."""

    _fields = ("fields", "methods")

    def __init__(self, fields: Sequence['Field'], methods: Sequence['Method'],
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.SOURCE, location)
        self.fields = tuple(fields)
        self.methods = tuple(methods)

    def children(self) -> List[ASTNode]:
        return [*self.fields, *self.methods]


class Field(ASTNode):
    """Global variable: ``LET [CONST] name [: Type] [= value];``."""

    _fields = ("name", "type_name", "is_constant", "value")

    def __init__(self, name: str, type_name: Optional[str], is_constant: bool,
                 value: Optional['Expression'], location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.FIELD, location)
        self.name = name
        self.type_name = type_name
        self.is_constant = is_constant
        self.value = value
        self._variable: Optional['Variable'] = None

    @property
    def variable(self) -> 'Variable':
        return self._get_decoration("_variable")

    @variable.setter
    def variable(self, variable: 'Variable'):
        self._set_decoration("_variable", variable)

    def children(self) -> List[ASTNode]:
        return [self.value] if self.value is not None else []


class Method(ASTNode):
    """Method definition: ``DEF name(params) [: Type] DO statements END``."""

    _fields = ("name", "parameters", "parameter_type_names", "return_type_name", "statements")

    def __init__(self, name: str, parameters: Sequence[str], parameter_type_names: Sequence[str],
                 return_type_name: Optional[str], statements: Sequence['Statement'],
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.METHOD, location)
        self.name = name
        self.parameters = tuple(parameters)
        self.parameter_type_names = tuple(parameter_type_names)
        self.return_type_name = return_type_name
        self.statements = tuple(statements)
        self._function: Optional['Function'] = None

    @property
    def function(self) -> 'Function':
        return self._get_decoration("_function")

    @function.setter
    def function(self, function: 'Function'):
        self._set_decoration("_function", function)

    def children(self) -> List[ASTNode]:
        return list(self.statements)


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""


class ExpressionStatement(Statement):
    """A bare expression used as a statement (must be a call)."""

    _fields = ("expression",)

    def __init__(self, expression: 'Expression', location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.EXPRESSION_STMT, location)
        self.expression = expression

    def children(self) -> List[ASTNode]:
        return [self.expression]


class Declaration(Statement):
    """Local variable declaration."""

    _fields = ("name", "type_name", "value")

    def __init__(self, name: str, type_name: Optional[str], value: Optional['Expression'],
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.DECLARATION, location)
        self.name = name
        self.type_name = type_name
        self.value = value
        self._variable: Optional['Variable'] = None

    @property
    def variable(self) -> 'Variable':
        return self._get_decoration("_variable")

    @variable.setter
    def variable(self, variable: 'Variable'):
        self._set_decoration("_variable", variable)

    def children(self) -> List[ASTNode]:
        return [self.value] if self.value is not None else []


class Assignment(Statement):
    """``receiver = value;``"""

    _fields = ("receiver", "value")

    def __init__(self, receiver: 'Expression', value: 'Expression',
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.ASSIGNMENT, location)
        self.receiver = receiver
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.receiver, self.value]


class IfStatement(Statement):
    _fields = ("condition", "then_statements", "else_statements")

    def __init__(self, condition: 'Expression', then_statements: Sequence[Statement],
                 else_statements: Sequence[Statement], location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.IF_STATEMENT, location)
        self.condition = condition
        self.then_statements = tuple(then_statements)
        self.else_statements = tuple(else_statements)

    def children(self) -> List[ASTNode]:
        return [self.condition, *self.then_statements, *self.else_statements]


class ForLoop(Statement):
    """``FOR (init; condition; increment) DO statements END``; each clause optional."""

    _fields = ("initialization", "condition", "increment", "statements")

    def __init__(self, initialization: Optional[Statement], condition: Optional['Expression'],
                 increment: Optional[Assignment], statements: Sequence[Statement],
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.FOR_LOOP, location)
        self.initialization = initialization
        self.condition = condition
        self.increment = increment
        self.statements = tuple(statements)

    def children(self) -> List[ASTNode]:
        clauses = [self.initialization, self.condition, self.increment]
        return [node for node in clauses if node is not None] + list(self.statements)


class WhileLoop(Statement):
    _fields = ("condition", "statements")

    def __init__(self, condition: 'Expression', statements: Sequence[Statement],
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.WHILE_LOOP, location)
        self.condition = condition
        self.statements = tuple(statements)

    def children(self) -> List[ASTNode]:
        return [self.condition, *self.statements]


class ReturnStatement(Statement):
    _fields = ("value",)

    def __init__(self, value: 'Expression', location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.RETURN_STATEMENT, location)
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.value]


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions; every analyzed expression has a type."""

    @property
    def type(self) -> 'Type':
        raise NotImplementedError


class Literal(Expression):
    """
    Literal value. ``literal_type`` is one of nil, boolean, character,
    string, integer or decimal; characters and strings are both ``str``.
    """

    _fields = ("value", "literal_type")

    def __init__(self, value: Any, literal_type: str, location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.LITERAL, location)
        self.value = value
        self.literal_type = literal_type
        self._type: Optional['Type'] = None

    @property
    def type(self) -> 'Type':
        return self._get_decoration("_type")

    @type.setter
    def type(self, value: 'Type'):
        self._set_decoration("_type", value)

    def children(self) -> List[ASTNode]:
        return []


class Group(Expression):
    """Parenthesized expression."""

    _fields = ("expression",)

    def __init__(self, expression: Expression, location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.GROUP, location)
        self.expression = expression
        self._type: Optional['Type'] = None

    @property
    def type(self) -> 'Type':
        return self._get_decoration("_type")

    @type.setter
    def type(self, value: 'Type'):
        self._set_decoration("_type", value)

    def children(self) -> List[ASTNode]:
        return [self.expression]


class BinaryOp(Expression):
    _fields = ("operator", "left", "right")

    def __init__(self, operator: str, left: Expression, right: Expression,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.BINARY_OP, location)
        self.operator = operator
        self.left = left
        self.right = right
        self._type: Optional['Type'] = None

    @property
    def type(self) -> 'Type':
        return self._get_decoration("_type")

    @type.setter
    def type(self, value: 'Type'):
        self._set_decoration("_type", value)

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


class Access(Expression):
    """Variable access ``name`` or field access ``receiver.name``."""

    _fields = ("receiver", "name")

    def __init__(self, receiver: Optional[Expression], name: str,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.ACCESS, location)
        self.receiver = receiver
        self.name = name
        self._variable: Optional['Variable'] = None

    @property
    def variable(self) -> 'Variable':
        return self._get_decoration("_variable")

    @variable.setter
    def variable(self, variable: 'Variable'):
        self._set_decoration("_variable", variable)

    @property
    def type(self) -> 'Type':
        return self.variable.type

    def children(self) -> List[ASTNode]:
        return [self.receiver] if self.receiver is not None else []


class FunctionCall(Expression):
    """Function call ``name(args)`` or method call ``receiver.name(args)``."""

    _fields = ("receiver", "name", "arguments")

    def __init__(self, receiver: Optional[Expression], name: str, arguments: Sequence[Expression],
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.FUNCTION_CALL, location)
        self.receiver = receiver
        self.name = name
        self.arguments = tuple(arguments)
        self._function: Optional['Function'] = None

    @property
    def function(self) -> 'Function':
        return self._get_decoration("_function")

    @function.setter
    def function(self, function: 'Function'):
        self._set_decoration("_function", function)

    @property
    def type(self) -> 'Type':
        return self.function.return_type

    def children(self) -> List[ASTNode]:
        receiver = [self.receiver] if self.receiver is not None else []
        return receiver + list(self.arguments)
