"""
Runtime error handling for the PLC interpreter.
"""

from typing import List, Optional

from ..errors import PlcError
from ..environment.errors import ScopeError, DuplicateSymbolError
from ..lexer.tokens import SourceLocation
from ..parser.ast_nodes import ASTNode


class InterpreterError(PlcError):
    """
    Exception raised when a program faults while running.
    """

    phase = "run"

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        node: Optional[ASTNode] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        if location is None and node is not None:
            location = node.location
        super().__init__(message, location, code, help_text, suggestions)
        self.node = node


# Runtime error codes for categorization
RUNTIME_ERROR_CODES = {
    "R001": "Undefined name",
    "R002": "Name redefinition",
    "R010": "Unexpected value type",
    "R011": "Invalid operands",
    "R020": "Division by zero",
    "R030": "Assignment to constant",
    "R031": "Invalid assignment target",
    "R040": "Missing main function",
    "R041": "Arity mismatch",
    "R042": "Call depth exceeded",
}


def create_scope_error(error: ScopeError, node: Optional[ASTNode]) -> InterpreterError:
    """Re-raise a name resolution failure as a runtime error at ``node``."""
    code = "R002" if isinstance(error, DuplicateSymbolError) else "R001"
    return InterpreterError(error.message, node=node, code=code,
                            suggestions=error.diagnostic.suggestions)


def create_type_error(expected: str, value, node: ASTNode) -> InterpreterError:
    """Create an error for a value whose host representation is wrong."""
    actual = "NIL" if value is None else type(value).__name__
    return InterpreterError(
        message=f"Expected a {expected} value, received {actual}",
        node=node,
        code="R010"
    )


def create_invalid_operands_error(operator: str, left, right, node: ASTNode) -> InterpreterError:
    return InterpreterError(
        message=f"Invalid operands for '{operator}': "
                f"{type(left).__name__} and {type(right).__name__}",
        node=node,
        code="R011"
    )


def create_division_by_zero_error(node: ASTNode) -> InterpreterError:
    return InterpreterError(
        message="Division by zero",
        node=node,
        code="R020",
        help_text="Check the divisor before dividing."
    )
