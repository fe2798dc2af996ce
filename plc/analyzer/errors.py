"""
Semantic analysis error handling for PLC.

Analysis is fail-fast: the first violated scoping or typing rule raises a
SemanticError and the whole program is rejected.
"""

from typing import List, Optional

from ..errors import PlcError
from ..environment.errors import ScopeError
from ..lexer.tokens import SourceLocation
from ..parser.ast_nodes import ASTNode


class SemanticError(PlcError):
    """
    Exception raised when semantic analysis encounters an invalid program.

    Contains detailed diagnostic information for error reporting.
    """

    phase = "analyze"

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


# Semantic error codes for categorization
SEMANTIC_ERROR_CODES = {
    # Type errors
    "S001": "Type mismatch",
    "S002": "Undefined type",
    "S003": "Type cannot be determined",
    "S004": "Invalid operands",
    "S005": "Expression nesting too deep",

    # Symbol resolution errors
    "S010": "Undefined symbol",
    "S011": "Symbol redefinition",

    # Assignment errors
    "S020": "Assignment to constant",
    "S021": "Invalid assignment target",
    "S022": "Constant without value",

    # Control flow errors
    "S030": "Empty block",
    "S031": "Missing for-loop condition",
    "S032": "Expression statement is not a call",

    # Program structure errors
    "S040": "Missing main function",
    "S041": "Invalid main return type",
}


# Helper functions for creating specific semantic errors

def create_type_mismatch_error(expected, actual, node: Optional[ASTNode] = None) -> SemanticError:
    """Create a type mismatch error."""
    return SemanticError(
        message=f"Type mismatch: expected {expected}, found {actual}",
        node=node,
        code="S001",
        help_text=f"A value of type '{actual}' cannot be used where '{expected}' is expected."
    )


def create_invalid_operands_error(operator: str, left, right, node: ASTNode) -> SemanticError:
    """Create an error for a binary operator applied to unsupported types."""
    return SemanticError(
        message=f"Invalid operands for '{operator}': {left} and {right}",
        node=node,
        code="S004"
    )


def create_scope_error(error: ScopeError, node: ASTNode) -> SemanticError:
    """Re-raise a name resolution failure as a semantic error at ``node``."""
    return SemanticError(
        message=error.message,
        node=node,
        code=error.code,
        suggestions=error.diagnostic.suggestions
    )


def create_constant_assignment_error(name: str, node: ASTNode) -> SemanticError:
    """Create an error for assigning to a constant."""
    return SemanticError(
        message=f"Cannot assign to constant '{name}'",
        node=node,
        code="S020",
        help_text="Declare the field without CONST if it needs to change."
    )


def create_empty_block_error(construct: str, node: ASTNode) -> SemanticError:
    """Create an error for an if/for/while with no statements."""
    return SemanticError(
        message=f"The body of a {construct} statement cannot be empty",
        node=node,
        code="S030"
    )
