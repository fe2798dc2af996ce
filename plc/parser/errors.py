"""
Error handling for the PLC parser.

A ParseError records the offset of the token where parsing went wrong, or
-1 when the token stream ended early.
"""

from typing import List, Optional

from ..errors import PlcError
from ..lexer.errors import ErrorRecovery
from ..lexer.tokens import Token, TokenType, SourceLocation


class ParseError(PlcError):
    """
    Exception raised when the token stream does not match the grammar.
    """

    phase = "parse"

    def __init__(
        self,
        message: str,
        index: int,
        location: Optional[SourceLocation] = None,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message, location, code, help_text, suggestions)
        self.index = index
        self.token = token


# Parser error codes
PARSE_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Unexpected end of input",
    "P003": "Invalid for-loop increment",
    "P004": "Invalid literal",
    "P005": "Trailing tokens after the last method",
}


def _describe(expected) -> str:
    if isinstance(expected, TokenType):
        return expected.name.lower()
    return f"'{expected}'"


def create_unexpected_token_error(message: str, expected, found: Token) -> ParseError:
    """Create an error for a token that does not fit the grammar here."""
    suggestions = None
    if found.type == TokenType.IDENTIFIER and isinstance(expected, str):
        close = ErrorRecovery.suggest_keyword_corrections(found.lexeme)
        if expected in close:
            suggestions = [f"Did you mean '{expected}'?"]

    return ParseError(
        message=message,
        index=found.offset,
        location=found.location,
        token=found,
        code="P001",
        help_text=f"Expected {_describe(expected)} but found '{found.lexeme}'.",
        suggestions=suggestions
    )


def create_unexpected_eof_error(message: str, expected=None) -> ParseError:
    """Create an error for input that ends in the middle of a construct."""
    help_text = None
    if expected is not None:
        help_text = f"Expected {_describe(expected)} before the end of input."
    return ParseError(
        message=message,
        index=-1,
        code="P002",
        help_text=help_text
    )
