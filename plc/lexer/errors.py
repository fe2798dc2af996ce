"""
Error handling for the PLC lexer.

Lexing stops at the first malformed token; the raised LexerError points at
the offending character.
"""

from typing import List, Optional

from ..errors import PlcError
from .tokens import SourceLocation


class LexerError(PlcError):
    """
    Exception raised when the lexer encounters a malformed token.
    """

    phase = "lex"

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message, location, code, help_text, suggestions)
        self.location = location

    @property
    def index(self) -> int:
        """Source offset of the offending character."""
        return self.location.offset


class ErrorRecovery:
    """
    Helpers that turn a bad lexeme into useful suggestions.
    """

    @staticmethod
    def suggest_keyword_corrections(invalid_word: str) -> List[str]:
        """Suggest keywords close to ``invalid_word`` by edit distance."""
        from .tokens import KEYWORDS

        suggestions = []
        for keyword in KEYWORDS:
            if invalid_word == keyword:
                continue
            # Keywords are upper case; "do" should still suggest DO
            limit = 2 if len(keyword) > 4 else 1
            if ErrorRecovery.edit_distance(invalid_word.upper(), keyword) <= limit:
                suggestions.append(keyword)

        return sorted(suggestions, key=lambda k: ErrorRecovery.edit_distance(invalid_word.upper(), k))[:3]

    @staticmethod
    def edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery.edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]


# Error codes for categorization
ERROR_CODES = {
    "L001": "Invalid operator",
    "L002": "Unterminated literal",
    "L003": "Invalid numeric literal",
    "L004": "Invalid escape sequence",
    "L005": "Invalid character literal",
    "L006": "Raw newline in literal",
}


def create_invalid_operator_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character that starts no known operator."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in PLC source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Invalid operator: '{char}'",
        location=location,
        code="L001",
        help_text=help_text
    )


def create_unterminated_literal_error(kind: str, delimiter: str, location: SourceLocation) -> LexerError:
    """Create an error for a character or string literal missing its closing delimiter."""
    return LexerError(
        message=f"Unterminated {kind} literal",
        location=location,
        code="L002",
        help_text=f"{kind.capitalize()} literals must be closed with a matching {delimiter} quote."
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for an invalid numeric literal."""
    return LexerError(
        message=f"Invalid numeric literal: '{lexeme}'",
        location=location,
        code="L003",
        help_text=reason
    )


def create_invalid_escape_error(sequence: str, location: SourceLocation) -> LexerError:
    """Create an error for an escape outside \\b \\n \\r \\t \\' \\" \\\\."""
    return LexerError(
        message=f"Invalid escape sequence: '{sequence}'",
        location=location,
        code="L004",
        help_text="Valid escapes are \\b, \\n, \\r, \\t, \\', \\\" and \\\\."
    )
