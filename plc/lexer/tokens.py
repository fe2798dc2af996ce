"""
Token definitions for the PLC lexer.

The language has only six token categories. Keywords such as LET, DEF or
RETURN are ordinary identifiers at this level; the parser recognizes them by
their text.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Tuple


class TokenType(Enum):
    """Enumeration of all token categories in PLC."""

    IDENTIFIER = auto()             # name, LET, my-var
    INTEGER = auto()                # 42, -7, 0
    DECIMAL = auto()                # 3.14, -0.5
    CHARACTER = auto()              # 'a', '\n'
    STRING = auto()                 # "hello\tworld"
    OPERATOR = auto()               # &&, <=, (, ;, ...


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting; ``offset`` is the character index from the
    start of the source.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token: category, raw text and source location.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    location: SourceLocation

    @property
    def offset(self) -> int:
        return self.location.offset

    def __str__(self) -> str:
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.location.offset})"


# Multi-character operators come before every single-character operator they
# start with, so the first match is always the longest one.
OPERATORS: Tuple[str, ...] = (
    "&&", "||", "==", "!=", "<=", ">=",
    "+", "-", "*", "/", "%", "<", ">", "=", "!", "^", "~", "@",
    "(", ")", "{", "}", "[", "]", ",", ";", ".", ":",
)

WHITESPACE = frozenset(" \b\n\r\t")

# Escape letter -> decoded character, shared by the lexer (validation) and the
# parser (decoding).
ESCAPES = {
    "b": "\b",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "'": "'",
    '"': '"',
    "\\": "\\",
}

KEYWORDS = frozenset({
    "LET", "CONST", "DEF", "DO", "END", "IF", "ELSE", "FOR", "WHILE",
    "RETURN", "NIL", "TRUE", "FALSE",
})
