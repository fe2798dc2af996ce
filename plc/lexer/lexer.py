"""
PLC Lexer - turns source text into a flat list of tokens.

Dispatch is on the first character of each token: letters and underscores
start identifiers, digits (optionally signed) start numbers, quotes start
character and string literals, and everything else must be an operator.
The first malformed token aborts lexing with a LexerError.
"""

import logging
from typing import List

from .tokens import Token, TokenType, SourceLocation, OPERATORS, WHITESPACE, ESCAPES
from .errors import (
    LexerError, create_invalid_operator_error, create_unterminated_literal_error,
    create_invalid_number_error, create_invalid_escape_error
)

logger = logging.getLogger(__name__)

_DIGITS = "0123456789"
_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"


class Lexer:
    """
    PLC lexical analyzer.

    Converts source code text into a list of tokens, tracking the offset,
    line and column of each one for diagnostics.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens in source order (no end-of-file marker)

        Raises:
            LexerError: On the first malformed token
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []

        while not self._is_at_end():
            if self._current() in WHITESPACE:
                self._advance()
                continue
            self.tokens.append(self._next_token())

        logger.debug("Lexed %d tokens from %s", len(self.tokens), self.filename)
        return self.tokens

    def _next_token(self) -> Token:
        """Lex one token starting at the current position."""
        start = self._location()
        current_char = self._current()

        if current_char in _LETTERS:
            return self._tokenize_identifier(start)

        if current_char in "+-":
            # A sign only belongs to a number when a digit follows it
            if self._is_digit(self._peek()):
                return self._tokenize_number(start)
            return self._tokenize_operator(start)

        if self._is_digit(current_char):
            return self._tokenize_number(start)

        if current_char == "'":
            return self._tokenize_character(start)

        if current_char == '"':
            return self._tokenize_string(start)

        return self._tokenize_operator(start)

    def _tokenize_identifier(self, start: SourceLocation) -> Token:
        """Tokenize an identifier (keywords included)."""
        self._advance()
        while not self._is_at_end() and (self._current() in _LETTERS or
                                         self._is_digit(self._current()) or
                                         self._current() == "-"):
            self._advance()
        return self._emit(TokenType.IDENTIFIER, start)

    def _tokenize_number(self, start: SourceLocation) -> Token:
        """Tokenize an integer or decimal literal."""
        if self._current() in "+-":
            self._advance()

        if self._current() == "0":
            self._advance()
            if self._is_digit(self._current()):
                raise create_invalid_number_error(
                    self.source[start.offset:self.pos + 1],
                    self._location(),
                    "Integer literals cannot have redundant leading zeros."
                )
        else:
            while self._is_digit(self._current()):
                self._advance()

        if self._current() != ".":
            return self._emit(TokenType.INTEGER, start)

        self._advance()  # Skip '.'
        if not self._is_digit(self._current()):
            raise create_invalid_number_error(
                self.source[start.offset:self.pos],
                self._location(),
                "A decimal point must be followed by at least one digit."
            )
        while self._is_digit(self._current()):
            self._advance()

        return self._emit(TokenType.DECIMAL, start)

    def _tokenize_character(self, start: SourceLocation) -> Token:
        """Tokenize a character literal: exactly one character or escape."""
        self._advance()  # Skip opening quote

        if self._is_at_end():
            raise create_unterminated_literal_error("character", "'", self._location())

        current_char = self._current()
        if current_char == "\\":
            self._read_escape()
        elif current_char in "'\n\r":
            raise LexerError(
                "Invalid character literal",
                self._location(),
                code="L005",
                help_text="Character literals hold exactly one character; use an escape for quotes and newlines."
            )
        else:
            self._advance()

        if self._is_at_end() or self._current() != "'":
            raise create_unterminated_literal_error("character", "'", self._location())

        self._advance()  # Skip closing quote
        return self._emit(TokenType.CHARACTER, start)

    def _tokenize_string(self, start: SourceLocation) -> Token:
        """Tokenize a string literal."""
        self._advance()  # Skip opening quote

        while True:
            if self._is_at_end():
                raise create_unterminated_literal_error("string", '"', self._location())

            current_char = self._current()
            if current_char == '"':
                break
            if current_char == "\\":
                self._read_escape()
            elif current_char in "\n\r":
                raise LexerError(
                    "Unescaped newline in string literal",
                    self._location(),
                    code="L006",
                    help_text="Use \\n or \\r inside string literals."
                )
            else:
                self._advance()

        self._advance()  # Skip closing quote
        return self._emit(TokenType.STRING, start)

    def _read_escape(self):
        """Validate and skip a backslash escape inside a literal."""
        location = self._location()
        self._advance()  # Skip backslash
        if self._is_at_end() or self._current() not in ESCAPES:
            raise create_invalid_escape_error(self.source[location.offset:self.pos + 1], location)
        self._advance()

    def _tokenize_operator(self, start: SourceLocation) -> Token:
        """Tokenize an operator or punctuation (longest operators first)."""
        for operator in OPERATORS:
            if self.source.startswith(operator, self.pos):
                self._advance_by(len(operator))
                return self._emit(TokenType.OPERATOR, start)

        raise create_invalid_operator_error(self._current(), start)

    def _emit(self, token_type: TokenType, start: SourceLocation) -> Token:
        return Token(token_type, self.source[start.offset:self.pos], start)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def _current(self) -> str:
        return self._peek(0)

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return '\0'

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    @staticmethod
    def _is_digit(char: str) -> bool:
        return char != '' and char in _DIGITS


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If lexing fails
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
