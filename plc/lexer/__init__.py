"""
PLC Lexer Package

Implements the lexical analyzer (tokenizer) for the PLC language.

Key Features:
- Six token categories (identifier, integer, decimal, character, string, operator)
- Signed numeric literals without redundant leading zeros
- Validated escape sequences in character and string literals
- Source offset, line and column tracking for diagnostics
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexerError",
    "tokenize_string",
    "tokenize_file",
]
