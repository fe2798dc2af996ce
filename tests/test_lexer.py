"""
Test suite for the PLC lexer.

Tests cover:
- Token categories and first-character dispatch
- Numeric literal rules (signs, leading zeros, decimal points)
- Character and string literals with escapes
- Operators and error reporting
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from plc.lexer import Lexer, LexerError, TokenType, tokenize_string


class TestLexer(unittest.TestCase):
    """Test cases for the lexer."""

    def _lex(self, source: str):
        return [(token.type, token.lexeme) for token in tokenize_string(source)]

    def test_field_declaration(self):
        self.assertEqual(self._lex("LET x = 5;"), [
            (TokenType.IDENTIFIER, "LET"),
            (TokenType.IDENTIFIER, "x"),
            (TokenType.OPERATOR, "="),
            (TokenType.INTEGER, "5"),
            (TokenType.OPERATOR, ";"),
        ])

    def test_identifiers(self):
        """Identifiers start with a letter or underscore and may contain hyphens."""
        self.assertEqual(self._lex("_x1 get-name abc"), [
            (TokenType.IDENTIFIER, "_x1"),
            (TokenType.IDENTIFIER, "get-name"),
            (TokenType.IDENTIFIER, "abc"),
        ])

    def test_zero_is_integer(self):
        self.assertEqual(self._lex("0"), [(TokenType.INTEGER, "0")])

    def test_zero_point_five_is_decimal(self):
        self.assertEqual(self._lex("0.5"), [(TokenType.DECIMAL, "0.5")])

    def test_redundant_leading_zeros(self):
        with self.assertRaises(LexerError) as context:
            tokenize_string("007")
        self.assertEqual(context.exception.code, "L003")
        self.assertEqual(context.exception.index, 1)
        self.assertEqual(context.exception.phase, "lex")

    def test_decimal_requires_fraction_digits(self):
        with self.assertRaises(LexerError):
            tokenize_string("1.")
        with self.assertRaises(LexerError):
            tokenize_string("1.x")

    def test_signed_numbers(self):
        self.assertEqual(self._lex("-5 +3.25"), [
            (TokenType.INTEGER, "-5"),
            (TokenType.DECIMAL, "+3.25"),
        ])

    def test_sign_without_digit_is_operator(self):
        self.assertEqual(self._lex("1 - x"), [
            (TokenType.INTEGER, "1"),
            (TokenType.OPERATOR, "-"),
            (TokenType.IDENTIFIER, "x"),
        ])

    def test_sign_before_digit_binds_to_number(self):
        self.assertEqual(self._lex("1-2"), [
            (TokenType.INTEGER, "1"),
            (TokenType.INTEGER, "-2"),
        ])

    def test_multi_character_operators(self):
        self.assertEqual(self._lex("a<=b&&c!=d||e==f>=g"), [
            (TokenType.IDENTIFIER, "a"),
            (TokenType.OPERATOR, "<="),
            (TokenType.IDENTIFIER, "b"),
            (TokenType.OPERATOR, "&&"),
            (TokenType.IDENTIFIER, "c"),
            (TokenType.OPERATOR, "!="),
            (TokenType.IDENTIFIER, "d"),
            (TokenType.OPERATOR, "||"),
            (TokenType.IDENTIFIER, "e"),
            (TokenType.OPERATOR, "=="),
            (TokenType.IDENTIFIER, "f"),
            (TokenType.OPERATOR, ">="),
            (TokenType.IDENTIFIER, "g"),
        ])

    def test_invalid_operator(self):
        with self.assertRaises(LexerError) as context:
            tokenize_string("x # y")
        self.assertEqual(context.exception.code, "L001")
        self.assertEqual(context.exception.index, 2)

    def test_whitespace_is_skipped(self):
        self.assertEqual(self._lex(" \t\r\n\bx"), [(TokenType.IDENTIFIER, "x")])

    def test_character_literals(self):
        self.assertEqual(self._lex("'a' '\\n' '\\''"), [
            (TokenType.CHARACTER, "'a'"),
            (TokenType.CHARACTER, "'\\n'"),
            (TokenType.CHARACTER, "'\\''"),
        ])

    def test_empty_character_literal(self):
        with self.assertRaises(LexerError) as context:
            tokenize_string("''")
        self.assertEqual(context.exception.code, "L005")

    def test_character_literal_with_two_characters(self):
        with self.assertRaises(LexerError) as context:
            tokenize_string("'ab'")
        self.assertEqual(context.exception.code, "L002")

    def test_string_literals(self):
        self.assertEqual(self._lex('"hello\\tworld" ""'), [
            (TokenType.STRING, '"hello\\tworld"'),
            (TokenType.STRING, '""'),
        ])

    def test_unterminated_string(self):
        with self.assertRaises(LexerError) as context:
            tokenize_string('"abc')
        self.assertEqual(context.exception.code, "L002")
        self.assertEqual(context.exception.index, 4)

    def test_raw_newline_in_string(self):
        with self.assertRaises(LexerError) as context:
            tokenize_string('"a\nb"')
        self.assertEqual(context.exception.code, "L006")

    def test_invalid_escape(self):
        with self.assertRaises(LexerError) as context:
            tokenize_string('"\\q"')
        self.assertEqual(context.exception.code, "L004")
        self.assertEqual(context.exception.index, 1)

    def test_source_locations(self):
        tokens = Lexer("LET\n  x", "prog.plc").tokenize()
        location = tokens[1].location
        self.assertEqual(location.filename, "prog.plc")
        self.assertEqual((location.line, location.column, location.offset), (2, 3, 6))
        self.assertEqual(str(location), "prog.plc:2:3")

    def test_error_message_points_at_location(self):
        with self.assertRaises(LexerError) as context:
            Lexer("LET x = $;", "prog.plc").tokenize()
        message = str(context.exception)
        self.assertIn("ERROR: Invalid operator: '$'", message)
        self.assertIn("--> prog.plc:1:9", message)


if __name__ == '__main__':
    unittest.main()
