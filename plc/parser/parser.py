"""
PLC Recursive Descent Parser

One method per grammar rule. Binary operators are parsed with one method per
precedence level (logical, comparison, additive, multiplicative), each
folding its operands left to right so every level is left-associative.

Keywords are plain identifier tokens; the parser recognizes them by text.
"""

import logging
import re
from decimal import Decimal
from typing import List, Optional, Sequence, Union

from ..lexer.tokens import Token, TokenType, ESCAPES
from .ast_nodes import (
    Source, Field, Method, Statement, ExpressionStatement, Declaration, Assignment,
    IfStatement, ForLoop, WhileLoop, ReturnStatement, Expression, Literal, Group,
    BinaryOp, Access, FunctionCall
)
from .errors import ParseError, create_unexpected_token_error, create_unexpected_eof_error

logger = logging.getLogger(__name__)

Pattern = Union[TokenType, str]

_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)

# Operators per precedence level, lowest first
LOGICAL_OPERATORS = ("&&", "||")
COMPARISON_OPERATORS = ("<", "<=", ">", ">=", "==", "!=")
ADDITIVE_OPERATORS = ("+", "-")
MULTIPLICATIVE_OPERATORS = ("*", "/")


class Parser:
    """
    PLC recursive descent parser.

    Produces an undecorated Source AST from a token list, raising a
    ParseError at the first structural mismatch.
    """

    def __init__(self, tokens: List[Token]):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer
        """
        self.tokens = tokens
        self.current = 0

    def parse(self) -> Source:
        """
        Parse the token stream into an AST.

        Returns:
            Source node holding every field and method

        Raises:
            ParseError: If the tokens do not form a program
        """
        location = self.tokens[0].location if self.tokens else None

        fields = []
        while self._peek("LET"):
            fields.append(self._parse_field())

        methods = []
        while self._peek("DEF"):
            methods.append(self._parse_method())

        if not self._is_at_end():
            error = create_unexpected_token_error(
                "Expected a field or method declaration.", "DEF", self._current_token()
            )
            error.diagnostic.code = "P005"
            raise error

        logger.debug("Parsed %d fields and %d methods", len(fields), len(methods))
        return Source(fields, methods, location)

    # ========================================================================
    # Declarations
    # ========================================================================

    def _parse_field(self) -> Field:
        """Parse ``LET [CONST] name [: Type] [= value];``."""
        start_token = self._consume("LET", "Expected 'LET' at the beginning of a field declaration.")
        is_constant = self._match("CONST")
        name = self._consume(TokenType.IDENTIFIER, "Expected identifier in field declaration.").lexeme

        type_name = None
        if self._match(":"):
            type_name = self._consume(TokenType.IDENTIFIER, "Expected type name after ':'.").lexeme

        value = None
        if self._match("="):
            value = self._parse_expression()

        self._consume(";", "Expected ';' after field declaration.")
        return Field(name, type_name, is_constant, value, start_token.location)

    def _parse_method(self) -> Method:
        """Parse ``DEF name(params) [: Type] DO statements END``."""
        start_token = self._consume("DEF", "Expected 'DEF' at the beginning of a method declaration.")
        name = self._consume(TokenType.IDENTIFIER, "Expected method name after 'DEF'.").lexeme
        self._consume("(", "Expected '(' after method name.")

        parameters = []
        parameter_type_names = []
        if not self._peek(")"):
            while True:
                parameters.append(self._consume(TokenType.IDENTIFIER, "Expected parameter name.").lexeme)
                if self._match(":"):
                    type_token = self._consume(TokenType.IDENTIFIER, "Expected parameter type name after ':'.")
                    parameter_type_names.append(type_token.lexeme)
                else:
                    parameter_type_names.append("Any")
                if not self._match(","):
                    break

        self._consume(")", "Expected ')' after parameters.")

        return_type_name = None
        if self._match(":"):
            return_type_name = self._consume(TokenType.IDENTIFIER, "Expected return type name after ':'.").lexeme

        self._consume("DO", "Expected 'DO' after method signature.")
        statements = self._parse_block("END")
        self._consume("END", "Expected 'END' after method body.")

        return Method(name, parameters, parameter_type_names, return_type_name, statements,
                      start_token.location)

    def _parse_block(self, *terminators: str) -> List[Statement]:
        """Parse statements until one of ``terminators`` (not consumed)."""
        statements = []
        while not any(self._peek(terminator) for terminator in terminators):
            if self._is_at_end():
                raise create_unexpected_eof_error(
                    f"Expected '{terminators[0]}' before the end of input.", terminators[0]
                )
            statements.append(self._parse_statement())
        return statements

    # ========================================================================
    # Statements
    # ========================================================================

    def _parse_statement(self) -> Statement:
        """Parse a statement."""
        if self._peek("LET"):
            return self._parse_declaration()
        elif self._peek("IF"):
            return self._parse_if_statement()
        elif self._peek("FOR"):
            return self._parse_for_loop()
        elif self._peek("WHILE"):
            return self._parse_while_loop()
        elif self._peek("RETURN"):
            return self._parse_return_statement()

        start = self._current_token()
        expression = self._parse_expression()
        if self._match("="):
            value = self._parse_expression()
            self._consume(";", "Expected ';' after assignment.")
            return Assignment(expression, value, start.location)

        self._consume(";", "Expected ';' after expression.")
        return ExpressionStatement(expression, start.location)

    def _parse_declaration(self) -> Declaration:
        """Parse ``LET name [: Type] [= value];``."""
        start_token = self._consume("LET", "Expected 'LET'.")
        name = self._consume(TokenType.IDENTIFIER, "Expected identifier in declaration.").lexeme

        type_name = None
        if self._match(":"):
            type_name = self._consume(TokenType.IDENTIFIER, "Expected type name after ':'.").lexeme

        value = None
        if self._match("="):
            value = self._parse_expression()

        self._consume(";", "Expected ';' after variable declaration.")
        return Declaration(name, type_name, value, start_token.location)

    def _parse_if_statement(self) -> IfStatement:
        """Parse ``IF condition DO statements [ELSE statements] END``."""
        start_token = self._consume("IF", "Expected 'IF'.")
        condition = self._parse_expression()
        self._consume("DO", "Expected 'DO' after if condition.")

        then_statements = self._parse_block("ELSE", "END")
        else_statements = []
        if self._match("ELSE"):
            else_statements = self._parse_block("END")

        self._consume("END", "Expected 'END' after if statement.")
        return IfStatement(condition, then_statements, else_statements, start_token.location)

    def _parse_for_loop(self) -> ForLoop:
        """Parse ``FOR ([init]; [condition]; [increment]) DO statements END``."""
        start_token = self._consume("FOR", "Expected 'FOR'.")
        self._consume("(", "Expected '(' after 'FOR'.")

        initialization: Optional[Statement] = None
        if self._peek("LET"):
            initialization = self._parse_declaration()
        elif not self._match(";"):
            receiver_token = self._current_token()
            receiver = self._parse_expression()
            self._consume("=", "Expected '=' in for-loop initializer.")
            value = self._parse_expression()
            self._consume(";", "Expected ';' after for-loop initializer.")
            initialization = Assignment(receiver, value, receiver_token.location)

        condition = None
        if not self._peek(";"):
            condition = self._parse_expression()
        self._consume(";", "Expected ';' after for-loop condition.")

        increment = None
        if not self._peek(")"):
            increment = self._parse_increment()

        self._consume(")", "Expected ')' after for-loop clauses.")
        self._consume("DO", "Expected 'DO' after for-loop clauses.")
        statements = self._parse_block("END")
        self._consume("END", "Expected 'END' after for-loop body.")

        return ForLoop(initialization, condition, increment, statements, start_token.location)

    def _parse_increment(self) -> Assignment:
        """Parse the increment clause, which must be ``access = value``."""
        start = self._current_token()
        receiver = self._parse_expression()
        if not isinstance(receiver, (Access, FunctionCall)):
            raise self._error("Invalid for-loop increment.", "=", code="P003")
        if not self._match("="):
            raise self._error("Expected '=' in for-loop increment.", "=", code="P003")
        value = self._parse_expression()
        return Assignment(receiver, value, start.location)

    def _parse_while_loop(self) -> WhileLoop:
        """Parse ``WHILE condition DO statements END``."""
        start_token = self._consume("WHILE", "Expected 'WHILE'.")
        condition = self._parse_expression()
        self._consume("DO", "Expected 'DO' after while condition.")
        statements = self._parse_block("END")
        self._consume("END", "Expected 'END' after while-loop body.")
        return WhileLoop(condition, statements, start_token.location)

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse ``RETURN value;``."""
        start_token = self._consume("RETURN", "Expected 'RETURN'.")
        value = self._parse_expression()
        self._consume(";", "Expected ';' after return value.")
        return ReturnStatement(value, start_token.location)

    # ========================================================================
    # Expressions
    # ========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_logical()

    def _parse_logical(self) -> Expression:
        return self._parse_binary(LOGICAL_OPERATORS, self._parse_comparison)

    def _parse_comparison(self) -> Expression:
        return self._parse_binary(COMPARISON_OPERATORS, self._parse_additive)

    def _parse_additive(self) -> Expression:
        return self._parse_binary(ADDITIVE_OPERATORS, self._parse_multiplicative)

    def _parse_multiplicative(self) -> Expression:
        return self._parse_binary(MULTIPLICATIVE_OPERATORS, self._parse_secondary)

    def _parse_binary(self, operators: Sequence[str], operand) -> Expression:
        """Fold ``operand (op operand)*`` into a left-associative tree."""
        left = operand()
        while any(self._peek(operator) for operator in operators):
            operator_token = self._advance()
            right = operand()
            left = BinaryOp(operator_token.lexeme, left, right, left.location)
        return left

    def _parse_secondary(self) -> Expression:
        """Parse field accesses and method calls chained with '.'."""
        expression = self._parse_primary()
        while self._match("."):
            name_token = self._consume(TokenType.IDENTIFIER, "Expected identifier after '.'.")
            if self._match("("):
                arguments = self._parse_arguments()
                expression = FunctionCall(expression, name_token.lexeme, arguments, name_token.location)
            else:
                expression = Access(expression, name_token.lexeme, name_token.location)
        return expression

    def _parse_primary(self) -> Expression:
        """Parse literals, groups, variable accesses and function calls."""
        if self._is_at_end():
            raise create_unexpected_eof_error("Expected primary expression.")

        token = self._current_token()
        location = token.location

        if self._match("NIL"):
            return Literal(None, "nil", location)
        elif self._match("TRUE"):
            return Literal(True, "boolean", location)
        elif self._match("FALSE"):
            return Literal(False, "boolean", location)
        elif self._match(TokenType.INTEGER):
            return Literal(int(token.lexeme), "integer", location)
        elif self._match(TokenType.DECIMAL):
            return Literal(Decimal(token.lexeme), "decimal", location)
        elif self._match(TokenType.CHARACTER):
            value = self._decode(token)
            if len(value) != 1:
                raise ParseError("Invalid character literal.", token.offset, location,
                                 token=token, code="P004")
            return Literal(value, "character", location)
        elif self._match(TokenType.STRING):
            return Literal(self._decode(token), "string", location)
        elif self._match("("):
            expression = self._parse_expression()
            self._consume(")", "Expected ')' after expression.")
            return Group(expression, location)
        elif self._match(TokenType.IDENTIFIER):
            if self._match("("):
                arguments = self._parse_arguments()
                return FunctionCall(None, token.lexeme, arguments, location)
            return Access(None, token.lexeme, location)

        raise self._error("Expected primary expression.", "expression")

    def _parse_arguments(self) -> List[Expression]:
        """Parse ``[expr (, expr)*] )`` after an opening parenthesis."""
        arguments = []
        if not self._peek(")"):
            arguments.append(self._parse_expression())
            while self._match(","):
                arguments.append(self._parse_expression())
        self._consume(")", "Expected ')' after function arguments.")
        return arguments

    @staticmethod
    def _decode(token: Token) -> str:
        """Strip the delimiters of a character/string token and decode escapes."""
        def replace(match):
            escape = match.group(1)
            if escape not in ESCAPES:
                raise ParseError(f"Invalid escape sequence '\\{escape}'.", token.offset,
                                 token.location, token=token, code="P004")
            return ESCAPES[escape]

        return _ESCAPE_PATTERN.sub(replace, token.lexeme[1:-1])

    # ========================================================================
    # Token stream primitives
    # ========================================================================

    def _peek(self, *patterns: Pattern) -> bool:
        """Check that the upcoming tokens match ``patterns`` without consuming."""
        for offset, pattern in enumerate(patterns):
            if self.current + offset >= len(self.tokens):
                return False
            token = self.tokens[self.current + offset]
            if isinstance(pattern, TokenType):
                if token.type != pattern:
                    return False
            elif token.lexeme != pattern:
                return False
        return True

    def _match(self, *patterns: Pattern) -> bool:
        """Consume the upcoming tokens if they match ``patterns``."""
        if not self._peek(*patterns):
            return False
        self.current += len(patterns)
        return True

    def _consume(self, pattern: Pattern, message: str) -> Token:
        """Consume a token matching ``pattern`` or raise a ParseError."""
        if self._peek(pattern):
            return self._advance()
        raise self._error(message, pattern)

    def _advance(self) -> Token:
        token = self.tokens[self.current]
        self.current += 1
        return token

    def _current_token(self) -> Optional[Token]:
        if self._is_at_end():
            return None
        return self.tokens[self.current]

    def _is_at_end(self) -> bool:
        return self.current >= len(self.tokens)

    def _error(self, message: str, expected, code: Optional[str] = None) -> ParseError:
        """Build a ParseError at the current token (or at end of input)."""
        if self._is_at_end():
            error = create_unexpected_eof_error(message, expected)
        else:
            error = create_unexpected_token_error(message, expected, self._current_token())
        if code is not None:
            error.diagnostic.code = code
        return error


def parse_string(source: str, filename: str = "<string>") -> Source:
    """
    Convenience function to parse a source string.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize_string

    tokens = tokenize_string(source, filename)
    return Parser(tokens).parse()


def parse_file(filepath: str) -> Source:
    """
    Convenience function to parse a source file.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
        OSError: If file cannot be read
    """
    from ..lexer import tokenize_file

    tokens = tokenize_file(filepath)
    return Parser(tokens).parse()
