"""
PLC Parser Package

Recursive descent parser that builds the abstract syntax tree.
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, DecorationError, Source, Field, Method,
    Statement, ExpressionStatement, Declaration, Assignment, IfStatement,
    ForLoop, WhileLoop, ReturnStatement,
    Expression, Literal, Group, BinaryOp, Access, FunctionCall
)
from .parser import Parser, parse_string, parse_file
from .errors import ParseError

__all__ = [
    "Parser",
    "ParseError",
    "parse_string",
    "parse_file",
    "ASTNode",
    "ASTNodeType",
    "DecorationError",
    "Source",
    "Field",
    "Method",
    "Statement",
    "ExpressionStatement",
    "Declaration",
    "Assignment",
    "IfStatement",
    "ForLoop",
    "WhileLoop",
    "ReturnStatement",
    "Expression",
    "Literal",
    "Group",
    "BinaryOp",
    "Access",
    "FunctionCall",
]
