"""
PLC Language Package

Front end and tree-walking interpreter for the PLC teaching language: a small
imperative language with fields, methods, a closed set of primitive types and
arbitrary-precision numerics.

Architecture:
    plc/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Recursive descent parsing and AST nodes
    ├── environment/     # Types, scopes, symbols and runtime values
    ├── analyzer/        # Scoping and type checking, AST decoration
    ├── interpreter/     # Evaluation of the decorated AST
    ├── driver.py        # Host entry point running every phase
    └── cli.py           # `plc` command line tool

License: MIT
"""

import logging

__version__ = "0.1.0"
__license__ = "MIT"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .errors import PlcError
from .lexer import Lexer
from .parser import Parser
from .analyzer import SemanticAnalyzer
from .interpreter import Interpreter
from .driver import evaluate, check, RunResult

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "SemanticAnalyzer",
    "Interpreter",

    # Host entry points
    "evaluate",
    "check",
    "RunResult",
    "PlcError",

    # Version info
    "__version__",
    "__license__",
]
