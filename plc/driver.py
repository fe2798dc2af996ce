"""
Host entry points running the whole PLC pipeline.

    source text -> tokens -> AST -> decorated AST -> value of main()

Each phase aborts on its first fault; the fault propagates unchanged, and
its ``phase`` attribute names the phase that raised it.
"""

import logging
from dataclasses import dataclass
from typing import Optional, TextIO

from .analyzer import SemanticAnalyzer
from .environment.values import PlcObject
from .interpreter import Interpreter
from .lexer import Lexer
from .parser import Parser
from .parser.ast_nodes import Source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Outcome of a successful run."""
    value: PlcObject
    exit_code: int


def check(source: str, filename: str = "<string>") -> Source:
    """
    Lex, parse and analyze ``source`` without running it.

    Returns:
        The decorated AST

    Raises:
        LexerError, ParseError, SemanticError: From the failing phase
    """
    tokens = Lexer(source, filename).tokenize()
    ast = Parser(tokens).parse()
    return SemanticAnalyzer().analyze(ast)


def evaluate(source: str, filename: str = "<string>", output: Optional[TextIO] = None) -> RunResult:
    """
    Run a program and return the value of ``main()``.

    Args:
        source: Program text
        filename: Name used in diagnostics
        output: Stream written by ``print`` (standard output by default)

    Raises:
        LexerError, ParseError, SemanticError, InterpreterError: From the failing phase
    """
    ast = check(source, filename)
    value = Interpreter(output=output).run(ast)

    exit_code = value.value if type(value.value) is int else 0
    logger.debug("%s finished with exit code %d", filename, exit_code)
    return RunResult(value, exit_code)
