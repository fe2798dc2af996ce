"""
PLC Interpreter Package

Executes analyzed programs by walking the AST.
"""

from .interpreter import Interpreter, Returning, render
from .errors import InterpreterError

__all__ = [
    "Interpreter",
    "InterpreterError",
    "Returning",
    "render",
]
