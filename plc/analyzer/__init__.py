"""
PLC Semantic Analyzer Package

Scope resolution and type checking over the parsed AST.
"""

from .semantic_analyzer import SemanticAnalyzer, require_assignable
from .errors import SemanticError

__all__ = [
    "SemanticAnalyzer",
    "SemanticError",
    "require_assignable",
]
