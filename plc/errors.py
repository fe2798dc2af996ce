"""
Common diagnostics for every PLC phase.

Each phase raises its own exception class; all of them derive from PlcError
and carry a Diagnostic describing what went wrong and where.
"""

import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .lexer.tokens import SourceLocation

# Python frames a phase may use. One PLC call costs about a dozen frames and
# each operator nesting level two.
RECURSION_LIMIT = 20000


@dataclass
class Diagnostic:
    """A single error report (message, location, code, help)."""
    message: str
    location: Optional["SourceLocation"]
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        result = f"{self.severity.upper()}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class PlcError(Exception):
    """
    Base class of every fault raised by the pipeline.

    The ``phase`` attribute tells the host which phase aborted.
    """

    phase = "unknown"

    def __init__(
        self,
        message: str,
        location: Optional["SourceLocation"] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


@contextmanager
def recursion_limit(limit: int = RECURSION_LIMIT):
    """Raise the interpreter recursion limit to ``limit`` inside the block."""
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)
