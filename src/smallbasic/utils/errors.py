"""
Error types and source location tracking for Small Basic tooling.

Only tooling failures are raised as exceptions. Problems found in program
text or in compiler output are reported as diagnostics instead.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in a source file.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        filename: Optional filename for error reporting
    """

    line: int
    column: int = 1
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


class SmallBasicError(Exception):
    """Base exception for all Small Basic tooling errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"[{self.location}] {self.message}"
        return self.message


class CompilerNotFoundError(SmallBasicError):
    """Raised when the configured compiler executable does not exist."""

    def __init__(self, compiler_path: str) -> None:
        self.compiler_path = compiler_path
        super().__init__(f"Small Basic compiler not found at {compiler_path}")


class SourceNotFoundError(SmallBasicError):
    """Raised when a file that must exist on disk is missing."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Source file not found: {path}")


class CompilerLaunchError(SmallBasicError):
    """Raised when the compiler process cannot be started."""

    pass


class ProgramLaunchError(SmallBasicError):
    """Raised when a compiled program cannot be started."""

    pass
