"""
Structured results of one Small Basic compiler invocation.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class CompilationError:
    """
    A single problem reported by the external compiler.

    Attributes:
        message: Human-readable error message
        line: 1-indexed line number, if known
        column: 1-indexed column number, if known (requires ``line``)
    """

    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __post_init__(self) -> None:
        if self.column is not None and self.line is None:
            raise ValueError("CompilationError with a column must also have a line")

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        if self.column is None:
            return f"{self.line}: {self.message}"
        return f"{self.line}:{self.column}: {self.message}"


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """
    Outcome of compiling one source file.

    Attributes:
        success: Whether a runnable program was produced
        exe_path: Path of the produced executable (only on success)
        errors: Errors explaining a failure (None on success)
        raw_output: Captured compiler output, when requested by the caller
    """

    success: bool
    exe_path: Optional[str] = None
    errors: Optional[tuple[CompilationError, ...]] = None
    raw_output: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "success": self.success,
            "exePath": self.exe_path,
            "errors": [
                {"message": e.message, "line": e.line, "column": e.column}
                for e in self.errors or ()
            ],
            "rawOutput": self.raw_output,
        }
