"""
Diagnostic generation for Small Basic LSP.

This module converts unclosed control blocks and compiler errors
into LSP-compatible diagnostic messages for display in editors.
"""

from collections.abc import Iterable

from lsprotocol import types

from smallbasic.compiler.blocks import BlockKind, ControlStatement, find_unmatched_blocks, split_lines
from smallbasic.compiler.results import CompilationError

DIAGNOSTIC_SOURCE = "smallbasic"
COMPILER_DIAGNOSTIC_SOURCE = "smallbasic-compiler"

# Width underlined for compiler errors, which carry no token length
COMPILER_ERROR_WIDTH = 10


class DiagnosticProvider:
    """
    Generates LSP diagnostics from Small Basic source code.

    Every ``If``, ``While``, ``For`` and ``Sub`` that is never closed
    produces one error at the opening keyword.
    """

    def __init__(self, source: str, uri: str) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The Small Basic source code to analyze
            uri: The document URI for location information
        """
        self.source = source
        self.uri = uri
        self._diagnostics: list[types.Diagnostic] = []

    def get_diagnostics(self, lines: list[str] | None = None) -> list[types.Diagnostic]:
        """
        Get all diagnostics for the document.

        Args:
            lines: The source already split into lines, if available

        Returns:
            List of LSP diagnostic objects
        """
        self._diagnostics = []

        if lines is None:
            lines = split_lines(self.source)

        for statement in find_unmatched_blocks(lines):
            self._add_unclosed_block(statement)

        return self._diagnostics

    def _add_unclosed_block(self, statement: ControlStatement) -> None:
        """
        Add an unclosed block opener as an LSP diagnostic.

        Args:
            statement: The opener with no matching closer
        """
        kind = statement.kind
        if kind is BlockKind.SUB:
            message = f"Subroutine '{statement.name}' is missing a matching '{kind.closer}'"
        else:
            message = f"'{kind.opener}' statement is missing a matching '{kind.closer}'"

        diagnostic = types.Diagnostic(
            range=types.Range(
                start=types.Position(line=statement.line, character=statement.column),
                end=types.Position(line=statement.line, character=statement.end_column),
            ),
            message=message,
            severity=types.DiagnosticSeverity.Error,
            source=DIAGNOSTIC_SOURCE,
        )

        self._diagnostics.append(diagnostic)


def get_diagnostics_for_document(source: str, uri: str) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        source: The Small Basic source code
        uri: The document URI

    Returns:
        List of LSP diagnostics
    """
    provider = DiagnosticProvider(source, uri)
    return provider.get_diagnostics()


def compilation_error_to_diagnostic(error: CompilationError) -> types.Diagnostic:
    """
    Convert a compiler error to an LSP diagnostic.

    Compiler positions are 1-indexed; LSP positions are 0-indexed.
    Errors without a position are placed at the start of the file.
    """
    line = max(0, error.line - 1) if error.line is not None else 0
    character = max(0, error.column - 1) if error.column is not None else 0

    return types.Diagnostic(
        range=types.Range(
            start=types.Position(line=line, character=character),
            end=types.Position(line=line, character=character + COMPILER_ERROR_WIDTH),
        ),
        message=error.message,
        severity=types.DiagnosticSeverity.Error,
        source=COMPILER_DIAGNOSTIC_SOURCE,
    )


def compilation_errors_to_diagnostics(
    errors: Iterable[CompilationError],
) -> list[types.Diagnostic]:
    """Convert compiler errors to LSP diagnostics, preserving order."""
    return [compilation_error_to_diagnostic(error) for error in errors]


def limit_diagnostics(
    diagnostics: list[types.Diagnostic], maximum: int
) -> list[types.Diagnostic]:
    """Keep at most ``maximum`` diagnostics."""
    return diagnostics[: max(0, maximum)]
