"""
Document analysis for Small Basic LSP.

A DocumentAnalyzer is the per-document session: it owns the document's
lines, its symbol table and its current diagnostics, and answers
position-based queries. Every analysis replaces the previous results.
"""

from lsprotocol import types

from smallbasic.compiler.blocks import split_lines
from smallbasic.config import Settings
from smallbasic.lsp.completions import CompletionProvider
from smallbasic.lsp.diagnostics import DiagnosticProvider, limit_diagnostics
from smallbasic.lsp.symbols import SymbolTable, collect_symbols


class DocumentAnalyzer:
    """
    Analyzes a Small Basic document for LSP features.

    This class collects symbols and block-balance diagnostics and
    provides completions and document symbols.
    """

    def __init__(self, source: str, uri: str, settings: Settings | None = None) -> None:
        """
        Initialize the analyzer with source code.

        Args:
            source: The Small Basic source code
            uri: The document URI
            settings: Editor settings (defaults when omitted)
        """
        self.source = source
        self.uri = uri
        self.settings = settings or Settings()
        self.lines = split_lines(source)

        # Analysis results
        self.symbols = SymbolTable()
        self.diagnostics: list[types.Diagnostic] = []

        self._completion_provider = CompletionProvider(self.settings)

    def analyze(self) -> None:
        """Collect symbols and diagnostics, discarding earlier results."""
        self.symbols.clear()
        collect_symbols(self.lines, self.symbols)

        diagnostics = DiagnosticProvider(self.source, self.uri).get_diagnostics(self.lines)
        self.diagnostics = limit_diagnostics(diagnostics, self.settings.max_number_of_problems)

    def get_completions(self, line: int, character: int) -> list[types.CompletionItem]:
        """
        Get completion items at a position.

        Args:
            line: 0-indexed line number
            character: 0-indexed character offset

        Returns:
            List of completion items
        """
        if line < 0 or line >= len(self.lines):
            prefix = ""
        else:
            prefix = self.lines[line][: max(0, character)]

        return self._completion_provider.get_completions(prefix, self.symbols)

    def get_document_symbols(self) -> list[types.DocumentSymbol]:
        """Get the document outline: subroutines, then variables."""
        return [symbol.to_document_symbol() for symbol in self.symbols.get_all_symbols()]
