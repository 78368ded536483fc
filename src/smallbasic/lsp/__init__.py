"""
Small Basic Language Server Protocol (LSP) implementation.

This package provides an LSP server for Small Basic, enabling IDE
features such as:
- Error diagnostics for unclosed If/While/For/Sub blocks
- Compiler errors from the Small Basic compiler
- Autocomplete for keywords, library objects and document symbols
- Document outline

Usage:
    # Start the LSP server (stdio mode)
    smallbasic-lsp

    # Or run as a module
    python -m smallbasic.lsp
"""

from smallbasic.lsp.server import SmallBasicLanguageServer, main

__all__ = [
    "SmallBasicLanguageServer",
    "main",
]
