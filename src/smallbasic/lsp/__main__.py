"""
Entry point for running the Small Basic LSP server as a module.

Usage:
    python -m smallbasic.lsp
    python -m smallbasic.lsp --tcp --port 2087
"""

from smallbasic.lsp.server import main

if __name__ == "__main__":
    main()
