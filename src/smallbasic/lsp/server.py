"""
Small Basic Language Server Protocol (LSP) Server.

This module implements the LSP server for Small Basic using pygls.
It provides:

- Document synchronization (open, change, save, close)
- Diagnostics for unclosed If/While/For/Sub blocks
- Completion of keywords, library objects and members, and document symbols
- Document symbols (outline)
- A ``smallbasic.compile`` command that runs the Small Basic compiler and
  reports its errors as diagnostics

Usage:
    # Start the server in stdio mode (for IDE integration)
    smallbasic-lsp

    # Start in TCP mode (for debugging)
    smallbasic-lsp --tcp --port 2087
"""

import functools
import logging
from collections.abc import Callable
from typing import Any

from lsprotocol import types
from pygls.lsp.server import LanguageServer
from pygls.uris import from_fs_path, to_fs_path

from smallbasic import __version__
from smallbasic.compiler.driver import compile_program
from smallbasic.config import Settings
from smallbasic.lsp.analyzer import DocumentAnalyzer
from smallbasic.lsp.completions import CompletionProvider
from smallbasic.lsp.diagnostics import compilation_errors_to_diagnostics, limit_diagnostics
from smallbasic.utils.errors import SmallBasicError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("smallbasic-lsp")

COMPILE_COMMAND = "smallbasic.compile"


def _handler(method: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a bound method in a plain function that pygls can register."""

    @functools.wraps(method)
    def handler(*args: Any) -> Any:
        return method(*args)

    return handler


class SmallBasicLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for Small Basic.

    This class handles LSP requests and notifications, keeping one
    DocumentAnalyzer per open document.
    """

    def __init__(self) -> None:
        """Initialize the Small Basic language server."""
        super().__init__(
            name="smallbasic-lsp",
            version=f"v{__version__}",
        )

        self.settings = Settings().resolve()

        # Document analyzers cache (uri -> analyzer)
        self._analyzers: dict[str, DocumentAnalyzer] = {}

        # Diagnostics from the last compile, until the document changes
        self._compiler_diagnostics: dict[str, list[types.Diagnostic]] = {}

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register all LSP request and notification handlers."""
        # Document synchronization
        self.feature(types.TEXT_DOCUMENT_DID_OPEN)(_handler(self._on_did_open))
        self.feature(types.TEXT_DOCUMENT_DID_CHANGE)(_handler(self._on_did_change))
        self.feature(types.TEXT_DOCUMENT_DID_SAVE)(_handler(self._on_did_save))
        self.feature(types.TEXT_DOCUMENT_DID_CLOSE)(_handler(self._on_did_close))

        # Configuration
        self.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)(
            _handler(self._on_did_change_configuration)
        )

        # Completion
        self.feature(
            types.TEXT_DOCUMENT_COMPLETION,
            types.CompletionOptions(trigger_characters=["."], resolve_provider=True),
        )(_handler(self._on_completion))
        self.feature(types.COMPLETION_ITEM_RESOLVE)(_handler(self._on_completion_resolve))

        # Document symbols (outline)
        self.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)(_handler(self._on_document_symbol))

        # Compile (runs the external compiler off the event loop)
        self.command(COMPILE_COMMAND)(self.thread()(_handler(self._on_compile)))

    def _get_analyzer(self, uri: str) -> DocumentAnalyzer | None:
        """Get the cached analyzer for a document, analyzing it if needed."""
        analyzer = self._analyzers.get(uri)
        if analyzer is not None:
            return analyzer

        doc = self.workspace.get_text_document(uri)
        if doc is None:
            return None
        return self._analyze_document(uri, doc.source)

    def _analyze_document(self, uri: str, text: str) -> DocumentAnalyzer:
        """Analyze a document and cache the result."""
        analyzer = DocumentAnalyzer(text, uri, self.settings)
        analyzer.analyze()
        self._analyzers[uri] = analyzer
        return analyzer

    def _publish_diagnostics(self, uri: str) -> None:
        """Publish block and compiler diagnostics for a document."""
        analyzer = self._analyzers.get(uri)
        diagnostics = list(analyzer.diagnostics) if analyzer else []
        diagnostics.extend(self._compiler_diagnostics.get(uri, []))

        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(
                uri=uri,
                diagnostics=limit_diagnostics(diagnostics, self.settings.max_number_of_problems),
            )
        )

    def apply_settings(self, settings: Settings) -> None:
        """Replace the settings and re-analyze all open documents."""
        self.settings = settings.resolve()
        logger.info(f"Settings updated: compiler at {self.settings.compiler_path}")

        for uri in list(self._analyzers):
            doc = self.workspace.get_text_document(uri)
            self._analyze_document(uri, doc.source)
            self._publish_diagnostics(uri)

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        """Handle document open notification."""
        document = params.text_document
        logger.info(f"Document opened: {document.uri}")

        self._analyze_document(document.uri, document.text)
        self._publish_diagnostics(document.uri)

    def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        """Handle document change notification."""
        uri = params.text_document.uri

        doc = self.workspace.get_text_document(uri)
        if doc is None:
            return

        logger.debug(f"Document changed: {uri}")

        # Compiler positions no longer match the edited text
        self._compiler_diagnostics.pop(uri, None)
        self._analyze_document(uri, doc.source)
        self._publish_diagnostics(uri)

    def _on_did_save(self, params: types.DidSaveTextDocumentParams) -> None:
        """Handle document save notification."""
        uri = params.text_document.uri
        logger.info(f"Document saved: {uri}")

        doc = self.workspace.get_text_document(uri)
        if doc:
            self._analyze_document(uri, doc.source)
            self._publish_diagnostics(uri)

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        uri = params.text_document.uri
        logger.info(f"Document closed: {uri}")

        self._analyzers.pop(uri, None)
        self._compiler_diagnostics.pop(uri, None)

        # Clear diagnostics
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=[])
        )

    def _on_did_change_configuration(self, params: types.DidChangeConfigurationParams) -> None:
        """Handle configuration change notification."""
        self.apply_settings(Settings.from_dict(params.settings))

    # =========================================================================
    # Completion
    # =========================================================================

    def _on_completion(self, params: types.CompletionParams) -> types.CompletionList | None:
        """Handle completion request."""
        analyzer = self._get_analyzer(params.text_document.uri)
        if analyzer is None:
            return None

        position = params.position
        items = analyzer.get_completions(position.line, position.character)

        return types.CompletionList(
            is_incomplete=False,
            items=items,
        )

    def _on_completion_resolve(self, item: types.CompletionItem) -> types.CompletionItem:
        """Handle completion item resolve request."""
        return CompletionProvider(self.settings).resolve(item)

    # =========================================================================
    # Document Symbols
    # =========================================================================

    def _on_document_symbol(
        self, params: types.DocumentSymbolParams
    ) -> list[types.DocumentSymbol] | None:
        """Handle document symbols request (for outline view)."""
        analyzer = self._get_analyzer(params.text_document.uri)
        if analyzer is None:
            return []

        return analyzer.get_document_symbols()

    # =========================================================================
    # Compile
    # =========================================================================

    def _on_compile(self, *args: Any) -> dict[str, Any] | None:
        """
        Handle the ``smallbasic.compile`` command.

        The single argument is the document URI (or a file path).
        """
        # Arguments may arrive unpacked or as one list
        if len(args) == 1 and isinstance(args[0], list):
            args = tuple(args[0])
        if not args or not isinstance(args[0], str):
            self._show_error("smallbasic.compile expects a document URI")
            return None

        target = args[0]
        if target.startswith("file:"):
            uri, path = target, to_fs_path(target)
        else:
            uri, path = from_fs_path(target), target

        logger.info(f"Compiling: {path}")
        try:
            result = compile_program(path, self.settings, capture_raw_output=True)
        except SmallBasicError as e:
            logger.error(f"Compilation could not run: {e}")
            self._show_error(f"Error during compilation: {e.message}")
            return None

        if result.success:
            logger.info(f"Compiled successfully: {result.exe_path}")
            self._compiler_diagnostics.pop(uri, None)
        else:
            logger.info(f"Compilation failed with {len(result.errors or ())} errors")
            self._compiler_diagnostics[uri] = compilation_errors_to_diagnostics(result.errors or ())

        if uri in self._analyzers:
            self._publish_diagnostics(uri)
        else:
            self.text_document_publish_diagnostics(
                types.PublishDiagnosticsParams(
                    uri=uri, diagnostics=self._compiler_diagnostics.get(uri, [])
                )
            )

        return result.to_dict()

    def _show_error(self, message: str) -> None:
        self.window_show_message(
            types.ShowMessageParams(type=types.MessageType.Error, message=message)
        )


# =============================================================================
# Server Creation and Main Entry Point
# =============================================================================


def create_server() -> SmallBasicLanguageServer:
    """Create and configure a Small Basic language server instance."""
    server = SmallBasicLanguageServer()

    @server.feature(types.INITIALIZE)
    def on_initialize(params: types.InitializeParams) -> None:
        """Handle initialize request."""
        logger.info("Initializing Small Basic Language Server")
        if isinstance(params.initialization_options, dict):
            server.settings = Settings.from_dict(params.initialization_options).resolve()

    @server.feature(types.INITIALIZED)
    def on_initialized(
        params: types.InitializedParams,  # noqa: ARG001
    ) -> None:
        """Handle initialized notification."""
        logger.info("Small Basic Language Server initialized successfully")

    @server.feature(types.SHUTDOWN)
    def on_shutdown(
        params: None,  # noqa: ARG001
    ) -> None:
        """Handle shutdown request."""
        logger.info("Shutting down Small Basic Language Server")

    return server


def main() -> None:
    """
    Main entry point for the Small Basic language server.

    Starts the server in stdio mode for IDE integration.
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="Small Basic Language Server",
        prog="smallbasic-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2087,
        help="Port to listen on in TCP mode (default: 2087)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )

    args = parser.parse_args()

    log_level = getattr(logging, args.log_level.upper())
    logging.getLogger("smallbasic-lsp").setLevel(log_level)

    server = create_server()

    if args.tcp:
        logger.info(f"Starting Small Basic LSP in TCP mode on {args.host}:{args.port}")
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting Small Basic LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
