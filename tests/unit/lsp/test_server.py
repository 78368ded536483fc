"""Tests for the Small Basic language server handlers."""

import pytest
from lsprotocol import types
from pygls.uris import from_fs_path

from smallbasic.config import Settings
from smallbasic.lsp.diagnostics import COMPILER_DIAGNOSTIC_SOURCE, DIAGNOSTIC_SOURCE
from smallbasic.lsp.server import COMPILE_COMMAND, SmallBasicLanguageServer, create_server


@pytest.fixture
def server(monkeypatch):
    """A server whose outgoing notifications are recorded instead of sent."""
    ls = SmallBasicLanguageServer()
    ls.published = []
    ls.messages = []
    monkeypatch.setattr(ls, "text_document_publish_diagnostics", ls.published.append)
    monkeypatch.setattr(ls, "window_show_message", ls.messages.append)
    return ls


def _open(server, path, text):
    uri = from_fs_path(str(path))
    server._on_did_open(
        types.DidOpenTextDocumentParams(
            text_document=types.TextDocumentItem(
                uri=uri, language_id="smallbasic", version=1, text=text
            )
        )
    )
    return uri


class TestServerCreation:
    """Test suite for handler registration."""

    def test_create_server_registers_handlers(self) -> None:
        """Test that every handler registers without error."""
        ls = create_server()

        assert COMPILE_COMMAND in ls.protocol.fm.commands
        for method in (
            types.TEXT_DOCUMENT_DID_OPEN,
            types.TEXT_DOCUMENT_COMPLETION,
            types.COMPLETION_ITEM_RESOLVE,
            types.TEXT_DOCUMENT_DOCUMENT_SYMBOL,
            types.INITIALIZE,
        ):
            assert method in ls.protocol.fm.features

    def test_registered_handler_delegates(self, server, tmp_path) -> None:
        """Test that the registered open handler reaches the server."""
        handler = server.protocol.fm.features[types.TEXT_DOCUMENT_DID_OPEN]
        uri = from_fs_path(str(tmp_path / "prog.sb"))
        handler(
            types.DidOpenTextDocumentParams(
                text_document=types.TextDocumentItem(
                    uri=uri, language_id="smallbasic", version=1, text="For i = 1 To 2\n"
                )
            )
        )
        assert len(server.published[-1].diagnostics) == 1


class TestDocumentHandlers:
    """Test suite for document synchronization."""

    def test_open_publishes_block_diagnostics(self, server, tmp_path) -> None:
        uri = _open(server, tmp_path / "prog.sb", "If x > 0 Then\n")

        params = server.published[-1]
        assert params.uri == uri
        assert len(params.diagnostics) == 1
        assert params.diagnostics[0].source == DIAGNOSTIC_SOURCE

    def test_close_clears_diagnostics(self, server, tmp_path) -> None:
        uri = _open(server, tmp_path / "prog.sb", "If x > 0 Then\n")
        server._on_did_close(
            types.DidCloseTextDocumentParams(
                text_document=types.TextDocumentIdentifier(uri=uri)
            )
        )
        assert server.published[-1].diagnostics == []


class TestCompileCommand:
    """Test suite for the smallbasic.compile command."""

    def test_compile_errors_published_with_block_diagnostics(
        self, server, fake_compiler, write_source
    ) -> None:
        source = write_source("While x < 3\n")
        server.settings = fake_compiler(
            stdout="Line 1: Expected EndWhile\n", exit_code=1, create_exe=False
        )
        uri = _open(server, source, source.read_text(encoding="utf-8"))

        result = server._on_compile(uri)

        assert result["success"] is False
        assert result["errors"] == [{"message": "Expected EndWhile", "line": 1, "column": None}]
        assert "Expected EndWhile" in result["rawOutput"]

        sources = [d.source for d in server.published[-1].diagnostics]
        assert sources == [DIAGNOSTIC_SOURCE, COMPILER_DIAGNOSTIC_SOURCE]

    def test_arguments_as_single_list(self, server, fake_compiler, write_source) -> None:
        source = write_source("x = 1\n")
        server.settings = fake_compiler()

        result = server._on_compile([str(source)])

        assert result["success"] is True
        assert server.published[-1].diagnostics == []

    def test_successful_compile_clears_compiler_diagnostics(
        self, server, fake_compiler, write_source
    ) -> None:
        source = write_source("x = 1\n")
        uri = _open(server, source, "x = 1\n")

        server.settings = fake_compiler(stdout="Error: boom\n", exit_code=1, create_exe=False)
        server._on_compile(uri)
        assert len(server.published[-1].diagnostics) == 1

        server.settings = fake_compiler()
        server._on_compile(uri)
        assert server.published[-1].diagnostics == []

    def test_missing_compiler_shows_message(self, server, write_source, tmp_path) -> None:
        source = write_source("x = 1\n")
        server.settings = Settings(compiler_path=str(tmp_path / "none.exe"))

        assert server._on_compile(str(source)) is None
        assert server.messages[-1].type == types.MessageType.Error
        assert "compiler not found" in server.messages[-1].message

    def test_missing_argument(self, server) -> None:
        assert server._on_compile() is None
        assert server.messages[-1].type == types.MessageType.Error
