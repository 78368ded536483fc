"""
Unit tests for the smallbasic command-line interface.
"""

import pytest

from smallbasic.cli import create_parser, main


class TestParser:
    """Argument parsing."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "smallbasic" in capsys.readouterr().out

    def test_aliases(self):
        parser = create_parser()
        assert parser.parse_args(["c", "prog.sb"]).command == "c"
        assert parser.parse_args(["r", "prog.sb", "--compiler", "x"]).compiler == "x"


class TestCheckCommand:
    """smallbasic check"""

    def test_balanced_file(self, write_source, capsys):
        path = write_source(
            """
            If x = 1 Then
              x = 2
            EndIf
            """
        )
        assert main(["check", str(path)]) == 0
        assert "all blocks closed" in capsys.readouterr().out

    def test_unclosed_blocks(self, write_source, capsys):
        path = write_source(
            """
            Sub Greet
              While x < 3
                x = x + 1
            """
        )
        assert main(["check", str(path)]) == 1

        out = capsys.readouterr().out
        assert f"{path}:1:1" in out
        assert "'Sub Greet' is missing a matching 'EndSub'" in out
        assert f"{path}:2:3" in out
        assert "'While' is missing a matching 'EndWhile'" in out

    def test_byte_order_mark_file(self, tmp_path, capsys):
        path = tmp_path / "bom.sb"
        path.write_bytes(b"\xef\xbb\xbfIf x > 0 Then\n  x = 1\n")

        assert main(["check", str(path)]) == 1
        assert f"{path}:1:1" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "nope.sb")]) == 1
        assert "File not found" in capsys.readouterr().err


class TestCompileCommand:
    """smallbasic compile / run"""

    def test_compile_success(self, fake_compiler, write_source, capsys):
        settings = fake_compiler(stdout="prog.sb: 0 errors.\n")
        path = write_source("x = 1\n")

        assert main(["compile", str(path), "--compiler", settings.compiler_path]) == 0
        assert "Compiled:" in capsys.readouterr().out

    def test_compile_failure_lists_errors(self, fake_compiler, write_source, capsys):
        settings = fake_compiler(
            stdout="Error: Unknown object at line 2, column 5\n", exit_code=1, create_exe=False
        )
        path = write_source("x = 1\nFoo.Bar()\n")

        assert main(["c", str(path), "--compiler", settings.compiler_path, "--raw"]) == 1

        captured = capsys.readouterr()
        assert "Compilation failed" in captured.err
        assert f"{path}:2:5" in captured.out
        assert "Unknown object" in captured.out
        assert "Compiler output:" in captured.out

    def test_missing_compiler(self, write_source, tmp_path, capsys):
        path = write_source("x = 1\n")
        code = main(["compile", str(path), "--compiler", str(tmp_path / "none.exe")])

        assert code == 1
        assert "compiler not found" in capsys.readouterr().err

    def test_run_failure_does_not_launch(self, fake_compiler, write_source, capsys):
        settings = fake_compiler(stdout="Line 1: Broken\n", exit_code=1, create_exe=False)
        path = write_source("x = \n")

        assert main(["run", str(path), "--compiler", settings.compiler_path]) == 1
        assert "Running:" not in capsys.readouterr().out


class TestParseOutputCommand:
    """smallbasic parse-output"""

    def test_clean_log(self, tmp_path, capsys):
        log = tmp_path / "build.log"
        log.write_text("prog.sb: 0 errors.\n", encoding="utf-8")

        assert main(["parse-output", str(log)]) == 0
        assert "no errors found" in capsys.readouterr().out

    def test_log_with_errors_and_source(self, tmp_path, write_source, capsys):
        source = write_source("If x > 0\nEndIf\n")
        log = tmp_path / "build.log"
        log.write_text("Error: Unexpected end of file\n", encoding="utf-8")

        assert main(["parse-output", str(log), "--source", str(source)]) == 1

        out = capsys.readouterr().out
        assert "2 error(s) found" in out
        assert "Unexpected end of file" in out
        assert f"{source}:1:1" in out
        assert '"Then"' in out

    def test_missing_log(self, tmp_path, capsys):
        assert main(["parse-output", str(tmp_path / "none.log")]) == 1
