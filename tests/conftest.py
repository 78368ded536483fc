"""
Pytest configuration and shared fixtures for Small Basic tests.
"""

import stat
import sys
from pathlib import Path
from textwrap import dedent

import pytest

from smallbasic.config import Settings


@pytest.fixture
def write_source(tmp_path):
    """Factory fixture for writing Small Basic source files."""

    def _write(source: str, name: str = "prog.sb") -> Path:
        path = tmp_path / name
        path.write_text(dedent(source).lstrip("\n"), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_compiler(tmp_path):
    """
    Factory fixture for a stand-in compiler executable.

    The script prints ``stdout``/``stderr``, optionally creates the
    ``.exe`` next to the source, and exits with ``exit_code``.
    """
    if sys.platform == "win32":
        pytest.skip("fake compiler is a POSIX shell script")

    def _create(
        stdout: str = "",
        stderr: str = "",
        exit_code: int = 0,
        create_exe: bool = True,
    ) -> Settings:
        script = tmp_path / "fake_compiler.sh"
        stdout_file = tmp_path / "compiler_stdout.txt"
        stderr_file = tmp_path / "compiler_stderr.txt"
        stdout_file.write_text(stdout, encoding="utf-8")
        stderr_file.write_text(stderr, encoding="utf-8")

        lines = [
            "#!/bin/sh",
            f"cat '{stdout_file}'",
            f"cat '{stderr_file}' >&2",
        ]
        if create_exe:
            lines.append('touch "${1%.sb}.exe"')
        lines.append(f"exit {exit_code}")

        script.write_text("\n".join(lines) + "\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return Settings(compiler_path=str(script))

    return _create
