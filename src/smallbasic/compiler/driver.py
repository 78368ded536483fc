"""
Running the external Small Basic compiler and judging its result.

The compiler is an opaque executable. Its exit code alone is not
trusted: a ``<file>: 0 errors.`` summary also counts as success, and a
nominal success without the expected ``.exe`` is reported as a failure.
"""

import subprocess
from pathlib import Path
from typing import Optional

from smallbasic.compiler.output_parser import has_zero_errors_summary, parse_compiler_output
from smallbasic.compiler.results import CompilationError, CompilationResult
from smallbasic.config import Settings
from smallbasic.utils.errors import (
    CompilerLaunchError,
    CompilerNotFoundError,
    ProgramLaunchError,
    SourceNotFoundError,
)

STDERR_SEPARATOR = "\nSTDERR:\n"
MISSING_OUTPUT_MESSAGE = "Compilation supposedly succeeded but output file not found"


def expected_output_path(source_path: str | Path) -> Path:
    """The executable the compiler writes next to ``source_path``."""
    return Path(source_path).with_suffix(".exe")


def combine_output(stdout: str, stderr: str) -> str:
    """Join captured streams the way they are shown to the user."""
    if stderr:
        return stdout + STDERR_SEPARATOR + stderr
    return stdout


def assemble_result(
    output: str,
    exit_code: int,
    source_path: str | Path,
    exe_path: str | Path,
    *,
    raw_output: Optional[str] = None,
) -> CompilationResult:
    """
    Decide the outcome of a finished compiler run.

    Args:
        output: Combined standard output and standard error
        exit_code: The compiler's exit status
        source_path: The compiled source file
        exe_path: Where the compiled program is expected
        raw_output: Text to attach to the result for display

    Returns:
        The compilation result
    """
    exe = Path(exe_path)

    if exit_code == 0 or has_zero_errors_summary(output):
        if exe.exists():
            return CompilationResult(success=True, exe_path=str(exe), raw_output=raw_output)

        errors = parse_compiler_output(output, source_path)
        if not errors:
            errors = [CompilationError(message=MISSING_OUTPUT_MESSAGE)]
        return CompilationResult(success=False, errors=tuple(errors), raw_output=raw_output)

    errors = parse_compiler_output(output, source_path)
    if not errors:
        detail = output.strip() or "Unknown error"
        errors = [CompilationError(message=f"Compilation failed (exit code {exit_code}): {detail}")]
    return CompilationResult(success=False, errors=tuple(errors), raw_output=raw_output)


def compile_program(
    source_path: str | Path,
    settings: Optional[Settings] = None,
    *,
    capture_raw_output: bool = False,
) -> CompilationResult:
    """
    Compile a Small Basic program with the external compiler.

    Args:
        source_path: Path to the ``.sb`` file
        settings: Settings naming the compiler executable; defaults
            (with environment overrides) when omitted
        capture_raw_output: Attach the compiler's text output to the result

    Returns:
        The compilation result

    Raises:
        CompilerNotFoundError: If the compiler executable does not exist
        SourceNotFoundError: If the source file does not exist
        CompilerLaunchError: If the compiler could not be started
    """
    settings = settings or Settings().resolve()
    compiler = Path(settings.compiler_path)
    source = Path(source_path)

    if not compiler.exists():
        raise CompilerNotFoundError(str(compiler))
    if not source.exists():
        raise SourceNotFoundError(str(source))

    source = source.resolve()
    try:
        completed = subprocess.run(
            [str(compiler), str(source)],
            cwd=source.parent,
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise CompilerLaunchError(f"Failed to launch Small Basic compiler: {e}") from e

    output = combine_output(completed.stdout or "", completed.stderr or "")
    return assemble_result(
        output,
        completed.returncode,
        source,
        expected_output_path(source),
        raw_output=output if capture_raw_output else None,
    )


def launch_program(exe_path: str | Path) -> subprocess.Popen:
    """
    Start a compiled program without waiting for it.

    Raises:
        SourceNotFoundError: If the executable does not exist
        ProgramLaunchError: If the program could not be started
    """
    exe = Path(exe_path)
    if not exe.exists():
        raise SourceNotFoundError(str(exe))

    try:
        return subprocess.Popen([str(exe)], cwd=exe.parent)
    except OSError as e:
        raise ProgramLaunchError(f"Failed to launch {exe}: {e}") from e
