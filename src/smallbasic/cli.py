"""
Small Basic Command-Line Interface.

Provides commands to check, compile and run Small Basic programs.

Usage:
    smallbasic check program.sb            # Look for unclosed blocks
    smallbasic compile program.sb          # Compile with the Small Basic compiler
    smallbasic run program.sb              # Compile, then start the program
    smallbasic parse-output build.log      # Interpret saved compiler output
"""

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from smallbasic import __version__
from smallbasic.compiler.blocks import BlockKind, check_block_balance
from smallbasic.compiler.driver import compile_program, launch_program
from smallbasic.compiler.output_parser import parse_compiler_output
from smallbasic.compiler.results import CompilationError, CompilationResult
from smallbasic.config import Settings
from smallbasic.utils.errors import SmallBasicError, SourceLocation


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


# Initialize on module load
_init_colors()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="smallbasic",
        description="Small Basic - check, compile and run Small Basic programs",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check a Small Basic file for unclosed If/While/For/Sub blocks",
    )
    check_parser.add_argument(
        "input",
        type=Path,
        help="Input Small Basic file (.sb)",
    )

    # Compile command
    compile_parser = subparsers.add_parser(
        "compile",
        aliases=["c"],
        help="Compile a Small Basic file with the Small Basic compiler",
    )
    compile_parser.add_argument(
        "input",
        type=Path,
        help="Input Small Basic file (.sb)",
    )
    compile_parser.add_argument(
        "--compiler",
        default=None,
        help="Path to SmallBasicCompiler.exe (default: $SMALLBASIC_COMPILER or the standard install path)",
    )
    compile_parser.add_argument(
        "--raw",
        action="store_true",
        help="Also print the compiler's raw output",
    )

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        aliases=["r"],
        help="Compile a Small Basic file and start the program",
    )
    run_parser.add_argument(
        "input",
        type=Path,
        help="Input Small Basic file (.sb)",
    )
    run_parser.add_argument(
        "--compiler",
        default=None,
        help="Path to SmallBasicCompiler.exe",
    )

    # Parse-output command
    parse_output_parser = subparsers.add_parser(
        "parse-output",
        help="Interpret a saved Small Basic compiler output log",
    )
    parse_output_parser.add_argument(
        "log",
        type=Path,
        help="File containing the compiler's output",
    )
    parse_output_parser.add_argument(
        "--source",
        type=Path,
        default=None,
        help="The compiled source file, used to locate errors without a line number",
    )

    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings().resolve()
    if getattr(args, "compiler", None):
        settings = replace(settings, compiler_path=args.compiler)
    return settings


def _print_error(error: CompilationError, filename: str) -> None:
    """Print a compiler error with its location, if any."""
    if error.line is not None:
        loc = SourceLocation(error.line, error.column or 1, filename)
        print(f"  {Colors.GRAY}{loc}:{Colors.RESET} {Colors.RED}error:{Colors.RESET} {error.message}")
    else:
        print(f"  {Colors.RED}error:{Colors.RESET} {error.message}")


def _report_result(result: CompilationResult, input_path: Path, show_raw: bool) -> int:
    if show_raw and result.raw_output:
        print(f"{Colors.BOLD}Compiler output:{Colors.RESET}")
        print(result.raw_output)

    if result.success:
        print(f"{Colors.GREEN}Compiled:{Colors.RESET} {input_path} -> {result.exe_path}")
        return 0

    print(f"{Colors.RED}Compilation failed:{Colors.RESET} {input_path}", file=sys.stderr)
    for error in result.errors or ():
        _print_error(error, str(input_path))
    return 1


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    input_path: Path = args.input

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    source = input_path.read_text(encoding="utf-8-sig", errors="replace")
    unmatched = check_block_balance(source)

    if not unmatched:
        print(f"{Colors.GREEN}OK:{Colors.RESET} {input_path} (all blocks closed)")
        return 0

    for stmt in unmatched:
        loc = SourceLocation(stmt.line + 1, stmt.column + 1, str(input_path))
        opener = f"Sub {stmt.name}" if stmt.kind is BlockKind.SUB else stmt.kind.opener
        print(
            f"{Colors.GRAY}{loc}:{Colors.RESET} {Colors.RED}error:{Colors.RESET} "
            f"'{opener}' is missing a matching '{stmt.kind.closer}'"
        )
    return 1


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle the compile command."""
    input_path: Path = args.input

    try:
        result = compile_program(input_path, _settings_from_args(args), capture_raw_output=args.raw)
    except SmallBasicError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    return _report_result(result, input_path, args.raw)


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the run command."""
    input_path: Path = args.input

    try:
        result = compile_program(input_path, _settings_from_args(args))
        if not result.success:
            return _report_result(result, input_path, show_raw=False)

        print(f"{Colors.GREEN}Running:{Colors.RESET} {result.exe_path}")
        launch_program(result.exe_path)
        return 0

    except SmallBasicError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1


def cmd_parse_output(args: argparse.Namespace) -> int:
    """Handle the parse-output command."""
    log_path: Path = args.log

    if not log_path.exists():
        print(f"Error: File not found: {log_path}", file=sys.stderr)
        return 1

    text = log_path.read_text(encoding="utf-8-sig", errors="replace")
    errors = parse_compiler_output(text, args.source)

    if not errors:
        print(f"{Colors.GREEN}OK:{Colors.RESET} no errors found in {log_path}")
        return 0

    filename = str(args.source) if args.source else "<source>"
    print(f"{Colors.YELLOW}{len(errors)} error(s) found:{Colors.RESET}")
    for error in errors:
        _print_error(error, filename)
    return 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "check": cmd_check,
        "compile": cmd_compile,
        "c": cmd_compile,
        "run": cmd_run,
        "r": cmd_run,
        "parse-output": cmd_parse_output,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
