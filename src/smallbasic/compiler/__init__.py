"""
Small Basic compiler integration.

This package contains the text-processing core of the tooling:

- Block balance analysis (unclosed If/While/For/Sub blocks)
- Interpretation of the external compiler's free-form output
- Running the compiler and deciding whether a compile succeeded
"""

from smallbasic.compiler.blocks import (
    BlockKind,
    ControlStatement,
    check_block_balance,
    find_unmatched_blocks,
    split_lines,
)
from smallbasic.compiler.driver import (
    assemble_result,
    compile_program,
    expected_output_path,
    launch_program,
)
from smallbasic.compiler.output_parser import has_zero_errors_summary, parse_compiler_output
from smallbasic.compiler.results import CompilationError, CompilationResult

__all__ = [
    "BlockKind",
    "ControlStatement",
    "check_block_balance",
    "find_unmatched_blocks",
    "split_lines",
    "CompilationError",
    "CompilationResult",
    "has_zero_errors_summary",
    "parse_compiler_output",
    "assemble_result",
    "compile_program",
    "expected_output_path",
    "launch_program",
]
