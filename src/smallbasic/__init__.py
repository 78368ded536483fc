"""
Small Basic language tooling.

Editor support for Microsoft Small Basic: block balance diagnostics,
interpretation of the Small Basic compiler's output, completions and
document symbols, served over the Language Server Protocol.
"""

from smallbasic.compiler import (
    CompilationError,
    CompilationResult,
    check_block_balance,
    compile_program,
    parse_compiler_output,
)
from smallbasic.config import Settings

__version__ = "0.1.1"
__all__ = [
    "CompilationError",
    "CompilationResult",
    "Settings",
    "check_block_balance",
    "compile_program",
    "parse_compiler_output",
]
