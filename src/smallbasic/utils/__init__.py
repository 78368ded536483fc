"""
Small Basic Utilities Package.

Common utilities for error handling and source locations.
"""

from smallbasic.utils.errors import (
    CompilerLaunchError,
    CompilerNotFoundError,
    ProgramLaunchError,
    SmallBasicError,
    SourceLocation,
    SourceNotFoundError,
)

__all__ = [
    "SmallBasicError",
    "CompilerNotFoundError",
    "CompilerLaunchError",
    "ProgramLaunchError",
    "SourceNotFoundError",
    "SourceLocation",
]
