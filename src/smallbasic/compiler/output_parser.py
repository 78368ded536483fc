"""
Interpretation of Small Basic compiler output.

The compiler prints free-form text with no formal grammar. This module
turns that text into a list of CompilationError records by trying an
ordered table of known line shapes, falling back to any line that
mentions "error". When some errors carry no line number, the source
file is re-scanned for common mistakes to give the user a place to look.

Example:
    errors = parse_compiler_output(stdout + stderr, "/path/to/prog.sb")
    for error in errors:
        print(error.line, error.message)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from smallbasic.compiler.blocks import split_lines
from smallbasic.compiler.results import CompilationError

logger = logging.getLogger(__name__)


ZERO_ERRORS_PATTERN = re.compile(r"^(.+?):\s+0\s+errors?\.", re.IGNORECASE | re.MULTILINE)
ZERO_ERRORS_MENTION = re.compile(r"\b0\s+errors", re.IGNORECASE)
SUMMARY_PATTERN = re.compile(r"^(.+?):\s+([1-9][0-9]*)\s+errors?\.$", re.IGNORECASE)
DETAIL_PATTERN = re.compile(r"^Line\s+(\d+)(?:,\s*Col\s+(\d+))?:\s+(.+)$", re.IGNORECASE)

MISSING_THEN_MESSAGE = 'If statement missing "Then" keyword'
UNCLOSED_STRING_MESSAGE = "Unclosed string (uneven number of quotes)"


def _optional_int(value: Optional[str]) -> Optional[int]:
    return int(value) if value else None


@dataclass(frozen=True)
class OutputPattern:
    """
    One recognizable shape of compiler output.

    Attributes:
        name: Short identifier for the shape
        regex: Pattern searched for in a trimmed output line
        extract: Builds the error record from a successful match
    """

    name: str
    regex: re.Pattern[str]
    extract: Callable[[re.Match[str]], CompilationError]

    def apply(self, line: str) -> Optional[CompilationError]:
        match = self.regex.search(line)
        if match is None:
            return None
        return self.extract(match)


# Tried in order; the first pattern that matches a line wins.
OUTPUT_PATTERNS: tuple[OutputPattern, ...] = (
    OutputPattern(
        name="error_at_line",
        regex=re.compile(
            r"Error:\s+(.+?)\s+at\s+line\s+(\d+)(?:,?\s*column\s+(\d+))?", re.IGNORECASE
        ),
        extract=lambda m: CompilationError(
            message=m.group(1), line=int(m.group(2)), column=_optional_int(m.group(3))
        ),
    ),
    OutputPattern(
        name="line_message",
        regex=re.compile(r"Line\s+(\d+):\s+(.+)", re.IGNORECASE),
        extract=lambda m: CompilationError(message=m.group(2), line=int(m.group(1))),
    ),
    OutputPattern(
        name="error_count",
        regex=re.compile(r"(.+?):\s+([1-9][0-9]*)\s+errors?\.$", re.IGNORECASE),
        extract=lambda m: CompilationError(message=f"File contains {m.group(2)} errors"),
    ),
    OutputPattern(
        name="syntax_error",
        regex=re.compile(r"Syntax\s+error(?:\s+at\s+line\s+(\d+))?:?(?:\s+(.+))?", re.IGNORECASE),
        extract=lambda m: CompilationError(
            message=f"Syntax error: {m.group(2) or 'Invalid syntax'}",
            line=_optional_int(m.group(1)),
        ),
    ),
    OutputPattern(
        name="error_message",
        regex=re.compile(r"Error:\s+(.+)", re.IGNORECASE),
        extract=lambda m: CompilationError(message=m.group(1)),
    ),
)


def has_zero_errors_summary(text: str) -> bool:
    """Check whether the output contains a ``<file>: 0 errors.`` summary line."""
    return ZERO_ERRORS_PATTERN.search(text) is not None


def match_output_line(line: str) -> Optional[CompilationError]:
    """
    Interpret a single trimmed output line.

    Args:
        line: A non-empty, trimmed line of compiler output

    Returns:
        The error described by the line, or None if it carries no error
    """
    for pattern in OUTPUT_PATTERNS:
        error = pattern.apply(line)
        if error is not None:
            return error

    if "error" in line.lower() and not ZERO_ERRORS_MENTION.search(line):
        return CompilationError(message=line)

    return None


def _scan_output(text: str) -> list[CompilationError]:
    errors: list[CompilationError] = []
    look_for_detailed_errors = False

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or ZERO_ERRORS_PATTERN.search(line):
            continue

        summary = SUMMARY_PATTERN.match(line)
        if summary:
            look_for_detailed_errors = True
            errors.append(
                CompilationError(
                    message=f"The program has {summary.group(2)} errors. "
                    "See detailed messages below."
                )
            )
            continue

        # Detail lines follow a summary and may carry a column.
        if look_for_detailed_errors:
            detail = DETAIL_PATTERN.match(line)
            if detail:
                errors.append(
                    CompilationError(
                        message=detail.group(3),
                        line=int(detail.group(1)),
                        column=_optional_int(detail.group(2)),
                    )
                )
                continue

        error = match_output_line(line)
        if error is not None:
            errors.append(error)

    return errors


def _source_line_problems(source_lines: Iterable[str]) -> list[CompilationError]:
    problems: list[CompilationError] = []

    for index, raw_line in enumerate(source_lines):
        line = raw_line.strip()
        lowered = line.lower()

        if lowered.startswith("if") and "then" not in lowered:
            problems.append(CompilationError(message=MISSING_THEN_MESSAGE, line=index + 1))

        if line.count('"') % 2 != 0 and not line.startswith("'"):
            problems.append(CompilationError(message=UNCLOSED_STRING_MESSAGE, line=index + 1))

    return problems


def augment_from_source(
    errors: list[CompilationError], source_lines: list[str]
) -> list[CompilationError]:
    """
    Append likely locations for errors that have no line number.

    The source is scanned once for every line-less error, so the same
    hint can appear more than once. The original records are kept.

    Args:
        errors: Errors recovered from the compiler output
        source_lines: Lines of the compiled source file

    Returns:
        A new list: the original errors followed by the source hints
    """
    augmented = list(errors)
    for error in errors:
        if error.line is None:
            augmented.extend(_source_line_problems(source_lines))
    return augmented


def _read_source_lines(source_path: str | Path) -> Optional[list[str]]:
    path = Path(source_path)
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as e:
        logger.debug(f"Could not read {path} for error augmentation: {e}")
        return None
    return split_lines(text)


def parse_compiler_output(
    text: str, source_path: str | Path | None = None
) -> list[CompilationError]:
    """
    Parse the combined output of one compiler run.

    Args:
        text: Captured standard output and standard error
        source_path: The compiled source file, used to locate errors
            the compiler reported without a line number

    Returns:
        Errors in the order they were found; empty when the output
        reports zero errors or mentions no error at all
    """
    if has_zero_errors_summary(text):
        return []

    errors = _scan_output(text)
    if not errors or source_path is None:
        return errors

    if all(error.line is not None for error in errors):
        return errors

    source_lines = _read_source_lines(source_path)
    if source_lines is None:
        return errors

    return augment_from_source(errors, source_lines)
