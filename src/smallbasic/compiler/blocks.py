"""
Block balance analysis for Small Basic source.

Finds block openers (``If``, ``While``, ``For``, ``Sub <name>``) that are
never closed by their matching ``EndIf``, ``EndWhile``, ``EndFor`` or
``EndSub``. This is a line-oriented check, not a parser: each block kind
is matched independently, and stray closers are ignored.

Example:
    for stmt in check_block_balance(source):
        print(stmt.line, stmt.column, stmt.kind.closer)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
BYTE_ORDER_MARK = "\ufeff"


class BlockKind(Enum):
    """A kind of control block, with its opening and closing keyword."""

    IF = ("If", "EndIf")
    WHILE = ("While", "EndWhile")
    FOR = ("For", "EndFor")
    SUB = ("Sub", "EndSub")

    @property
    def opener(self) -> str:
        return self.value[0]

    @property
    def closer(self) -> str:
        return self.value[1]


# Keywords must start the (left-trimmed) line and be whole words.
_OPENER_PATTERNS: dict[BlockKind, re.Pattern[str]] = {
    BlockKind.IF: re.compile(r"^(\s*)(If)\b", re.IGNORECASE),
    BlockKind.WHILE: re.compile(r"^(\s*)(While)\b", re.IGNORECASE),
    BlockKind.FOR: re.compile(r"^(\s*)(For)\b", re.IGNORECASE),
    BlockKind.SUB: re.compile(r"^(\s*)(Sub\s+([A-Za-z_][A-Za-z0-9_]*))", re.IGNORECASE),
}

_CLOSER_PATTERNS: dict[BlockKind, re.Pattern[str]] = {
    kind: re.compile(rf"^\s*{kind.closer}\b", re.IGNORECASE) for kind in BlockKind
}


@dataclass
class ControlStatement:
    """
    An occurrence of a block-opening keyword.

    Attributes:
        kind: The block kind this statement opens
        line: 0-indexed line number
        column: 0-indexed column of the keyword
        length: Length of the highlighted token (keyword, or ``Sub <name>``)
        name: Subroutine name for ``Sub`` blocks
        matched: Set once a closer has been paired with this opener
    """

    kind: BlockKind
    line: int
    column: int
    length: int
    name: Optional[str] = None
    matched: bool = False

    @property
    def end_column(self) -> int:
        return self.column + self.length


def split_lines(text: str) -> list[str]:
    """Split text into lines the way editors number them, dropping a leading BOM."""
    return _LINE_BREAK.split(text.removeprefix(BYTE_ORDER_MARK))


def _match_opener(kind: BlockKind, line_index: int, line: str) -> Optional[ControlStatement]:
    match = _OPENER_PATTERNS[kind].match(line)
    if match is None:
        return None

    name = match.group(3) if kind is BlockKind.SUB else None
    return ControlStatement(
        kind=kind,
        line=line_index,
        column=len(match.group(1)),
        length=len(match.group(2)),
        name=name,
    )


def find_unmatched_blocks(lines: list[str]) -> list[ControlStatement]:
    """
    Find block openers that have no closer later in the document.

    Each block kind keeps its own stack. A closer pairs with the most
    recent still-open opener of the same kind; a closer with nothing
    open is ignored.

    Args:
        lines: The document split into lines

    Returns:
        Unmatched openers ordered by position
    """
    stacks: dict[BlockKind, list[ControlStatement]] = {kind: [] for kind in BlockKind}
    unmatched: list[ControlStatement] = []

    for line_index, line in enumerate(lines):
        for kind in BlockKind:
            if _CLOSER_PATTERNS[kind].match(line):
                if stacks[kind]:
                    stacks[kind].pop().matched = True
                continue

            statement = _match_opener(kind, line_index, line)
            if statement is not None:
                stacks[kind].append(statement)
                unmatched.append(statement)

    return [stmt for stmt in unmatched if not stmt.matched]


def check_block_balance(text: str) -> list[ControlStatement]:
    """Convenience wrapper over :func:`find_unmatched_blocks` for raw text."""
    return find_unmatched_blocks(split_lines(text))
