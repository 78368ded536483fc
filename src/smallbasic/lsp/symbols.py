"""
Symbol collection for Small Basic LSP.

Small Basic has two kinds of user-defined names: global variables,
created by assignment, and subroutines declared with ``Sub name``.
This module finds both with a line scan; it is not a parser.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from lsprotocol import types

_ASSIGNMENT = re.compile(r"^(\s*)([A-Za-z][A-Za-z0-9_]*)\s*=\s*(.+)$")
_SUB_START = re.compile(r"^(\s*)Sub\s+([A-Za-z][A-Za-z0-9_]*)\s*$", re.IGNORECASE)
_SUB_END = re.compile(r"^\s*EndSub\s*$", re.IGNORECASE)


class SymbolKind(Enum):
    """Kind of symbol in a Small Basic program."""

    VARIABLE = auto()
    SUBROUTINE = auto()


SYMBOL_KIND_TO_LSP: dict[SymbolKind, types.SymbolKind] = {
    SymbolKind.VARIABLE: types.SymbolKind.Variable,
    SymbolKind.SUBROUTINE: types.SymbolKind.Method,
}


@dataclass
class Symbol:
    """
    A variable or subroutine defined in a document.

    Attributes:
        name: The name as first written in the source
        kind: Variable or subroutine
        type_info: Inferred value type for variables ("string", "number", ...)
        range: Full extent of the definition (0-indexed)
        selection_range: The part to highlight when the symbol is selected
    """

    name: str
    kind: SymbolKind
    range: types.Range
    selection_range: types.Range
    type_info: str | None = None

    @property
    def detail(self) -> str:
        if self.kind is SymbolKind.SUBROUTINE:
            return "Subroutine"
        return f"Variable ({self.type_info})"

    def to_document_symbol(self) -> types.DocumentSymbol:
        """Convert to LSP DocumentSymbol."""
        return types.DocumentSymbol(
            name=self.name,
            kind=SYMBOL_KIND_TO_LSP[self.kind],
            range=self.range,
            selection_range=self.selection_range,
            detail=self.detail,
            children=[],
        )


class SymbolTable:
    """
    Variables and subroutines of one document.

    Small Basic names are case-insensitive, so lookups ignore case.
    """

    def __init__(self) -> None:
        self._variables: dict[str, Symbol] = {}
        self._subroutines: dict[str, Symbol] = {}

    def clear(self) -> None:
        self._variables.clear()
        self._subroutines.clear()

    def add_variable(self, symbol: Symbol) -> None:
        """Record a variable; the first assignment keeps its position."""
        key = symbol.name.lower()
        existing = self._variables.get(key)
        if existing is None:
            self._variables[key] = symbol
        else:
            existing.type_info = symbol.type_info

    def add_subroutine(self, symbol: Symbol) -> None:
        self._subroutines[symbol.name.lower()] = symbol

    def lookup(self, name: str) -> Symbol | None:
        key = name.lower()
        return self._subroutines.get(key) or self._variables.get(key)

    @property
    def variables(self) -> list[Symbol]:
        return list(self._variables.values())

    @property
    def subroutines(self) -> list[Symbol]:
        return list(self._subroutines.values())

    def get_all_symbols(self) -> list[Symbol]:
        """Subroutines first, then variables, each in definition order."""
        return self.subroutines + self.variables


def infer_value_type(value: str) -> str:
    """Guess the type of an assigned value from its literal form."""
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return "string"
    if value.lower() in ("true", "false"):
        return "boolean"
    try:
        float(value)
    except ValueError:
        return "variable"
    return "number"


def _line_range(line: int, start: int, end: int) -> types.Range:
    return types.Range(
        start=types.Position(line=line, character=start),
        end=types.Position(line=line, character=end),
    )


def collect_symbols(lines: list[str], table: SymbolTable | None = None) -> SymbolTable:
    """
    Collect variables and subroutines from document lines.

    A subroutine is only recorded once its ``EndSub`` is seen, so the
    symbol covers the whole body.

    Args:
        lines: The document split into lines
        table: Table to fill; a new one is created when omitted

    Returns:
        The filled symbol table
    """
    table = table if table is not None else SymbolTable()
    current_sub: tuple[str, int, int] | None = None

    for index, line in enumerate(lines):
        assignment = _ASSIGNMENT.match(line)
        if assignment:
            indent, name, value = assignment.groups()
            name_range = _line_range(index, len(indent), len(indent) + len(name))
            table.add_variable(
                Symbol(
                    name=name,
                    kind=SymbolKind.VARIABLE,
                    range=name_range,
                    selection_range=name_range,
                    type_info=infer_value_type(value),
                )
            )

        sub_start = _SUB_START.match(line)
        if sub_start:
            current_sub = (sub_start.group(2), index, len(sub_start.group(1)))
            continue

        if current_sub is not None and _SUB_END.match(line):
            name, start_line, start_char = current_sub
            selection_end = start_char + len("Sub ") + len(name)
            table.add_subroutine(
                Symbol(
                    name=name,
                    kind=SymbolKind.SUBROUTINE,
                    range=types.Range(
                        start=types.Position(line=start_line, character=start_char),
                        end=types.Position(line=index, character=len(line)),
                    ),
                    selection_range=_line_range(start_line, start_char, selection_end),
                )
            )
            current_sub = None

    return table
