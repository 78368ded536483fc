"""
Unit tests for block balance analysis.

Tests pairing of If/While/For/Sub openers with their closers.
"""

from textwrap import dedent

from smallbasic.compiler.blocks import (
    BlockKind,
    check_block_balance,
    find_unmatched_blocks,
    split_lines,
)


def _check(source: str):
    return check_block_balance(dedent(source).strip("\n"))


class TestSplitLines:
    """Tests for editor-compatible line splitting."""

    def test_mixed_line_endings(self):
        assert split_lines("a\r\nb\nc\rd") == ["a", "b", "c", "d"]

    def test_trailing_newline_gives_empty_last_line(self):
        assert split_lines("a\n") == ["a", ""]

    def test_empty_text(self):
        assert split_lines("") == [""]

    def test_leading_byte_order_mark_dropped(self):
        assert split_lines("\ufeffa\nb") == ["a", "b"]

    def test_other_separators_stay_in_line(self):
        assert split_lines("a\x0cb\x85c\u2028d") == ["a\x0cb\x85c\u2028d"]


class TestBalancedDocuments:
    """Documents whose blocks are all closed produce nothing."""

    def test_empty_document(self):
        assert check_block_balance("") == []

    def test_all_block_kinds_closed(self):
        source = """
        Sub DrawBox
          For i = 1 To 10
            While i < 5
              If i = 2 Then
                TextWindow.WriteLine(i)
              EndIf
            EndWhile
          EndFor
        EndSub
        """
        assert _check(source) == []

    def test_nested_ifs(self):
        source = """
        If a Then
        If b Then
        EndIf
        EndIf
        """
        assert _check(source) == []

    def test_case_insensitive_keywords(self):
        source = """
        if x = 1 then
          WHILE y
          endwhile
        ENDIF
        """
        assert _check(source) == []

    def test_else_branches_do_not_open_blocks(self):
        source = """
        If x = 1 Then
          a = 1
        ElseIf x = 2 Then
          a = 2
        Else
          a = 3
        EndIf
        """
        assert _check(source) == []


class TestUnmatchedOpeners:
    """Openers without closers are reported at the keyword."""

    def test_single_if_without_endif(self):
        unmatched = _check("x = 1\n  If x > 0 Then\n  TextWindow.WriteLine(x)")
        assert len(unmatched) == 1
        stmt = unmatched[0]
        assert stmt.kind is BlockKind.IF
        assert stmt.line == 1
        assert stmt.column == 2
        assert stmt.end_column == 4
        assert stmt.matched is False

    def test_outer_opener_reported_when_one_closer_missing(self):
        source = """
        While a
          While b
          EndWhile
        """
        unmatched = _check(source)
        assert [(s.kind, s.line) for s in unmatched] == [(BlockKind.WHILE, 0)]

    def test_sub_includes_name(self):
        unmatched = _check("Sub  Greet\n  TextWindow.WriteLine(1)")
        assert len(unmatched) == 1
        stmt = unmatched[0]
        assert stmt.kind is BlockKind.SUB
        assert stmt.name == "Greet"
        assert stmt.column == 0
        assert stmt.end_column == len("Sub  Greet")

    def test_sub_without_name_is_not_an_opener(self):
        assert _check("Sub\n") == []

    def test_closer_before_opener_does_not_match_it(self):
        unmatched = _check("EndFor\nFor i = 1 To 3")
        assert [(s.kind, s.line) for s in unmatched] == [(BlockKind.FOR, 1)]

    def test_each_kind_reported_independently(self):
        source = """
        If a Then
        For i = 1 To 2
        While b
        Sub Foo
        """
        kinds = [s.kind for s in _check(source)]
        assert kinds == [BlockKind.IF, BlockKind.FOR, BlockKind.WHILE, BlockKind.SUB]

    def test_results_ordered_by_line(self):
        source = """
        While a
        If b Then
        """
        lines = [s.line for s in _check(source)]
        assert lines == sorted(lines)


class TestIgnoredInput:
    """Input that must not produce reports."""

    def test_stray_closer_is_not_reported(self):
        assert _check("x = 1\nEndFor\nEndSub") == []

    def test_keyword_inside_line_is_not_an_opener(self):
        assert _check('TextWindow.WriteLine("If only")') == []

    def test_identifier_starting_with_keyword(self):
        assert _check("Iffy = 1\nForward = 2\nWhileLoop = 3\nSubtotal = 4") == []

    def test_comment_line_is_ignored(self):
        assert _check("' If this were code\n") == []

    def test_cross_kind_interleaving_not_flagged(self):
        source = """
        While a
        If b Then
        EndWhile
        EndIf
        """
        assert _check(source) == []

    def test_binary_content(self):
        assert find_unmatched_blocks(["\x00\x01\xff", "�"]) == []

    def test_byte_order_mark_before_first_opener(self):
        unmatched = check_block_balance("\ufeffIf x > 0 Then\n")
        assert [(s.kind, s.line, s.column) for s in unmatched] == [(BlockKind.IF, 0, 0)]
