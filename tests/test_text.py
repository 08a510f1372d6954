"""Tests for pi.cells.text -- spans, lines and text blocks."""

from __future__ import annotations

from pi.cells.style import Color, Style
from pi.cells.text import Alignment, Line, Span, Text


class TestSpanAndLine:
    def test_span_width_counts_columns(self) -> None:
        assert Span("a世").width() == 3

    def test_line_from_str(self) -> None:
        line = Line.from_str("hi", Style(fg=Color.RED), Alignment.CENTER)
        assert line.spans == (Span("hi"),)
        assert line.style == Style(fg=Color.RED)
        assert line.alignment is Alignment.CENTER

    def test_line_spans_become_tuple(self) -> None:
        line = Line([Span("a"), Span("b")])  # type: ignore[arg-type]
        assert line.spans == (Span("a"), Span("b"))

    def test_line_width_and_str(self) -> None:
        line = Line((Span("ab"), Span("世")))
        assert line.width() == 4
        assert str(line) == "ab世"


class TestText:
    def test_raw_splits_lines(self) -> None:
        text = Text.raw("one\ntwo\n")
        assert [str(line) for line in text] == ["one", "two", ""]
        assert text.height() == 3

    def test_width_is_widest_line(self) -> None:
        assert Text.raw("a\nabc\nab").width() == 3

    def test_from_lines_accepts_mixed_values(self) -> None:
        text = Text.from_lines(["a", Span("b"), Line.from_str("c")])
        assert str(text) == "a\nb\nc"

    def test_empty_text(self) -> None:
        assert Text().width() == 0
        assert Text().height() == 0
