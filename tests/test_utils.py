"""Tests for pi.cells.utils -- grapheme widths and whitespace."""

from __future__ import annotations

from pi.cells.utils import (
    grapheme_width,
    graphemes,
    is_whitespace_char,
    visible_width,
)


# ---------------------------------------------------------------------------
# Width
# ---------------------------------------------------------------------------


class TestGraphemeWidth:
    def test_ascii(self) -> None:
        assert grapheme_width("a") == 1

    def test_cjk_is_wide(self) -> None:
        assert grapheme_width("世") == 2

    def test_emoji_is_wide(self) -> None:
        assert grapheme_width("😀") == 2

    def test_control_characters_are_zero(self) -> None:
        assert grapheme_width("\x1b") == 0
        assert grapheme_width("\n") == 0

    def test_empty_is_zero(self) -> None:
        assert grapheme_width("") == 0

    def test_combining_sequence_is_one_grapheme(self) -> None:
        assert list(graphemes("e\u0301x")) == ["e\u0301", "x"]
        assert grapheme_width("e\u0301") == 1


class TestVisibleWidth:
    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_mixed(self) -> None:
        assert visible_width("a世b") == 4

    def test_cached_result_is_stable(self) -> None:
        assert visible_width("世界") == visible_width("世界") == 4


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------


class TestIsWhitespaceChar:
    def test_values(self) -> None:
        assert is_whitespace_char(" ")
        assert is_whitespace_char("\t")
        assert not is_whitespace_char("a")
