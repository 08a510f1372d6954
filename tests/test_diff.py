"""Tests for pi.cells.diff -- minimal patches between buffers."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pi.cells.buffer import Buffer, Cell
from pi.cells.diff import PatchEntry, diff, group_runs
from pi.cells.geometry import Position, Rect
from pi.cells.style import Color, Style
from pi.cells.utils import visible_width


def _positions(patches: list[PatchEntry]) -> list[tuple[int, int]]:
    return [(p.x, p.y) for p in patches]


class TestDiff:
    def test_identical_buffers_produce_nothing(self) -> None:
        buffer = Buffer.with_lines(["hello", "world"])
        assert diff(buffer, buffer) == []

    def test_single_change(self) -> None:
        previous = Buffer.with_lines(["abc"])
        current = Buffer.with_lines(["axc"])
        patches = diff(previous, current)
        assert patches == [PatchEntry(Position(1, 0), Cell("x"))]

    def test_row_major_order(self) -> None:
        previous = Buffer.empty(Rect(0, 0, 3, 2))
        current = Buffer.with_lines(["  a", "b c"])
        assert _positions(diff(previous, current)) == [(2, 0), (0, 1), (2, 1)]

    def test_style_change_is_a_patch(self) -> None:
        previous = Buffer.with_lines(["ab"])
        current = Buffer.with_lines(["ab"])
        current.set_style(Rect(0, 0, 1, 1), Style(fg=Color.RED))
        assert _positions(diff(previous, current)) == [(0, 0)]

    def test_trailing_blank_cells_are_not_a_change(self) -> None:
        previous = Buffer.with_lines(["foo  "])
        current = Buffer.empty(Rect(0, 0, 5, 1))
        current.set_string(0, 0, "foo")
        assert diff(previous, current) == []

    def test_area_mismatch_raises(self) -> None:
        with pytest.raises(ValueError, match="different areas"):
            diff(Buffer.empty(Rect(0, 0, 2, 1)), Buffer.empty(Rect(0, 0, 3, 1)))

    def test_method_form(self) -> None:
        previous = Buffer.with_lines(["a"])
        current = Buffer.with_lines(["b"])
        assert previous.diff(current) == diff(previous, current)


class TestWideGlyphs:
    def test_wide_glyph_is_one_patch(self) -> None:
        previous = Buffer.empty(Rect(0, 0, 4, 1))
        current = Buffer.empty(Rect(0, 0, 4, 1))
        current.set_string(0, 0, "世")
        assert diff(previous, current) == [PatchEntry(Position(0, 0), Cell("世"))]

    def test_cells_hidden_under_wide_glyph_are_not_emitted(self) -> None:
        area = Rect(0, 0, 3, 1)
        previous = Buffer.empty(area)
        current = Buffer(area, [Cell("世"), Cell("x"), Cell(" ")])
        assert _positions(diff(previous, current)) == [(0, 0)]

    def test_cells_under_previous_wide_glyph_are_reemitted(self) -> None:
        area = Rect(0, 0, 3, 1)
        previous = Buffer(area, [Cell("世"), Cell(" "), Cell(" ")])
        current = Buffer(area, [Cell("a"), Cell(" "), Cell(" ")])
        assert _positions(diff(previous, current)) == [(0, 0), (1, 0)]

    def test_invalidation_does_not_cross_rows(self) -> None:
        area = Rect(0, 0, 2, 2)
        previous = Buffer(area, [Cell(" "), Cell("世"), Cell(" "), Cell(" ")])
        current = Buffer(area, [Cell(" "), Cell("a"), Cell(" "), Cell(" ")])
        assert _positions(diff(previous, current)) == [(1, 0)]


class TestApply:
    def test_applying_diff_reproduces_target(self) -> None:
        previous = Buffer.with_lines(["hello", "world"])
        current = Buffer.with_lines(["help!", "w世ld"])
        current.set_style(Rect(0, 0, 2, 1), Style(bg=Color.BLUE))
        previous.apply(diff(previous, current))
        assert previous == current

    def test_applying_wide_patch_writes_companion(self) -> None:
        buffer = Buffer.empty(Rect(0, 0, 3, 1))
        buffer.apply([PatchEntry(Position(1, 0), Cell("世"))])
        assert buffer[2, 0].skip
        assert buffer.lines() == [" 世"]


class TestGroupRuns:
    def test_contiguous_patches_form_one_run(self) -> None:
        patches = [
            PatchEntry(Position(0, 0), Cell("a")),
            PatchEntry(Position(1, 0), Cell("b")),
            PatchEntry(Position(3, 0), Cell("c")),
            PatchEntry(Position(0, 1), Cell("d")),
        ]
        runs = [(start, [c.symbol for c in cells]) for start, cells in group_runs(patches)]
        assert runs == [
            (Position(0, 0), ["a", "b"]),
            (Position(3, 0), ["c"]),
            (Position(0, 1), ["d"]),
        ]

    def test_wide_cell_advances_by_its_width(self) -> None:
        patches = [
            PatchEntry(Position(0, 0), Cell("世")),
            PatchEntry(Position(2, 0), Cell("a")),
        ]
        assert len(list(group_runs(patches))) == 1

    def test_empty(self) -> None:
        assert list(group_runs([])) == []


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

_symbols = st.sampled_from(["a", "b", " ", "x", "世", "界"])
_colors = st.sampled_from([Color.RESET, Color.RED, Color.BLUE])
_styles = st.builds(Style, fg=_colors, bg=_colors)
_texts = st.lists(_symbols, min_size=1, max_size=4).map("".join)


@st.composite
def _areas(draw: st.DrawFn) -> Rect:
    return Rect(
        draw(st.integers(0, 3)),
        draw(st.integers(0, 2)),
        draw(st.integers(1, 7)),
        draw(st.integers(1, 3)),
    )


def _scribble(draw: st.DrawFn, buffer: Buffer) -> None:
    """Apply one write, fill, merge or restyle to *buffer*."""
    area = buffer.area
    x = draw(st.integers(area.left, area.right - 1))
    y = draw(st.integers(area.top, area.bottom - 1))
    region = Rect(x, y, draw(st.integers(0, area.width)), draw(st.integers(0, area.height)))
    op = draw(st.sampled_from(["write", "fill", "merge", "style"]))
    if op == "write":
        buffer.set_string(x, y, draw(_texts), draw(_styles))
    elif op == "fill":
        buffer.fill(region, Cell(draw(_symbols), fg=draw(_colors)))
    elif op == "merge":
        overlay = Buffer.empty(Rect(0, 0, draw(st.integers(1, 4)), draw(st.integers(1, 2))))
        overlay.set_string(draw(st.integers(0, overlay.area.width - 1)), 0, draw(_texts), draw(_styles))
        buffer.merge(overlay, at=Position(x, y))
    else:
        buffer.set_style(region, draw(_styles))


@st.composite
def _scribbled(draw: st.DrawFn, area: Rect, base: Buffer | None = None) -> Buffer:
    if base is None:
        buffer = Buffer.empty(area)
    else:
        buffer = Buffer(area, [cell.copy() for cell in base.content])
    for _ in range(draw(st.integers(0, 8))):
        _scribble(draw, buffer)
    return buffer


class TestDiffProperties:
    @given(data=st.data())
    @settings(max_examples=2000, deadline=None)
    def test_applying_diff_reproduces_target(self, data: st.DataObject) -> None:
        area = data.draw(_areas())
        previous = data.draw(_scribbled(area))
        base = previous if data.draw(st.booleans()) else None
        current = data.draw(_scribbled(area, base))

        patches = diff(previous, current)
        previous.apply(patches)
        assert previous == current

    @given(data=st.data())
    @settings(max_examples=500, deadline=None)
    def test_rows_keep_the_buffer_width(self, data: st.DataObject) -> None:
        area = data.draw(_areas())
        buffer = data.draw(_scribbled(area))
        assert all(visible_width(row) == area.width for row in buffer.lines())
        for index, cell in enumerate(buffer.content):
            if cell.skip:
                lead = buffer.content[index - 1]
                assert index % area.width > 0
                assert lead.width == 2
                assert cell == lead.companion()
