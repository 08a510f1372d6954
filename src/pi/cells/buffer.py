"""Dense grid of styled terminal cells.

A ``Buffer`` owns a ``Rect`` and exactly ``area.width * area.height``
cells in row-major order.  Widgets paint into it through the tolerant
``set*`` methods (writes outside the area are dropped); raw indexing with
``index_of`` / ``buffer[x, y]`` outside the area raises ``IndexError``.

A glyph two columns wide occupies its own cell plus a *companion* cell to
its right.  The companion is blank, carries the glyph's style and has
``skip=True`` so the diff engine never targets it on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence, Union

from pi.cells.diff import PatchEntry, diff
from pi.cells.geometry import Position, Rect
from pi.cells.style import Color, ColorValue, Modifier, Style
from pi.cells.text import Line, Span
from pi.cells.utils import grapheme_width, graphemes, visible_width

__all__ = ["Cell", "Buffer"]


# ---------------------------------------------------------------------------
# Cell
# ---------------------------------------------------------------------------


@dataclass
class Cell:
    """One grid position: a grapheme, two colors, modifiers and a skip flag."""

    symbol: str = " "
    fg: ColorValue = Color.RESET
    bg: ColorValue = Color.RESET
    modifier: Modifier = Modifier.NONE
    skip: bool = False

    def set_symbol(self, symbol: str) -> Cell:
        self.symbol = symbol
        return self

    def set_char(self, ch: str) -> Cell:
        self.symbol = ch
        return self

    def set_fg(self, color: ColorValue) -> Cell:
        self.fg = color
        return self

    def set_bg(self, color: ColorValue) -> Cell:
        self.bg = color
        return self

    def set_style(self, style: Style) -> Cell:
        """Patch *style* onto the cell; ``None`` colors are left untouched."""
        if style.fg is not None:
            self.fg = style.fg
        if style.bg is not None:
            self.bg = style.bg
        self.modifier = Modifier((self.modifier | style.add_modifier) & ~style.sub_modifier)
        return self

    def style(self) -> Style:
        return Style(fg=self.fg, bg=self.bg, add_modifier=self.modifier)

    def reset(self) -> None:
        self.symbol = " "
        self.fg = Color.RESET
        self.bg = Color.RESET
        self.modifier = Modifier.NONE
        self.skip = False

    @property
    def width(self) -> int:
        """Display width of the symbol in columns."""
        return visible_width(self.symbol)

    def copy(self) -> Cell:
        return replace(self)

    def is_default(self) -> bool:
        return self == _DEFAULT_CELL

    def companion(self) -> Cell:
        """The blank right-hand half that accompanies this cell when it is wide."""
        return Cell(" ", self.fg, self.bg, self.modifier, skip=True)


_DEFAULT_CELL = Cell()


# ---------------------------------------------------------------------------
# Buffer
# ---------------------------------------------------------------------------

_Key = Union[Position, tuple]


class Buffer:
    """A ``Rect`` worth of cells, addressed with absolute coordinates."""

    def __init__(self, area: Rect, content: list[Cell] | None = None) -> None:
        if content is None:
            content = [Cell() for _ in range(area.area)]
        if len(content) != area.area:
            raise ValueError(
                f"Buffer content has {len(content)} cells, area {area} needs {area.area}"
            )
        self.area = area
        self.content = content

    # -- construction --------------------------------------------------------

    @classmethod
    def empty(cls, area: Rect) -> Buffer:
        """A buffer of default cells (a space with no style)."""
        return cls(area)

    @classmethod
    def filled(cls, area: Rect, cell: Cell) -> Buffer:
        return cls(area, [cell.copy() for _ in range(area.area)])

    @classmethod
    def with_lines(cls, lines: Sequence[Union[str, Line]]) -> Buffer:
        """Build a buffer at the origin, one row per item of *lines*.

        The width is that of the widest line.  Mainly used to write
        expected output in tests.
        """
        rows = [Line.from_str(line) if isinstance(line, str) else line for line in lines]
        width = max((row.width() for row in rows), default=0)
        buffer = cls.empty(Rect(0, 0, width, len(rows)))
        for y, row in enumerate(rows):
            buffer.set_line(0, y, row, width)
        return buffer

    # -- comparison / display ------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return self.area == other.area and self.content == other.content

    def __repr__(self) -> str:
        rows = "".join(f"\n    {row!r}," for row in self.lines())
        styled = [
            f"({x}, {y}): {cell!r}"
            for (x, y), cell in self._iter_positions()
            if cell.style() != _DEFAULT_CELL.style()
        ]
        styles = "".join(f"\n    {entry}," for entry in styled)
        return f"Buffer(area={self.area!r}, lines=[{rows}\n], styles=[{styles}\n])"

    def lines(self) -> list[str]:
        """The symbols of each row, companion cells omitted."""
        width = self.area.width
        result: list[str] = []
        for start in range(0, len(self.content), max(width, 1)):
            row = self.content[start:start + width]
            result.append("".join(cell.symbol for cell in row if not cell.skip))
        return result

    # -- indexing ------------------------------------------------------------

    def _in_area(self, x: int, y: int) -> bool:
        area = self.area
        return area.x <= x < area.right and area.y <= y < area.bottom

    def index_of(self, x: int, y: int) -> int:
        """Index into ``content`` of the cell at ``(x, y)``.

        Raises ``IndexError`` when the position is outside the area.
        """
        if not self._in_area(x, y):
            raise IndexError(
                f"index outside of buffer: the area is {self.area!r} "
                f"but index is ({x}, {y})"
            )
        return (y - self.area.y) * self.area.width + (x - self.area.x)

    def pos_of(self, index: int) -> Position:
        """Position of the cell at *index* in ``content``."""
        if not 0 <= index < len(self.content):
            raise IndexError(
                f"trying to get coords of cell outside the buffer: "
                f"index {index}, length {len(self.content)}"
            )
        return Position(
            self.area.x + index % self.area.width,
            self.area.y + index // self.area.width,
        )

    def __getitem__(self, key: _Key) -> Cell:
        x, y = key
        return self.content[self.index_of(x, y)]

    def _iter_positions(self) -> Iterable[tuple[tuple[int, int], Cell]]:
        for index, cell in enumerate(self.content):
            pos = self.pos_of(index)
            yield (pos.x, pos.y), cell

    # -- writing -------------------------------------------------------------

    def _write(self, x: int, y: int, symbol: str, style: Style | None) -> int:
        """Write one grapheme at an in-area position; return its width.

        The cell keeps its current style, patched with *style* when given.
        """
        cell = self.content[self.index_of(x, y)].copy()
        cell.symbol = symbol
        cell.skip = False
        if style is not None:
            cell.set_style(style)
        return self._place(x, y, cell)

    def _place(self, x: int, y: int, cell: Cell) -> int:
        """Put *cell* at an in-area position; return the columns it covers.

        Keeps the wide-glyph bookkeeping consistent: companions of the new
        glyph are marked, a left half orphaned by writing into its companion
        is blanked, and a companion orphaned by overwriting its glyph is
        cleared.
        """
        index = self.index_of(x, y)
        if self.content[index].skip and x > self.area.x:
            lead = self.content[index - 1]
            if not lead.skip and lead.width > 1:
                lead.set_symbol(" ")

        self.content[index] = cell
        width = max(grapheme_width(cell.symbol), 1)
        right = self.area.right
        for offset in range(1, width):
            if x + offset >= right:
                break
            self.content[index + offset] = cell.companion()

        after = x + width
        if after < right and self.content[index + width].skip:
            self.content[index + width].reset()
        return width

    def set(self, x: int, y: int, symbol: str, style: Style | None = None) -> None:
        """Set the symbol (and optionally style) of one cell.

        Writes outside the buffer are silently dropped.
        """
        if self._in_area(x, y):
            self._write(x, y, symbol, style)

    def set_string(
        self, x: int, y: int, string: str, style: Style | None = None
    ) -> tuple[int, int]:
        return self.set_stringn(x, y, string, len(self.content), style)

    def set_stringn(
        self,
        x: int,
        y: int,
        string: str,
        max_width: int,
        style: Style | None = None,
    ) -> tuple[int, int]:
        """Write *string* from ``(x, y)`` using at most *max_width* columns.

        Zero-width graphemes are skipped.  Stops before a grapheme that
        would not fit in the remaining width or row.  Returns the position
        just after the last written grapheme.
        """
        if not self._in_area(x, y):
            return x, y
        remaining = min(max_width, self.area.right - x)
        for g in graphemes(string):
            width = grapheme_width(g)
            if width == 0:
                continue
            if width > remaining:
                break
            self._write(x, y, g, style)
            x += width
            remaining -= width
        return x, y

    def set_span(self, x: int, y: int, span: Span, max_width: int) -> tuple[int, int]:
        return self.set_stringn(x, y, span.content, max_width, span.style)

    def set_line(self, x: int, y: int, line: Line, max_width: int) -> tuple[int, int]:
        """Write every span of *line*, each patched over the line style."""
        remaining = max_width
        for span in line.spans:
            if remaining <= 0:
                break
            end_x, _ = self.set_stringn(
                x, y, span.content, remaining, line.style.patch(span.style)
            )
            remaining -= end_x - x
            x = end_x
        return x, y

    def set_style(self, area: Rect, style: Style) -> None:
        """Patch *style* onto every cell of *area* that lies in the buffer.

        A wide glyph cut by the edge of *area* is restyled as a whole, so
        it and its companion never disagree.
        """
        region = area.intersection(self.area)
        if region.is_empty():
            return
        for y in range(region.top, region.bottom):
            left, right = region.left, region.right
            while left > self.area.left and self[left, y].skip:
                left -= 1
            while right < self.area.right and self[right, y].skip:
                right += 1
            for x in range(left, right):
                self.content[self.index_of(x, y)].set_style(style)

    def fill(self, area: Rect, cell: Cell) -> None:
        """Write *cell* over every cell of *area* that lies in the buffer.

        A wide *cell* is repeated every ``width`` columns; a trailing column
        too narrow for it is left untouched.  The skip flag of *cell* is
        ignored.
        """
        region = area.intersection(self.area)
        cell = replace(cell, skip=False)
        step = max(grapheme_width(cell.symbol), 1)
        for y in range(region.top, region.bottom):
            for x in range(region.left, region.right - step + 1, step):
                self._place(x, y, cell.copy())

    # -- composition ---------------------------------------------------------

    def merge(self, other: Buffer, at: Position | None = None) -> None:
        """Overlay *other* onto this buffer.

        *other* is placed with its top-left corner at *at* (its own origin
        by default).  Default cells of *other* are transparent and cells
        falling outside this buffer are dropped, as is a wide glyph with no
        room for its companion.  Wide glyphs bring their own companions, so
        companion cells of *other* are not copied.
        """
        origin = at if at is not None else other.area.as_position()
        dx = origin.x - other.area.x
        dy = origin.y - other.area.y
        for index, cell in enumerate(other.content):
            if cell.skip or cell.is_default():
                continue
            pos = other.pos_of(index)
            x, y = pos.x + dx, pos.y + dy
            if self._in_area(x, y) and x + cell.width <= self.area.right:
                self._place(x, y, cell.copy())

    def resize(self, area: Rect) -> None:
        """Change the area, keeping the cells both areas share.

        A companion cut off from its glyph by the new left edge is cleared.
        """
        resized = Buffer.empty(area)
        overlap = area.intersection(self.area)
        for y in range(overlap.top, overlap.bottom):
            for x in range(overlap.left, overlap.right):
                resized.content[resized.index_of(x, y)] = self.content[self.index_of(x, y)]
            if resized[area.left, y].skip:
                resized[area.left, y].reset()
        self.area = resized.area
        self.content = resized.content

    def reset(self) -> None:
        for cell in self.content:
            cell.reset()

    # -- diffing -------------------------------------------------------------

    def diff(self, other: Buffer) -> list[PatchEntry]:
        """Patches that turn this buffer into *other*."""
        return diff(self, other)

    def apply(self, patches: Iterable[PatchEntry]) -> None:
        """Apply *patches* the way a terminal would.

        A wide cell also overwrites the cells it covers with blank
        companions.
        """
        right = self.area.right
        for patch in patches:
            x, y = patch.position
            index = self.index_of(x, y)
            cell = patch.cell.copy()
            self.content[index] = cell
            for offset in range(1, cell.width):
                if x + offset >= right:
                    break
                self.content[index + offset] = cell.companion()
