"""Block widget - borders and an optional title around a region."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

from pi.cells import symbols
from pi.cells.buffer import Buffer
from pi.cells.geometry import Rect, saturating_sub
from pi.cells.style import Style
from pi.cells.text import Alignment, Line


class Borders(enum.IntFlag):
    NONE = 0
    TOP = 1 << 0
    RIGHT = 1 << 1
    BOTTOM = 1 << 2
    LEFT = 1 << 3
    ALL = TOP | RIGHT | BOTTOM | LEFT


class BorderType(enum.Enum):
    PLAIN = "plain"
    ROUNDED = "rounded"
    DOUBLE = "double"
    THICK = "thick"

    def line_set(self) -> symbols.LineSet:
        return _LINE_SETS[self]


_LINE_SETS = {
    BorderType.PLAIN: symbols.PLAIN,
    BorderType.ROUNDED: symbols.ROUNDED,
    BorderType.DOUBLE: symbols.DOUBLE,
    BorderType.THICK: symbols.THICK,
}


@dataclass(frozen=True)
class Block:
    """Draws borders and a title on the top row; ``inner`` is what is left."""

    borders: Borders = Borders.NONE
    border_type: BorderType = BorderType.PLAIN
    title: Union[Line, str, None] = None
    title_alignment: Alignment = Alignment.LEFT
    style: Style = field(default_factory=Style)
    border_style: Style = field(default_factory=Style)

    @classmethod
    def bordered(cls, title: Union[Line, str, None] = None) -> Block:
        return cls(borders=Borders.ALL, title=title)

    def _title_line(self) -> Line | None:
        if self.title is None:
            return None
        if isinstance(self.title, str):
            return Line.from_str(self.title)
        return self.title

    def inner(self, area: Rect) -> Rect:
        """The part of *area* not covered by borders or the title row."""
        x, y, width, height = area.x, area.y, area.width, area.height
        if self.borders & Borders.LEFT:
            x = min(x + 1, area.right)
            width = saturating_sub(width, 1)
        if self.borders & Borders.TOP or self.title is not None:
            y = min(y + 1, area.bottom)
            height = saturating_sub(height, 1)
        if self.borders & Borders.RIGHT:
            width = saturating_sub(width, 1)
        if self.borders & Borders.BOTTOM:
            height = saturating_sub(height, 1)
        return Rect(x, y, width, height)

    def render(self, area: Rect, buffer: Buffer) -> None:
        area = area.intersection(buffer.area)
        if area.is_empty():
            return
        buffer.set_style(area, self.style)
        self._render_borders(area, buffer)
        self._render_title(area, buffer)

    def _render_borders(self, area: Rect, buffer: Buffer) -> None:
        lines = self.border_type.line_set()
        style = self.border_style
        left, right = area.left, area.right - 1
        top, bottom = area.top, area.bottom - 1

        if self.borders & Borders.LEFT:
            for y in range(top, bottom + 1):
                buffer.set(left, y, lines.vertical, style)
        if self.borders & Borders.RIGHT:
            for y in range(top, bottom + 1):
                buffer.set(right, y, lines.vertical, style)
        if self.borders & Borders.TOP:
            for x in range(left, right + 1):
                buffer.set(x, top, lines.horizontal, style)
        if self.borders & Borders.BOTTOM:
            for x in range(left, right + 1):
                buffer.set(x, bottom, lines.horizontal, style)

        corners = (
            (Borders.TOP | Borders.LEFT, left, top, lines.top_left),
            (Borders.TOP | Borders.RIGHT, right, top, lines.top_right),
            (Borders.BOTTOM | Borders.LEFT, left, bottom, lines.bottom_left),
            (Borders.BOTTOM | Borders.RIGHT, right, bottom, lines.bottom_right),
        )
        for mask, x, y, symbol in corners:
            if self.borders & mask == mask:
                buffer.set(x, y, symbol, style)

    def _render_title(self, area: Rect, buffer: Buffer) -> None:
        title = self._title_line()
        if title is None:
            return
        start = area.left + (1 if self.borders & Borders.LEFT else 0)
        end = area.right - (1 if self.borders & Borders.RIGHT else 0)
        available = end - start
        if available <= 0:
            return

        slack = max(0, available - title.width())
        alignment = title.alignment or self.title_alignment
        if alignment is Alignment.CENTER:
            start += slack // 2
        elif alignment is Alignment.RIGHT:
            start += slack
        buffer.set_line(start, area.top, title, end - start)
