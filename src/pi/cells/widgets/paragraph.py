"""Paragraph widget - styled text, optionally word-wrapped and aligned."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from pi.cells.buffer import Buffer
from pi.cells.geometry import Rect
from pi.cells.style import Style
from pi.cells.text import Alignment, Line, Text
from pi.cells.utils import grapheme_width, graphemes, is_whitespace_char
from pi.cells.widgets.block import Block

_StyledRow = list[tuple[str, Style]]


def _styled_graphemes(line: Line) -> Iterator[tuple[str, Style]]:
    for span in line.spans:
        style = line.style.patch(span.style)
        for g in graphemes(span.content):
            if grapheme_width(g) > 0:
                yield g, style


def _row_width(row: _StyledRow) -> int:
    return sum(grapheme_width(g) for g, _ in row)


def _tokens(line: Line) -> Iterator[tuple[bool, _StyledRow]]:
    """Split *line* into alternating runs of whitespace and words."""
    run: _StyledRow = []
    run_is_space = False
    for g, style in _styled_graphemes(line):
        is_space = is_whitespace_char(g)
        if run and is_space != run_is_space:
            yield run_is_space, run
            run = []
        run_is_space = is_space
        run.append((g, style))
    if run:
        yield run_is_space, run


def wrap_line(line: Line, width: int) -> list[_StyledRow]:
    """Word-wrap *line* into rows no wider than *width*.

    Whitespace at a break is dropped; words wider than a row are broken
    at grapheme boundaries.  An empty line yields one empty row.
    """
    rows: list[_StyledRow] = []
    current: _StyledRow = []
    current_width = 0
    pending: _StyledRow = []
    for is_space, chunk in _tokens(line):
        if is_space:
            pending = pending + chunk
            continue
        pending_width = _row_width(pending)
        chunk_width = _row_width(chunk)
        if current_width + pending_width + chunk_width <= width:
            current += pending + chunk
            current_width += pending_width + chunk_width
        else:
            if current:
                rows.append(current)
            current, current_width = [], 0
            for g, style in chunk:
                g_width = grapheme_width(g)
                if current and current_width + g_width > width:
                    rows.append(current)
                    current, current_width = [], 0
                current.append((g, style))
                current_width += g_width
        pending = []
    rows.append(current)
    return rows


@dataclass(frozen=True)
class Paragraph:
    """Renders ``Text`` line by line inside an area.

    Lines are truncated at the right edge unless *wrap* is set.  *scroll*
    skips that many rows from the top.
    """

    text: Union[Text, str]
    style: Style = field(default_factory=Style)
    alignment: Alignment = Alignment.LEFT
    wrap: bool = False
    scroll: int = 0
    block: Block | None = None

    def _text(self) -> Text:
        if isinstance(self.text, str):
            return Text.raw(self.text)
        return self.text

    def _rows(self, width: int) -> Iterator[tuple[_StyledRow, Alignment]]:
        text = self._text()
        for line in text.lines:
            line = Line(line.spans, text.style.patch(line.style), line.alignment)
            alignment = line.alignment or text.alignment or self.alignment
            if self.wrap:
                for row in wrap_line(line, width):
                    yield row, alignment
            else:
                yield list(_styled_graphemes(line)), alignment

    def render(self, area: Rect, buffer: Buffer) -> None:
        area = area.intersection(buffer.area)
        if self.block is not None:
            self.block.render(area, buffer)
            area = self.block.inner(area)
        if area.is_empty():
            return
        buffer.set_style(area, self.style)

        y = area.top
        for index, (row, alignment) in enumerate(self._rows(area.width)):
            if index < self.scroll:
                continue
            if y >= area.bottom:
                break
            slack = max(0, area.width - _row_width(row))
            x = area.left
            if alignment is Alignment.CENTER:
                x += slack // 2
            elif alignment is Alignment.RIGHT:
                x += slack
            for g, style in row:
                g_width = grapheme_width(g)
                if x + g_width > area.right:
                    break
                buffer.set(x, y, g, style)
                x += g_width
            y += 1
