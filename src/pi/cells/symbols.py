"""Glyph tables shared by the widgets: borders, blocks, bars and braille."""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Canvas markers
# ---------------------------------------------------------------------------

DOT = "•"

BLOCK_FULL = "█"
BAR_HALF = "▄"

HALF_BLOCK_UPPER = "▀"
HALF_BLOCK_LOWER = "▄"
HALF_BLOCK_FULL = "█"

# Braille patterns: U+2800 plus one bit per dot.  DOTS is indexed
# [row][column] for a cell of 4 rows by 2 columns.
BRAILLE_BLANK = 0x2800
BRAILLE_DOTS = (
    (0x01, 0x08),
    (0x02, 0x10),
    (0x04, 0x20),
    (0x40, 0x80),
)

# ---------------------------------------------------------------------------
# Border line sets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineSet:
    vertical: str
    horizontal: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str


PLAIN = LineSet("│", "─", "┌", "┐", "└", "┘")
ROUNDED = LineSet("│", "─", "╭", "╮", "╰", "╯")
DOUBLE = LineSet("║", "═", "╔", "╗", "╚", "╝")
THICK = LineSet("┃", "━", "┏", "┓", "┗", "┛")
