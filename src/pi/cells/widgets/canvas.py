"""Canvas widget - free-form shapes painted onto a sub-cell grid.

Shapes are drawn in a floating-point coordinate system whose origin is
the *bottom-left* corner of the canvas (``x_bounds`` / ``y_bounds`` pick
the visible window).  A ``Painter`` maps those coordinates onto the
points of a ``Grid``, whose resolution depends on the marker:

==============  ==========  ===========================================
marker          points/cell symbol
==============  ==========  ===========================================
``DOT``         1 x 1       ``•``
``BLOCK``       1 x 1       ``█``
``BAR``         1 x 1       ``▄``
``BRAILLE``     2 x 4       ``U+2800`` with one bit per dot
``HALF_BLOCK``  1 x 2       ``▀`` / ``▄`` / ``█`` with two colors
==============  ==========  ===========================================

Each call to ``Context.layer`` freezes the grid into a ``Layer``; layers
are rendered in order, then text labels on top.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence, Union

from pi.cells import symbols
from pi.cells.buffer import Buffer
from pi.cells.geometry import Rect
from pi.cells.style import Color, ColorValue, Style
from pi.cells.text import Line as TextLine
from pi.cells.widgets.block import Block

__all__ = [
    "Marker",
    "Layer",
    "Grid",
    "Painter",
    "Context",
    "Shape",
    "Points",
    "Line",
    "Rectangle",
    "Circle",
    "Canvas",
]


class Marker(enum.Enum):
    DOT = "dot"
    BLOCK = "block"
    BAR = "bar"
    BRAILLE = "braille"
    HALF_BLOCK = "half_block"


_CHAR_MARKERS = {
    Marker.DOT: symbols.DOT,
    Marker.BLOCK: symbols.BLOCK_FULL,
    Marker.BAR: symbols.BAR_HALF,
}

# Symbols that leave the underlying buffer cell untouched
_TRANSPARENT = (" ", chr(symbols.BRAILLE_BLANK))


@dataclass(frozen=True)
class Layer:
    """A frozen grid: one symbol and one ``(fg, bg)`` pair per cell, row-major."""

    string: str
    colors: tuple[tuple[ColorValue, ColorValue], ...]


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


class Grid:
    """Paintable point grid covering ``width x height`` terminal cells.

    The marker is fixed at construction and decides how many points make
    up a cell and how a cell is turned into a symbol.  Painting a point
    outside the grid does nothing.
    """

    def __init__(self, width: int, height: int, marker: Marker = Marker.BRAILLE) -> None:
        self.width = width
        self.height = height
        self.marker = marker
        if marker is Marker.BRAILLE:
            self._points_per_cell = (2, 4)
        elif marker is Marker.HALF_BLOCK:
            self._points_per_cell = (1, 2)
        else:
            self._points_per_cell = (1, 1)
        self.reset()

    @property
    def resolution(self) -> tuple[float, float]:
        """Number of addressable points horizontally and vertically."""
        px, py = self._points_per_cell
        return float(self.width * px), float(self.height * py)

    def reset(self) -> None:
        size = self.width * self.height
        if self.marker is Marker.HALF_BLOCK:
            self._pixels: list[list[ColorValue]] = [
                [Color.RESET] * self.width for _ in range(self.height * 2)
            ]
            return
        if self.marker is Marker.BRAILLE:
            self._codes: list[int] = [symbols.BRAILLE_BLANK] * size
        else:
            self._chars: list[str] = [" "] * size
        self._colors: list[ColorValue] = [Color.RESET] * size

    def paint(self, x: int, y: int, color: ColorValue) -> None:
        px, py = self._points_per_cell
        if not (0 <= x < self.width * px and 0 <= y < self.height * py):
            return
        if self.marker is Marker.HALF_BLOCK:
            self._pixels[y][x] = color
            return
        index = (y // py) * self.width + x // px
        if self.marker is Marker.BRAILLE:
            self._codes[index] |= symbols.BRAILLE_DOTS[y % 4][x % 2]
        else:
            self._chars[index] = _CHAR_MARKERS[self.marker]
        self._colors[index] = color

    def save(self) -> Layer:
        if self.marker is Marker.HALF_BLOCK:
            return self._save_half_blocks()
        if self.marker is Marker.BRAILLE:
            string = "".join(chr(code) for code in self._codes)
        else:
            string = "".join(self._chars)
        return Layer(string, tuple((color, Color.RESET) for color in self._colors))

    def _save_half_blocks(self) -> Layer:
        chars: list[str] = []
        colors: list[tuple[ColorValue, ColorValue]] = []
        for row in range(self.height):
            upper_row = self._pixels[row * 2]
            lower_row = self._pixels[row * 2 + 1]
            for upper, lower in zip(upper_row, lower_row):
                if upper == Color.RESET and lower == Color.RESET:
                    chars.append(" ")
                    colors.append((Color.RESET, Color.RESET))
                elif upper == Color.RESET:
                    # fg carries the color; the default bg stays visible above
                    chars.append(symbols.HALF_BLOCK_LOWER)
                    colors.append((lower, Color.RESET))
                elif lower == Color.RESET:
                    chars.append(symbols.HALF_BLOCK_UPPER)
                    colors.append((upper, Color.RESET))
                else:
                    # same color on both halves renders as one full block
                    chars.append(
                        symbols.HALF_BLOCK_FULL if upper == lower else symbols.HALF_BLOCK_UPPER
                    )
                    colors.append((upper, lower))
        return Layer("".join(chars), tuple(colors))


# ---------------------------------------------------------------------------
# Painter / Context
# ---------------------------------------------------------------------------


class Painter:
    """Maps canvas coordinates to grid points for a ``Shape``."""

    def __init__(self, context: Context) -> None:
        self.context = context
        self.resolution = context.grid.resolution

    def get_point(self, x: float, y: float) -> tuple[int, int] | None:
        """Grid point for canvas coordinates ``(x, y)``.

        Returns ``None`` outside the bounds or when either bound range is
        empty.  The y axis is flipped: the top of ``y_bounds`` is row 0.
        """
        left, right = self.context.x_bounds
        bottom, top = self.context.y_bounds
        if x < left or x > right or y < bottom or y > top:
            return None
        width = abs(right - left)
        height = abs(top - bottom)
        if width == 0 or height == 0:
            return None
        grid_x = int((x - left) * (self.resolution[0] - 1) / width)
        grid_y = int((top - y) * (self.resolution[1] - 1) / height)
        return grid_x, grid_y

    def paint(self, x: int, y: int, color: ColorValue) -> None:
        self.context.grid.paint(x, y, color)


@dataclass(frozen=True)
class Label:
    x: float
    y: float
    line: TextLine


class Context:
    """Drawing state handed to ``Canvas.paint``."""

    def __init__(
        self,
        width: int,
        height: int,
        x_bounds: Sequence[float],
        y_bounds: Sequence[float],
        marker: Marker = Marker.BRAILLE,
    ) -> None:
        self.x_bounds = (float(x_bounds[0]), float(x_bounds[1]))
        self.y_bounds = (float(y_bounds[0]), float(y_bounds[1]))
        self.grid = Grid(width, height, marker)
        self.layers: list[Layer] = []
        self.labels: list[Label] = []
        self._dirty = False

    def draw(self, shape: Shape) -> None:
        self._dirty = True
        shape.draw(Painter(self))

    def layer(self) -> None:
        """Freeze the current grid as a layer and start a fresh one."""
        self.layers.append(self.grid.save())
        self.grid.reset()
        self._dirty = False

    def print(self, x: float, y: float, line: Union[TextLine, str]) -> None:
        """Queue a text label; labels are drawn above every layer."""
        if isinstance(line, str):
            line = TextLine.from_str(line)
        self.labels.append(Label(x, y, line))

    def finish(self) -> None:
        if self._dirty:
            self.layer()


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


class Shape(Protocol):
    def draw(self, painter: Painter) -> None:
        ...


@dataclass(frozen=True)
class Points:
    coords: Sequence[tuple[float, float]] = ()
    color: ColorValue = Color.RESET

    def draw(self, painter: Painter) -> None:
        for x, y in self.coords:
            point = painter.get_point(x, y)
            if point is not None:
                painter.paint(point[0], point[1], self.color)


@dataclass(frozen=True)
class Line:
    """A straight segment from ``(x1, y1)`` to ``(x2, y2)`` (Bresenham)."""

    x1: float
    y1: float
    x2: float
    y2: float
    color: ColorValue = Color.RESET

    def draw(self, painter: Painter) -> None:
        start = painter.get_point(self.x1, self.y1)
        end = painter.get_point(self.x2, self.y2)
        if start is None or end is None:
            return
        (x1, y1), (x2, y2) = start, end
        dx = abs(x2 - x1)
        dy = abs(y2 - y1)
        if dx == 0:
            for y in range(min(y1, y2), max(y1, y2) + 1):
                painter.paint(x1, y, self.color)
            return
        if dy == 0:
            for x in range(min(x1, x2), max(x1, x2) + 1):
                painter.paint(x, y1, self.color)
            return
        if dy < dx:
            if x1 > x2:
                x1, y1, x2, y2 = x2, y2, x1, y1
            _draw_line_low(painter, x1, y1, x2, y2, self.color)
        else:
            if y1 > y2:
                x1, y1, x2, y2 = x2, y2, x1, y1
            _draw_line_high(painter, x1, y1, x2, y2, self.color)


def _draw_line_low(painter: Painter, x1: int, y1: int, x2: int, y2: int, color: ColorValue) -> None:
    dx = x2 - x1
    dy = abs(y2 - y1)
    d = 2 * dy - dx
    y = y1
    for x in range(x1, x2 + 1):
        painter.paint(x, y, color)
        if d > 0:
            y = max(y - 1, 0) if y1 > y2 else y + 1
            d -= 2 * dx
        d += 2 * dy


def _draw_line_high(painter: Painter, x1: int, y1: int, x2: int, y2: int, color: ColorValue) -> None:
    dx = abs(x2 - x1)
    dy = y2 - y1
    d = 2 * dx - dy
    x = x1
    for y in range(y1, y2 + 1):
        painter.paint(x, y, color)
        if d > 0:
            x = max(x - 1, 0) if x1 > x2 else x + 1
            d -= 2 * dy
        d += 2 * dx


@dataclass(frozen=True)
class Rectangle:
    """Outline of an axis-aligned rectangle; ``(x, y)`` is its bottom-left corner."""

    x: float
    y: float
    width: float
    height: float
    color: ColorValue = Color.RESET

    def draw(self, painter: Painter) -> None:
        left, bottom = self.x, self.y
        right, top = self.x + self.width, self.y + self.height
        for edge in (
            Line(left, bottom, left, top, self.color),
            Line(left, top, right, top, self.color),
            Line(right, bottom, right, top, self.color),
            Line(left, bottom, right, bottom, self.color),
        ):
            edge.draw(painter)


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float
    color: ColorValue = Color.RESET

    def draw(self, painter: Painter) -> None:
        for angle in range(360):
            radians = math.radians(angle)
            point = painter.get_point(
                self.x + self.radius * math.cos(radians),
                self.y + self.radius * math.sin(radians),
            )
            if point is not None:
                painter.paint(point[0], point[1], self.color)


# ---------------------------------------------------------------------------
# Canvas widget
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Canvas:
    """Widget that runs *paint* against a fresh ``Context`` on every render.

    Example::

        Canvas(
            x_bounds=(0.0, 10.0),
            y_bounds=(0.0, 10.0),
            marker=Marker.BRAILLE,
            paint=lambda ctx: ctx.draw(Circle(5.0, 5.0, 4.0, Color.RED)),
        )
    """

    x_bounds: tuple[float, float] = (0.0, 0.0)
    y_bounds: tuple[float, float] = (0.0, 0.0)
    marker: Marker = Marker.BRAILLE
    background_color: ColorValue = Color.RESET
    block: Block | None = None
    paint: Callable[[Context], None] | None = field(default=None, compare=False)

    def render(self, area: Rect, buffer: Buffer) -> None:
        area = area.intersection(buffer.area)
        canvas_area = area
        if self.block is not None:
            self.block.render(area, buffer)
            canvas_area = self.block.inner(area)
        if canvas_area.is_empty():
            return

        buffer.set_style(canvas_area, Style(bg=self.background_color))
        if self.paint is None:
            return

        ctx = Context(
            canvas_area.width,
            canvas_area.height,
            self.x_bounds,
            self.y_bounds,
            self.marker,
        )
        self.paint(ctx)
        ctx.finish()

        width = canvas_area.width
        for layer in ctx.layers:
            for index, (ch, (fg, bg)) in enumerate(zip(layer.string, layer.colors)):
                if ch in _TRANSPARENT:
                    continue
                x = canvas_area.left + index % width
                y = canvas_area.top + index // width
                buffer.set(x, y, ch)
                cell = buffer[x, y]
                if fg != Color.RESET:
                    cell.set_fg(fg)
                if bg != Color.RESET:
                    cell.set_bg(bg)

        self._render_labels(ctx, canvas_area, buffer)

    def _render_labels(self, ctx: Context, canvas_area: Rect, buffer: Buffer) -> None:
        left, right = ctx.x_bounds
        bottom, top = ctx.y_bounds
        width = abs(right - left)
        height = abs(top - bottom)
        if width == 0 or height == 0:
            return
        resolution = (canvas_area.width - 1, canvas_area.height - 1)
        for label in ctx.labels:
            if not (left <= label.x <= right and bottom <= label.y <= top):
                continue
            x = int((label.x - left) * resolution[0] / width) + canvas_area.left
            y = int((top - label.y) * resolution[1] / height) + canvas_area.top
            buffer.set_line(x, y, label.line, canvas_area.right - x)
