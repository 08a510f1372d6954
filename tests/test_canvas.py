"""Tests for pi.cells.widgets.canvas -- grids, painters, shapes and markers."""

from __future__ import annotations

import pytest

from pi.cells.buffer import Buffer, Cell
from pi.cells.geometry import Rect
from pi.cells.style import Color
from pi.cells.widgets import Block, Canvas, Circle, Context, Grid, Marker, Painter, Points, Rectangle
from pi.cells.widgets.canvas import Line


def _render(canvas: Canvas, width: int, height: int, fill: str = " ") -> Buffer:
    area = Rect(0, 0, width, height)
    buffer = Buffer.filled(area, Cell(fill))
    canvas.render(area, buffer)
    return buffer


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------


class TestMarkers:
    @pytest.mark.parametrize(
        "marker, expected",
        [
            (Marker.BAR, ["▄xxxx", "▄xxxx", "▄xxxx", "▄xxxx", "▄▄▄▄▄"]),
            (Marker.BLOCK, ["█xxxx", "█xxxx", "█xxxx", "█xxxx", "█████"]),
            (Marker.BRAILLE, ["⡇xxxx", "⡇xxxx", "⡇xxxx", "⡇xxxx", "⣇⣀⣀⣀⣀"]),
            (Marker.DOT, ["•xxxx", "•xxxx", "•xxxx", "•xxxx", "•••••"]),
        ],
    )
    def test_axes(self, marker: Marker, expected: list[str]) -> None:
        def paint(ctx: Context) -> None:
            ctx.draw(Line(0.0, 0.0, 0.0, 10.0))
            ctx.draw(Line(0.0, 0.0, 10.0, 0.0))

        canvas = Canvas(x_bounds=(0.0, 10.0), y_bounds=(0.0, 10.0), marker=marker, paint=paint)
        assert _render(canvas, 5, 5, fill="x").lines() == expected


class TestHalfBlocks:
    def test_upper_only(self) -> None:
        grid = Grid(1, 1, Marker.HALF_BLOCK)
        grid.paint(0, 0, Color.RED)
        layer = grid.save()
        assert layer.string == "▀"
        assert layer.colors == ((Color.RED, Color.RESET),)

    def test_lower_only(self) -> None:
        grid = Grid(1, 1, Marker.HALF_BLOCK)
        grid.paint(0, 1, Color.GREEN)
        layer = grid.save()
        assert layer.string == "▄"
        assert layer.colors == ((Color.GREEN, Color.RESET),)

    def test_same_color_is_full_block(self) -> None:
        grid = Grid(1, 1, Marker.HALF_BLOCK)
        grid.paint(0, 0, Color.RED)
        grid.paint(0, 1, Color.RED)
        assert grid.save().string == "█"

    def test_two_colors(self) -> None:
        grid = Grid(1, 1, Marker.HALF_BLOCK)
        grid.paint(0, 0, Color.RED)
        grid.paint(0, 1, Color.BLUE)
        layer = grid.save()
        assert layer.string == "▀"
        assert layer.colors == ((Color.RED, Color.BLUE),)

    def test_canvas_sets_both_colors(self) -> None:
        canvas = Canvas(
            x_bounds=(0.0, 1.0),
            y_bounds=(0.0, 1.0),
            marker=Marker.HALF_BLOCK,
            paint=lambda ctx: ctx.draw(Points([(0.0, 1.0)], Color.RED)),
        )
        buffer = _render(canvas, 2, 1)
        assert buffer[0, 0] == Cell("▀", fg=Color.RED)


# ---------------------------------------------------------------------------
# Grid / Painter
# ---------------------------------------------------------------------------


class TestGrid:
    def test_resolution(self) -> None:
        assert Grid(3, 2, Marker.BRAILLE).resolution == (6.0, 8.0)
        assert Grid(3, 2, Marker.HALF_BLOCK).resolution == (3.0, 4.0)
        assert Grid(3, 2, Marker.DOT).resolution == (3.0, 2.0)

    def test_paint_outside_is_ignored(self) -> None:
        grid = Grid(2, 2, Marker.DOT)
        grid.paint(5, 5, Color.RED)
        grid.paint(-1, 0, Color.RED)
        assert grid.save().string == "    "

    def test_braille_bits_accumulate(self) -> None:
        grid = Grid(1, 1, Marker.BRAILLE)
        grid.paint(0, 0, Color.RED)
        grid.paint(1, 3, Color.RED)
        assert grid.save().string == chr(0x2800 | 0x01 | 0x80)

    def test_reset_clears(self) -> None:
        grid = Grid(1, 1, Marker.BLOCK)
        grid.paint(0, 0, Color.RED)
        grid.reset()
        assert grid.save().string == " "


class TestPainter:
    @pytest.mark.parametrize(
        "point, expected",
        [
            ((1.0, 0.0), (0, 7)),
            ((1.5, 1.0), (1, 3)),
            ((0.0, 0.0), None),
            ((2.0, 2.0), (3, 0)),
            ((1.0, 2.0), (0, 0)),
        ],
    )
    def test_get_point(self, point: tuple[float, float], expected: tuple[int, int] | None) -> None:
        painter = Painter(Context(2, 2, (1.0, 2.0), (0.0, 2.0), Marker.BRAILLE))
        assert painter.get_point(*point) == expected

    def test_empty_bounds_give_no_point(self) -> None:
        painter = Painter(Context(2, 2, (1.0, 1.0), (0.0, 2.0), Marker.BRAILLE))
        assert painter.get_point(1.0, 1.0) is None


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


def _dots(shape: object, width: int = 5, height: int = 5, bound: float = 4.0) -> list[str]:
    canvas = Canvas(
        x_bounds=(0.0, bound),
        y_bounds=(0.0, bound),
        marker=Marker.DOT,
        paint=lambda ctx: ctx.draw(shape),  # type: ignore[arg-type]
    )
    return _render(canvas, width, height).lines()


class TestShapes:
    def test_points(self) -> None:
        canvas = Canvas(
            x_bounds=(0.0, 2.0),
            y_bounds=(0.0, 2.0),
            marker=Marker.DOT,
            paint=lambda ctx: ctx.draw(Points([(1.0, 1.0)], Color.RED)),
        )
        buffer = _render(canvas, 3, 3)
        assert buffer.lines() == ["   ", " • ", "   "]
        assert buffer[1, 1].fg == Color.RED

    def test_diagonal_line(self) -> None:
        assert _dots(Line(0.0, 0.0, 2.0, 2.0), 3, 3, 2.0) == ["  •", " • ", "•  "]

    def test_line_outside_bounds_is_not_drawn(self) -> None:
        assert _dots(Line(0.0, 0.0, 9.0, 9.0), 3, 3, 2.0) == ["   ", "   ", "   "]

    def test_rectangle(self) -> None:
        assert _dots(Rectangle(0.0, 0.0, 4.0, 4.0)) == [
            "•••••",
            "•   •",
            "•   •",
            "•   •",
            "•••••",
        ]

    def test_circle_touches_its_extremes(self) -> None:
        rows = _dots(Circle(2.0, 2.0, 2.0))
        assert rows[2][4] == "•"
        assert rows[0][2] == "•"
        assert rows[2][2] == " "


# ---------------------------------------------------------------------------
# Canvas widget
# ---------------------------------------------------------------------------


class TestCanvas:
    def test_background_color(self) -> None:
        buffer = _render(Canvas(background_color=Color.BLUE), 2, 1)
        assert all(cell.bg == Color.BLUE for cell in buffer.content)

    def test_later_layers_draw_on_top(self) -> None:
        def paint(ctx: Context) -> None:
            ctx.draw(Points([(1.0, 1.0)], Color.RED))
            ctx.layer()
            ctx.draw(Points([(1.0, 1.0)], Color.BLUE))

        canvas = Canvas(x_bounds=(0.0, 2.0), y_bounds=(0.0, 2.0), marker=Marker.DOT, paint=paint)
        assert _render(canvas, 3, 3)[1, 1].fg == Color.BLUE

    def test_blank_cells_are_transparent(self) -> None:
        canvas = Canvas(
            x_bounds=(0.0, 1.0),
            y_bounds=(0.0, 1.0),
            paint=lambda ctx: ctx.draw(Points([(0.0, 1.0)])),
        )
        assert _render(canvas, 3, 1, fill="x").lines() == ["⠁xx"]

    def test_labels(self) -> None:
        def paint(ctx: Context) -> None:
            ctx.print(0.0, 10.0, "hi")
            ctx.print(10.0, 0.0, "hi")
            ctx.print(20.0, 0.0, "out")

        canvas = Canvas(x_bounds=(0.0, 10.0), y_bounds=(0.0, 10.0), paint=paint)
        assert _render(canvas, 5, 3).lines() == ["hi   ", "     ", "    h"]

    def test_labels_need_bounds(self) -> None:
        canvas = Canvas(paint=lambda ctx: ctx.print(0.0, 0.0, "hi"))
        assert _render(canvas, 3, 1).lines() == ["   "]

    def test_zero_area_renders_nothing(self) -> None:
        called: list[Context] = []
        buffer = Buffer.empty(Rect(0, 0, 3, 3))
        Canvas(paint=called.append).render(Rect(0, 0, 0, 0), buffer)
        assert called == []
        assert buffer == Buffer.empty(Rect(0, 0, 3, 3))

    def test_block_shrinks_canvas(self) -> None:
        canvas = Canvas(
            x_bounds=(0.0, 1.0),
            y_bounds=(0.0, 1.0),
            marker=Marker.BLOCK,
            block=Block.bordered(),
            paint=lambda ctx: ctx.draw(Points([(0.0, 1.0)])),
        )
        assert _render(canvas, 3, 3).lines() == ["┌─┐", "│█│", "└─┘"]
