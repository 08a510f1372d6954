"""Widgets that paint into a ``Buffer``."""

from pi.cells.widgets.base import Widget
from pi.cells.widgets.block import Block, Borders, BorderType
from pi.cells.widgets.canvas import (
    Canvas,
    Circle,
    Context,
    Grid,
    Layer,
    Marker,
    Painter,
    Points,
    Rectangle,
    Shape,
)
from pi.cells.widgets.paragraph import Paragraph, wrap_line

__all__ = [
    "Block",
    "BorderType",
    "Borders",
    "Canvas",
    "Circle",
    "Context",
    "Grid",
    "Layer",
    "Marker",
    "Painter",
    "Paragraph",
    "Points",
    "Rectangle",
    "Shape",
    "Widget",
    "wrap_line",
]
