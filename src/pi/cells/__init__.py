"""pi-cells: cell-grid terminal rendering with constraint layouts and diffing."""

# Backends
from pi.cells.backend import Backend, ProcessBackend, encode_patches

# Cells and buffers
from pi.cells.buffer import Buffer, Cell

# Configuration
from pi.cells.config import RenderSettings, load_settings

# Constraints
from pi.cells.constraint import (
    Constraint,
    Direction,
    Fill,
    Flex,
    Length,
    Max,
    Min,
    Percentage,
    Ratio,
)

# Diffing
from pi.cells.diff import PatchEntry, diff, group_runs

# Geometry
from pi.cells.geometry import Margin, Offset, Position, Rect, Size

# Layout
from pi.cells.layout import Layout

# Styles
from pi.cells.style import Color, Indexed, Modifier, Rgb, Style, parse_color

# Frame orchestration
from pi.cells.terminal import CompletedFrame, Frame, Terminal, Viewport, session

# Styled text
from pi.cells.text import Alignment, Line, Span, Text

# Utilities
from pi.cells.utils import visible_width

__all__ = [
    # Backends
    "Backend",
    "ProcessBackend",
    "encode_patches",
    # Cells and buffers
    "Buffer",
    "Cell",
    # Configuration
    "RenderSettings",
    "load_settings",
    # Constraints
    "Constraint",
    "Direction",
    "Fill",
    "Flex",
    "Length",
    "Max",
    "Min",
    "Percentage",
    "Ratio",
    # Diffing
    "PatchEntry",
    "diff",
    "group_runs",
    # Geometry
    "Margin",
    "Offset",
    "Position",
    "Rect",
    "Size",
    # Layout
    "Layout",
    # Styles
    "Color",
    "Indexed",
    "Modifier",
    "Rgb",
    "Style",
    "parse_color",
    # Frame orchestration
    "CompletedFrame",
    "Frame",
    "Terminal",
    "Viewport",
    "session",
    # Styled text
    "Alignment",
    "Line",
    "Span",
    "Text",
    # Utilities
    "visible_width",
]
