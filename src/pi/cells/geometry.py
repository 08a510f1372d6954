"""Geometry primitives: ``Position``, ``Size``, ``Margin``, ``Offset``, ``Rect``.

All coordinates and extents are unsigned 16-bit values.  Arithmetic that
would leave that range saturates instead of wrapping, and a ``Rect`` never
covers more than ``MAX_AREA`` cells: oversized rectangles are scaled down
keeping their aspect ratio.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from pi.cells.layout import Layout

__all__ = [
    "U16_MAX",
    "MAX_AREA",
    "clamp_u16",
    "saturating_add",
    "saturating_sub",
    "Position",
    "Size",
    "Margin",
    "Offset",
    "Rect",
]

# ---------------------------------------------------------------------------
# Saturating u16 arithmetic
# ---------------------------------------------------------------------------

U16_MAX = 0xFFFF

# Largest number of cells a Rect (and so a Buffer) may cover
MAX_AREA = U16_MAX


def clamp_u16(value: int) -> int:
    """Clamp *value* into ``[0, U16_MAX]``."""
    if value < 0:
        return 0
    if value > U16_MAX:
        return U16_MAX
    return value


def saturating_add(a: int, b: int) -> int:
    return clamp_u16(a + b)


def saturating_sub(a: int, b: int) -> int:
    return clamp_u16(a - b)


# ---------------------------------------------------------------------------
# Position / Size / Margin / Offset
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    """A cell coordinate; the origin is the top-left corner of the screen."""

    x: int = 0
    y: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", clamp_u16(self.x))
        object.__setattr__(self, "y", clamp_u16(self.y))

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y

    @classmethod
    def from_rect(cls, rect: Rect) -> Position:
        return rect.as_position()


@dataclass(frozen=True)
class Size:
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", clamp_u16(self.width))
        object.__setattr__(self, "height", clamp_u16(self.height))

    def __iter__(self) -> Iterator[int]:
        yield self.width
        yield self.height

    @classmethod
    def from_rect(cls, rect: Rect) -> Size:
        return rect.as_size()


@dataclass(frozen=True)
class Margin:
    """Space removed from each side of a rect by :meth:`Rect.inner`."""

    horizontal: int = 0
    vertical: int = 0


@dataclass(frozen=True)
class Offset:
    """A signed displacement used by :meth:`Rect.offset`."""

    x: int = 0
    y: int = 0


# ---------------------------------------------------------------------------
# Rect
# ---------------------------------------------------------------------------


def _clip_to_max_area(width: int, height: int) -> tuple[int, int]:
    """Scale ``width x height`` down to at most ``MAX_AREA`` cells.

    The aspect ratio is preserved; both dimensions are truncated, so the
    product of the result can never exceed the limit.
    """
    if width * height <= MAX_AREA:
        return width, height
    aspect_ratio = width / height
    height_f = math.sqrt(MAX_AREA / aspect_ratio)
    width_f = height_f * aspect_ratio
    return int(width_f), int(height_f)


@dataclass(frozen=True)
class Rect:
    """A rectangular region of the cell grid.

    Construction saturates every field into the u16 range and clamps the
    area to ``MAX_AREA``.  ``right`` and ``bottom`` are exclusive and
    saturate at ``U16_MAX``.
    """

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        width, height = _clip_to_max_area(
            clamp_u16(self.width), clamp_u16(self.height)
        )
        object.__setattr__(self, "x", clamp_u16(self.x))
        object.__setattr__(self, "y", clamp_u16(self.y))
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)

    @classmethod
    def new(cls, x: int, y: int, width: int, height: int) -> Rect:
        return cls(x, y, width, height)

    @classmethod
    def from_position_size(cls, position: Position, size: Size) -> Rect:
        return cls(position.x, position.y, size.width, size.height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}+{self.x}+{self.y}"

    # -- accessors -----------------------------------------------------------

    @property
    def area(self) -> int:
        return self.width * self.height

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def left(self) -> int:
        return self.x

    @property
    def right(self) -> int:
        return saturating_add(self.x, self.width)

    @property
    def top(self) -> int:
        return self.y

    @property
    def bottom(self) -> int:
        return saturating_add(self.y, self.height)

    def as_position(self) -> Position:
        return Position(self.x, self.y)

    def as_size(self) -> Size:
        return Size(self.width, self.height)

    def contains(self, position: Position) -> bool:
        return (
            self.x <= position.x < self.right
            and self.y <= position.y < self.bottom
        )

    # -- derived rects -------------------------------------------------------

    def inner(self, margin: Margin) -> Rect:
        """Return the rect left after removing *margin* from every side.

        A margin larger than the rect yields an empty ``Rect()``.
        """
        doubled_h = saturating_add(margin.horizontal, margin.horizontal)
        doubled_v = saturating_add(margin.vertical, margin.vertical)
        if self.width < doubled_h or self.height < doubled_v:
            return Rect()
        return Rect(
            saturating_add(self.x, margin.horizontal),
            saturating_add(self.y, margin.vertical),
            self.width - doubled_h,
            self.height - doubled_v,
        )

    def offset(self, offset: Offset) -> Rect:
        """Move the rect by *offset* without changing its size.

        The result is clamped so the rect stays inside the u16 grid.
        """
        x = min(max(self.x + offset.x, 0), U16_MAX - self.width)
        y = min(max(self.y + offset.y, 0), U16_MAX - self.height)
        return Rect(x, y, self.width, self.height)

    def union(self, other: Rect) -> Rect:
        x1 = min(self.x, other.x)
        y1 = min(self.y, other.y)
        x2 = max(self.right, other.right)
        y2 = max(self.bottom, other.bottom)
        return Rect(x1, y1, saturating_sub(x2, x1), saturating_sub(y2, y1))

    def intersection(self, other: Rect) -> Rect:
        """Return the overlap of both rects (zero area when disjoint)."""
        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.right, other.right)
        y2 = min(self.bottom, other.bottom)
        return Rect(x1, y1, saturating_sub(x2, x1), saturating_sub(y2, y1))

    def intersects(self, other: Rect) -> bool:
        return (
            self.x < other.right
            and self.right > other.x
            and self.y < other.bottom
            and self.bottom > other.y
        )

    def clamp(self, other: Rect) -> Rect:
        """Move (and if needed shrink) this rect so it fits inside *other*.

        Unlike :meth:`intersection` the position changes rather than the
        size, unless the rect is larger than *other*.
        """
        width = min(self.width, other.width)
        height = min(self.height, other.height)
        x = min(max(self.x, other.x), saturating_sub(other.right, width))
        y = min(max(self.y, other.y), saturating_sub(other.bottom, height))
        return Rect(x, y, width, height)

    # -- iteration -----------------------------------------------------------

    def rows(self) -> Iterator[Rect]:
        """Yield every row of the rect as a rect of height 1."""
        for row in range(self.y, self.bottom):
            yield Rect(self.x, row, self.width, 1)

    def columns(self) -> Iterator[Rect]:
        """Yield every column of the rect as a rect of width 1."""
        for column in range(self.x, self.right):
            yield Rect(column, self.y, 1, self.height)

    def positions(self) -> Iterator[Position]:
        """Yield every cell position in row-major order."""
        for y in range(self.y, self.bottom):
            for x in range(self.x, self.right):
                yield Position(x, y)

    # -- layout --------------------------------------------------------------

    def split(self, layout: Layout, count: int) -> list[Rect]:
        """Split the rect with *layout*, expecting exactly *count* parts.

        Raises ``ValueError`` when *count* does not match the number of
        constraints in *layout*.
        """
        return layout.split_n(self, count)
