"""The ``Widget`` protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pi.cells.buffer import Buffer
    from pi.cells.geometry import Rect


class Widget(Protocol):
    """Anything that can paint itself into a region of a ``Buffer``.

    Implementations must stay inside *area* and treat a zero-area rect as
    "draw nothing".
    """

    def render(self, area: Rect, buffer: Buffer) -> None:
        ...
