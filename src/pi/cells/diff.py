"""Minimal cell patches between two buffers of the same area."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

from pi.cells.geometry import Position

if TYPE_CHECKING:
    from pi.cells.buffer import Buffer, Cell

__all__ = ["PatchEntry", "diff", "group_runs"]


@dataclass(frozen=True)
class PatchEntry:
    """A cell to write at an absolute position."""

    position: Position
    cell: Cell

    @property
    def x(self) -> int:
        return self.position.x

    @property
    def y(self) -> int:
        return self.position.y


def diff(previous: Buffer, current: Buffer) -> list[PatchEntry]:
    """Return the cells that must be written to turn *previous* into *current*.

    Patches come out row by row, columns ascending.  Companion cells are
    never emitted, nor is anything hidden under a wide glyph of *current*.
    Cells that sat under a wide glyph of *previous* are re-emitted even when
    they compare equal, since the terminal still shows the old glyph there.
    """
    if previous.area != current.area:
        raise ValueError(
            f"cannot diff buffers with different areas: "
            f"{previous.area!r} != {current.area!r}"
        )

    width = current.area.width
    updates: list[PatchEntry] = []
    to_skip = 0
    invalidated = 0
    for index, (cur, prev) in enumerate(zip(current.content, previous.content)):
        if index % width == 0:
            to_skip = 0
            invalidated = 0

        if not cur.skip and to_skip == 0 and (cur != prev or invalidated > 0):
            updates.append(PatchEntry(current.pos_of(index), cur.copy()))

        cur_width = cur.width
        to_skip = max(to_skip - 1, cur_width - 1, 0)
        invalidated = max(cur_width, prev.width, invalidated) - 1
    return updates


def group_runs(patches: Iterable[PatchEntry]) -> Iterator[tuple[Position, list[Cell]]]:
    """Group patches into runs that can be written without moving the cursor.

    A patch continues the current run when it sits on the same row directly
    after the previous cell, a wide cell counting for its full width.
    """
    start: Position | None = None
    cells: list[Cell] = []
    next_x = 0
    for patch in patches:
        if start is not None and patch.y == start.y and patch.x == next_x:
            cells.append(patch.cell)
        else:
            if start is not None:
                yield start, cells
            start, cells = patch.position, [patch.cell]
        next_x = patch.x + max(patch.cell.width, 1)
    if start is not None:
        yield start, cells
