"""Frame orchestration with differential rendering.

``Terminal`` keeps the buffer of the last frame that reached the backend.
Each ``draw`` renders into a fresh buffer, diffs it against that one and
sends only the changed cells.  The new buffer replaces the old one only
after the backend has been flushed, so a render callback that raises
leaves the terminal exactly as it was.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from pi.cells.backend import Backend, ProcessBackend
from pi.cells.buffer import Buffer
from pi.cells.config import RenderSettings, load_settings
from pi.cells.geometry import Rect, Size
from pi.cells.layout import configure_cache
from pi.cells.widgets.base import Widget

logger = logging.getLogger(__name__)

__all__ = [
    "Viewport",
    "Frame",
    "CompletedFrame",
    "Terminal",
    "session",
]


@dataclass(frozen=True)
class Viewport:
    """Where frames are drawn: the whole screen, or a fixed rect.

    A fullscreen viewport follows the backend size before every draw; a
    fixed one never changes unless ``Terminal.resize`` is called.
    """

    area: Rect | None = None

    @classmethod
    def fullscreen(cls) -> Viewport:
        return cls()

    @classmethod
    def fixed(cls, area: Rect) -> Viewport:
        return cls(area)

    @property
    def is_fullscreen(self) -> bool:
        return self.area is None


class Frame:
    """The drawing surface handed to a render callback."""

    def __init__(self, buffer: Buffer, count: int) -> None:
        self.buffer = buffer
        self.count = count
        self.cursor: tuple[int, int] | None = None

    @property
    def area(self) -> Rect:
        return self.buffer.area

    def size(self) -> Size:
        return self.buffer.area.as_size()

    def render_widget(self, widget: Widget, area: Rect | None = None) -> None:
        widget.render(area if area is not None else self.area, self.buffer)

    def set_cursor(self, x: int, y: int) -> None:
        """Show the cursor at ``(x, y)`` once the frame has been drawn."""
        self.cursor = (x, y)


@dataclass(frozen=True)
class CompletedFrame:
    buffer: Buffer
    area: Rect
    count: int


class Terminal:
    """Drives a ``Backend`` one frame at a time."""

    def __init__(
        self,
        backend: Backend,
        viewport: Viewport | None = None,
        settings: RenderSettings | None = None,
    ) -> None:
        self.backend = backend
        self.viewport = viewport or Viewport.fullscreen()
        self.settings = settings or load_settings()
        configure_cache(self.settings.layout_cache_size)

        area = self.viewport.area if self.viewport.area is not None else backend.size()
        self._previous = Buffer.empty(area)
        self._cursor: tuple[int, int] | None = None
        self._cursor_hidden = False

        # Metrics
        self._frame_count = 0
        self._full_redraw_count = 0

    # -- properties ---------------------------------------------------------

    @property
    def area(self) -> Rect:
        return self._previous.area

    @property
    def previous_buffer(self) -> Buffer:
        """The last frame that reached the backend."""
        return self._previous

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def full_redraws(self) -> int:
        """Number of times the screen was cleared and repainted from scratch."""
        return self._full_redraw_count

    def size(self) -> Rect:
        return self.backend.size()

    # -- drawing ------------------------------------------------------------

    def autoresize(self) -> None:
        if not self.viewport.is_fullscreen:
            return
        size = self.backend.size()
        if size != self._previous.area:
            self.resize(size)

    def draw(self, render: Callable[[Frame], None]) -> CompletedFrame:
        """Render one frame and send the difference to the backend."""
        self.autoresize()
        area = self._previous.area
        frame = Frame(Buffer.empty(area), self._frame_count)
        render(frame)

        patches = self._previous.diff(frame.buffer)
        self.backend.draw(patches)
        self._apply_cursor(frame.cursor)
        self.backend.flush()

        self._previous = frame.buffer
        self._frame_count += 1
        logger.debug("frame %d: %d patches", frame.count, len(patches))
        return CompletedFrame(frame.buffer, area, frame.count)

    def _apply_cursor(self, cursor: tuple[int, int] | None) -> None:
        self._cursor = cursor
        if cursor is not None:
            self.backend.set_cursor(*cursor)
            self.show_cursor()
        elif self.settings.show_hardware_cursor:
            self.show_cursor()
        else:
            self.hide_cursor()

    def resize(self, area: Rect) -> None:
        """Switch to *area* and force the next frame to repaint every cell."""
        logger.debug("resize %s -> %s, forcing full redraw", self._previous.area, area)
        self.backend.clear()
        self._previous = Buffer.empty(area)
        self._full_redraw_count += 1

    def clear(self) -> None:
        """Clear the screen; the next frame repaints everything."""
        self.backend.clear()
        self._previous = Buffer.empty(self._previous.area)
        self._full_redraw_count += 1

    def hide_cursor(self) -> None:
        if not self._cursor_hidden:
            self.backend.hide_cursor()
            self._cursor_hidden = True

    def show_cursor(self) -> None:
        if self._cursor_hidden:
            self.backend.show_cursor()
            self._cursor_hidden = False

    # -- debug dump ---------------------------------------------------------

    def write_debug_dump(self) -> str | None:
        """Write the last frame and render state to ``settings.debug_dir``.

        Returns the path of the dump, or ``None`` if it could not be
        written.
        """
        try:
            os.makedirs(self.settings.debug_dir, exist_ok=True)
            ts = int(time.time() * 1000)
            dump_path = os.path.join(self.settings.debug_dir, f"render-{ts}.txt")
            with open(dump_path, "w", encoding="utf-8") as f:
                f.write(f"area: {self._previous.area}\n")
                f.write(f"viewport: {'fullscreen' if self.viewport.is_fullscreen else 'fixed'}\n")
                f.write(f"frame_count: {self._frame_count}\n")
                f.write(f"full_redraws: {self._full_redraw_count}\n")
                f.write(f"cursor: {self._cursor}\n")
                f.write(f"cursor_hidden: {self._cursor_hidden}\n")
                lines = self._previous.lines()
                f.write(f"\nlines ({len(lines)}):\n")
                for i, line in enumerate(lines):
                    f.write(f"  [{i:3d}] {line!r}\n")
        except OSError:
            logger.debug("could not write debug dump to %s", self.settings.debug_dir, exc_info=True)
            return None
        return dump_path


@contextmanager
def session(
    backend: Backend | None = None,
    settings: RenderSettings | None = None,
    viewport: Viewport | None = None,
) -> Iterator[Terminal]:
    """Start *backend* (a ``ProcessBackend`` by default) for the duration of the block.

    The backend is stopped on every exit path, including exceptions raised
    by the block.
    """
    settings = settings or load_settings()
    if backend is None:
        backend = ProcessBackend(settings)
    backend.start()
    try:
        yield Terminal(backend, viewport, settings)
    finally:
        backend.stop()
