"""Backends: where patches end up.

Provides a ``Backend`` protocol, the pure ``encode_patches`` function that
turns patches into ANSI escape sequences, and ``ProcessBackend`` which
writes them to stdout with the terminal in raw mode and (optionally) on
the alternate screen.
"""

from __future__ import annotations

import logging
import os
import sys
import termios
import tty
from typing import IO, Iterable, Protocol

from pi.cells.config import RenderSettings, load_settings
from pi.cells.diff import PatchEntry, group_runs
from pi.cells.geometry import Rect
from pi.cells.style import Color, ColorValue, Indexed, Modifier, Rgb

logger = logging.getLogger(__name__)

__all__ = ["Backend", "ProcessBackend", "encode_patches"]

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_ENTER_ALT_SCREEN = "\x1b[?1049h"
_LEAVE_ALT_SCREEN = "\x1b[?1049l"
_MOVE_TO_FMT = "\x1b[{};{}H"
_SGR_FMT = "\x1b[{}m"
_SGR_RESET = "\x1b[0m"

_FG_CODES = {
    Color.RESET: 39,
    Color.BLACK: 30,
    Color.RED: 31,
    Color.GREEN: 32,
    Color.YELLOW: 33,
    Color.BLUE: 34,
    Color.MAGENTA: 35,
    Color.CYAN: 36,
    Color.GRAY: 37,
    Color.DARK_GRAY: 90,
    Color.LIGHT_RED: 91,
    Color.LIGHT_GREEN: 92,
    Color.LIGHT_YELLOW: 93,
    Color.LIGHT_BLUE: 94,
    Color.LIGHT_MAGENTA: 95,
    Color.LIGHT_CYAN: 96,
    Color.WHITE: 97,
}

_MODIFIER_CODES = (
    (Modifier.BOLD, 1),
    (Modifier.DIM, 2),
    (Modifier.ITALIC, 3),
    (Modifier.UNDERLINED, 4),
    (Modifier.SLOW_BLINK, 5),
    (Modifier.RAPID_BLINK, 6),
    (Modifier.REVERSED, 7),
    (Modifier.HIDDEN, 8),
    (Modifier.CROSSED_OUT, 9),
)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _color_sgr(color: ColorValue, background: bool) -> str:
    if isinstance(color, Indexed):
        return f"{48 if background else 38};5;{color.index}"
    if isinstance(color, Rgb):
        return f"{48 if background else 38};2;{color.r};{color.g};{color.b}"
    code = _FG_CODES[color]
    return str(code + 10 if background else code)


def _stdin_fd() -> int | None:
    """File descriptor of stdin, or ``None`` when it has none."""
    try:
        return sys.stdin.fileno()
    except (ValueError, OSError):
        return None


def _move_to(x: int, y: int) -> str:
    return _MOVE_TO_FMT.format(y + 1, x + 1)


def encode_patches(patches: Iterable[PatchEntry]) -> str:
    """Encode *patches* as one string of ANSI output.

    The cursor is moved once per run from ``group_runs``.  Colors and
    modifiers are only emitted when they change; the attributes are reset
    at the end.
    """
    out: list[str] = []
    fg: ColorValue = Color.RESET
    bg: ColorValue = Color.RESET
    modifier = Modifier.NONE

    for start, cells in group_runs(patches):
        out.append(_move_to(start.x, start.y))
        for cell in cells:
            if cell.modifier != modifier:
                codes = ["0"] + [
                    str(code) for flag, code in _MODIFIER_CODES if cell.modifier & flag
                ]
                out.append(_SGR_FMT.format(";".join(codes)))
                modifier = cell.modifier
                fg = bg = Color.RESET
            if cell.fg != fg:
                out.append(_SGR_FMT.format(_color_sgr(cell.fg, background=False)))
                fg = cell.fg
            if cell.bg != bg:
                out.append(_SGR_FMT.format(_color_sgr(cell.bg, background=True)))
                bg = cell.bg
            out.append(cell.symbol)

    if out:
        out.append(_SGR_RESET)
    return "".join(out)


# ---------------------------------------------------------------------------
# Backend protocol
# ---------------------------------------------------------------------------


class Backend(Protocol):
    """Interface ``Terminal`` drives."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def size(self) -> Rect: ...

    def draw(self, patches: Iterable[PatchEntry]) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def set_cursor(self, x: int, y: int) -> None: ...

    def clear(self) -> None: ...

    def flush(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessBackend implementation
# ---------------------------------------------------------------------------


class ProcessBackend:
    """Backend on top of the process's own terminal.

    ``start`` saves the termios state and switches stdin to raw mode,
    enters the alternate screen (unless disabled) and hides the cursor;
    ``stop`` undoes all of it.  Output is buffered by the stream until
    ``flush``.
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        stream: IO[str] | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._stream: IO[str] = stream or sys.stdout
        self._original_termios: list | None = None
        self._write_log_path: str = self._settings.write_log_path
        self._started = False

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        fd = _stdin_fd()
        if fd is not None and os.isatty(fd):
            self._original_termios = termios.tcgetattr(fd)
            tty.setraw(fd)
        if self._settings.alternate_screen:
            self._write(_ENTER_ALT_SCREEN)
        self._write(_HIDE_CURSOR)
        self.flush()
        self._started = True
        logger.debug("backend started (alternate_screen=%s)", self._settings.alternate_screen)

    def stop(self) -> None:
        """Restore the cursor, the main screen and the termios state."""
        try:
            self._write(_SGR_RESET + _SHOW_CURSOR)
            if self._settings.alternate_screen:
                self._write(_LEAVE_ALT_SCREEN)
            self.flush()
        finally:
            fd = _stdin_fd()
            if self._original_termios is not None and fd is not None:
                termios.tcsetattr(fd, termios.TCSADRAIN, self._original_termios)
                self._original_termios = None
            self._started = False
            logger.debug("backend stopped")

    # -- queries ------------------------------------------------------------

    def size(self) -> Rect:
        try:
            columns, lines = os.get_terminal_size(self._stream.fileno())
        except (ValueError, OSError):
            columns, lines = 80, 24
        return Rect(0, 0, columns, lines)

    # -- output -------------------------------------------------------------

    def draw(self, patches: Iterable[PatchEntry]) -> None:
        data = encode_patches(patches)
        if data:
            self._write(data)

    def hide_cursor(self) -> None:
        self._write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._write(_SHOW_CURSOR)

    def set_cursor(self, x: int, y: int) -> None:
        self._write(_move_to(x, y))

    def clear(self) -> None:
        self._write(_CLEAR_SCREEN)

    def flush(self) -> None:
        try:
            self._stream.flush()
        except OSError:
            pass

    def _write(self, data: str) -> None:
        try:
            self._stream.write(data)
        except OSError:
            pass

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                pass
