"""Colors, text modifiers and the ``Style`` value that combines them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

__all__ = [
    "Color",
    "Indexed",
    "Rgb",
    "ColorValue",
    "parse_color",
    "Modifier",
    "Style",
]


class Color(enum.Enum):
    """The terminal's default color plus the 16 named ANSI colors."""

    RESET = "reset"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    GRAY = "gray"
    DARK_GRAY = "dark_gray"
    LIGHT_RED = "light_red"
    LIGHT_GREEN = "light_green"
    LIGHT_YELLOW = "light_yellow"
    LIGHT_BLUE = "light_blue"
    LIGHT_MAGENTA = "light_magenta"
    LIGHT_CYAN = "light_cyan"
    WHITE = "white"


@dataclass(frozen=True)
class Indexed:
    """A color from the 256-color palette."""

    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 255:
            raise ValueError(f"Color index must be in 0..255, got {self.index}")


@dataclass(frozen=True)
class Rgb:
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"RGB channel must be in 0..255, got {channel}")


ColorValue = Union[Color, Indexed, Rgb]

_COLOR_ALIASES = {
    "grey": Color.GRAY,
    "dark_grey": Color.DARK_GRAY,
    "silver": Color.GRAY,
    "bright_red": Color.LIGHT_RED,
    "bright_green": Color.LIGHT_GREEN,
    "bright_yellow": Color.LIGHT_YELLOW,
    "bright_blue": Color.LIGHT_BLUE,
    "bright_magenta": Color.LIGHT_MAGENTA,
    "bright_cyan": Color.LIGHT_CYAN,
    "bright_white": Color.WHITE,
}


def parse_color(text: str) -> ColorValue:
    """Parse a color name, ``#rrggbb`` string or palette index.

    Names ignore case and accept ``-``, ``_`` or spaces as separators
    (``"Light Red"``, ``"light-red"``).  Raises ``ValueError`` for anything
    else.
    """
    value = text.strip()
    if value.startswith("#") and len(value) == 7:
        try:
            return Rgb(int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16))
        except ValueError:
            raise ValueError(f"Invalid color: {text!r}") from None
    if value.isdigit():
        return Indexed(int(value))

    key = value.lower().replace("-", "_").replace(" ", "_")
    if key in _COLOR_ALIASES:
        return _COLOR_ALIASES[key]
    try:
        return Color(key)
    except ValueError:
        raise ValueError(f"Invalid color: {text!r}") from None


class Modifier(enum.IntFlag):
    """Text attributes; combine with ``|``."""

    NONE = 0
    BOLD = 1 << 0
    DIM = 1 << 1
    ITALIC = 1 << 2
    UNDERLINED = 1 << 3
    SLOW_BLINK = 1 << 4
    RAPID_BLINK = 1 << 5
    REVERSED = 1 << 6
    HIDDEN = 1 << 7
    CROSSED_OUT = 1 << 8


_ALL_MODIFIERS = Modifier(0x1FF)


@dataclass(frozen=True)
class Style:
    """A partial set of cell attributes.

    ``None`` colors leave the target unchanged when the style is applied.
    ``add_modifier`` is switched on and ``sub_modifier`` switched off.
    """

    fg: Optional[ColorValue] = None
    bg: Optional[ColorValue] = None
    add_modifier: Modifier = Modifier.NONE
    sub_modifier: Modifier = Modifier.NONE

    @classmethod
    def reset(cls) -> Style:
        """A style that restores every attribute to the terminal default."""
        return cls(
            fg=Color.RESET,
            bg=Color.RESET,
            add_modifier=Modifier.NONE,
            sub_modifier=_ALL_MODIFIERS,
        )

    def patch(self, other: Style) -> Style:
        """Return this style with *other* layered on top."""
        add = (self.add_modifier & ~other.sub_modifier) | other.add_modifier
        sub = (self.sub_modifier & ~other.add_modifier) | other.sub_modifier
        return Style(
            fg=other.fg if other.fg is not None else self.fg,
            bg=other.bg if other.bg is not None else self.bg,
            add_modifier=Modifier(add),
            sub_modifier=Modifier(sub),
        )
