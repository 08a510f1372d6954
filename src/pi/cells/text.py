"""Styled text: ``Span`` (one style), ``Line`` (spans on one row), ``Text``."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union

from pi.cells.style import Style
from pi.cells.utils import visible_width

__all__ = ["Alignment", "Span", "Line", "Text", "LineLike"]


class Alignment(enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class Span:
    content: str
    style: Style = field(default_factory=Style)

    def width(self) -> int:
        return visible_width(self.content)


@dataclass(frozen=True)
class Line:
    """A row of spans with an optional base style and alignment.

    ``alignment=None`` defers to whatever the rendering widget uses.
    """

    spans: tuple[Span, ...] = ()
    style: Style = field(default_factory=Style)
    alignment: Alignment | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "spans", tuple(self.spans))

    @classmethod
    def from_str(
        cls,
        content: str,
        style: Style | None = None,
        alignment: Alignment | None = None,
    ) -> Line:
        return cls((Span(content),), style or Style(), alignment)

    def width(self) -> int:
        return sum(span.width() for span in self.spans)

    def __str__(self) -> str:
        return "".join(span.content for span in self.spans)


LineLike = Union[Line, Span, str]


def _to_line(value: LineLike) -> Line:
    if isinstance(value, Line):
        return value
    if isinstance(value, Span):
        return Line((value,))
    return Line.from_str(value)


@dataclass(frozen=True)
class Text:
    """Several lines of styled text."""

    lines: tuple[Line, ...] = ()
    style: Style = field(default_factory=Style)
    alignment: Alignment | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(_to_line(line) for line in self.lines))

    @classmethod
    def raw(cls, content: str, style: Style | None = None) -> Text:
        """Build a ``Text`` from *content*, one ``Line`` per ``\\n``-separated row."""
        return cls(
            tuple(Line.from_str(row) for row in content.split("\n")),
            style or Style(),
        )

    @classmethod
    def from_lines(cls, lines: Iterable[LineLike]) -> Text:
        return cls(tuple(_to_line(line) for line in lines))

    def width(self) -> int:
        return max((line.width() for line in self.lines), default=0)

    def height(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    def __str__(self) -> str:
        return "\n".join(str(line) for line in self.lines)
