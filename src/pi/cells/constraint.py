"""Sizing policies for one segment of a layout split.

``Constraint`` is a closed family of frozen dataclasses: ``Length``,
``Percentage``, ``Ratio``, ``Min``, ``Max`` and ``Fill``.  Together with a
``Direction``, a ``Flex`` mode and a spacing value they are the whole input
of the layout solver.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Union

__all__ = [
    "Constraint",
    "Length",
    "Percentage",
    "Ratio",
    "Min",
    "Max",
    "Fill",
    "ConstraintLike",
    "coerce_constraint",
    "coerce_constraints",
    "Direction",
    "Flex",
    "round_half_up",
]


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division of two non-negative ints rounding ``.5`` upward."""
    return (2 * numerator + denominator) // (2 * denominator)


class Direction(enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Flex(enum.Enum):
    """How leftover space is distributed once constraints are satisfied.

    * ``LEGACY`` grows the segments themselves to consume the slack.
    * ``START`` / ``END`` / ``CENTER`` pack the segments and leave the
      slack after, before, or around them.
    * ``SPACE_BETWEEN`` turns the slack into extra gaps between segments,
      keeping the first and last flush with the edges.
    * ``SPACE_AROUND`` adds half-size gaps at both edges and full-size gaps
      between segments.
    """

    LEGACY = "legacy"
    START = "start"
    END = "end"
    CENTER = "center"
    SPACE_BETWEEN = "space_between"
    SPACE_AROUND = "space_around"


# ---------------------------------------------------------------------------
# Constraint family
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Constraint:
    """Base class of every constraint; never instantiated directly."""

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ``ValueError`` if the constraint can never be satisfied."""
        for name, value in vars(self).items():
            if value < 0:
                raise ValueError(
                    f"{type(self).__name__} {name} must not be negative, got {value}"
                )

    def apply(self, length: int) -> int:
        """Return the size this constraint alone would take out of *length*."""
        raise NotImplementedError

    def __str__(self) -> str:
        values = ", ".join(str(v) for v in vars(self).values())
        return f"{type(self).__name__}({values})"

    # -- list constructors ---------------------------------------------------

    @staticmethod
    def from_lengths(values: Iterable[int]) -> list[Constraint]:
        return [Length(v) for v in values]

    @staticmethod
    def from_percentages(values: Iterable[int]) -> list[Constraint]:
        return [Percentage(v) for v in values]

    @staticmethod
    def from_ratios(values: Iterable[tuple[int, int]]) -> list[Constraint]:
        return [Ratio(n, d) for n, d in values]

    @staticmethod
    def from_mins(values: Iterable[int]) -> list[Constraint]:
        return [Min(v) for v in values]

    @staticmethod
    def from_maxes(values: Iterable[int]) -> list[Constraint]:
        return [Max(v) for v in values]

    @staticmethod
    def from_fills(values: Iterable[int]) -> list[Constraint]:
        return [Fill(v) for v in values]


@dataclass(frozen=True)
class Length(Constraint):
    """An exact number of cells."""

    value: int

    def apply(self, length: int) -> int:
        return min(self.value, length)


@dataclass(frozen=True)
class Percentage(Constraint):
    """A share of the available length, ``0..=100``."""

    value: int

    def validate(self) -> None:
        super().validate()
        if self.value > 100:
            raise ValueError(
                f"Percentage must be between 0 and 100, got {self.value}"
            )

    def apply(self, length: int) -> int:
        return min(round_half_up(length * self.value, 100), length)


@dataclass(frozen=True)
class Ratio(Constraint):
    """``numerator / denominator`` of the available length.

    A zero denominator resolves to zero cells.
    """

    numerator: int
    denominator: int

    def apply(self, length: int) -> int:
        if self.denominator == 0:
            return 0
        return min(round_half_up(length * self.numerator, self.denominator), length)


@dataclass(frozen=True)
class Min(Constraint):
    """At least ``value`` cells; grows into free space when nothing fills it."""

    value: int

    def apply(self, length: int) -> int:
        return max(self.value, length)


@dataclass(frozen=True)
class Max(Constraint):
    """At most ``value`` cells; prefers exactly ``value``."""

    value: int

    def apply(self, length: int) -> int:
        return min(self.value, length)


@dataclass(frozen=True)
class Fill(Constraint):
    """Takes leftover space proportionally to ``weight``."""

    weight: int = 1

    def apply(self, length: int) -> int:
        return length


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

ConstraintLike = Union[Constraint, int]


def coerce_constraint(value: ConstraintLike) -> Constraint:
    """Turn *value* into a validated ``Constraint``.

    Bare ints become ``Length``.  Existing constraints are validated again
    so an out-of-range percentage is rejected on every path that accepts
    constraints, not only at construction.
    """
    if isinstance(value, bool):
        raise TypeError(f"Expected a Constraint or int, got {value!r}")
    if isinstance(value, int):
        return Length(value)
    if not isinstance(value, Constraint) or type(value) is Constraint:
        raise TypeError(f"Expected a Constraint or int, got {value!r}")
    value.validate()
    return value


def coerce_constraints(values: Iterable[ConstraintLike]) -> tuple[Constraint, ...]:
    return tuple(coerce_constraint(v) for v in values)
