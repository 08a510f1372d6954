"""Constraint-based layout solver.

``Layout`` splits a ``Rect`` along one axis into one sub-rect per
constraint.  The solver works in integer cells and is fully deterministic:

1.  Spacing between segments is reserved first and never shrunk.
2.  Each constraint claims its preferred size: ``Length`` and ``Min`` their
    value, ``Max`` its value, ``Percentage``/``Ratio`` a rounded (half-up)
    share of the space left after spacing, ``Fill`` nothing.
3.  Space left over goes to ``Fill`` segments by weight, or, when there is
    no ``Fill``, to ``Min`` segments in equal parts.  When the claims do not
    fit, segments are shrunk group by group in reverse priority order:
    ``Fill``, ``Max``, ``Min``, ``Ratio``/``Percentage`` and ``Length`` last.
4.  What is still left is slack, placed according to the ``Flex`` mode.

Proportional splits use largest-remainder rounding with ties going to the
earlier segment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from pi.cells.constraint import (
    Constraint,
    ConstraintLike,
    Direction,
    Fill,
    Flex,
    Length,
    Max,
    Min,
    Percentage,
    Ratio,
    coerce_constraints,
)
from pi.cells.geometry import Margin, Rect, clamp_u16

logger = logging.getLogger(__name__)

__all__ = [
    "Layout",
    "solve",
    "configure_cache",
    "clear_cache",
]

# Constraint groups in the order they give up space when the area is too small
_SHRINK_ORDER: tuple[tuple[type[Constraint], ...], ...] = (
    (Fill,),
    (Max,),
    (Min,),
    (Ratio, Percentage),
    (Length,),
)

# ---------------------------------------------------------------------------
# Result cache (capped; cleared wholesale when full)
# ---------------------------------------------------------------------------

_DEFAULT_CACHE_MAX = 512

_layout_cache: dict[tuple, tuple[Rect, ...]] = {}
_cache_max = _DEFAULT_CACHE_MAX


def configure_cache(capacity: int) -> None:
    """Set the layout cache capacity; ``0`` disables caching.

    Cached layouts are dropped only when the capacity actually changes.
    """
    global _cache_max
    capacity = max(0, capacity)
    if capacity == _cache_max:
        return
    _cache_max = capacity
    _layout_cache.clear()


def clear_cache() -> None:
    _layout_cache.clear()


def _cache_result(key: tuple, value: tuple[Rect, ...]) -> tuple[Rect, ...]:
    if _cache_max == 0:
        return value
    if len(_layout_cache) >= _cache_max:
        logger.debug("layout cache full (%d entries), clearing", len(_layout_cache))
        _layout_cache.clear()
    _layout_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Integer distribution helpers
# ---------------------------------------------------------------------------


def _distribute(amount: int, weights: Sequence[int]) -> list[int]:
    """Split *amount* proportionally to *weights* (largest remainder).

    Leftover units go to the largest fractional parts, ties to the earlier
    index.  Zero weights receive nothing.
    """
    total = sum(weights)
    if amount <= 0 or total <= 0:
        return [0] * len(weights)
    shares = [amount * w // total for w in weights]
    remainders = [amount * w % total for w in weights]
    left = amount - sum(shares)
    order = sorted(range(len(weights)), key=lambda i: (-remainders[i], i))
    for i in order[:left]:
        shares[i] += 1
    return shares


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------


def _claim(constraint: Constraint, available: int) -> int:
    """The preferred size of *constraint* before any distribution."""
    if isinstance(constraint, (Length, Min, Max)):
        return constraint.value
    if isinstance(constraint, (Percentage, Ratio)):
        return constraint.apply(available)
    return 0


def _resolve_sizes(
    constraints: Sequence[Constraint],
    available: int,
    flex: Flex,
) -> list[int]:
    sizes = [_claim(c, available) for c in constraints]
    claimed = sum(sizes)

    if claimed > available:
        excess = claimed - available
        for group in _SHRINK_ORDER:
            members = [i for i, c in enumerate(constraints) if isinstance(c, group)]
            group_total = sum(sizes[i] for i in members)
            cut = min(excess, group_total)
            for i, share in zip(members, _distribute(cut, [sizes[i] for i in members])):
                sizes[i] -= share
            excess -= cut
            if excess == 0:
                break
        return sizes

    remaining = available - claimed

    fills = [i for i, c in enumerate(constraints) if isinstance(c, Fill)]
    fill_weights = [constraints[i].weight for i in fills]  # type: ignore[attr-defined]
    if sum(fill_weights) > 0:
        for i, share in zip(fills, _distribute(remaining, fill_weights)):
            sizes[i] += share
        remaining = 0
    else:
        mins = [i for i, c in enumerate(constraints) if isinstance(c, Min)]
        if mins:
            for i, share in zip(mins, _distribute(remaining, [1] * len(mins))):
                sizes[i] += share
            remaining = 0

    if flex is Flex.LEGACY and remaining > 0:
        growable = [i for i, c in enumerate(constraints) if not isinstance(c, Max)]
        if growable:
            weights = [sizes[i] for i in growable]
            if sum(weights) == 0:
                weights = [1] * len(growable)
            for i, grant in zip(growable, _distribute(remaining, weights)):
                sizes[i] += grant

    return sizes


def _gap_extras(flex: Flex, slack: int, count: int) -> tuple[int, list[int]]:
    """Return ``(leading, between)``: slack placed before and between segments."""
    between = [0] * max(0, count - 1)
    if slack <= 0 or count == 0:
        return 0, between
    if flex is Flex.END:
        return slack, between
    if flex is Flex.CENTER:
        return slack // 2, between
    if flex is Flex.SPACE_BETWEEN and count > 1:
        return 0, _distribute(slack, [1] * (count - 1))
    if flex is Flex.SPACE_AROUND:
        extras = _distribute(slack, [1] + [2] * (count - 1) + [1])
        return extras[0], extras[1:-1]
    # START, LEGACY and a single SPACE_BETWEEN segment pack to the start
    return 0, between


def solve(
    area: Rect,
    direction: Direction,
    constraints: Iterable[ConstraintLike],
    flex: Flex = Flex.START,
    spacing: int = 0,
) -> list[Rect]:
    """Partition *area* along *direction* according to *constraints*.

    Returns exactly one rect per constraint, in declaration order.  Every
    rect spans the full cross-axis extent of *area*.
    """
    resolved = coerce_constraints(constraints)
    count = len(resolved)
    if count == 0:
        return []
    spacing = clamp_u16(spacing)

    horizontal = direction is Direction.HORIZONTAL
    start = area.x if horizontal else area.y
    length = area.width if horizontal else area.height
    end = start + length

    available = max(0, length - spacing * (count - 1))
    sizes = _resolve_sizes(resolved, available, flex)
    slack = max(0, available - sum(sizes))
    leading, between = _gap_extras(flex, slack, count)

    rects: list[Rect] = []
    position = start + leading
    for index, size in enumerate(sizes):
        origin = min(position, end)
        size = min(size, end - origin)
        if horizontal:
            rects.append(Rect(origin, area.y, size, area.height))
        else:
            rects.append(Rect(area.x, origin, area.width, size))
        position += size + spacing
        if index < len(between):
            position += between[index]
    return rects


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Layout:
    """A reusable split description.

    Configure with named fields; every constraint is validated when the
    layout is built::

        Layout(Direction.VERTICAL, [Length(1), Min(0)], spacing=1)
    """

    direction: Direction
    constraints: tuple[Constraint, ...]
    margin: Margin = field(default_factory=Margin)
    flex: Flex = Flex.START
    spacing: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", coerce_constraints(self.constraints))
        object.__setattr__(self, "spacing", clamp_u16(self.spacing))

    @classmethod
    def horizontal(
        cls,
        constraints: Iterable[ConstraintLike],
        margin: Margin | None = None,
        flex: Flex = Flex.START,
        spacing: int = 0,
    ) -> Layout:
        return cls(
            Direction.HORIZONTAL,
            tuple(constraints),  # type: ignore[arg-type]
            margin or Margin(),
            flex,
            spacing,
        )

    @classmethod
    def vertical(
        cls,
        constraints: Iterable[ConstraintLike],
        margin: Margin | None = None,
        flex: Flex = Flex.START,
        spacing: int = 0,
    ) -> Layout:
        return cls(
            Direction.VERTICAL,
            tuple(constraints),  # type: ignore[arg-type]
            margin or Margin(),
            flex,
            spacing,
        )

    def split(self, area: Rect) -> list[Rect]:
        """Split *area* into one rect per constraint."""
        key = (area, self.direction, self.constraints, self.margin, self.flex, self.spacing)
        cached = _layout_cache.get(key)
        if cached is None:
            inner = area.inner(self.margin)
            cached = _cache_result(
                key,
                tuple(solve(inner, self.direction, self.constraints, self.flex, self.spacing)),
            )
        return list(cached)

    def split_n(self, area: Rect, count: int) -> list[Rect]:
        """Split *area*, requiring exactly *count* constraints."""
        if count != len(self.constraints):
            raise ValueError(
                f"invalid number of rects: layout has {len(self.constraints)} "
                f"constraints, {count} requested"
            )
        return self.split(area)
