"""Terminal text utilities: grapheme segmentation and width measurement.

Cells hold one grapheme cluster each.  A grapheme is either narrow (one
column), wide (two columns) or zero-width; nothing finer is modelled.
"""

from __future__ import annotations

import unicodedata
from typing import Iterator

import grapheme
import wcwidth as _wcwidth

__all__ = [
    "graphemes",
    "grapheme_width",
    "visible_width",
    "is_whitespace_char",
]


def graphemes(text: str) -> Iterator[str]:
    """Iterate over the grapheme clusters of *text*."""
    return grapheme.graphemes(text)


# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Control characters, combining marks and format characters -> 0
    2. Emoji sequences (VS16, ZWJ, skin tones, regional indicators) -> 2
    3. Otherwise delegate to wcwidth for the first codepoint, capped at 2.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return min(max(_wcwidth.wcwidth(g), 0), 2)

    for ch in g:
        cp = ord(ch)
        if cp == 0xFE0F:  # VS16
            return 2
        if cp == 0x200D:  # ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first = g[0]
    first_cp = ord(first)
    if first_cp >= 0x1F000:
        return 2

    cat = unicodedata.category(first)
    if cat.startswith("M") or cat == "Cf":
        return 0

    return min(max(_wcwidth.wcwidth(first), 0), 2)


def visible_width(text: str) -> int:
    """Calculate the number of terminal columns *text* occupies.

    Uses a fast path for printable ASCII and caches everything else.
    """
    if not text:
        return 0

    if text.isascii() and text.isprintable():
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(text):
        total += grapheme_width(g)
    return _cache_width(text, total)


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v")
