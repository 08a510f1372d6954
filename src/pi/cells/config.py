"""Render settings, read from ``PI_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

_DEFAULT_LAYOUT_CACHE = 512


def _default_debug_dir() -> str:
    return str(Path.home() / ".pi" / "cells-debug")


@dataclass
class RenderSettings:
    """Knobs for ``Terminal`` and ``ProcessBackend``."""

    show_hardware_cursor: bool = False
    alternate_screen: bool = True
    write_log_path: str = ""
    debug_dir: str = field(default_factory=_default_debug_dir)
    layout_cache_size: int = _DEFAULT_LAYOUT_CACHE


def _flag(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(env: Mapping[str, str] | None = None) -> RenderSettings:
    """Build ``RenderSettings`` from *env* (``os.environ`` by default).

    ``PI_HARDWARE_CURSOR``      show the cursor while drawing (``1`` enables)
    ``PI_CELLS_ALT_SCREEN``     use the alternate screen (default on)
    ``PI_CELLS_WRITE_LOG``      append every backend write to this file
    ``PI_CELLS_DEBUG_DIR``      where ``write_debug_dump`` puts its files
    ``PI_CELLS_LAYOUT_CACHE``   layout cache capacity, ``0`` disables it

    A malformed cache size falls back to the default.
    """
    if env is None:
        env = os.environ

    cache_size = _DEFAULT_LAYOUT_CACHE
    raw_cache = env.get("PI_CELLS_LAYOUT_CACHE")
    if raw_cache:
        try:
            cache_size = max(0, int(raw_cache))
        except ValueError:
            logger.warning(
                "ignoring invalid PI_CELLS_LAYOUT_CACHE=%r, using %d",
                raw_cache,
                _DEFAULT_LAYOUT_CACHE,
            )

    return RenderSettings(
        show_hardware_cursor=env.get("PI_HARDWARE_CURSOR") == "1",
        alternate_screen=_flag(env.get("PI_CELLS_ALT_SCREEN"), True),
        write_log_path=env.get("PI_CELLS_WRITE_LOG", ""),
        debug_dir=env.get("PI_CELLS_DEBUG_DIR") or _default_debug_dir(),
        layout_cache_size=cache_size,
    )
