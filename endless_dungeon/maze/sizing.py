"""Responsive layout helpers: layout classification, canvas framing, tile size.

All functions are pure. Pixel inputs may be ints or floats (browser metrics are
often fractional); outputs are always ints.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Tuple

from .config import (
    COMPACT,
    COMPACT_ASPECT,
    COMPACT_HEIGHT_SHARE,
    FALLBACK_ASPECT,
    MAX_CANVAS_WIDTH,
    MAX_VIEWPORT_PIXELS,
    MOBILE_BREAKPOINT,
    REBUILD_THRESHOLD,
    STANDARD,
    STANDARD_ASPECT,
    get_profile,
)


class Viewport(NamedTuple):
    """What the browser reports: the free area for the canvas and the window size."""

    container_width: float
    container_height: float
    window_width: float
    window_height: float


class Layout(NamedTuple):
    mode: str
    canvas_width: int
    canvas_height: int
    tile_size: int
    cols: int
    rows: int


def _pixels(value: float) -> float:
    """NaN counts as zero; infinities and huge values are capped."""
    if math.isnan(value):
        return 0
    return max(-MAX_VIEWPORT_PIXELS, min(value, MAX_VIEWPORT_PIXELS))


def classify_layout(window_width: float, window_height: float) -> str:
    if window_width < MOBILE_BREAKPOINT and window_height > window_width:
        return COMPACT
    return STANDARD


def compute_tile_size(viewport_width: float, viewport_height: float, layout_mode: str) -> int:
    """Largest tile that fits the target column/row count, clamped per layout.

    Degenerate sizes (zero, negative, NaN) fall through to the lower bound.
    """
    profile = get_profile(layout_mode)
    viewport_width, viewport_height = _pixels(viewport_width), _pixels(viewport_height)
    preferred = min(
        math.floor(viewport_width / profile.target_cols),
        math.floor(viewport_height / profile.target_rows),
    )
    return max(profile.min_tile, min(preferred, profile.max_tile))


def compute_canvas_size(container_width: float, container_height: float, layout_mode: str) -> Tuple[int, int]:
    profile = get_profile(layout_mode)
    container_width, container_height = _pixels(container_width), _pixels(container_height)
    if layout_mode == COMPACT:
        side = min(container_width, container_height * COMPACT_HEIGHT_SHARE)
        width, height = math.floor(side), math.floor(side * COMPACT_ASPECT)
    else:
        width = min(container_width, MAX_CANVAS_WIDTH)
        height = math.floor(width * STANDARD_ASPECT)
        if height > container_height:
            height = container_height
            width = math.floor(height * FALLBACK_ASPECT)
        # never smaller than the minimum maze at the smallest tile
        width = max(width, profile.min_cols * profile.min_tile)
        height = max(height, profile.min_rows * profile.min_tile)
    return max(1, int(width)), max(1, int(height))


def _odd_at_most(count: int) -> int:
    return 2 * math.floor((count - 1) / 2) + 1


def maze_dimensions(viewport_width: float, viewport_height: float, tile_size: int, layout_mode: str) -> Tuple[int, int]:
    """Odd (cols, rows) that fit the viewport, never below the layout minimum."""
    profile = get_profile(layout_mode)
    viewport_width, viewport_height = _pixels(viewport_width), _pixels(viewport_height)
    max_cols = math.floor(viewport_width / tile_size)
    max_rows = math.floor(viewport_height / tile_size)
    return (
        max(profile.min_cols, _odd_at_most(max_cols)),
        max(profile.min_rows, _odd_at_most(max_rows)),
    )


def needs_rebuild(current_tile_size: int, new_tile_size: int, threshold: int = REBUILD_THRESHOLD) -> bool:
    return abs(new_tile_size - current_tile_size) > threshold


def resolve_layout(viewport: Viewport) -> Layout:
    """Full sizing pass for a browser viewport."""
    mode = classify_layout(viewport.window_width, viewport.window_height)
    canvas_width, canvas_height = compute_canvas_size(viewport.container_width, viewport.container_height, mode)
    tile_size = compute_tile_size(canvas_width, canvas_height, mode)
    cols, rows = maze_dimensions(canvas_width, canvas_height, tile_size, mode)
    return Layout(mode, canvas_width, canvas_height, tile_size, cols, rows)


__all__ = [
    "Viewport",
    "Layout",
    "classify_layout",
    "compute_tile_size",
    "compute_canvas_size",
    "maze_dimensions",
    "needs_rebuild",
    "resolve_layout",
]
