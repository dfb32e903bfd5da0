import pytest

from endless_dungeon.maze import (
    COMPACT,
    STANDARD,
    Viewport,
    classify_layout,
    compute_canvas_size,
    compute_tile_size,
    maze_dimensions,
    needs_rebuild,
    resolve_layout,
)
from endless_dungeon.maze.config import PROFILES, get_profile


def test_standard_desktop_canvas_gets_30px_tiles():
    assert compute_tile_size(1050, 704, STANDARD) == 30
    assert maze_dimensions(1050, 704, 30, STANDARD) == (35, 23)


@pytest.mark.parametrize(
    "width,height,mode,expected",
    [
        (0, 0, STANDARD, 16),
        (-100, -50, STANDARD, 16),
        (10_000, 10_000, STANDARD, 48),
        (0, 0, COMPACT, 20),
        (300, 260, COMPACT, 20),
        (900, 900, COMPACT, 40),
        (390, 300, COMPACT, 23),
    ],
)
def test_tile_size_examples(width, height, mode, expected):
    assert compute_tile_size(width, height, mode) == expected


@pytest.mark.parametrize("mode", [STANDARD, COMPACT])
def test_tile_size_always_within_layout_bounds(mode):
    profile = PROFILES[mode]
    for width in range(0, 3000, 131):
        for height in range(0, 2000, 97):
            size = compute_tile_size(width, height, mode)
            assert profile.min_tile <= size <= profile.max_tile


NAN = float("nan")
INF = float("inf")


@pytest.mark.parametrize(
    "width,height,mode,expected",
    [
        (INF, INF, STANDARD, 48),
        (INF, 700, STANDARD, 30),
        (NAN, 700, STANDARD, 16),
        (NAN, NAN, COMPACT, 20),
        (-INF, -INF, STANDARD, 16),
        (INF, INF, COMPACT, 40),
    ],
)
def test_tile_size_non_finite_viewport(width, height, mode, expected):
    assert compute_tile_size(width, height, mode) == expected


def test_canvas_and_dimensions_tolerate_non_finite():
    assert compute_canvas_size(NAN, NAN, STANDARD) == (336, 240)
    assert compute_canvas_size(INF, INF, STANDARD) == (1050, 703)
    width, height = compute_canvas_size(INF, INF, COMPACT)
    assert 0 < height < width <= 100_000
    assert maze_dimensions(NAN, INF, 16, STANDARD) == (21, 6249)


def test_resolve_layout_with_nan_window():
    layout = resolve_layout(Viewport(NAN, 700, NAN, NAN))
    assert layout.mode == STANDARD
    assert (layout.canvas_width, layout.canvas_height) == (336, 240)
    assert layout.tile_size == 16


def test_fractional_viewport_is_floored():
    assert compute_tile_size(1050.9, 704.7, STANDARD) == 30
    assert isinstance(compute_tile_size(1050.9, 704.7, STANDARD), int)


def test_unknown_layout_mode_rejected():
    with pytest.raises(ValueError):
        compute_tile_size(800, 600, "widescreen")
    with pytest.raises(ValueError):
        get_profile("widescreen")


@pytest.mark.parametrize(
    "window,expected",
    [
        ((390, 844), COMPACT),
        ((767, 768), COMPACT),
        ((767, 767), STANDARD),
        ((768, 1024), STANDARD),
        ((700, 600), STANDARD),
        ((1920, 1080), STANDARD),
    ],
)
def test_classify_layout(window, expected):
    assert classify_layout(*window) == expected


def test_standard_canvas_capped_at_max_width():
    assert compute_canvas_size(1080, 704, STANDARD) == (1050, 703)


def test_standard_canvas_short_container_falls_back_to_height():
    # 1050 * 0.67 overflows a 500px container; width follows height * 1.5
    assert compute_canvas_size(1200, 500, STANDARD) == (750, 500)


def test_standard_canvas_never_below_minimum_maze():
    assert compute_canvas_size(200, 100, STANDARD) == (336, 240)


def test_compact_canvas_square_ish():
    assert compute_canvas_size(360, 640, COMPACT) == (360, 306)
    # height share limits the side
    assert compute_canvas_size(500, 500, COMPACT) == (300, 255)


def test_compact_canvas_degenerate_container():
    assert compute_canvas_size(0, 0, COMPACT) == (1, 1)


def test_maze_dimensions_are_odd_and_respect_minimums():
    for mode in (STANDARD, COMPACT):
        profile = PROFILES[mode]
        for width in range(0, 2500, 113):
            for height in range(0, 1500, 89):
                tile = compute_tile_size(width, height, mode)
                cols, rows = maze_dimensions(width, height, tile, mode)
                assert cols % 2 == 1 and rows % 2 == 1
                assert cols >= profile.min_cols and rows >= profile.min_rows


def test_maze_dimensions_small_viewport_uses_minimum():
    assert maze_dimensions(100, 100, 16, STANDARD) == (21, 15)
    assert maze_dimensions(336, 240, 16, STANDARD) == (21, 15)


@pytest.mark.parametrize(
    "current,new,expected",
    [
        (30, 30, False),
        (30, 34, False),
        (30, 26, False),
        (30, 35, True),
        (30, 25, True),
    ],
)
def test_needs_rebuild_threshold(current, new, expected):
    assert needs_rebuild(current, new) is expected


def test_needs_rebuild_custom_threshold():
    assert needs_rebuild(30, 32, threshold=1) is True
    assert needs_rebuild(30, 40, threshold=10) is False


def test_resolve_layout_standard():
    layout = resolve_layout(Viewport(1080, 704, 1280, 904))
    assert layout.mode == STANDARD
    assert (layout.canvas_width, layout.canvas_height) == (1050, 703)
    assert layout.tile_size == 30
    assert (layout.cols, layout.rows) == (35, 23)


def test_resolve_layout_compact():
    layout = resolve_layout(Viewport(360, 640, 390, 844))
    assert layout.mode == COMPACT
    assert (layout.canvas_width, layout.canvas_height) == (360, 306)
    assert layout.tile_size == 23
    assert (layout.cols, layout.rows) == (15, 13)
