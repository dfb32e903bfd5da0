"""
project: Endless Dungeon
module: main.py
License: MIT

HTTP routes: the game page plus small JSON endpoints for layout, client
configuration and throwaway maze previews. Game play itself runs over
Socket.IO (see websockets/game.py).
"""

import functools
import math

from flask import Blueprint, current_app, jsonify, render_template, request

from endless_dungeon.logging_utils import get_logger
from endless_dungeon.maze import (
    COMPACT,
    STANDARD,
    MazeError,
    PlacementRenderer,
    Viewport,
    build,
    generate_maze,
    resolve_layout,
)
from endless_dungeon.services.input_service import KEY_DIRECTIONS

bp = Blueprint("main", __name__)
_log = get_logger("http")

PREVIEW_MAX_PIXELS = 4096


@bp.route("/")
def index():
    return render_template("index.html")


@bp.route("/api/maze/layout")
def maze_layout():
    """
    Resolve layout, canvas and tile size for a browser viewport.
    Query: container_width, container_height, window_width, window_height (numbers)
    Response: { layout, canvas: {width, height}, tile_size, cols, rows }
    """
    try:
        viewport = Viewport(
            float(request.args["container_width"]),
            float(request.args["container_height"]),
            float(request.args.get("window_width", request.args["container_width"])),
            float(request.args.get("window_height", request.args["container_height"])),
        )
    except (KeyError, ValueError):
        return jsonify({"error": "container_width and container_height must be numbers"}), 400
    if not all(math.isfinite(v) for v in viewport):
        return jsonify({"error": "viewport dimensions must be finite numbers"}), 400
    layout = resolve_layout(viewport)
    return jsonify(
        {
            "layout": layout.mode,
            "canvas": {"width": layout.canvas_width, "height": layout.canvas_height},
            "tile_size": layout.tile_size,
            "cols": layout.cols,
            "rows": layout.rows,
        }
    )


@bp.route("/api/maze/config")
def maze_config():
    """Client-side tuning values. Response: { swipe_min_distance, goal_delay, resize_debounce, keys }"""
    cfg = current_app.config
    return jsonify(
        {
            "swipe_min_distance": cfg["MAZE_SWIPE_MIN_DISTANCE"],
            "goal_delay": cfg["MAZE_GOAL_DELAY"],
            "resize_debounce": cfg["MAZE_RESIZE_DEBOUNCE"],
            "keys": KEY_DIRECTIONS,
        }
    )


@bp.route("/api/maze/preview", methods=["POST"])
def maze_preview():
    """Build a throwaway maze.

    Body JSON: { "width": int, "height": int, "layout": "standard"|"compact", "seed": int|null }
    Response: the same frame payload the game socket emits.
    """
    data = request.get_json(silent=True) or {}
    width, height = data.get("width"), data.get("height")
    layout = data.get("layout", STANDARD)
    seed = data.get("seed")
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (width, height)):
        return jsonify({"error": "width and height must be integers", "field": "width"}), 400
    if not (0 < width <= PREVIEW_MAX_PIXELS and 0 < height <= PREVIEW_MAX_PIXELS):
        return jsonify({"error": f"width and height must be within 1..{PREVIEW_MAX_PIXELS}", "field": "width"}), 400
    if layout not in (STANDARD, COMPACT):
        return jsonify({"error": "unknown layout", "field": "layout"}), 400
    if seed is not None and not isinstance(seed, int):
        return jsonify({"error": "seed must be an integer", "field": "seed"}), 400
    try:
        session = build(
            width,
            height,
            layout,
            generator=functools.partial(generate_maze, seed=seed),
            max_attempts=current_app.config["MAZE_MAX_BUILD_ATTEMPTS"],
        )
    except MazeError as exc:
        _log.error(event="preview_failed", error=type(exc).__name__)
        return jsonify({"error": "maze generation failed"}), 503
    renderer = PlacementRenderer(current_app.config["MAZE_ASSET_DIR"])
    renderer.materialize(session)
    payload = renderer.frame(session)
    payload["start"] = list(session.start)
    payload["goal"] = list(session.goal)
    return jsonify(payload)

