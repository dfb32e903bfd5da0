"""Public maze package interface."""

from .builder import Placement, Session, build
from .config import COMPACT, STANDARD
from .errors import AssetLoadFailure, GenerationFailure, MazeError, NoFloorTile, NoGoalTile
from .generator import GeneratorConfig, MazeGrid, generate_maze
from .movement import DIRECTIONS, MoveResult, step
from .render import PlacementRenderer, to_ascii
from .sizing import (
    Viewport,
    classify_layout,
    compute_canvas_size,
    compute_tile_size,
    maze_dimensions,
    needs_rebuild,
    resolve_layout,
)
from .tiles import AVATAR, DOOR, FINISH, FLOOR, WALKABLE, WALL, Tile  # noqa: F401

__all__ = [
    "build",
    "step",
    "Session",
    "Placement",
    "MoveResult",
    "DIRECTIONS",
    "COMPACT",
    "STANDARD",
    "MazeError",
    "GenerationFailure",
    "NoFloorTile",
    "NoGoalTile",
    "AssetLoadFailure",
    "GeneratorConfig",
    "MazeGrid",
    "generate_maze",
    "PlacementRenderer",
    "to_ascii",
    "Viewport",
    "classify_layout",
    "compute_canvas_size",
    "compute_tile_size",
    "maze_dimensions",
    "needs_rebuild",
    "resolve_layout",
    "WALL",
    "FLOOR",
    "DOOR",
    "FINISH",
    "AVATAR",
    "WALKABLE",
    "Tile",
]
