"""Grid builder: viewport -> playable maze session.

The builder sizes the maze for the viewport, asks the generator for a grid,
picks the avatar start and the goal, and lists the placements a renderer needs
to draw. It never renders or waits on anything itself.

Start and goal scans walk the grid in storage order (columns outer, rows
inner). The start is the first floor tile from the top-left corner; the goal is
the first floor tile walking back from the bottom-right corner, skipping the
start. This only guarantees the two differ; no path length is promised.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import NamedTuple, Optional, Tuple

from endless_dungeon.logging_utils import get_logger

from .config import STANDARD
from .errors import BUILD_ERRORS, GenerationFailure, NoFloorTile, NoGoalTile
from .generator import MazeGenerator, generate_maze
from .sizing import compute_tile_size, maze_dimensions
from .tiles import AVATAR, DOOR, FINISH, FLOOR, GENERATED_TYPES, WALL

_log = get_logger("maze")

Cell = Tuple[int, int]


class Placement(NamedTuple):
    type: str
    col: int
    row: int


@dataclass(frozen=True)
class Session:
    grid: object
    tile_size: int
    cols: int
    rows: int
    start: Cell
    goal: Cell
    avatar: Tuple[int, int]
    layout_mode: str = STANDARD
    viewport: Tuple[int, int] = (0, 0)
    placements: Tuple[Placement, ...] = ()
    avatar_placed: bool = True
    goal_placed: bool = True
    build_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    @property
    def tiles(self):
        return self.grid.tiles

    @property
    def avatar_cell(self) -> Cell:
        x, y = self.avatar
        return x // self.tile_size, y // self.tile_size

    def tile_type(self, col: int, row: int) -> str:
        return self.grid.tiles[col][row].type

    def with_avatar(self, x: int, y: int) -> "Session":
        return replace(self, avatar=(x, y))


def _invoke_generator(generator: MazeGenerator, cols: int, rows: int):
    try:
        grid = generator(width=cols, height=rows)
    except Exception as exc:
        raise GenerationFailure(f"generator failed for {cols}x{rows}: {exc}") from exc
    tiles = getattr(grid, "tiles", None)
    if tiles is None:
        raise GenerationFailure("generator returned a grid without tiles")
    try:
        shape_ok = len(tiles) == cols and all(len(column) == rows for column in tiles)
    except TypeError:
        shape_ok = False
    if not shape_ok:
        raise GenerationFailure(f"generator returned tiles not shaped {cols}x{rows}")
    for column in tiles:
        for tile in column:
            if getattr(tile, "type", None) not in GENERATED_TYPES:
                raise GenerationFailure(f"unexpected tile type {getattr(tile, 'type', None)!r}")
    return grid


def _find_start(tiles, cols: int, rows: int) -> Cell:
    for col in range(cols):
        for row in range(rows):
            if tiles[col][row].type == FLOOR:
                return col, row
    raise NoFloorTile(f"no floor tile in {cols}x{rows} grid")


def _find_goal(tiles, cols: int, rows: int, start: Cell) -> Cell:
    for col in range(cols - 1, -1, -1):
        for row in range(rows - 1, -1, -1):
            if tiles[col][row].type == FLOOR and (col, row) != start:
                return col, row
    raise NoGoalTile(f"no floor tile besides start {start} in {cols}x{rows} grid")


def _placements(tiles, cols: int, rows: int, start: Cell, goal: Cell) -> Tuple[Placement, ...]:
    out = [
        Placement(tiles[col][row].type, col, row)
        for col in range(cols)
        for row in range(rows)
        if tiles[col][row].type in (WALL, DOOR)
    ]
    out.append(Placement(AVATAR, *start))
    out.append(Placement(FINISH, *goal))
    return tuple(out)


def _build_once(viewport_width, viewport_height, layout_mode, tile_size, cols, rows, generator) -> Session:
    grid = _invoke_generator(generator, cols, rows)
    tiles = grid.tiles
    start = _find_start(tiles, cols, rows)
    goal = _find_goal(tiles, cols, rows, start)
    tiles[goal[0]][goal[1]].type = FINISH
    return Session(
        grid=grid,
        tile_size=tile_size,
        cols=cols,
        rows=rows,
        start=start,
        goal=goal,
        avatar=(start[0] * tile_size, start[1] * tile_size),
        layout_mode=layout_mode,
        viewport=(int(viewport_width), int(viewport_height)),
        placements=_placements(tiles, cols, rows, start, goal),
    )


def build(
    viewport_width: float,
    viewport_height: float,
    layout_mode: str = STANDARD,
    generator: Optional[MazeGenerator] = None,
    max_attempts: int = 1,
) -> Session:
    """Build a fresh session sized for the viewport.

    Raises GenerationFailure, NoFloorTile or NoGoalTile once ``max_attempts``
    generator invocations have all failed. Nothing is shared with any
    previous session, so a failure never leaves a half-built one behind.
    """
    generator = generator or generate_maze
    tile_size = compute_tile_size(viewport_width, viewport_height, layout_mode)
    cols, rows = maze_dimensions(viewport_width, viewport_height, tile_size, layout_mode)
    attempts = max(1, int(max_attempts))
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            session = _build_once(viewport_width, viewport_height, layout_mode, tile_size, cols, rows, generator)
        except BUILD_ERRORS as exc:
            last_error = exc
            _log.warn(
                event="maze_build_failed",
                attempt=attempt,
                max_attempts=attempts,
                error=type(exc).__name__,
                detail=str(exc),
            )
            continue
        _log.info(
            event="maze_built",
            build_id=session.build_id,
            layout=layout_mode,
            tile_size=tile_size,
            cols=cols,
            rows=rows,
            start=f"{session.start[0]},{session.start[1]}",
            goal=f"{session.goal[0]},{session.goal[1]}",
        )
        return session
    raise last_error


__all__ = ["Placement", "Session", "build"]
