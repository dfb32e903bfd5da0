"""Single-step movement validation.

``step`` is pure: it never mutates the session it is given. An accepted move
returns a new session value carrying the updated avatar position.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple

from .builder import Session
from .tiles import FINISH, WALKABLE

DIRECTIONS = {
    "left": (-1, 0),
    "up": (0, -1),
    "right": (1, 0),
    "down": (0, 1),
}


class MoveResult(NamedTuple):
    accepted: bool
    position: Tuple[int, int]
    reached_goal: bool
    session: Session


def step(session: Session, direction: str) -> MoveResult:
    """Attempt to move the avatar one tile in ``direction``.

    Out-of-bounds and wall destinations are rejected with the session
    unchanged. Moving onto the finish tile sets ``reached_goal``; scheduling
    the rebuild is the caller's job.
    """
    try:
        dx, dy = DIRECTIONS[direction]
    except KeyError:
        raise ValueError(f"unknown direction: {direction!r}") from None
    size = session.tile_size
    x, y = session.avatar
    new_x, new_y = x + dx * size, y + dy * size
    col, row = new_x // size, new_y // size
    if not (0 <= col < session.cols and 0 <= row < session.rows):
        return MoveResult(False, (x, y), False, session)
    tile_type = session.tile_type(col, row)
    if tile_type not in WALKABLE:
        return MoveResult(False, (x, y), False, session)
    return MoveResult(True, (new_x, new_y), tile_type == FINISH, session.with_avatar(new_x, new_y))


__all__ = ["DIRECTIONS", "MoveResult", "step"]
