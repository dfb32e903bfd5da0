"""Input normalisation: raw browser input -> movement direction.

Three sources feed the same ``step`` call:
    - arrow keys, one step per physical press (held keys do not repeat)
    - touch swipes, direction from the dominant axis of the gesture
    - on-screen d-pad buttons, one step per pointer-down
"""

from __future__ import annotations

from typing import Optional, Set, Tuple

from endless_dungeon.maze.movement import DIRECTIONS

KEY_DIRECTIONS = {
    "ArrowLeft": "left",
    "ArrowUp": "up",
    "ArrowRight": "right",
    "ArrowDown": "down",
}

DEFAULT_SWIPE_MIN_DISTANCE = 30


class KeyState:
    """Tracks held keys so auto-repeat keydown events are ignored."""

    def __init__(self):
        self.pressed: Set[str] = set()

    def press(self, code: str) -> Optional[str]:
        """Direction for a fresh arrow press; None for repeats and other keys."""
        direction = KEY_DIRECTIONS.get(code)
        if direction is None or code in self.pressed:
            return None
        self.pressed.add(code)
        return direction

    def release(self, code: str):
        self.pressed.discard(code)

    def clear(self):
        self.pressed.clear()


def swipe_direction(
    start: Tuple[float, float],
    end: Tuple[float, float],
    min_distance: float = DEFAULT_SWIPE_MIN_DISTANCE,
) -> Optional[str]:
    """Direction of a swipe from ``start`` to ``end`` or None if too short.

    Ties between the axes resolve vertically.
    """
    diff_x = start[0] - end[0]
    diff_y = start[1] - end[1]
    if abs(diff_x) > abs(diff_y):
        if abs(diff_x) > min_distance:
            return "left" if diff_x > 0 else "right"
        return None
    if abs(diff_y) > min_distance:
        return "up" if diff_y > 0 else "down"
    return None


def button_direction(value: str) -> Optional[str]:
    return value if value in DIRECTIONS else None


__all__ = ["KEY_DIRECTIONS", "DEFAULT_SWIPE_MIN_DISTANCE", "KeyState", "swipe_direction", "button_direction"]
