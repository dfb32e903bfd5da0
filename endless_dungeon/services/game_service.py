"""Per-connection game state and rebuild sequencing.

One ``PlayerState`` per Socket.IO sid; each owns exactly one live ``Session``.
Deferred work (the pause after reaching the goal, resize debouncing) is driven
by the websocket layer through tokens handed out here: a timer only takes
effect if its token is still current when it fires, so a newer rebuild always
wins and resize timers never stack.

A failed build leaves the previous session live and re-raises.
"""

from __future__ import annotations

import functools
import random
import threading
from dataclasses import dataclass, field
from typing import Dict, NamedTuple, Optional, Tuple

from endless_dungeon.logging_utils import get_logger
from endless_dungeon.maze import (
    MoveResult,
    PlacementRenderer,
    Session,
    build,
    generate_maze,
    needs_rebuild,
    resolve_layout,
    step,
)
from endless_dungeon.maze.config import REBUILD_THRESHOLD
from endless_dungeon.maze.errors import BUILD_ERRORS
from endless_dungeon.maze.sizing import Layout, Viewport

from .input_service import KeyState

_log = get_logger("game")


@dataclass
class PlayerState:
    sid: str
    viewport: Viewport
    layout: Layout
    renderer: PlacementRenderer
    session: Optional[Session] = None
    canvas: Tuple[int, int] = (0, 0)
    keys: KeyState = field(default_factory=KeyState)
    rebuild_token: int = 0
    rebuild_pending: bool = False
    resize_token: int = 0
    pending_viewport: Optional[Viewport] = None

    def frame(self) -> Dict:
        return self.renderer.frame(self.session, self.canvas)


class ResizeOutcome(NamedTuple):
    rebuilt: bool
    state: PlayerState


class GameRegistry:
    def __init__(
        self,
        asset_dir: str,
        url_prefix: str = "/static/img",
        generator=None,
        seed: Optional[int] = None,
        max_attempts: int = 3,
        rebuild_threshold: int = REBUILD_THRESHOLD,
    ):
        self.asset_dir = asset_dir
        self.url_prefix = url_prefix
        self.max_attempts = max_attempts
        self.rebuild_threshold = rebuild_threshold
        self._generator = generator
        self._rng = random.Random(seed)
        self._states: Dict[str, PlayerState] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> "GameRegistry":
        return cls(
            asset_dir=config["MAZE_ASSET_DIR"],
            seed=config.get("MAZE_SEED"),
            max_attempts=config.get("MAZE_MAX_BUILD_ATTEMPTS", 3),
            rebuild_threshold=config.get("MAZE_REBUILD_THRESHOLD", REBUILD_THRESHOLD),
        )

    def _next_generator(self):
        if self._generator is not None:
            return self._generator
        return functools.partial(generate_maze, seed=self._rng.randint(1, 1_000_000))

    def _rebuild(self, state: PlayerState, layout: Layout) -> Session:
        """Replace the state's session wholesale. Caller holds the lock."""
        try:
            session = build(
                layout.canvas_width,
                layout.canvas_height,
                layout.mode,
                generator=self._next_generator(),
                max_attempts=self.max_attempts,
            )
        except BUILD_ERRORS as exc:
            state.rebuild_pending = False
            _log.error(event="rebuild_failed", sid=state.sid, error=type(exc).__name__, kept_previous=state.session is not None)
            raise
        state.layout = layout
        state.canvas = (layout.canvas_width, layout.canvas_height)
        state.session = session
        state.rebuild_token += 1
        state.rebuild_pending = False
        state.keys.clear()
        state.renderer.materialize(session)
        return session

    def start(self, sid: str, viewport: Viewport) -> PlayerState:
        layout = resolve_layout(viewport)
        with self._lock:
            state = self._states.get(sid)
            if state is None:
                state = PlayerState(
                    sid=sid,
                    viewport=viewport,
                    layout=layout,
                    renderer=PlacementRenderer(self.asset_dir, self.url_prefix),
                )
            else:
                state.viewport = viewport
            self._rebuild(state, layout)
            self._states[sid] = state
        _log.info(event="game_started", sid=sid, layout=layout.mode, tile_size=layout.tile_size)
        return state

    def get(self, sid: str) -> Optional[PlayerState]:
        return self._states.get(sid)

    def drop(self, sid: str):
        with self._lock:
            self._states.pop(sid, None)

    def __len__(self):
        return len(self._states)

    def move(self, sid: str, direction: str) -> Optional[MoveResult]:
        """Step the avatar. None when there is no live session or a rebuild is pending."""
        with self._lock:
            state = self._states.get(sid)
            if state is None or state.session is None or state.rebuild_pending:
                return None
            result = step(state.session, direction)
            if result.accepted:
                state.session = result.session
                state.renderer.set_avatar(*result.position)
                if result.reached_goal:
                    state.rebuild_pending = True
                    _log.info(event="goal_reached", sid=sid, build_id=state.session.build_id)
            return result

    def press_key(self, sid: str, code: str) -> Optional[str]:
        with self._lock:
            state = self._states.get(sid)
            if state is None:
                return None
            return state.keys.press(code)

    def release_key(self, sid: str, code: str):
        with self._lock:
            state = self._states.get(sid)
            if state is not None:
                state.keys.release(code)

    def begin_goal_rebuild(self, sid: str) -> Optional[int]:
        with self._lock:
            state = self._states.get(sid)
            if state is None or not state.rebuild_pending:
                return None
            return state.rebuild_token

    def complete_rebuild(self, sid: str, token: int) -> Optional[PlayerState]:
        with self._lock:
            state = self._states.get(sid)
            if state is None or not state.rebuild_pending or token != state.rebuild_token:
                return None
            self._rebuild(state, state.layout)
            return state

    def regenerate(self, sid: str) -> Optional[PlayerState]:
        with self._lock:
            state = self._states.get(sid)
            if state is None:
                return None
            self._rebuild(state, state.layout)
            return state

    def request_resize(self, sid: str, viewport: Viewport) -> Optional[int]:
        with self._lock:
            state = self._states.get(sid)
            if state is None:
                return None
            state.resize_token += 1
            state.pending_viewport = viewport
            return state.resize_token

    def apply_resize(self, sid: str, token: int) -> Optional[ResizeOutcome]:
        """Apply the latest requested viewport; earlier tokens are ignored."""
        with self._lock:
            state = self._states.get(sid)
            if state is None or token != state.resize_token or state.pending_viewport is None:
                return None
            viewport, state.pending_viewport = state.pending_viewport, None
            layout = resolve_layout(viewport)
            state.viewport = viewport
            current = state.session.tile_size if state.session else None
            if current is None or needs_rebuild(current, layout.tile_size, self.rebuild_threshold):
                _log.info(event="resize_rebuild", sid=sid, old_tile=current, new_tile=layout.tile_size)
                self._rebuild(state, layout)
                return ResizeOutcome(True, state)
            state.layout = layout
            state.canvas = (layout.canvas_width, layout.canvas_height)
            return ResizeOutcome(False, state)


def get_registry() -> GameRegistry:
    from flask import current_app

    return current_app.extensions["endless_registry"]


__all__ = ["PlayerState", "ResizeOutcome", "GameRegistry", "get_registry"]
