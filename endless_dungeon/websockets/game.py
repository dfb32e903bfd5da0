"""Socket.IO game handlers.

Events (client -> server):
    - start_game: Build a maze for the client viewport; payload VIEWPORT fields
    - resize: Viewport changed; debounced, may rebuild or just rescale
    - key_down / key_up: Arrow key press/release; payload { code }
    - swipe: Touch gesture; payload { start_x, start_y, end_x, end_y }
    - move: On-screen button; payload { direction }
    - regenerate: Discard the maze and build a new one

Emits:
    - maze: Full frame (sprites, tile size, canvas, avatar)
    - avatar: { x, y, accepted } after every attempted step
    - goal_reached: { build_id }; a new maze follows after MAZE_GOAL_DELAY
    - canvas: { width, height } when a resize only rescales
    - error: { message, field, code }
"""

from flask import current_app, request
from flask_socketio import emit

from endless_dungeon import socketio
from endless_dungeon.logging_utils import get_logger
from endless_dungeon.maze import MazeError, Viewport
from endless_dungeon.services.game_service import get_registry
from endless_dungeon.services.input_service import button_direction, swipe_direction

from .validation import KEY_EVENT, MOVE, SWIPE, VIEWPORT, validate

_log = get_logger("ws_game")


def _schedule(fn, *args):
    """Fire-and-forget deferred work on the Socket.IO worker."""
    return socketio.start_background_task(fn, *args)


def _emit_invalid(event: str, result: dict):
    emit("error", {"message": f"Invalid {event}: {result['error']}", "field": result["field"], "code": result["code"]})


def _emit_no_session():
    emit("error", {"message": "No game in progress; send start_game first", "field": None, "code": "no_session"})


def _emit_generation_failed(exc: MazeError):
    _log.error(event="generation_failed", sid=request.sid, error=type(exc).__name__)
    emit("error", {"message": "Maze generation failed", "field": None, "code": "generation_failed"})


def _viewport(fields: dict) -> Viewport:
    return Viewport(
        fields["container_width"],
        fields["container_height"],
        fields["window_width"],
        fields["window_height"],
    )


def _delayed_rebuild(registry, sid, token, delay):
    socketio.sleep(delay)
    try:
        state = registry.complete_rebuild(sid, token)
    except MazeError as exc:
        _log.error(event="goal_rebuild_failed", sid=sid, error=type(exc).__name__)
        socketio.emit("error", {"message": "Maze generation failed", "field": None, "code": "generation_failed"}, to=sid)
        return
    if state is not None:
        socketio.emit("maze", state.frame(), to=sid)


def _debounced_resize(registry, sid, token, delay):
    socketio.sleep(delay)
    try:
        outcome = registry.apply_resize(sid, token)
    except MazeError as exc:
        _log.error(event="resize_rebuild_failed", sid=sid, error=type(exc).__name__)
        socketio.emit("error", {"message": "Maze generation failed", "field": None, "code": "generation_failed"}, to=sid)
        return
    if outcome is None:
        return
    if outcome.rebuilt:
        socketio.emit("maze", outcome.state.frame(), to=sid)
    else:
        width, height = outcome.state.canvas
        socketio.emit("canvas", {"width": width, "height": height}, to=sid)


def _apply_move(direction):
    registry = get_registry()
    sid = request.sid
    if registry.get(sid) is None:
        _emit_no_session()
        return
    result = registry.move(sid, direction)
    if result is None:
        # rebuild pending; input is dropped until the next maze arrives
        return
    x, y = result.position
    emit("avatar", {"x": x, "y": y, "accepted": result.accepted})
    if result.reached_goal:
        emit("goal_reached", {"build_id": result.session.build_id})
        token = registry.begin_goal_rebuild(sid)
        if token is not None:
            _schedule(_delayed_rebuild, registry, sid, token, current_app.config["MAZE_GOAL_DELAY"])


@socketio.on("start_game")
def handle_start_game(data):
    ok, result = validate(data or {}, VIEWPORT)
    if not ok:
        _emit_invalid("start_game", result)
        return
    try:
        state = get_registry().start(request.sid, _viewport(result))
    except MazeError as exc:
        _emit_generation_failed(exc)
        return
    emit("maze", state.frame())


@socketio.on("resize")
def handle_resize(data):
    ok, result = validate(data or {}, VIEWPORT)
    if not ok:
        _emit_invalid("resize", result)
        return
    registry = get_registry()
    token = registry.request_resize(request.sid, _viewport(result))
    if token is None:
        _emit_no_session()
        return
    _schedule(_debounced_resize, registry, request.sid, token, current_app.config["MAZE_RESIZE_DEBOUNCE"])


@socketio.on("key_down")
def handle_key_down(data):
    ok, result = validate(data or {}, KEY_EVENT)
    if not ok:
        _emit_invalid("key_down", result)
        return
    registry = get_registry()
    if registry.get(request.sid) is None:
        _emit_no_session()
        return
    direction = registry.press_key(request.sid, result["code"])
    if direction:
        _apply_move(direction)


@socketio.on("key_up")
def handle_key_up(data):
    ok, result = validate(data or {}, KEY_EVENT)
    if not ok:
        _emit_invalid("key_up", result)
        return
    get_registry().release_key(request.sid, result["code"])


@socketio.on("swipe")
def handle_swipe(data):
    ok, result = validate(data or {}, SWIPE)
    if not ok:
        _emit_invalid("swipe", result)
        return
    direction = swipe_direction(
        (result["start_x"], result["start_y"]),
        (result["end_x"], result["end_y"]),
        current_app.config["MAZE_SWIPE_MIN_DISTANCE"],
    )
    if direction:
        _apply_move(direction)


@socketio.on("move")
def handle_move(data):
    ok, result = validate(data or {}, MOVE)
    if not ok:
        _emit_invalid("move", result)
        return
    _apply_move(button_direction(result["direction"]))


@socketio.on("regenerate")
def handle_regenerate(data=None):
    try:
        state = get_registry().regenerate(request.sid)
    except MazeError as exc:
        _emit_generation_failed(exc)
        return
    if state is None:
        _emit_no_session()
        return
    emit("maze", state.frame())


@socketio.on("disconnect")
def handle_disconnect(*args):
    get_registry().drop(request.sid)
    _log.info(event="disconnect", sid=request.sid)
