"""
project: Endless Dungeon
module: __init__.py
License: MIT

Flask application and core extensions setup.

Wires together the Flask app, Flask-SocketIO and the in-memory game registry.
Configuration is sourced from environment variables (optionally via a .env
file) with defaults suitable for development. A local `instance/` directory
holds runtime data such as the log file.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO

# Load .env if present so SECRET_KEY, MAZE_* etc. can be supplied without exporting shell variables.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # read-only deployments still run; only the log file is lost
    pass


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


def _env_int(name: str, default):
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    TEMPLATES_AUTO_RELOAD=True,
    SEND_FILE_MAX_AGE_DEFAULT=0,
    # Game pacing / sizing knobs
    MAZE_GOAL_DELAY=_env_float("MAZE_GOAL_DELAY", 1.0),
    MAZE_RESIZE_DEBOUNCE=_env_float("MAZE_RESIZE_DEBOUNCE", 0.25),
    MAZE_REBUILD_THRESHOLD=_env_int("MAZE_REBUILD_THRESHOLD", 4),
    MAZE_SWIPE_MIN_DISTANCE=_env_int("MAZE_SWIPE_MIN_DISTANCE", 30),
    MAZE_MAX_BUILD_ATTEMPTS=_env_int("MAZE_MAX_BUILD_ATTEMPTS", 3),
    MAZE_SEED=_env_int("MAZE_SEED", None),
    MAZE_ASSET_DIR=os.getenv("MAZE_ASSET_DIR") or os.path.join(app.static_folder, "img"),
)

# Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    engineio_logger=bool(os.getenv("ENGINEIO_LOGGER", "0") == "1"),
    ping_interval=20,
    ping_timeout=10,
)

from endless_dungeon.services.game_service import GameRegistry  # noqa: E402

app.extensions["endless_registry"] = GameRegistry.from_config(app.config)

# Register HTTP blueprints (import after app/socketio exist)
from endless_dungeon.routes.main import bp as bp_main  # noqa: E402

app.register_blueprint(bp_main)

# Import websocket handlers so their event decorators register with Socket.IO (side-effect)
from endless_dungeon.websockets import game as _ws_game  # noqa: F401,E402


def create_app():
    """Return the Flask app with a registry built from the current config.

    Tests adjust ``app.config`` (seed, asset dir) and call this again to get a
    fresh registry reflecting those values.
    """
    app.extensions["endless_registry"] = GameRegistry.from_config(app.config)
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500
