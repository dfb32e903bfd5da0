import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from endless_dungeon import app, create_app, socketio  # noqa: E402
from endless_dungeon.websockets import game as game_ws  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app.config.update(
        TESTING=True,
        MAZE_SEED=1234,
        MAZE_GOAL_DELAY=0,
        MAZE_RESIZE_DEBOUNCE=0,
    )
    return app


@pytest.fixture(autouse=True)
def _fresh_registry(test_app):
    """Every test starts with an empty, deterministically seeded registry."""
    create_app()
    yield


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def registry(test_app):
    return test_app.extensions["endless_registry"]


@pytest.fixture()
def sync_tasks(monkeypatch):
    """Run deferred socket work inline so its emits land before get_received()."""
    scheduled = []

    def _inline(fn, *args):
        scheduled.append(fn.__name__)
        fn(*args)

    monkeypatch.setattr(game_ws, "_schedule", _inline)
    return scheduled


@pytest.fixture()
def socket_client(test_app):
    test_client = socketio.test_client(test_app, flask_test_client=test_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()

