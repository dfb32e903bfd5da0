import functools

import pytest

from endless_dungeon.maze import DIRECTIONS, WALKABLE, build, generate_maze, step
from tests.maze_test_utils import ScriptedGenerator, StubGrid, corridor_rows, session_from_ascii

TILE = 32

MAZE = [
    "#######",
    "#@.+.X#",
    "#.###.#",
    "#.....#",
    "#######",
]


@pytest.fixture()
def session():
    return session_from_ascii(MAZE, tile_size=TILE)


def test_step_onto_floor_accepted(session):
    result = step(session, "right")
    assert result.accepted
    assert result.position == (2 * TILE, 1 * TILE)
    assert not result.reached_goal
    assert result.session.avatar == (2 * TILE, 1 * TILE)


def test_step_does_not_mutate_input(session):
    step(session, "right")
    assert session.avatar == (TILE, TILE)


@pytest.mark.parametrize("direction", ["up", "left"])
def test_step_into_wall_rejected(session, direction):
    result = step(session, direction)
    assert not result.accepted
    assert result.position == (TILE, TILE)
    assert result.session is session


def test_rejected_step_is_idempotent(session):
    first = step(session, "up")
    second = step(first.session, "up")
    assert first == second


def test_doors_are_walkable(session):
    s = step(step(session, "right").session, "right")
    assert s.accepted
    assert s.session.avatar_cell == (3, 1)


def test_reaching_finish_flags_goal(session):
    near = session.with_avatar(4 * TILE, 1 * TILE)
    result = step(near, "right")
    assert result.accepted
    assert result.reached_goal
    assert result.position == (5 * TILE, 1 * TILE)


def test_out_of_bounds_rejected():
    edge = session_from_ascii(["@.X"], tile_size=TILE)
    for direction in ("left", "up", "down"):
        result = step(edge, direction)
        assert not result.accepted
        assert result.position == (0, 0)


def test_each_accepted_step_moves_exactly_one_tile():
    open_grid = session_from_ascii(["...", ".@.", "..X"], tile_size=TILE)
    for direction, (dx, dy) in DIRECTIONS.items():
        result = step(open_grid, direction)
        assert result.accepted
        assert result.position == (TILE + dx * TILE, TILE + dy * TILE)


def test_unknown_direction_raises(session):
    with pytest.raises(ValueError):
        step(session, "northeast")


def test_desktop_start_blocked_on_the_east():
    session = build(1050, 704, generator=ScriptedGenerator(lambda w, h: StubGrid(corridor_rows(w, h))))
    assert session.tile_size == 30
    assert session.start == (1, 1)
    assert session.tile_type(2, 1) == "wall"
    result = step(session, "right")
    assert not result.accepted
    assert result.session.avatar == (30, 30)
    down = step(session, "down")
    assert down.accepted and down.position == (30, 60)


def test_walk_corridor_to_goal():
    session = build(1050, 704, generator=ScriptedGenerator(lambda w, h: StubGrid(corridor_rows(w, h))))
    reached = []
    for _ in range(session.goal[1] - session.start[1]):
        result = step(session, "down")
        assert result.accepted
        reached.append(result.reached_goal)
        session = result.session
    assert reached[-1] is True
    assert not any(reached[:-1])
    assert session.avatar_cell == session.goal


@pytest.mark.parametrize("seed", [3, 11, 2024])
def test_generated_maze_east_step_matches_tile(seed):
    session = build(1050, 704, generator=functools.partial(generate_maze, seed=seed))
    col, row = session.start
    result = step(session, "right")
    assert result.accepted == (session.tile_type(col + 1, row) in WALKABLE)
