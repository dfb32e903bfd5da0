import pytest

from endless_dungeon.maze import AVATAR, FINISH, WALL, AssetLoadFailure, PlacementRenderer, build, to_ascii
from tests.maze_test_utils import ScriptedGenerator, StubGrid, corridor_rows

PNG_STUB = b"\x89PNG\r\n\x1a\n"


def _session():
    return build(336, 240, generator=ScriptedGenerator(lambda w, h: StubGrid(corridor_rows(w, h))))


def _asset_dir(tmp_path, types):
    for name in types:
        (tmp_path / f"{name}.png").write_bytes(PNG_STUB)
    return str(tmp_path)


def test_load_asset_returns_url(tmp_path):
    renderer = PlacementRenderer(_asset_dir(tmp_path, ["wall"]), url_prefix="/static/img/")
    assert renderer.load_asset("wall") == "/static/img/wall.png"


def test_load_asset_missing_raises(tmp_path):
    renderer = PlacementRenderer(str(tmp_path))
    with pytest.raises(AssetLoadFailure) as exc:
        renderer.load_asset("door")
    assert exc.value.tile_type == "door"
    assert exc.value.path.endswith("door.png")


def test_materialize_positions_sprites_in_pixels(tmp_path):
    session = _session()
    renderer = PlacementRenderer(_asset_dir(tmp_path, ["wall", "door", "avatar", "finish"]))
    sprites = renderer.materialize(session)
    assert len(sprites) == len(session.placements)
    avatar = next(s for s in sprites if s["type"] == AVATAR)
    assert (avatar["x"], avatar["y"]) == (16, 16)
    assert avatar["size"] == 16
    finish = next(s for s in sprites if s["type"] == FINISH)
    assert (finish["x"], finish["y"]) == (session.goal[0] * 16, session.goal[1] * 16)


def test_missing_asset_skips_only_that_sprite(tmp_path, capsys):
    session = _session()
    renderer = PlacementRenderer(_asset_dir(tmp_path, ["wall", "avatar"]))
    sprites = renderer.materialize(session)
    kinds = {s["type"] for s in sprites}
    assert kinds == {WALL, AVATAR}
    out = capsys.readouterr().out
    assert "event=asset_load_failed" in out
    assert "type=finish" in out


def test_materialize_replaces_previous_sprites(tmp_path):
    renderer = PlacementRenderer(_asset_dir(tmp_path, ["wall", "avatar", "finish"]))
    renderer.materialize(_session())
    count = len(renderer.sprites)
    renderer.materialize(_session())
    assert len(renderer.sprites) == count


def test_set_avatar_moves_avatar_sprite(tmp_path):
    renderer = PlacementRenderer(_asset_dir(tmp_path, ["avatar"]))
    session = _session()
    renderer.materialize(session)
    assert renderer.set_avatar(16, 32) == {"x": 16, "y": 32}
    assert renderer.sprites[0]["y"] == 32


def test_frame_payload(tmp_path):
    session = _session()
    renderer = PlacementRenderer(_asset_dir(tmp_path, ["wall", "avatar", "finish"]))
    renderer.materialize(session)
    frame = renderer.frame(session, (336, 240))
    assert frame["build_id"] == session.build_id
    assert frame["layout"] == "standard"
    assert frame["canvas"] == {"width": 336, "height": 240}
    assert frame["avatar"] == {"x": 16, "y": 16}
    assert (frame["cols"], frame["rows"], frame["tile_size"]) == (21, 15, 16)
    assert len(frame["sprites"]) == len(renderer.sprites)


def test_frame_defaults_canvas_to_viewport(tmp_path):
    session = _session()
    frame = PlacementRenderer(str(tmp_path)).frame(session)
    assert frame["canvas"] == {"width": 336, "height": 240}


def test_to_ascii_marks_avatar_and_goal():
    session = _session()
    lines = to_ascii(session).splitlines()
    assert len(lines) == 15
    assert all(len(line) == 21 for line in lines)
    assert lines[1][1] == "@"
    assert lines[13][1] == "X"
    assert lines[0] == "#" * 21
