"""Rendering adapter: placements -> sprite descriptions for the browser canvas.

Each placement type is drawn with ``<asset_dir>/<type>.png``. A missing asset
costs only that sprite: it is logged and skipped, the rest of the maze still
draws. The browser side does nothing but blit the sprites it receives.
"""

from __future__ import annotations

import os
from typing import Dict, List, Optional, Tuple

from endless_dungeon.logging_utils import get_logger

from .builder import Session
from .errors import AssetLoadFailure
from .tiles import AVATAR, DOOR, FINISH, FLOOR, WALL

_log = get_logger("render")

ASCII_GLYPHS = {WALL: "#", FLOOR: ".", DOOR: "+", FINISH: "X", AVATAR: "@"}


class PlacementRenderer:
    def __init__(self, asset_dir: str, url_prefix: str = "/static/img"):
        self.asset_dir = asset_dir
        self.url_prefix = url_prefix.rstrip("/")
        self.sprites: List[Dict] = []
        self._assets: Dict[str, str] = {}
        self._avatar: Optional[Dict] = None

    def load_asset(self, tile_type: str) -> str:
        """Return the URL for ``tile_type``'s image, raising AssetLoadFailure if absent."""
        url = self._assets.get(tile_type)
        if url is not None:
            return url
        path = os.path.join(self.asset_dir, f"{tile_type}.png")
        if not os.path.isfile(path):
            raise AssetLoadFailure(tile_type, path)
        url = f"{self.url_prefix}/{tile_type}.png"
        self._assets[tile_type] = url
        return url

    def clear(self):
        self.sprites = []
        self._avatar = None

    def materialize(self, session: Session) -> List[Dict]:
        self.clear()
        size = session.tile_size
        skipped = 0
        for placement in session.placements:
            try:
                src = self.load_asset(placement.type)
            except AssetLoadFailure as exc:
                skipped += 1
                _log.warn(event="asset_load_failed", type=exc.tile_type, path=exc.path, col=placement.col, row=placement.row)
                continue
            sprite = {
                "type": placement.type,
                "x": placement.col * size,
                "y": placement.row * size,
                "size": size,
                "src": src,
            }
            if placement.type == AVATAR:
                self._avatar = sprite
            self.sprites.append(sprite)
        _log.debug(event="materialized", build_id=session.build_id, sprites=len(self.sprites), skipped=skipped)
        return self.sprites

    def set_avatar(self, x: int, y: int) -> Dict:
        if self._avatar is not None:
            self._avatar["x"], self._avatar["y"] = x, y
        return {"x": x, "y": y}

    def frame(self, session: Session, canvas: Optional[Tuple[int, int]] = None) -> Dict:
        """JSON payload for a full redraw."""
        width, height = canvas or session.viewport
        x, y = session.avatar
        return {
            "build_id": session.build_id,
            "layout": session.layout_mode,
            "tile_size": session.tile_size,
            "cols": session.cols,
            "rows": session.rows,
            "canvas": {"width": width, "height": height},
            "avatar": {"x": x, "y": y},
            "sprites": [dict(s) for s in self.sprites],
        }


def to_ascii(session: Session) -> str:
    avatar = session.avatar_cell
    lines = []
    for row in range(session.rows):
        chars = []
        for col in range(session.cols):
            if (col, row) == avatar:
                chars.append(ASCII_GLYPHS[AVATAR])
            else:
                chars.append(ASCII_GLYPHS.get(session.tile_type(col, row), "?"))
        lines.append("".join(chars))
    return "\n".join(lines)


__all__ = ["PlacementRenderer", "to_ascii", "ASCII_GLYPHS"]
