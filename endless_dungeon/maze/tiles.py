# Tile type constants centralized for modular imports
WALL = "wall"
FLOOR = "floor"
DOOR = "door"
FINISH = "finish"
AVATAR = "avatar"  # placement tag only, never a tile type

GENERATED_TYPES = frozenset({WALL, FLOOR, DOOR})
WALKABLE = frozenset({FLOOR, DOOR, FINISH})


class Tile:
    """Lightweight container for a maze grid cell."""

    __slots__ = ("col", "row", "type")

    def __init__(self, col: int, row: int, type: str = WALL):
        self.col = col
        self.row = row
        self.type = type

    def to_dict(self):
        return {"col": self.col, "row": self.row, "type": self.type}

    def __repr__(self):
        return f"Tile({self.col}, {self.row}, {self.type!r})"


__all__ = ["WALL", "FLOOR", "DOOR", "FINISH", "AVATAR", "GENERATED_TYPES", "WALKABLE", "Tile"]
