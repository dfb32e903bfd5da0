"""Maze build and render error taxonomy.

Movement rejections are ordinary results and never raise; everything here is a
failure of a build attempt or of a single asset.
"""


class MazeError(Exception):
    """Base class for maze pipeline failures."""


class GenerationFailure(MazeError):
    """The generator raised, or returned a grid the builder cannot use."""


class NoFloorTile(MazeError):
    """No floor tile available for the avatar start."""


class NoGoalTile(MazeError):
    """No floor tile other than the start available for the goal."""


class AssetLoadFailure(MazeError):
    def __init__(self, tile_type: str, path: str):
        super().__init__(f"asset for {tile_type!r} not found at {path}")
        self.tile_type = tile_type
        self.path = path


# Failures that a fresh generator invocation may fix
BUILD_ERRORS = (GenerationFailure, NoFloorTile, NoGoalTile)
