"""Default maze generator: rooms, winding corridors, then connectors.

Works on an odd-sized grid where every odd/odd cell is open space and the cells
between them are walls that can be knocked through. Phases:

1. place non-overlapping odd-aligned rooms
2. fill every remaining odd/odd cell with growing-tree corridors
3. join all carved regions through single-cell connectors (union-find), with
   a small chance of extra connectors so the maze has some loops

Connectors that touch a room become doors. The result is one 4-connected open
area surrounded by a solid wall border.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from .tiles import DOOR, FLOOR, WALL, Tile

CARDINALS = ((0, -1), (1, 0), (0, 1), (-1, 0))
# Smallest odd side with room for two open cells
MIN_SIZE = 5

# Contract every generator honours: generator(width=cols, height=rows) -> object with .tiles
MazeGenerator = Callable[..., "MazeGrid"]


@dataclass
class GeneratorConfig:
    room_attempts: int = 30
    min_room_size: int = 3
    max_room_size: int = 7
    winding_percent: float = 0.35
    extra_connector_chance: float = 0.08


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int

    def cells(self):
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy

    def touches(self, other: "Room") -> bool:
        # Shared edges count as overlap; odd alignment leaves a one-cell wall otherwise
        return (
            self.x <= other.x + other.w
            and other.x <= self.x + self.w
            and self.y <= other.y + other.h
            and other.y <= self.y + self.h
        )


class MazeGrid:
    """Generated grid stored column-major: ``tiles[col][row]``."""

    def __init__(self, width: int, height: int, seed: Optional[int] = None):
        self.width = width
        self.height = height
        self.seed = seed
        self.tiles: List[List[Tile]] = [[Tile(c, r) for r in range(height)] for c in range(width)]
        self.rooms: List[Room] = []

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def count(self, tile_type: str) -> int:
        return sum(1 for column in self.tiles for t in column if t.type == tile_type)


class _Regions:
    """Union-find over carved region ids."""

    def __init__(self):
        self.parent: List[int] = []

    def new(self) -> int:
        self.parent.append(len(self.parent))
        return len(self.parent) - 1

    def find(self, a: int) -> int:
        while self.parent[a] != a:
            self.parent[a] = self.parent[self.parent[a]]
            a = self.parent[a]
        return a

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        self.parent[rb] = ra
        return True


class Generator:
    def __init__(self, width: int, height: int, seed: int, config: Optional[GeneratorConfig] = None):
        self.width = width
        self.height = height
        self.seed = seed
        self.config = config or GeneratorConfig()
        self.rng = random.Random(seed)
        self.grid = MazeGrid(width, height, seed)
        self.region_of: List[List[Optional[int]]] = [[None] * height for _ in range(width)]
        self.regions = _Regions()
        self.room_regions: Set[int] = set()

    def carve(self, x: int, y: int, region: int, tile_type: str = FLOOR):
        self.grid.tiles[x][y].type = tile_type
        self.region_of[x][y] = region

    def _odd_size(self, limit: int) -> int:
        cfg = self.config
        hi = min(cfg.max_room_size, limit)
        if hi % 2 == 0:
            hi -= 1
        lo = min(cfg.min_room_size | 1, hi)
        return self.rng.randrange(lo, hi + 1, 2)

    def place_rooms(self):
        if self.width < MIN_SIZE or self.height < MIN_SIZE:
            return
        for _ in range(self.config.room_attempts):
            w = self._odd_size(self.width - 2)
            h = self._odd_size(self.height - 2)
            x = self.rng.randrange(1, self.width - w, 2)
            y = self.rng.randrange(1, self.height - h, 2)
            room = Room(x, y, w, h)
            if any(room.touches(r) for r in self.grid.rooms):
                continue
            region = self.regions.new()
            self.room_regions.add(region)
            for cx, cy in room.cells():
                self.carve(cx, cy, region)
            self.grid.rooms.append(room)

    def _can_carve(self, x: int, y: int, dx: int, dy: int) -> bool:
        if not self.grid.in_bounds(x + dx * 3, y + dy * 3):
            return False
        return self.grid.tiles[x + dx * 2][y + dy * 2].type == WALL

    def grow_corridors(self, start_x: int, start_y: int):
        region = self.regions.new()
        self.carve(start_x, start_y, region)
        cells = [(start_x, start_y)]
        last_dir = None
        while cells:
            cx, cy = cells[-1]
            open_dirs = [d for d in CARDINALS if self._can_carve(cx, cy, *d)]
            if not open_dirs:
                cells.pop()
                last_dir = None
                continue
            if last_dir in open_dirs and self.rng.random() > self.config.winding_percent:
                dx, dy = last_dir
            else:
                dx, dy = self.rng.choice(open_dirs)
            self.carve(cx + dx, cy + dy, region)
            self.carve(cx + dx * 2, cy + dy * 2, region)
            cells.append((cx + dx * 2, cy + dy * 2))
            last_dir = (dx, dy)

    def fill_corridors(self):
        for x in range(1, self.width, 2):
            for y in range(1, self.height, 2):
                if self.grid.tiles[x][y].type == WALL:
                    self.grow_corridors(x, y)

    def find_connectors(self) -> Dict[Tuple[int, int], Set[int]]:
        connectors = {}
        for x in range(1, self.width - 1):
            for y in range(1, self.height - 1):
                if self.grid.tiles[x][y].type != WALL:
                    continue
                touching = set()
                for dx, dy in CARDINALS:
                    region = self.region_of[x + dx][y + dy]
                    if region is not None:
                        touching.add(region)
                if len(touching) >= 2:
                    connectors[(x, y)] = touching
        return connectors

    def connect_regions(self):
        connectors = self.find_connectors()
        ordered = sorted(connectors)
        self.rng.shuffle(ordered)
        opened: Set[Tuple[int, int]] = set()
        for x, y in ordered:
            touching = connectors[(x, y)]
            roots = {self.regions.find(r) for r in touching}
            if len(roots) < 2:
                if self.rng.random() >= self.config.extra_connector_chance:
                    continue
                if any((x + dx, y + dy) in opened for dx, dy in CARDINALS):
                    continue
            first = next(iter(touching))
            for other in touching:
                self.regions.union(first, other)
            tile_type = DOOR if touching & self.room_regions else FLOOR
            self.carve(x, y, first, tile_type)
            opened.add((x, y))

    def run(self) -> MazeGrid:
        self.place_rooms()
        self.fill_corridors()
        self.connect_regions()
        return self.grid


def generate_maze(width: int, height: int, seed: Optional[int] = None, config: Optional[GeneratorConfig] = None) -> MazeGrid:
    """Generate a connected maze on an odd ``width`` x ``height`` grid.

    ``seed=None`` picks a random seed (recorded on the result); the same seed
    always yields the same layout.
    """
    if width < MIN_SIZE or height < MIN_SIZE or width % 2 == 0 or height % 2 == 0:
        raise ValueError(f"maze dimensions must be odd and >= {MIN_SIZE}, got {width}x{height}")
    if seed is None:
        seed = random.randint(1, 1_000_000)
    return Generator(width, height, seed, config).run()


__all__ = ["GeneratorConfig", "Generator", "MazeGrid", "MazeGenerator", "Room", "generate_maze"]
