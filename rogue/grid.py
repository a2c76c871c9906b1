"""
The shared dungeon grid.

Every component (generation, placement, the turn engine and the renderers)
works on the same Grid instance. Cells are addressed as (x, y) with x the
column and y the row; the underlying numpy arrays are indexed [y, x].
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List

import numpy as np

from .tiles import CONTENTS_TO_TAG, CellTag, Contents, Terrain

GRID_WIDTH: int = 40
GRID_HEIGHT: int = 24

# Type Definition
TileLayer = np.ndarray


@dataclass(frozen=True)
class Position:
    """A cell position on the grid."""

    x: int
    y: int

    def offset(self, step: "Position") -> "Position":
        return Position(x=self.x + step.x, y=self.y + step.y)


class Direction(Enum):
    """Cardinal directions for movement."""

    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()

    def step(self) -> Position:
        """Returns the Position offset for moving one step in this direction."""
        steps = {
            Direction.UP: Position(x=0, y=-1),
            Direction.DOWN: Position(x=0, y=1),
            Direction.LEFT: Position(x=-1, y=0),
            Direction.RIGHT: Position(x=1, y=0),
        }
        return steps[self]


# Neighbour offsets used by melee and flood fill: east, west, south, north
CARDINAL_STEPS = [(1, 0), (-1, 0), (0, 1), (0, -1)]

# Lookup from Contents value to CellTag value, for vectorised tag views
_TAG_LOOKUP = np.zeros(max(Contents) + 1, dtype=int)
for _contents, _tag in CONTENTS_TO_TAG.items():
    _TAG_LOOKUP[_contents] = _tag


class Grid:
    """
    Fixed-size 2D dungeon grid with a terrain layer and a contents layer.

    Non-empty contents may only sit on floor terrain. Turning a cell back
    into wall clears whatever was on it.
    """

    def __init__(self, width: int = GRID_WIDTH, height: int = GRID_HEIGHT) -> None:
        self.width: int = width
        self.height: int = height
        self.terrain: TileLayer = np.full((height, width), Terrain.WALL, dtype=int)
        self.contents: TileLayer = np.full((height, width), Contents.EMPTY, dtype=int)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def terrain_at(self, x: int, y: int) -> Terrain:
        return Terrain(self.terrain[y, x])

    def contents_at(self, x: int, y: int) -> Contents:
        return Contents(self.contents[y, x])

    def is_floor(self, x: int, y: int) -> bool:
        """Check if (x, y) is inside the grid and has floor terrain."""
        return self.in_bounds(x, y) and self.terrain[y, x] == Terrain.FLOOR

    def is_free(self, x: int, y: int) -> bool:
        """Check if (x, y) is plain floor with nothing on it."""
        return self.is_floor(x, y) and self.contents[y, x] == Contents.EMPTY

    def set_terrain(self, x: int, y: int, terrain: Terrain) -> None:
        self.terrain[y, x] = terrain
        if terrain == Terrain.WALL:
            self.contents[y, x] = Contents.EMPTY

    def set_contents(self, x: int, y: int, contents: Contents) -> None:
        """
        Put something on a cell (or clear it with Contents.EMPTY).

        Raises:
            ValueError: If non-empty contents would be placed on a wall.
        """
        if contents != Contents.EMPTY and self.terrain[y, x] != Terrain.FLOOR:
            raise ValueError(f"Cannot place {contents.name} on wall at ({x}, {y})")
        self.contents[y, x] = contents

    def clear(self, x: int, y: int) -> None:
        """Remove whatever stands on (x, y), leaving bare floor."""
        self.contents[y, x] = Contents.EMPTY

    # Carving helpers used by generation. Carving never touches contents.

    def carve_rect(self, x: int, y: int, w: int, h: int) -> None:
        self.terrain[y : y + h, x : x + w] = Terrain.FLOOR

    def carve_row(self, y: int) -> None:
        self.terrain[y, :] = Terrain.FLOOR

    def carve_column(self, x: int) -> None:
        self.terrain[:, x] = Terrain.FLOOR

    def tag_at(self, x: int, y: int) -> CellTag:
        """Returns the single-tag view of one cell."""
        if self.terrain[y, x] == Terrain.WALL:
            return CellTag.WALL
        return CONTENTS_TO_TAG[Contents(self.contents[y, x])]

    def tags(self) -> np.ndarray:
        """Returns a [height, width] array of CellTag values for the whole grid."""
        return np.where(
            self.terrain == Terrain.WALL, int(CellTag.WALL), _TAG_LOOKUP[self.contents]
        )

    def floor_count(self) -> int:
        return int(np.count_nonzero(self.terrain == Terrain.FLOOR))

    def free_cells(self) -> List[Position]:
        """All floor cells with nothing on them, in row-major order."""
        mask = (self.terrain == Terrain.FLOOR) & (self.contents == Contents.EMPTY)
        return [Position(x=int(col), y=int(row)) for row, col in np.argwhere(mask)]

    def cells_with(self, contents: Contents) -> List[Position]:
        """All cells holding the given contents, in row-major order."""
        return [
            Position(x=int(col), y=int(row))
            for row, col in np.argwhere(self.contents == contents)
        ]
