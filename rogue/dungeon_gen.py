"""
Dungeon Generation Algorithm
============================

The dungeon starts as solid rock and is opened up in three passes.

1. Rooms: pick a target of 5-10 rooms. Repeatedly draw a random room
   (3-8 cells per side) at a random origin and keep it only if it stays
   clear of every room already placed, with a one-cell margin between them.
   All rooms share a budget of 1000 draws; running out just means fewer rooms.
2. Corridors: carve 3-5 full-width rows and 3-5 full-height columns. No two
   rows (or columns) may be equal or adjacent, so corridors never merge into
   a double-wide hall.
3. Connectivity: flood fill from the first floor cell in row-major order and
   turn every floor cell that was not reached back into wall. What remains is
   one connected walkable region.
"""

import random
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .grid import Grid
from .pathfinding import flood_fill
from .tiles import Terrain

MIN_ROOMS: int = 5
MAX_ROOMS: int = 10
MIN_ROOM_SIZE: int = 3
MAX_ROOM_SIZE: int = 8
ROOM_ATTEMPT_BUDGET: int = 1000

MIN_CORRIDORS: int = 3
MAX_CORRIDORS: int = 5
CORRIDOR_ATTEMPT_BUDGET: int = 1000


@dataclass
class Room:
    """A rectangular room, in cells. Only used while generating."""

    x: int
    y: int
    w: int
    h: int

    def overlaps(self, other: "Room") -> bool:
        """Check if the two rooms touch or overlap, counting a one-cell margin."""
        return (
            self.x < other.x + other.w + 1
            and self.x + self.w + 1 > other.x
            and self.y < other.y + other.h + 1
            and self.y + self.h + 1 > other.y
        )


@dataclass
class GenerationContext:
    """
    Scratch state for a single generation pass.

    Created by generate_dungeon() and handed back to the caller for
    inspection; nothing keeps it once the dungeon is built.
    """

    rooms: List[Room] = field(default_factory=list)
    target_rooms: int = 0
    room_attempts: int = 0
    corridor_rows: List[int] = field(default_factory=list)
    corridor_cols: List[int] = field(default_factory=list)
    cells_pruned: int = 0


def place_rooms(grid: Grid, context: GenerationContext, rng=None) -> List[Room]:
    """
    Place non-overlapping rooms and carve them into the grid.

    Returns the rooms placed in this call (also appended to context.rooms).
    """
    if rng is None:
        rng = random

    target = rng.randint(MIN_ROOMS, MAX_ROOMS)
    context.target_rooms = target
    placed: List[Room] = []

    for _ in range(target):
        room_placed = False
        while not room_placed and context.room_attempts < ROOM_ATTEMPT_BUDGET:
            context.room_attempts += 1
            w = rng.randint(MIN_ROOM_SIZE, MAX_ROOM_SIZE)
            h = rng.randint(MIN_ROOM_SIZE, MAX_ROOM_SIZE)
            # Origin keeps the room off the far edges
            x = rng.randrange(grid.width - w - 1)
            y = rng.randrange(grid.height - h - 1)
            candidate = Room(x, y, w, h)

            if any(candidate.overlaps(room) for room in context.rooms):
                continue

            grid.carve_rect(x, y, w, h)
            context.rooms.append(candidate)
            placed.append(candidate)
            room_placed = True

    if len(placed) < target:
        print(
            f"Room budget exhausted: placed {len(placed)} of {target} rooms.",
            file=sys.stderr,
        )

    return placed


def _pick_spaced(extent: int, count: int, rng) -> List[int]:
    """Pick up to count indices in [0, extent), no two equal or adjacent."""
    chosen: List[int] = []
    used: Set[int] = set()
    for _ in range(count):
        for _attempt in range(CORRIDOR_ATTEMPT_BUDGET):
            index = rng.randrange(extent)
            if index in used or index - 1 in used or index + 1 in used:
                continue
            used.add(index)
            chosen.append(index)
            break
        else:
            print(
                f"Corridor budget exhausted: carved {len(chosen)} of {count}.",
                file=sys.stderr,
            )
            break
    return chosen


def carve_corridors(grid: Grid, context: GenerationContext, rng=None) -> None:
    """Carve full-width horizontal and full-height vertical corridors."""
    if rng is None:
        rng = random

    horizontal_count = rng.randint(MIN_CORRIDORS, MAX_CORRIDORS)
    vertical_count = rng.randint(MIN_CORRIDORS, MAX_CORRIDORS)

    context.corridor_rows = _pick_spaced(grid.height, horizontal_count, rng)
    for y in context.corridor_rows:
        grid.carve_row(y)

    context.corridor_cols = _pick_spaced(grid.width, vertical_count, rng)
    for x in context.corridor_cols:
        grid.carve_column(x)


def find_first_floor(grid: Grid) -> Optional[Tuple[int, int]]:
    """Returns (x, y) of the first floor cell in row-major order, or None."""
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.terrain[y, x] == Terrain.FLOOR:
                return (x, y)
    return None


def prune_unreachable(grid: Grid) -> int:
    """
    Turn every floor cell unreachable from the first floor cell into wall.

    Returns the number of cells turned back into wall. A grid with no floor
    is left untouched.
    """
    seed = find_first_floor(grid)
    if seed is None:
        return 0

    reachable = flood_fill(seed[0], seed[1], grid.is_floor)

    pruned = 0
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.terrain[y, x] == Terrain.FLOOR and (x, y) not in reachable:
                grid.set_terrain(x, y, Terrain.WALL)
                pruned += 1
    return pruned


def generate_dungeon(grid: Grid, rng=None) -> GenerationContext:
    """
    Generate a connected dungeon in place on an all-wall grid.

    Runs room placement, corridor carving and the connectivity pass in order.

    Returns:
        The GenerationContext for this pass (rooms, corridor picks, stats).
    """
    context = GenerationContext()
    place_rooms(grid, context, rng)
    carve_corridors(grid, context, rng)
    context.cells_pruned = prune_unreachable(grid)
    return context
