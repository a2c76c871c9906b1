"""
Scatter items, the player and enemies onto a freshly generated dungeon.
"""

import random
import sys
from typing import List, Tuple

from .entities import Enemy, Player
from .grid import Grid, Position
from .tiles import Contents

HEALTH_POTION_COUNT: int = 10
SWORD_COUNT: int = 2
ENEMY_COUNT: int = 10

# Rejection sampling gives up after this many draws per grid cell and
# falls back to choosing from the enumerated free cells.
FREE_CELL_DRAWS_PER_CELL: int = 10


def find_random_free_cell(grid: Grid, rng=None) -> Position:
    """
    Pick a uniformly random floor cell that has nothing on it.

    Draws random cells until one is free. If that takes unreasonably long
    (a nearly full grid), picks directly from the list of free cells.

    Raises:
        RuntimeError: If the grid has no free floor cell at all.
    """
    if rng is None:
        rng = random

    for _ in range(FREE_CELL_DRAWS_PER_CELL * grid.width * grid.height):
        x = rng.randrange(grid.width)
        y = rng.randrange(grid.height)
        if grid.is_free(x, y):
            return Position(x=x, y=y)

    free_cells = grid.free_cells()
    if not free_cells:
        raise RuntimeError("No free floor cell available")

    print(
        f"Free cell sampling fell back to enumeration ({len(free_cells)} free cells).",
        file=sys.stderr,
    )
    return rng.choice(free_cells)


def place_item(grid: Grid, item: Contents, rng=None) -> Position:
    """Put one item on a random free cell."""
    pos = find_random_free_cell(grid, rng)
    grid.set_contents(pos.x, pos.y, item)
    return pos


def place_player(grid: Grid, rng=None) -> Player:
    pos = find_random_free_cell(grid, rng)
    grid.set_contents(pos.x, pos.y, Contents.PLAYER)
    return Player(x=pos.x, y=pos.y)


def place_enemies(grid: Grid, count: int = ENEMY_COUNT, rng=None) -> List[Enemy]:
    enemies: List[Enemy] = []
    for i in range(count):
        pos = find_random_free_cell(grid, rng)
        grid.set_contents(pos.x, pos.y, Contents.ENEMY)
        enemies.append(Enemy(x=pos.x, y=pos.y, enemy_id=f"enemy_{i}"))
    return enemies


def populate(grid: Grid, rng=None) -> Tuple[Player, List[Enemy]]:
    """
    Place items, then the player, then enemies.

    Each placement takes its cell before the next draw, so nothing lands on
    top of anything else.

    Returns:
        Tuple of (player, enemies)
    """
    for _ in range(HEALTH_POTION_COUNT):
        place_item(grid, Contents.HEALTH_POTION, rng)
    for _ in range(SWORD_COUNT):
        place_item(grid, Contents.SWORD, rng)

    player = place_player(grid, rng)
    enemies = place_enemies(grid, rng=rng)
    return player, enemies
