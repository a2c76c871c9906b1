"""
Tile types for the dungeon grid.

A cell is stored as two layers: its terrain (wall or floor) and whatever
currently sits on it (nothing, an item, the player or an enemy). Consumers
that only care about "what is drawn here" use the combined CellTag view.
"""

from enum import IntEnum
from typing import Dict


class Terrain(IntEnum):
    """What a cell is made of."""

    WALL = 0
    FLOOR = 1


class Contents(IntEnum):
    """What currently occupies a floor cell."""

    EMPTY = 0

    # Items (consumed when the player steps on them)
    HEALTH_POTION = 1
    SWORD = 2

    # Occupants
    PLAYER = 10
    ENEMY = 11


class CellTag(IntEnum):
    """
    Single-tag view of a cell, as seen by render and test code.

    WALL and FLOOR describe bare terrain; every other tag implies floor
    terrain underneath.
    """

    WALL = 0
    FLOOR = 1
    HEALTH_POTION = 2
    SWORD = 3
    PLAYER = 4
    ENEMY = 5


ITEMS = {Contents.HEALTH_POTION, Contents.SWORD}
OCCUPANTS = {Contents.PLAYER, Contents.ENEMY}

CONTENTS_TO_TAG: Dict[Contents, CellTag] = {
    Contents.EMPTY: CellTag.FLOOR,
    Contents.HEALTH_POTION: CellTag.HEALTH_POTION,
    Contents.SWORD: CellTag.SWORD,
    Contents.PLAYER: CellTag.PLAYER,
    Contents.ENEMY: CellTag.ENEMY,
}
