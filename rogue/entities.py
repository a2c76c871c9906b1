"""
Combatants on the dungeon grid.

Both the player and enemies are plain records; the turn engine is the only
thing that changes them once a game is running.
"""

from dataclasses import dataclass

from .grid import Position

STARTING_HP: int = 100
STARTING_ATTACK: int = 10


@dataclass
class Player:
    """The player character. Exactly one per session."""

    x: int
    y: int
    hp: int = STARTING_HP
    max_hp: int = STARTING_HP
    attack: int = STARTING_ATTACK

    @property
    def position(self) -> Position:
        return Position(x=self.x, y=self.y)

    def is_alive(self) -> bool:
        return self.hp > 0


@dataclass
class Enemy:
    """
    A roaming enemy.

    Enemies are created at session start, chase and hit the player on each
    tick, and are removed from play for good once their hp reaches zero.
    """

    x: int
    y: int
    hp: int = STARTING_HP
    max_hp: int = STARTING_HP
    attack: int = STARTING_ATTACK

    # Unique identifier for events and lookups
    enemy_id: str = ""

    @property
    def position(self) -> Position:
        return Position(x=self.x, y=self.y)

    def is_alive(self) -> bool:
        return self.hp > 0

    def occupies_tile(self, x: int, y: int) -> bool:
        return self.x == x and self.y == y
