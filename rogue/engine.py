"""
Turn resolution: player movement, item pickup, melee and the enemy AI step.

The engine mutates the grid and the entity list it was given in place. It
does no locking of its own; GameSession serializes calls so that a player
command and an enemy tick never interleave.
"""

import random
from typing import Any, List, Optional

from .entities import Enemy, Player
from .event_system import Event, EventBus
from .grid import CARDINAL_STEPS, Direction, Grid
from .tiles import ITEMS, Contents, Terrain

POTION_HEAL: int = 30
SWORD_BONUS: int = 10

# Chance an enemy chases along x rather than y on a given tick
CHASE_X_PROBABILITY: float = 0.5


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class TurnEngine:
    """
    Applies player commands and enemy ticks to a shared grid.

    Args:
        grid: The dungeon grid (shared, mutated in place)
        player: The player entity
        enemies: Live enemies; killed enemies are removed from this list
        rng: Source of randomness for enemy axis choice (defaults to random)
        event_bus: Optional bus that receives per-action events
    """

    def __init__(
        self,
        grid: Grid,
        player: Player,
        enemies: List[Enemy],
        rng=None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.grid = grid
        self.player = player
        self.enemies = enemies
        self.rng = rng if rng is not None else random
        self.event_bus = event_bus

        self._defeat_reported = not player.is_alive()

    def _emit(self, event: Event, **kwargs: Any) -> None:
        """Emit an event if an event bus is configured."""
        if self.event_bus:
            self.event_bus.emit(event, **kwargs)

    def find_enemy_at(self, x: int, y: int) -> Optional[Enemy]:
        for enemy in self.enemies:
            if enemy.occupies_tile(x, y):
                return enemy
        return None

    def move_player(self, direction: Direction) -> bool:
        """
        Move the player one cell, picking up any item on the destination.

        Moves into walls, enemies or off the grid are ignored.

        Returns:
            True if the player moved, False if the move was rejected (in
            which case nothing changed).
        """
        step = direction.step()
        nx = self.player.x + step.x
        ny = self.player.y + step.y

        if not self.grid.in_bounds(nx, ny):
            return False
        if self.grid.terrain_at(nx, ny) == Terrain.WALL:
            return False
        if self.grid.contents_at(nx, ny) == Contents.ENEMY:
            return False

        self.grid.clear(self.player.x, self.player.y)
        self.player.x = nx
        self.player.y = ny

        item = self.grid.contents_at(nx, ny)
        if item == Contents.HEALTH_POTION:
            self.player.hp = min(self.player.max_hp, self.player.hp + POTION_HEAL)
        elif item == Contents.SWORD:
            self.player.attack += SWORD_BONUS

        self.grid.set_contents(nx, ny, Contents.PLAYER)

        self._emit(Event.PLAYER_MOVED, x=nx, y=ny)
        if item in ITEMS:
            self._emit(Event.ITEM_PICKED_UP, item=item, x=nx, y=ny)
        return True

    def attack(self) -> List[Enemy]:
        """
        Hit every enemy orthogonally adjacent to the player.

        Enemies brought to zero hp or below are removed from the grid and
        from the enemy list.

        Returns:
            The enemies that were hit, including any that died.
        """
        hit: List[Enemy] = []
        for dx, dy in CARDINAL_STEPS:
            enemy = self.find_enemy_at(self.player.x + dx, self.player.y + dy)
            if enemy is None:
                continue

            enemy.hp -= self.player.attack
            hit.append(enemy)
            self._emit(Event.ENEMY_DAMAGED, enemy_id=enemy.enemy_id, hp=enemy.hp)

            if enemy.hp <= 0:
                self.grid.clear(enemy.x, enemy.y)
                self.enemies.remove(enemy)
                self._emit(Event.ENEMY_KILLED, enemy_id=enemy.enemy_id)
                if not self.enemies:
                    self._emit(Event.ENEMIES_CLEARED)

        return hit

    def advance_enemies(self) -> int:
        """
        Run one AI step for every live enemy, in list order.

        An enemy next to the player attacks instead of moving. Otherwise it
        picks x or y at random and steps one cell toward the player along
        that axis, if the destination is plain floor. A blocked enemy waits.

        Returns:
            The number of enemies that moved.
        """
        moved = 0
        for enemy in self.enemies:
            dx = self.player.x - enemy.x
            dy = self.player.y - enemy.y

            if abs(dx) + abs(dy) == 1:
                self.player.hp -= enemy.attack
                self._emit(Event.PLAYER_DAMAGED, enemy_id=enemy.enemy_id, hp=self.player.hp)
                continue

            if self.rng.random() < CHASE_X_PROBABILITY:
                nx, ny = enemy.x + _sign(dx), enemy.y
            else:
                nx, ny = enemy.x, enemy.y + _sign(dy)

            # A zero step lands on the enemy's own cell, which is not free
            if not self.grid.is_free(nx, ny):
                continue

            self.grid.clear(enemy.x, enemy.y)
            enemy.x = nx
            enemy.y = ny
            self.grid.set_contents(nx, ny, Contents.ENEMY)
            moved += 1
            self._emit(Event.ENEMY_MOVED, enemy_id=enemy.enemy_id, x=nx, y=ny)

        if not self._defeat_reported and not self.player.is_alive():
            self._defeat_reported = True
            self._emit(Event.PLAYER_DEFEATED)

        return moved
