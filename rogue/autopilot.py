"""
A simple player bot for demos and headless runs.

The autopilot only produces commands; it never touches session state
directly. Enemies are unaffected by it and keep their greedy axis-chase.
"""

import random
from typing import List, Tuple

from .grid import CARDINAL_STEPS, Position
from .pathfinding import find_path_bfs
from .session import Command, GameSession
from .tiles import OCCUPANTS, Contents


class Autopilot:
    """
    Picks the player's next command.

    Priority:
        - Attack if any enemy is orthogonally adjacent
        - Walk the shortest path toward the nearest item or enemy
        - Otherwise move in a random direction
    """

    def __init__(self, rng=None) -> None:
        self.rng = rng if rng is not None else random

    def decide(self, session: GameSession) -> Command:
        grid = session.grid
        player = session.player

        for dx, dy in CARDINAL_STEPS:
            x, y = player.x + dx, player.y + dy
            if grid.in_bounds(x, y) and grid.contents_at(x, y) == Contents.ENEMY:
                return Command.ATTACK

        def is_walkable(x: int, y: int) -> bool:
            return grid.is_floor(x, y) and grid.contents_at(x, y) not in OCCUPANTS

        for target in self._targets_by_distance(session):
            path = find_path_bfs(
                player.x,
                player.y,
                target.x,
                target.y,
                is_walkable,
                max_distance=grid.width * grid.height,
            )
            if path:
                return _command_for_step(player.x, player.y, path[0])

        return self.rng.choice(
            [Command.MOVE_UP, Command.MOVE_DOWN, Command.MOVE_LEFT, Command.MOVE_RIGHT]
        )

    def _targets_by_distance(self, session: GameSession) -> List[Position]:
        grid = session.grid
        player = session.player
        targets: List[Position] = []
        for contents in (Contents.HEALTH_POTION, Contents.SWORD, Contents.ENEMY):
            targets.extend(grid.cells_with(contents))
        targets.sort(key=lambda p: abs(p.x - player.x) + abs(p.y - player.y))
        return targets


def _command_for_step(x: int, y: int, step: Tuple[int, int]) -> Command:
    next_x, next_y = step
    if next_x > x:
        return Command.MOVE_RIGHT
    if next_x < x:
        return Command.MOVE_LEFT
    if next_y > y:
        return Command.MOVE_DOWN
    return Command.MOVE_UP
