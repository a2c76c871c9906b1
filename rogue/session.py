"""
Game session: owns the grid and entities and serializes everything that
changes them.

Two sources drive a session: player commands from the input layer and a
periodic "advance enemies" tick. Both go through one command queue and are
applied one at a time under a lock, so a move, an attack and an enemy tick
can never interleave mid-mutation.
"""

import queue
import random
import threading
from enum import Enum, auto
from typing import Dict, List, Optional

import numpy as np

from .dungeon_gen import generate_dungeon
from .engine import TurnEngine
from .entities import Enemy, Player
from .event_system import Event, EventBus
from .grid import Direction, Grid, GRID_HEIGHT, GRID_WIDTH
from .placement import populate

# Seconds between enemy ticks
ENEMY_TICK_SECONDS: float = 0.8


class Command(Enum):
    """Everything the input and timer layers can ask a session to do."""

    MOVE_UP = auto()
    MOVE_DOWN = auto()
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()
    ATTACK = auto()
    ADVANCE_ENEMIES = auto()

    @property
    def direction(self) -> Optional[Direction]:
        """The movement direction for MOVE_* commands, else None."""
        return _COMMAND_DIRECTIONS.get(self)

    @staticmethod
    def from_key(key: str) -> "Command":
        """
        Map a key name to a command: WASD to move, space to attack.

        Accepts bare letters ("w") as well as key codes ("KeyW", "Space").

        Raises:
            ValueError: If the key is not bound.
        """
        normalized = key.lower()
        if normalized.startswith("key") and len(normalized) == 4:
            normalized = normalized[3:]
        if normalized not in _KEY_BINDINGS:
            raise ValueError(f"No command bound to key {key!r}")
        return _KEY_BINDINGS[normalized]


_COMMAND_DIRECTIONS: Dict[Command, Direction] = {
    Command.MOVE_UP: Direction.UP,
    Command.MOVE_DOWN: Direction.DOWN,
    Command.MOVE_LEFT: Direction.LEFT,
    Command.MOVE_RIGHT: Direction.RIGHT,
}

_KEY_BINDINGS: Dict[str, Command] = {
    "w": Command.MOVE_UP,
    "s": Command.MOVE_DOWN,
    "a": Command.MOVE_LEFT,
    "d": Command.MOVE_RIGHT,
    " ": Command.ATTACK,
    "space": Command.ATTACK,
}


class GameSession:
    """
    A running game: one grid, one player, a list of enemies.

    Render consumers read grid, player and enemies and subscribe to
    Event.STATE_CHANGED to know when to redraw. Nothing outside the
    session writes to them.
    """

    def __init__(
        self,
        grid: Grid,
        player: Player,
        enemies: List[Enemy],
        rng=None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.grid: Grid = grid
        self.player: Player = player
        self.enemies: List[Enemy] = enemies
        self.event_bus: EventBus = event_bus if event_bus is not None else EventBus()
        self.engine = TurnEngine(grid, player, enemies, rng=rng, event_bus=self.event_bus)

        self.turn: int = 0
        self.ticks: int = 0

        self._commands: "queue.Queue[Command]" = queue.Queue()
        # Reentrant so STATE_CHANGED handlers can call tags() while a command applies
        self._lock = threading.RLock()

    def submit(self, command: Command) -> None:
        """Queue a command for the coordinating loop. Safe from any thread."""
        self._commands.put(command)

    def pending(self) -> int:
        """Approximate number of queued commands."""
        return self._commands.qsize()

    def apply(self, command: Command) -> bool:
        """
        Apply one command to completion.

        Returns:
            True if the state changed and consumers were told to redraw,
            False for a rejected move.
        """
        with self._lock:
            if command == Command.ATTACK:
                self.engine.attack()
                self.turn += 1
                changed = True
            elif command == Command.ADVANCE_ENEMIES:
                self.engine.advance_enemies()
                self.ticks += 1
                changed = True
            elif command.direction is not None:
                changed = self.engine.move_player(command.direction)
                if changed:
                    self.turn += 1
            else:
                raise ValueError(f"Unknown command {command}")

            if changed:
                self.event_bus.emit(Event.STATE_CHANGED, command=command)
            return changed

    def process_pending(self) -> int:
        """
        Drain the command queue, applying commands in arrival order.

        Returns:
            The number of commands applied.
        """
        applied = 0
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                return applied
            self.apply(command)
            applied += 1

    def run(self, stop: threading.Event, poll_interval: float = 0.05) -> None:
        """Apply queued commands as they arrive until stop is set."""
        while not stop.is_set():
            try:
                command = self._commands.get(timeout=poll_interval)
            except queue.Empty:
                continue
            self.apply(command)

    def tags(self) -> np.ndarray:
        """Snapshot of the grid as CellTag values, for render consumers."""
        with self._lock:
            return self.grid.tags()

    @property
    def player_defeated(self) -> bool:
        return not self.player.is_alive()

    @property
    def enemies_cleared(self) -> bool:
        return not self.enemies


class EnemyTicker(threading.Thread):
    """
    Timer thread that asks a session to advance enemies at a fixed period.

    The ticker only submits commands; the session's coordinating loop
    applies them.
    """

    def __init__(self, session: GameSession, period: float = ENEMY_TICK_SECONDS) -> None:
        super().__init__(name="enemy-ticker", daemon=True)
        self.session = session
        self.period = period
        self._halt = threading.Event()

    def run(self) -> None:
        while not self._halt.wait(self.period):
            self.session.submit(Command.ADVANCE_ENEMIES)

    def stop(self) -> None:
        self._halt.set()


def create_session(
    rng=None,
    event_bus: Optional[EventBus] = None,
    width: int = GRID_WIDTH,
    height: int = GRID_HEIGHT,
) -> GameSession:
    """
    Factory function to create a ready-to-play session.

    Generates a dungeon, scatters items, the player and enemies, and emits
    Event.LEVEL_START.

    Args:
        rng: Random source for generation, placement and enemy AI
             (defaults to the random module)
        event_bus: Bus to publish on; a new one is created if omitted
    """
    if rng is None:
        rng = random

    grid = Grid(width, height)
    generate_dungeon(grid, rng)
    player, enemies = populate(grid, rng)

    session = GameSession(grid, player, enemies, rng=rng, event_bus=event_bus)
    session.event_bus.emit(Event.LEVEL_START)
    return session
