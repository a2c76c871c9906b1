"""Tests for player melee."""

import pytest

from rogue.engine import TurnEngine
from rogue.entities import Enemy, Player
from rogue.event_system import Event, EventBus
from rogue.grid import Grid
from rogue.tiles import CellTag, Contents


def make_arena(width: int = 12, height: int = 12) -> Grid:
    grid = Grid(width, height)
    grid.carve_rect(1, 1, width - 2, height - 2)
    return grid


def put_player(grid: Grid, x: int, y: int, **stats) -> Player:
    grid.set_contents(x, y, Contents.PLAYER)
    return Player(x=x, y=y, **stats)


def put_enemy(grid: Grid, x: int, y: int, enemy_id: str, **stats) -> Enemy:
    grid.set_contents(x, y, Contents.ENEMY)
    return Enemy(x=x, y=y, enemy_id=enemy_id, **stats)


class TestAttack:
    """Tests for TurnEngine.attack."""

    def test_two_hits_kill_a_weakened_enemy(self):
        """An enemy with 20 hp survives one hit at attack 10 and dies to the second."""
        grid = make_arena()
        player = put_player(grid, 5, 5)
        enemy = put_enemy(grid, 6, 5, "enemy_0", hp=20)
        enemies = [enemy]
        engine = TurnEngine(grid, player, enemies)

        engine.attack()
        assert enemy.hp == 10
        assert enemies == [enemy]
        assert grid.tag_at(6, 5) == CellTag.ENEMY

        engine.attack()
        assert enemies == []
        assert grid.tag_at(6, 5) == CellTag.FLOOR

    def test_hits_every_adjacent_enemy(self):
        """All four neighbours are hit in one attack, east, west, south, north."""
        grid = make_arena()
        player = put_player(grid, 5, 5)
        north = put_enemy(grid, 5, 4, "north")
        south = put_enemy(grid, 5, 6, "south")
        west = put_enemy(grid, 4, 5, "west")
        east = put_enemy(grid, 6, 5, "east")
        engine = TurnEngine(grid, player, [north, south, west, east])

        hit = engine.attack()

        assert hit == [east, west, south, north]
        assert all(e.hp == 90 for e in hit)

    def test_diagonal_and_distant_enemies_are_safe(self):
        grid = make_arena()
        player = put_player(grid, 5, 5)
        diagonal = put_enemy(grid, 6, 6, "diagonal")
        distant = put_enemy(grid, 5, 7, "distant")
        engine = TurnEngine(grid, player, [diagonal, distant])

        assert engine.attack() == []
        assert diagonal.hp == 100
        assert distant.hp == 100

    def test_attack_strength_follows_player(self):
        """A sword-boosted player hits harder."""
        grid = make_arena()
        player = put_player(grid, 5, 5, attack=30)
        enemy = put_enemy(grid, 5, 4, "enemy_0")

        TurnEngine(grid, player, [enemy]).attack()

        assert enemy.hp == 70

    def test_overkill_removes_enemy(self):
        """An enemy taken below zero is removed like one taken to exactly zero."""
        grid = make_arena()
        player = put_player(grid, 5, 5, attack=50)
        enemy = put_enemy(grid, 4, 5, "enemy_0", hp=20)
        enemies = [enemy]

        TurnEngine(grid, player, enemies).attack()

        assert enemies == []
        assert grid.contents_at(4, 5) == Contents.EMPTY

    def test_kill_events(self):
        """Damage, kill and the final clear are reported in order."""
        grid = make_arena()
        player = put_player(grid, 5, 5)
        enemy = put_enemy(grid, 6, 5, "enemy_7", hp=10)
        bus = EventBus()
        seen = []
        for event in (Event.ENEMY_DAMAGED, Event.ENEMY_KILLED, Event.ENEMIES_CLEARED):
            bus.subscribe(event, seen.append)

        TurnEngine(grid, player, [enemy], event_bus=bus).attack()

        assert [e.event for e in seen] == [
            Event.ENEMY_DAMAGED,
            Event.ENEMY_KILLED,
            Event.ENEMIES_CLEARED,
        ]
        assert seen[0].kwargs == {"enemy_id": "enemy_7", "hp": 0}

    def test_clear_is_reported_once(self):
        """Killing two enemies in one swing reports ENEMIES_CLEARED only after the last."""
        grid = make_arena()
        player = put_player(grid, 5, 5)
        a = put_enemy(grid, 6, 5, "a", hp=5)
        b = put_enemy(grid, 4, 5, "b", hp=5)
        bus = EventBus()
        cleared = []
        bus.subscribe(Event.ENEMIES_CLEARED, cleared.append)

        engine = TurnEngine(grid, player, [a, b], event_bus=bus)
        engine.attack()
        engine.attack()

        assert len(cleared) == 1

    def test_surviving_enemy_stays_in_list(self):
        grid = make_arena()
        player = put_player(grid, 5, 5)
        weak = put_enemy(grid, 6, 5, "weak", hp=10)
        strong = put_enemy(grid, 5, 6, "strong")
        enemies = [weak, strong]

        TurnEngine(grid, player, enemies).attack()

        assert enemies == [strong]
        assert strong.hp == 90
