"""Tests for the game session: command mapping, serialization and setup."""

import random
import threading
import time

import numpy as np
import pytest

from rogue.entities import Enemy, Player
from rogue.event_system import Event, EventBus
from rogue.grid import Direction, Grid
from rogue.session import Command, EnemyTicker, GameSession, create_session
from rogue.tiles import CellTag, Contents


def make_session(event_bus: EventBus = None) -> GameSession:
    """Player at (2, 2) in a 10x10 walled box, one enemy at (7, 7)."""
    grid = Grid(10, 10)
    grid.carve_rect(1, 1, 8, 8)
    grid.set_contents(2, 2, Contents.PLAYER)
    grid.set_contents(7, 7, Contents.ENEMY)
    player = Player(x=2, y=2)
    enemies = [Enemy(x=7, y=7, enemy_id="enemy_0")]
    return GameSession(grid, player, enemies, rng=random.Random(0), event_bus=event_bus)


def wait_for(condition, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.005)
    return condition()


class TestCommand:
    """Tests for Command and key mapping."""

    @pytest.mark.parametrize(
        "key,command",
        [
            ("w", Command.MOVE_UP),
            ("a", Command.MOVE_LEFT),
            ("s", Command.MOVE_DOWN),
            ("d", Command.MOVE_RIGHT),
            ("W", Command.MOVE_UP),
            ("KeyD", Command.MOVE_RIGHT),
            (" ", Command.ATTACK),
            ("Space", Command.ATTACK),
        ],
    )
    def test_from_key(self, key, command):
        assert Command.from_key(key) == command

    def test_unbound_key_raises(self):
        with pytest.raises(ValueError):
            Command.from_key("q")

    def test_direction(self):
        """Only move commands carry a direction."""
        assert Command.MOVE_UP.direction == Direction.UP
        assert Command.MOVE_LEFT.direction == Direction.LEFT
        assert Command.ATTACK.direction is None
        assert Command.ADVANCE_ENEMIES.direction is None


class TestGameSession:
    """Tests for applying commands through a session."""

    def test_apply_move(self):
        session = make_session()

        assert session.apply(Command.MOVE_RIGHT)

        assert (session.player.x, session.player.y) == (3, 2)
        assert session.turn == 1

    def test_rejected_move_does_not_signal_redraw(self):
        """A move into a wall is a no-op and emits no STATE_CHANGED."""
        bus = EventBus()
        changes = []
        bus.subscribe(Event.STATE_CHANGED, changes.append)
        session = make_session(bus)
        session.apply(Command.MOVE_UP)
        changes.clear()

        session.apply(Command.MOVE_UP)  # now at (2, 1); above is wall

        assert changes == []
        assert session.turn == 1

    def test_attack_and_tick_always_signal_redraw(self):
        bus = EventBus()
        changes = []
        bus.subscribe(Event.STATE_CHANGED, changes.append)
        session = make_session(bus)

        assert session.apply(Command.ATTACK)
        assert session.apply(Command.ADVANCE_ENEMIES)

        assert [e.kwargs["command"] for e in changes] == [Command.ATTACK, Command.ADVANCE_ENEMIES]
        assert session.ticks == 1

    def test_queue_applies_in_arrival_order(self):
        session = make_session()
        session.submit(Command.MOVE_RIGHT)
        session.submit(Command.MOVE_DOWN)
        session.submit(Command.MOVE_LEFT)
        assert session.pending() == 3

        assert session.process_pending() == 3

        assert session.pending() == 0
        assert (session.player.x, session.player.y) == (2, 3)

    def test_process_pending_on_empty_queue(self):
        assert make_session().process_pending() == 0

    def test_handler_can_read_tags_during_apply(self):
        """STATE_CHANGED handlers see the updated grid."""
        bus = EventBus()
        bus.set_debug(True)
        snapshots = []
        session = make_session(bus)
        bus.subscribe(Event.STATE_CHANGED, lambda _e: snapshots.append(session.tags()))

        session.apply(Command.MOVE_DOWN)

        assert snapshots[0][3, 2] == CellTag.PLAYER
        assert snapshots[0][2, 2] == CellTag.FLOOR

    def test_run_until_stopped(self):
        """The coordinating loop applies submitted commands on its own thread."""
        session = make_session()
        stop = threading.Event()
        loop = threading.Thread(target=session.run, args=(stop,), kwargs={"poll_interval": 0.01})
        loop.start()
        try:
            session.submit(Command.MOVE_RIGHT)
            session.submit(Command.MOVE_RIGHT)
            assert wait_for(lambda: session.player.x == 4)
        finally:
            stop.set()
            loop.join(timeout=2.0)
        assert not loop.is_alive()

    def test_status_properties(self):
        session = make_session()
        assert not session.player_defeated
        assert not session.enemies_cleared

        session.player.hp = 0
        session.enemies.clear()

        assert session.player_defeated
        assert session.enemies_cleared


class TestEnemyTicker:
    """Tests for the enemy tick timer."""

    def test_submits_ticks_until_stopped(self):
        session = make_session()
        ticker = EnemyTicker(session, period=0.01)
        ticker.start()
        try:
            assert wait_for(lambda: session.pending() >= 2)
        finally:
            ticker.stop()
            ticker.join(timeout=2.0)
        assert not ticker.is_alive()

        queued = session.pending()
        assert session.process_pending() == queued
        assert session.ticks == queued

    def test_is_daemon(self):
        assert EnemyTicker(make_session()).daemon


class TestCreateSession:
    """Tests for building a ready-to-play session."""

    def test_emits_level_start(self):
        bus = EventBus()
        started = []
        bus.subscribe(Event.LEVEL_START, started.append)

        session = create_session(random.Random(1), event_bus=bus)

        assert len(started) == 1
        assert session.event_bus is bus

    @pytest.mark.parametrize("seed", range(5))
    def test_occupancy_matches_entities(self, seed: int):
        """One player cell, one cell per enemy, and entity coordinates agree."""
        session = create_session(random.Random(seed))
        tags = session.tags()

        assert np.count_nonzero(tags == CellTag.PLAYER) == 1
        assert tags[session.player.y, session.player.x] == CellTag.PLAYER
        assert np.count_nonzero(tags == CellTag.ENEMY) == len(session.enemies) == 10
        for enemy in session.enemies:
            assert tags[enemy.y, enemy.x] == CellTag.ENEMY

    def test_same_seed_same_session(self):
        a = create_session(random.Random(42))
        b = create_session(random.Random(42))

        np.testing.assert_array_equal(a.tags(), b.tags())
