"""Grid dungeon generation and turn engine."""

from rogue.tiles import Terrain, Contents, CellTag
from rogue.grid import Grid, Position, Direction, GRID_WIDTH, GRID_HEIGHT
from rogue.dungeon_gen import GenerationContext, Room, generate_dungeon
from rogue.entities import Player, Enemy
from rogue.placement import find_random_free_cell, populate
from rogue.engine import TurnEngine
from rogue.event_system import Event, EventBus, EventData
from rogue.session import Command, EnemyTicker, GameSession, create_session
from rogue.pathfinding import find_path_bfs, flood_fill, Path
