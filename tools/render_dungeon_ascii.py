#!/usr/bin/env python3
"""
Render a generated dungeon as ASCII art for debugging.

Usage:
    uv run tools/render_dungeon_ascii.py [--seed S] [--empty]
"""

import argparse
import random
import sys
from pathlib import Path

# Add parent directory to path so we can import rogue
sys.path.insert(0, str(Path(__file__).parent.parent))

from rogue.dungeon_gen import generate_dungeon
from rogue.grid import Grid, GRID_HEIGHT, GRID_WIDTH
from rogue.placement import populate
from rogue.renderer import render_ascii


def main():
    parser = argparse.ArgumentParser(description="Render dungeon as ASCII art")
    parser.add_argument("--width", type=int, default=GRID_WIDTH, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=GRID_HEIGHT, help="Grid height in cells")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    parser.add_argument("--empty", action="store_true", help="Skip placing items, player and enemies")
    args = parser.parse_args()

    rng = random.Random(args.seed)

    grid = Grid(args.width, args.height)
    context = generate_dungeon(grid, rng)
    if not args.empty:
        populate(grid, rng)

    print(render_ascii(grid))

    # Print some debug info
    print(f"\n--- Debug Info ---", file=sys.stderr)
    print(f"Map size: {grid.width}x{grid.height} cells", file=sys.stderr)
    print(f"Rooms placed: {len(context.rooms)} of {context.target_rooms} ({context.room_attempts} draws)", file=sys.stderr)
    print(f"Corridor rows: {sorted(context.corridor_rows)}", file=sys.stderr)
    print(f"Corridor columns: {sorted(context.corridor_cols)}", file=sys.stderr)
    print(f"Floor cells: {grid.floor_count()} ({context.cells_pruned} pruned)", file=sys.stderr)


if __name__ == "__main__":
    main()
