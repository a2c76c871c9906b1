#!/usr/bin/env python3
"""
Render a fresh game session to an image file for visual inspection.

Usage:
    uv run tools/render_dungeon_image.py                    # Random seed
    uv run tools/render_dungeon_image.py --seed 42          # Reproducible dungeon
    uv run tools/render_dungeon_image.py --output my.png    # Custom output path
    uv run tools/render_dungeon_image.py --hud --show-grid  # Status strip and cell grid
"""

import argparse
import cv2
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rogue.renderer import TILE_SIZE, draw_hud, render_frame
from rogue.session import create_session


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render a dungeon to an image file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducible dungeons",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default="dungeon_render.png",
        help="Output image path (default: dungeon_render.png)",
    )
    parser.add_argument(
        "--tile-size",
        type=int,
        default=TILE_SIZE,
        help=f"Pixels per cell (default: {TILE_SIZE})",
    )
    parser.add_argument(
        "--show-grid",
        action="store_true",
        help="Overlay a cell grid on the image",
    )
    parser.add_argument(
        "--hud",
        action="store_true",
        help="Append the status strip below the map",
    )

    args = parser.parse_args()

    if args.seed is not None:
        print(f"Using random seed: {args.seed}")
    rng = random.Random(args.seed)

    session = create_session(rng)
    grid = session.grid
    print(f"Dungeon size: {grid.width}x{grid.height} cells, {grid.floor_count()} floor")

    image = render_frame(session, tile_size=args.tile_size, show_grid=args.show_grid)
    if args.hud:
        image = draw_hud(image, session)

    output_path = Path(args.output)
    cv2.imwrite(str(output_path), image)
    print(f"Saved to: {output_path.absolute()}")

    player = session.player
    print(f"Player: cell ({player.x}, {player.y}), hp {player.hp}, attack {player.attack}")
    print(f"Enemies ({len(session.enemies)}):")
    for enemy in session.enemies:
        print(f"  {enemy.enemy_id}: cell ({enemy.x}, {enemy.y})")


if __name__ == "__main__":
    main()
