"""
Read-only views of a game session: ASCII text and OpenCV images.

Nothing here writes to the grid or the entities.
"""

import cv2
import numpy as np
from typing import Dict, List, Tuple, TYPE_CHECKING
from PIL import Image as PILImage, ImageDraw, ImageFont

from .grid import Grid
from .tiles import CellTag

if TYPE_CHECKING:
    from .session import GameSession

# Type alias matching the numpy BGR images cv2 works with
Image = np.ndarray

TILE_SIZE: int = 16
HUD_HEIGHT: int = 24
HEALTH_BAR_HEIGHT: int = 3

TAG_TO_ASCII: Dict[CellTag, str] = {
    CellTag.WALL: "#",
    CellTag.FLOOR: ".",
    CellTag.HEALTH_POTION: "+",
    CellTag.SWORD: "/",
    CellTag.PLAYER: "@",
    CellTag.ENEMY: "E",
}

# Colours are BGR
TAG_TO_COLOR: Dict[CellTag, Tuple[int, int, int]] = {
    CellTag.WALL: (40, 40, 40),
    CellTag.FLOOR: (150, 150, 150),
    CellTag.HEALTH_POTION: (60, 60, 220),
    CellTag.SWORD: (220, 180, 60),
    CellTag.PLAYER: (80, 200, 80),
    CellTag.ENEMY: (40, 40, 160),
}

PLAYER_BAR_COLOR = (0, 255, 0)
ENEMY_BAR_COLOR = (0, 0, 255)
GRID_LINE_COLOR = (64, 64, 64)
HUD_BACKGROUND = (20, 20, 30)
HUD_TEXT_COLOR = (240, 240, 240)


def render_ascii(grid: Grid) -> str:
    """Convert a grid to an ASCII string, one character per cell."""
    tags = grid.tags()
    lines: List[str] = []
    for row in tags:
        lines.append("".join(TAG_TO_ASCII[CellTag(tag)] for tag in row))
    return "\n".join(lines)


def _draw_health_bar(
    frame: Image, x: int, y: int, hp: int, max_hp: int, color: Tuple[int, int, int], tile_size: int
) -> None:
    """Draw a bar along the top of cell (x, y), as wide as the hp fraction."""
    fraction = max(0.0, min(1.0, hp / max_hp)) if max_hp > 0 else 0.0
    width = int(round(tile_size * fraction))
    if width <= 0:
        return
    left = x * tile_size
    top = y * tile_size
    cv2.rectangle(
        frame,
        (left, top),
        (left + width - 1, top + HEALTH_BAR_HEIGHT - 1),
        color,
        thickness=-1,
    )


def render_frame(
    session: "GameSession",
    tile_size: int = TILE_SIZE,
    show_grid: bool = False,
) -> Image:
    """
    Render the whole grid as a BGR image, one tile_size square per cell.

    The player and every enemy carry a health bar showing hp / max_hp.
    """
    tags = session.tags()
    rows, cols = tags.shape
    frame: Image = np.zeros((rows * tile_size, cols * tile_size, 3), np.uint8)

    for tag, color in TAG_TO_COLOR.items():
        mask = tags == tag
        if not mask.any():
            continue
        # Scale the cell mask up to pixels
        pixel_mask = np.kron(mask, np.ones((tile_size, tile_size), dtype=bool))
        frame[pixel_mask] = color

    player = session.player
    _draw_health_bar(frame, player.x, player.y, player.hp, player.max_hp, PLAYER_BAR_COLOR, tile_size)
    for enemy in session.enemies:
        _draw_health_bar(frame, enemy.x, enemy.y, enemy.hp, enemy.max_hp, ENEMY_BAR_COLOR, tile_size)

    if show_grid:
        height, width = frame.shape[:2]
        for col in range(cols + 1):
            x = col * tile_size
            cv2.line(frame, (x, 0), (x, height), GRID_LINE_COLOR, 1)
        for row in range(rows + 1):
            y = row * tile_size
            cv2.line(frame, (0, y), (width, y), GRID_LINE_COLOR, 1)

    return frame


def hud_text(session: "GameSession") -> str:
    player = session.player
    return f"HP {player.hp}/{player.max_hp}   ATK {player.attack}   ENEMIES {len(session.enemies)}"


def draw_hud(frame: Image, session: "GameSession") -> Image:
    """Return a copy of frame with a status strip appended underneath."""
    height, width = frame.shape[:2]
    strip: Image = np.zeros((HUD_HEIGHT, width, 3), np.uint8)
    strip[:] = HUD_BACKGROUND
    combined = np.vstack([frame, strip])

    # Convert BGR numpy array to RGB PIL Image
    rgb_frame = cv2.cvtColor(combined, cv2.COLOR_BGR2RGB)
    pil_image = PILImage.fromarray(rgb_frame)
    draw = ImageDraw.Draw(pil_image)
    font = ImageFont.load_default()

    b, g, r = HUD_TEXT_COLOR
    draw.text((6, height + 6), hud_text(session), fill=(r, g, b), font=font)

    # Convert back to BGR numpy array
    return cv2.cvtColor(np.array(pil_image), cv2.COLOR_RGB2BGR)
