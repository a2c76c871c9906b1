"""
Breadth-first search over the dungeon grid.

flood_fill() backs the connectivity pass during generation; find_path_bfs()
is used by the autopilot to steer the player. Enemies never use these; they
chase greedily along one axis at a time.
"""

from collections import deque
import sys
from typing import Callable, Deque, Dict, List, Optional, Set, Tuple

from .grid import CARDINAL_STEPS

# A path is a list of cell coordinates (x, y), ordered from start to goal
Path = List[Tuple[int, int]]

WalkableCheck = Callable[[int, int], bool]


def flood_fill(
    start_x: int,
    start_y: int,
    is_walkable_tile: WalkableCheck,
) -> Set[Tuple[int, int]]:
    """
    Return every cell reachable from (start_x, start_y) with 4-directional moves.

    The start cell is always included. Cells are visited in FIFO order and
    each is enqueued at most once.
    """
    visited: Set[Tuple[int, int]] = {(start_x, start_y)}
    queue: Deque[Tuple[int, int]] = deque([(start_x, start_y)])

    while queue:
        x, y = queue.popleft()
        for dx, dy in CARDINAL_STEPS:
            neighbour = (x + dx, y + dy)
            if neighbour in visited:
                continue
            if not is_walkable_tile(*neighbour):
                continue
            visited.add(neighbour)
            queue.append(neighbour)

    return visited


def find_path_bfs(
    start_x: int,
    start_y: int,
    target_x: int,
    target_y: int,
    is_walkable_tile: WalkableCheck,
    max_distance: int,
) -> Optional[Path]:
    """
    Find a path from (start_x, start_y) to (target_x, target_y) using BFS.

    The target itself does not need to be walkable, so callers can path to
    an occupied cell (an enemy) and stop one step short.

    Args:
        start_x: Starting column
        start_y: Starting row
        target_x: Target column
        target_y: Target row
        is_walkable_tile: Callback that returns True if cell (x, y) is walkable
        max_distance: Maximum number of cells to expand (bounds the search)

    Returns:
        List of (x, y) tuples from start to target (excludes start, includes
        target), or None if no path was found within max_distance.
        Returns an empty list if already at the target.
    """
    if start_x == target_x and start_y == target_y:
        return []

    queue: Deque[Tuple[int, int]] = deque([(start_x, start_y)])

    # parent[cell] = previous cell, for path reconstruction
    parent: Dict[Tuple[int, int], Optional[Tuple[int, int]]] = {(start_x, start_y): None}

    cells_searched = 0

    while queue:
        if cells_searched >= max_distance:
            break

        current = queue.popleft()
        cells_searched += 1

        for dx, dy in CARDINAL_STEPS:
            next_cell = (current[0] + dx, current[1] + dy)

            if next_cell in parent:
                continue

            is_target = next_cell == (target_x, target_y)
            if not is_target and not is_walkable_tile(*next_cell):
                continue

            parent[next_cell] = current

            if is_target:
                path: Path = []
                cell: Optional[Tuple[int, int]] = next_cell
                while cell is not None and cell != (start_x, start_y):
                    path.append(cell)
                    cell = parent[cell]
                path.reverse()
                return path

            queue.append(next_cell)

    print(f"No path found to ({target_x}, {target_y}) within {max_distance} cells.", file=sys.stderr)
    return None
