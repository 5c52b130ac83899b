"""Corridor orchestration between start area, partition tree and boss room.

Also hosts the flood fill used by diagnostics and tests to verify that every
listed room can be walked to from the start area.
"""
from __future__ import annotations

import math
from collections import deque
from typing import List, Optional, Sequence, Set, Tuple

from .grid import Coord2D, Grid, Rect
from .partition import PartitionNode
from .tunnels import carve_doorway, dig_corridor

# Outward normals: west, east, north (toward y=0), south
WEST, EAST, NORTH, SOUTH = (-1, 0), (1, 0), (0, -1), (0, 1)


def distance(a: Coord2D, b: Coord2D) -> float:
    return math.dist(a, b)


def nearest(point: Coord2D, candidates: Sequence[Coord2D]) -> Optional[Coord2D]:
    """Closest candidate to ``point``; the first one wins ties."""
    best = None
    best_d = math.inf
    for c in candidates:
        d = distance(point, c)
        if d < best_d:
            best, best_d = c, d
    return best


def start_doorway(start: Rect) -> Coord2D:
    return (start.x + start.w // 2, start.bottom - 1)


def connect_start_to_nearest(grid: Grid, start: Rect, rooms: List[Rect], half_width: int) -> bool:
    """Dig from a doorway in the start area's far edge to the closest room.

    Returns False (and carves nothing) when there are no rooms.
    """
    target = nearest(start.center, [r.center for r in rooms])
    if target is None:
        return False
    doorway = start_doorway(start)
    carve_doorway(grid, doorway, SOUTH, half_width)
    dig_corridor(grid, doorway, target, half_width)
    return True


def connect_tree(node: PartitionNode, grid: Grid, half_width: int) -> int:
    """Join the representative rooms of every internal node's children."""
    if node.left is None or node.right is None:
        return 0
    dig_corridor(grid, node.left.center, node.right.center, half_width)
    return 1 + connect_tree(node.left, grid, half_width) + connect_tree(node.right, grid, half_width)


def boss_edge_points(boss: Rect) -> List[Tuple[Coord2D, Tuple[int, int]]]:
    mid_x = boss.x + boss.w // 2
    mid_y = boss.y + boss.h // 2
    return [
        ((boss.x, mid_y), WEST),
        ((boss.right - 1, mid_y), EAST),
        ((mid_x, boss.y), NORTH),
        ((mid_x, boss.bottom - 1), SOUTH),
    ]


def connect_boss_room(grid: Grid, boss: Rect, rooms: List[Rect], half_width: int) -> int:
    """Link each boss edge midpoint to its closest normal room.

    Rooms swallowed by the boss room do not count as normal rooms. Without
    any normal room a single corridor runs from the boss center to the
    closest listed room; with no rooms at all the boss room stays isolated.
    Returns the number of corridors dug.
    """
    if boss.is_empty() or not rooms:
        return 0
    normal = [r.center for r in rooms if not r.overlaps(boss)]
    if not normal:
        fallback = nearest(boss.center, [r.center for r in rooms])
        dig_corridor(grid, boss.center, fallback, half_width)
        return 1
    made = 0
    for point, direction in boss_edge_points(boss):
        target = nearest(point, normal)
        carve_doorway(grid, point, direction, half_width)
        dig_corridor(grid, point, target, half_width)
        made += 1
    return made


def flood_reachable(grid: Grid, origin: Coord2D) -> Set[Coord2D]:
    """4-connected FLOOR cells reachable from ``origin`` (empty if origin is wall)."""
    if not grid.is_floor(*origin):
        return set()
    seen = {origin}
    q = deque([origin])
    while q:
        cx, cy = q.popleft()
        for nx, ny in grid.neighbors_4(cx, cy):
            if (nx, ny) not in seen and grid.is_floor(nx, ny):
                seen.add((nx, ny))
                q.append((nx, ny))
    return seen
