from typing import Tuple

from .grid import Coord2D, Grid


def effective_half_width(half_width: int) -> int:
    return max(1, half_width)


def dig_corridor(grid: Grid, a: Coord2D, b: Coord2D, half_width: int) -> None:
    """Carve an L-shaped corridor from ``a`` to ``b``.

    Strategy:
      * Horizontal band centered on a.y spanning a.x..b.x.
      * Vertical band centered on b.x spanning a.y..b.y.
    Both bands are ``2 * half + 1`` cells thick and meet at (b.x, a.y), so the
    two endpoints are always joined. Cells outside the grid are skipped.
    """
    half = effective_half_width(half_width)
    (ax, ay), (bx, by) = a, b

    for x in range(min(ax, bx), max(ax, bx) + 1):
        for off in range(-half, half + 1):
            grid.set_floor(x, ay + off)

    for y in range(min(ay, by), max(ay, by) + 1):
        for off in range(-half, half + 1):
            grid.set_floor(bx + off, y)


def carve_doorway(grid: Grid, point: Coord2D, direction: Tuple[int, int], half_width: int) -> None:
    """Open a wall band at ``point`` and one step further along ``direction``.

    The band runs perpendicular to ``direction`` so a corridor dug from
    ``point`` always lands in an opening at least as wide as itself.
    """
    half = effective_half_width(half_width)
    px, py = point
    dx, dy = direction
    for off in range(-half, half + 1):
        ox = off if dx == 0 else 0
        oy = off if dy == 0 else 0
        grid.set_floor(px + ox, py + oy)
        grid.set_floor(px + dx + ox, py + dy + oy)
