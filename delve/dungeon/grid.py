"""Occupancy grid and rectangle primitives shared by every generation phase."""
from __future__ import annotations

from typing import Iterator, List, NamedTuple, Tuple

from .tiles import FLOOR, GLYPHS, WALL

Coord2D = Tuple[int, int]


class Rect(NamedTuple):
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def center(self) -> Coord2D:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def overlaps(self, other: "Rect") -> bool:
        """Strict interior overlap; rectangles sharing only an edge do not overlap."""
        if self.is_empty() or other.is_empty():
            return False
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom

    def cells(self) -> Iterator[Coord2D]:
        for ix in range(self.x, self.right):
            for iy in range(self.y, self.bottom):
                yield ix, iy

    def to_list(self) -> List[int]:
        return [self.x, self.y, self.w, self.h]


EMPTY_RECT = Rect(0, 0, 0, 0)


class Grid:
    """Fixed-size FLOOR/WALL cell array indexed as ``cells[x][y]``.

    Reads outside the grid are treated as wall and writes outside it are
    skipped, so carving helpers never need their own bounds checks.
    """

    __slots__ = ("width", "height", "cells")

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.cells: List[List[int]] = []
        self.reset()

    def reset(self) -> None:
        self.cells = [[WALL for _ in range(self.height)] for _ in range(self.width)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_floor(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self.cells[x][y] == FLOOR

    def set_floor(self, x: int, y: int) -> None:
        if self.in_bounds(x, y):
            self.cells[x][y] = FLOOR

    def carve(self, rect: Rect, inset: int = 0) -> None:
        """Set ``rect`` shrunk by ``inset`` on every side to FLOOR."""
        for ix in range(rect.x + inset, rect.right - inset):
            for iy in range(rect.y + inset, rect.bottom - inset):
                self.set_floor(ix, iy)

    def neighbors_4(self, x: int, y: int) -> Iterator[Coord2D]:
        # Ordered for deterministic traversal
        for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def floor_count(self) -> int:
        return sum(col.count(FLOOR) for col in self.cells)

    def rows(self) -> List[List[int]]:
        # Row-major (y first) so consumers can index rows[y][x]
        return [[self.cells[x][y] for x in range(self.width)] for y in range(self.height)]

    def to_ascii(self) -> str:
        return "\n".join("".join(GLYPHS[c] for c in row) for row in self.rows())

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(col) for col in self.cells)
