"""Public dungeon package interface."""

from .config import DungeonConfig
from .grid import EMPTY_RECT, Grid, Rect
from .pipeline import Dungeon
from .tiles import FLOOR, WALL

__all__ = [
    "Dungeon",
    "DungeonConfig",
    "Grid",
    "Rect",
    "EMPTY_RECT",
    "FLOOR",
    "WALL",
]
