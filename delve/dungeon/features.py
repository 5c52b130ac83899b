"""Gameplay feature placement on a finished layout (currently the exit)."""
from __future__ import annotations

from typing import Optional, Sequence

from .connectivity import distance
from .grid import Coord2D, Rect


def farthest_room(rooms: Sequence[Rect], start: Rect) -> Optional[Rect]:
    """Room whose center lies farthest (straight line) from the start center.

    Rooms overlapping the start area never qualify; the first room wins ties.
    """
    origin = start.center
    best = None
    best_d = -1.0
    for r in rooms:
        if r.overlaps(start):
            continue
        d = distance(origin, r.center)
        if d > best_d:
            best, best_d = r, d
    return best


def place_exit(rooms: Sequence[Rect], start: Rect) -> Optional[Coord2D]:
    room = farthest_room(rooms, start)
    return room.center if room is not None else None
