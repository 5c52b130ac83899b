"""Structural diagnostics for a generated dungeon.

Used by ``scripts/diagnose_seeds.py`` and the test-suite to report which
layout invariants (bounds, start separation, reachability, exit choice) a
given pass breaks. Every list is empty for a healthy pass.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .connectivity import flood_reachable
from .features import place_exit
from .grid import Rect


def _inside(rect: Rect, width: int, height: int) -> bool:
    return rect.x >= 0 and rect.y >= 0 and rect.right <= width and rect.bottom <= height


def analyze(dungeon) -> Dict[str, Any]:
    w, h = dungeon.width, dungeon.height
    start = dungeon.get_start_room()
    boss = dungeon.get_boss_room()
    rooms = dungeon.get_rooms()

    tracked: List[Rect] = [start, *dungeon.rooms]
    if not boss.is_empty():
        tracked.append(boss)
    out_of_bounds = [r.to_list() for r in tracked if not _inside(r, w, h)]
    start_overlaps = [r.to_list() for r in dungeon.rooms if r.overlaps(start)]

    reach = flood_reachable(dungeon.grid, dungeon.start_center)
    unreachable_rooms = [r.to_list() for r in rooms if r.center not in reach]
    boss_unreachable = bool(dungeon.rooms) and not boss.is_empty() and boss.center not in reach

    expected_exit = place_exit(rooms, start)
    exit_mismatch = expected_exit != dungeon.get_exit_location()

    return {
        "out_of_bounds": out_of_bounds,
        "start_overlaps": start_overlaps,
        "unreachable_rooms": unreachable_rooms,
        "boss_unreachable": boss_unreachable,
        "exit_mismatch": exit_mismatch,
    }


def is_healthy(report: Dict[str, Any]) -> bool:
    return not any(report.values())
