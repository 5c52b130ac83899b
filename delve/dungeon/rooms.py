import random
from typing import List, Tuple

from ..logging_utils import get_logger
from .config import DungeonConfig
from .grid import EMPTY_RECT, Grid, Rect
from .partition import PartitionNode

log = get_logger("dungeon.rooms")

# Smallest room edge carved inside a leaf (boss sizing uses config.min_room_size)
LEAF_ROOM_MIN = 4


def start_rect(config: DungeonConfig) -> Rect:
    return Rect(config.start_x, config.start_y, config.start_size, config.start_size)


def carve_start_area(grid: Grid, rect: Rect) -> None:
    """Open the spawn area, leaving its outermost ring as wall."""
    grid.carve(rect, inset=1)


def leaf_room(region: Rect, config: DungeonConfig, rng: random.Random) -> Rect:
    """Pick a room inside ``region`` with at least a one cell margin.

    Sizes come from the half-open range [max(4, side // 2), min(max_room, side - 1)),
    which caps a room at ``side - 2``. A leaf too small for that range is used
    whole.
    """
    min_w = max(LEAF_ROOM_MIN, region.w // 2)
    min_h = max(LEAF_ROOM_MIN, region.h // 2)
    max_w = min(config.max_room_size, region.w - 1)
    max_h = min(config.max_room_size, region.h - 1)
    if min_w >= max_w or min_h >= max_h:
        return region
    w = rng.randrange(min_w, max_w)
    h = rng.randrange(min_h, max_h)
    x = region.x + rng.randint(1, region.w - w - 1)
    y = region.y + rng.randint(1, region.h - h - 1)
    return Rect(x, y, w, h)


def carve_leaf_rooms(
    node: PartitionNode,
    grid: Grid,
    start: Rect,
    config: DungeonConfig,
    rng: random.Random,
    rooms: List[Rect],
) -> Tuple[Rect, int]:
    """Carve one room per leaf below ``node``; return (representative room, discarded).

    Rooms overlapping the start area are neither carved nor listed, but still
    become their leaf's ``room_rect`` so tree corridors keep their anchors.
    """
    if node.is_leaf():
        node.room_rect = leaf_room(node.region, config, rng)
        if node.room_rect.overlaps(start):
            log.debug(event="room_discarded", room=node.room_rect.to_list(), reason="start_overlap")
            return node.room_rect, 1
        grid.carve(node.room_rect)
        rooms.append(node.room_rect)
        return node.room_rect, 0

    discarded = 0
    left = right = EMPTY_RECT
    if node.left is not None:
        left, d = carve_leaf_rooms(node.left, grid, start, config, rng, rooms)
        discarded += d
    if node.right is not None:
        right, d = carve_leaf_rooms(node.right, grid, start, config, rng, rooms)
        discarded += d
    node.room_rect = left if not left.is_empty() else right
    return node.room_rect, discarded


def boss_rect(config: DungeonConfig) -> Rect:
    bw = max(config.min_room_size, min(config.boss_room_width, config.width - 4))
    bh = max(config.min_room_size, min(config.boss_room_height, config.height - 4))
    return Rect((config.width - bw) // 2, (config.height - bh) // 2, bw, bh)


def carve_boss_room(grid: Grid, config: DungeonConfig) -> Rect:
    """Carve the centered boss room over whatever the partition left there."""
    rect = boss_rect(config)
    grid.carve(rect)
    return rect
