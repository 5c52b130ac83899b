"""Binary space partitioning of the dungeon area into leaf regions."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, Optional

from .config import DungeonConfig
from .grid import EMPTY_RECT, Rect


@dataclass
class PartitionNode:
    region: Rect
    left: Optional["PartitionNode"] = None
    right: Optional["PartitionNode"] = None
    # Leaf: room computed for this region (kept even when discarded).
    # Internal: representative room of the first child that produced one.
    room_rect: Rect = EMPTY_RECT

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def center(self):
        return self.room_rect.center

    def leaves(self) -> Iterator["PartitionNode"]:
        if self.is_leaf():
            yield self
            return
        for child in (self.left, self.right):
            if child is not None:
                yield from child.leaves()

    def internal_nodes(self) -> Iterator["PartitionNode"]:
        if self.left is None or self.right is None:
            return
        yield self
        yield from self.left.internal_nodes()
        yield from self.right.internal_nodes()


def can_split(region: Rect, min_leaf_size: int) -> bool:
    return region.w >= min_leaf_size * 2 or region.h >= min_leaf_size * 2


def split_region(region: Rect, depth: int, config: DungeonConfig, rng: random.Random) -> PartitionNode:
    """Recursively split ``region`` and return the subtree rooted at it.

    Cuts run across the longer axis (width wins ties). The cut offset is drawn
    from the configured ratio window; a window that collapses after clamping
    leaves the node as a leaf instead of forcing a lopsided split.
    """
    node = PartitionNode(region)
    if depth >= config.max_depth or not can_split(region, config.min_leaf_size):
        return node

    split_width = region.w >= region.h
    axis_len = region.w if split_width else region.h
    if axis_len < 2:
        return node
    min_split = min(max(round(axis_len * config.split_ratio_min), 1), axis_len - 1)
    max_split = min(max(round(axis_len * config.split_ratio_max), min_split), axis_len - 1)
    if min_split >= max_split:
        return node

    cut = rng.randint(min_split, max_split)
    if split_width:
        left = Rect(region.x, region.y, cut, region.h)
        right = Rect(region.x + cut, region.y, region.w - cut, region.h)
    else:
        left = Rect(region.x, region.y, region.w, cut)
        right = Rect(region.x, region.y + cut, region.w, region.h - cut)

    node.left = split_region(left, depth + 1, config, rng)
    node.right = split_region(right, depth + 1, config, rng)
    return node


def build_tree(config: DungeonConfig, rng: random.Random) -> PartitionNode:
    """Partition the grid interior, keeping a one cell wall border."""
    root = Rect(1, 1, config.width - 2, config.height - 2)
    return split_region(root, 0, config, rng)
