"""Pipeline orchestration for dungeon generation.

Provides the public Dungeon class: it owns the grid and room list for the
current pass, runs the ordered generation phases, and answers the read-only
queries that spawners, renderers and the HTTP layer make afterwards.
"""
from __future__ import annotations

import os
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..logging_utils import get_logger
from .config import DungeonConfig
from .connectivity import connect_boss_room, connect_start_to_nearest, connect_tree
from .features import place_exit
from .grid import EMPTY_RECT, Coord2D, Grid, Rect
from .metrics import init_metrics
from .partition import build_tree
from .rooms import carve_boss_room, carve_leaf_rooms, carve_start_area, start_rect

log = get_logger("dungeon")

GeneratedCallback = Callable[["Dungeon"], None]


@dataclass
class Dungeon:
    config: DungeonConfig = field(default_factory=DungeonConfig)
    seed: Optional[int] = None
    boss: bool = False
    enable_metrics: bool = True
    on_generated: Optional[GeneratedCallback] = field(default=None, repr=False)

    def __post_init__(self):
        self.config.validate()
        if self.seed is None:
            self.seed = self.config.seed
        # Environment override support
        env_val = os.environ.get("DUNGEON_ENABLE_GENERATION_METRICS")
        if env_val is not None:
            self.enable_metrics = env_val.lower() not in {"0", "false", "no", ""}
        # Flask app config overrides (highest precedence)
        from flask import current_app, has_app_context

        if has_app_context() and "DUNGEON_ENABLE_GENERATION_METRICS" in current_app.config:
            self.enable_metrics = bool(current_app.config["DUNGEON_ENABLE_GENERATION_METRICS"])
        self.grid = Grid(self.config.width, self.config.height)
        self.rooms: List[Rect] = []
        self.start_room: Rect = start_rect(self.config)
        self.boss_room: Rect = EMPTY_RECT
        self.exit_location: Optional[Coord2D] = None
        self.rooms_discarded = 0
        self.metrics: Dict[str, Any] = init_metrics()
        self.regenerate(seed=self.seed, boss=self.boss)

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def is_boss_pass(self) -> bool:
        return not self.boss_room.is_empty()

    @property
    def start_center(self) -> Coord2D:
        return self.start_room.center

    def regenerate(
        self,
        seed: Optional[int] = None,
        boss: Optional[bool] = None,
        on_generated: Optional[GeneratedCallback] = None,
    ) -> Dict[str, Any]:
        """Discard the current layout and run one full generation pass.

        ``seed=None`` draws a fresh seed (0 is a valid deterministic seed);
        ``boss=None`` keeps the previous boss flag. The callback (or the one
        given at construction) runs exactly once after every phase finished.
        Returns the pass metrics.
        """
        # Preserve seed semantics: 0 is valid deterministic seed; None => random
        self.seed = random.randint(1, 1_000_000) if seed is None else seed
        if boss is not None:
            self.boss = bool(boss)
        self._run_pipeline()
        callback = on_generated or self.on_generated
        if callback is not None:
            callback(self)
        return self.metrics

    def _run_pipeline(self):
        """Execute ordered generation phases with lightweight per-phase timing."""
        if self.enable_metrics:
            start = time.perf_counter()
            phase_times = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter()
                r = fn(*a, **k)
                phase_times[label] = int((time.perf_counter() - ps) * 1000)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)

        cfg = self.config
        rng = random.Random(self.seed)
        half = cfg.corridor_half_width
        self.metrics = init_metrics()
        # Pass-scoped state is rebuilt from scratch
        self.grid.reset()
        self.rooms = []
        self.boss_room = EMPTY_RECT
        self.exit_location = None
        self.start_room = start_rect(cfg)

        _phase('carve_start', carve_start_area, self.grid, self.start_room)
        tree = _phase('partition', build_tree, cfg, rng)
        _rep, self.rooms_discarded = _phase(
            'carve_rooms', carve_leaf_rooms, tree, self.grid, self.start_room, cfg, rng, self.rooms
        )
        if self.boss:
            self.boss_room = _phase('carve_boss', carve_boss_room, self.grid, cfg)
        linked = _phase('connect_start', connect_start_to_nearest, self.grid, self.start_room, self.rooms, half)
        tree_corridors = _phase('connect_tree', connect_tree, tree, self.grid, half)
        boss_links = 0
        if self.boss:
            boss_links = _phase('connect_boss', connect_boss_room, self.grid, self.boss_room, self.rooms, half)
        self.exit_location = _phase('place_exit', place_exit, self.get_rooms(), self.start_room)

        self.metrics['leaves'] = sum(1 for _ in tree.leaves())
        self.metrics['rooms_carved'] = len(self.rooms)
        self.metrics['rooms_discarded'] = self.rooms_discarded
        self.metrics['corridors_dug'] = tree_corridors + int(linked) + boss_links
        self.metrics['boss_connections'] = boss_links
        self.metrics['exit_placed'] = self.exit_location is not None
        if self.enable_metrics:
            self.metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
            self.metrics['phase_ms'] = phase_times
        if not linked:
            log.warn(event="start_isolated", seed=self.seed, reason="no_rooms")
        log.info(
            event="dungeon_generated",
            seed=self.seed,
            boss=self.boss,
            size=f"{cfg.width}x{cfg.height}",
            rooms=len(self.rooms),
            discarded=self.rooms_discarded,
            runtime_ms=self.metrics['runtime_ms'],
        )

    # Query surface (read-only for collaborators)
    def is_floor(self, x: int, y: int) -> bool:
        return self.grid.is_floor(x, y)

    def get_rooms(self) -> List[Rect]:
        if self.is_boss_pass:
            return [r for r in self.rooms if not r.overlaps(self.boss_room)]
        return list(self.rooms)

    def get_boss_room(self) -> Rect:
        return self.boss_room

    def get_start_room(self) -> Rect:
        return self.start_room

    def get_exit_location(self) -> Optional[Coord2D]:
        return self.exit_location

    def to_ascii(self) -> str:
        lines = [list(row) for row in self.grid.to_ascii().splitlines()]
        sx, sy = self.start_center
        lines[sy][sx] = "@"
        if self.exit_location is not None:
            ex, ey = self.exit_location
            lines[ey][ex] = ">"
        return "\n".join("".join(row) for row in lines)

    def summary(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "boss": self.boss,
            "width": self.width,
            "height": self.height,
            "start_room": self.start_room.to_list(),
            "boss_room": self.boss_room.to_list(),
            "rooms": [r.to_list() for r in self.get_rooms()],
            "exit": list(self.exit_location) if self.exit_location is not None else None,
        }
