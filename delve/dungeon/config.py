import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

from ..logging_utils import get_logger

log = get_logger("dungeon.config")


@dataclass
class DungeonConfig:
    width: int = 100
    height: int = 100
    min_leaf_size: int = 10
    max_depth: int = 6
    split_ratio_min: float = 0.45
    split_ratio_max: float = 0.55
    corridor_half_width: int = 2
    min_room_size: int = 10
    max_room_size: int = 24
    boss_room_width: int = 28
    boss_room_height: int = 28
    start_x: int = 2
    start_y: int = 2
    start_size: int = 25
    seed: Optional[int] = None

    def validate(self) -> "DungeonConfig":
        """Raise ValueError for settings no generation pass can honour."""
        for name in ("width", "height", "min_leaf_size", "max_depth", "min_room_size", "max_room_size", "start_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive (got {getattr(self, name)})")
        if self.boss_room_width <= 0 or self.boss_room_height <= 0:
            raise ValueError("boss room dimensions must be positive")
        if self.corridor_half_width < 0:
            raise ValueError("corridor_half_width must not be negative")
        if not (0.0 < self.split_ratio_min < 1.0 and 0.0 < self.split_ratio_max < 1.0):
            raise ValueError("split ratios must lie strictly between 0 and 1")
        if self.split_ratio_min > self.split_ratio_max:
            raise ValueError("split_ratio_min must not exceed split_ratio_max")
        if self.start_x < 0 or self.start_y < 0:
            raise ValueError("start area must not begin outside the grid")
        # Start area plus a one cell border must fit inside the grid
        if self.start_x + self.start_size + 1 > self.width or self.start_y + self.start_size + 1 > self.height:
            raise ValueError(
                f"grid {self.width}x{self.height} too small for start area "
                f"({self.start_x},{self.start_y},{self.start_size})"
            )
        if self.min_room_size > min(self.width, self.height) - 4:
            raise ValueError("min_room_size leaves no room for a boss area inside the grid")
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "DungeonConfig":
        """Build a config from ``DUNGEON_<FIELD>`` variables.

        Unparseable values are logged and ignored so a bad deployment variable
        never prevents map generation.
        """
        environ = os.environ if environ is None else environ
        cfg = cls()
        for f in fields(cls):
            if f.name == "seed":
                continue
            key = f"DUNGEON_{f.name.upper()}"
            raw = environ.get(key)
            if raw is None or raw == "":
                continue
            cast = float if isinstance(getattr(cfg, f.name), float) else int
            try:
                setattr(cfg, f.name, cast(raw))
            except ValueError:
                log.warn(event="config_env_ignored", key=key, value=raw)
        return replace(cfg, **overrides)


__all__ = ["DungeonConfig"]
