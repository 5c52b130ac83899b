# Cell state constants centralized for modular imports
FLOOR = 0
WALL = 1

GLYPHS = {FLOOR: ".", WALL: "#"}

__all__ = ["FLOOR", "WALL", "GLYPHS"]
