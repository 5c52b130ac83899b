"""HTTP blueprints for the dungeon API."""
