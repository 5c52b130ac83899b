"""
project: Delve
module: dungeon_api.py
License: MIT

Dungeon map query and regeneration API routes.

Every read route accepts optional ``seed`` and ``boss`` query parameters;
without a seed the session's current seed is used (a random one is chosen
and remembered on first use). Responses are built from the engine's query
surface only, never from its internals.
"""

import hashlib
import random
import threading

from flask import Blueprint, current_app, jsonify, request, session

from delve import socketio
from delve.dungeon import Dungeon, DungeonConfig
from delve.logging_utils import get_logger

log = get_logger("dungeon_api")

SEED_MAX_INT = 9223372036854775807
NOTIFY_NAMESPACE = "/dungeon"

# Simple in-process cache (seed, size, boss) -> Dungeon. Locked because
# Flask-SocketIO workers may interleave requests.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()


def coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded 64-bit signed int."""
    if payload_seed is None or isinstance(payload_seed, bool):
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, int):
        return payload_seed % SEED_MAX_INT
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SEED_MAX_INT
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MAX_INT
    return random.randint(1, 1_000_000)


def truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


def dungeon_config() -> DungeonConfig:
    return DungeonConfig.from_env()


def get_cached_dungeon(seed: int, boss: bool, config: DungeonConfig | None = None) -> Dungeon:
    config = config or dungeon_config()
    key = (seed, (config.width, config.height), boss)
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
    if dungeon is not None:
        return dungeon
    dungeon = Dungeon(config=config, seed=seed, boss=boss)
    _remember(key, dungeon)
    return dungeon


def _remember(key, dungeon: Dungeon) -> None:
    cap = current_app.config.get("DUNGEON_CACHE_MAX", 8)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = dungeon
        while len(_dungeon_cache) > cap:
            first_key = next(iter(_dungeon_cache.keys()))
            if first_key == key:
                break
            _dungeon_cache.pop(first_key, None)


def notification_payload(dungeon: Dungeon) -> dict:
    exit_loc = dungeon.get_exit_location()
    return {
        "seed": dungeon.seed,
        "boss": dungeon.boss,
        "rooms": len(dungeon.get_rooms()),
        "exit": list(exit_loc) if exit_loc is not None else None,
    }


def broadcast_generated(dungeon: Dungeon) -> None:
    """Forward the engine's completion callback to Socket.IO clients."""
    try:
        socketio.emit("map_generated", notification_payload(dungeon), namespace=NOTIFY_NAMESPACE)
    except Exception as exc:
        # Emission failure must not discard an already generated map
        log.error(event="map_generated_emit_failed", seed=dungeon.seed, error=exc)


def _resolve_seed() -> int:
    raw = request.args.get("seed")
    if raw is not None:
        seed = coerce_seed(raw)
    elif session.get("dungeon_seed") is not None:
        seed = int(session["dungeon_seed"])
    else:
        seed = coerce_seed(None)
    session["dungeon_seed"] = seed
    return seed


def _current_dungeon() -> Dungeon:
    return get_cached_dungeon(_resolve_seed(), truthy(request.args.get("boss")))


bp_dungeon = Blueprint("dungeon", __name__)


@bp_dungeon.route("/api/dungeon/map")
def dungeon_map():
    """
    Return the full floor grid plus room layout.
    Response: { seed, boss, width, height, grid: rows[y][x] (0 floor, 1 wall),
                start_room, boss_room, rooms, exit }
    """
    dungeon = _current_dungeon()
    data = dungeon.summary()
    data["grid"] = dungeon.grid.rows()
    return jsonify(data)


@bp_dungeon.route("/api/dungeon/rooms")
def dungeon_rooms():
    dungeon = _current_dungeon()
    data = dungeon.summary()
    return jsonify(
        {
            "seed": data["seed"],
            "rooms": data["rooms"],
            "start_room": data["start_room"],
            "boss_room": data["boss_room"],
            "exit": data["exit"],
        }
    )


@bp_dungeon.route("/api/dungeon/floor")
def dungeon_floor():
    x = request.args.get("x", type=int)
    y = request.args.get("y", type=int)
    if x is None or y is None:
        return jsonify({"error": "x and y must be integers"}), 400
    dungeon = _current_dungeon()
    return jsonify({"x": x, "y": y, "floor": dungeon.is_floor(x, y)})


@bp_dungeon.route("/api/dungeon/regenerate", methods=["POST"])
def regenerate():
    """Run a fresh generation pass and notify Socket.IO listeners.

    Body JSON (all optional):
      { "seed": <int|str|null>, "boss": <bool> }
    Response: { "seed": <int>, "boss": <bool>, "metrics": {...} }
    """
    data = request.get_json(silent=True) or {}
    seed = coerce_seed(data.get("seed"))
    boss = truthy(data.get("boss"))
    config = dungeon_config()
    log.info(event="regenerate_requested", seed=seed, boss=boss)
    dungeon = Dungeon(config=config, seed=seed, boss=boss, on_generated=broadcast_generated)
    _remember((seed, (config.width, config.height), boss), dungeon)
    session["dungeon_seed"] = seed
    return jsonify({"seed": seed, "boss": boss, "metrics": dungeon.metrics})


@bp_dungeon.route("/api/dungeon/gen/metrics")
def generation_metrics():
    dungeon = _current_dungeon()
    return jsonify({"seed": dungeon.seed, "metrics": dungeon.metrics})
