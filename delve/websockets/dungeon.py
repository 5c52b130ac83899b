"""Socket.IO dungeon namespace handlers.

Events:
    - connect: Client joins the /dungeon namespace
    - request_map: Ask for the summary of a dungeon; payload { seed?, boss? }

Emits:
    - status: Greeting on connect
    - map_generated: { seed, boss, rooms, exit } after a regeneration, or as
      the reply to request_map
"""

from flask import session
from flask_socketio import emit

from delve import socketio
from delve.logging_utils import get_logger
from delve.routes.dungeon_api import (
    NOTIFY_NAMESPACE,
    coerce_seed,
    get_cached_dungeon,
    notification_payload,
    truthy,
)

log = get_logger("ws.dungeon")


@socketio.on("connect", namespace=NOTIFY_NAMESPACE)
def handle_connect():
    emit("status", {"msg": "connected", "namespace": NOTIFY_NAMESPACE})
    log.debug(event="dungeon_ws_connect")


@socketio.on("request_map", namespace=NOTIFY_NAMESPACE)
def handle_request_map(data=None):
    data = data if isinstance(data, dict) else {}
    raw_seed = data.get("seed")
    if raw_seed is None:
        raw_seed = session.get("dungeon_seed")
    seed = coerce_seed(raw_seed)
    boss = truthy(data.get("boss"))
    dungeon = get_cached_dungeon(seed, boss)
    emit("map_generated", notification_payload(dungeon))
    log.info(event="request_map", seed=seed, boss=boss)
