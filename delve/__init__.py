"""
project: Delve
module: __init__.py
License: MIT

Flask application and Socket.IO setup.

The web layer is a thin collaborator of the generation engine: it exposes the
engine's read-only queries as JSON routes and forwards the "map generated"
notification to connected Socket.IO clients. Configuration is sourced from
environment variables (optionally loaded from a .env file) with defaults
suitable for development.
"""

import os

from dotenv import load_dotenv
from flask import Flask
from flask_socketio import SocketIO

# Load .env if present so `SECRET_KEY`, `DUNGEON_*` etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

os.makedirs(app.instance_path, exist_ok=True)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    # Dungeon generation feature flags / metrics
    DUNGEON_ENABLE_GENERATION_METRICS=_env_flag("DUNGEON_ENABLE_GENERATION_METRICS", "1"),
    DUNGEON_CACHE_MAX=int(os.getenv("DUNGEON_CACHE_MAX", "8")),
)

# Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
)

# Register HTTP blueprints (import after app/socketio exist)
from delve.routes.dungeon_api import bp_dungeon  # noqa: E402

app.register_blueprint(bp_dungeon)

# Import websocket handlers so their event decorators register with Socket.IO (side-effect)
from delve.websockets import dungeon as _ws_dungeon  # noqa: F401,E402


def create_app():
    """Return the Flask app instance (single module-level app)."""
    return app
