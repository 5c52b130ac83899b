"""
project: Delve
module: server.py
License: MIT

Server bootstrap.

Exposes the helper that starts the Socket.IO server after configuring
application logging to a rotating file and the console.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from delve import app, socketio
from delve.logging_utils import current_level, log


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Start the Socket.IO server.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    """
    with app.app_context():
        _configure_logging()
    try:
        print(f"[INFO] Starting Socket.IO server on {host}:{port} (async_mode={socketio.async_mode})")
        log.info(event="server_start", host=host, port=port, async_mode=socketio.async_mode)
        socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")


def _configure_logging(level=None):
    """Route stdlib logging to instance/app.log (rotated) and the console.

    ``level`` defaults to DELVE_LOG_LEVEL so library records (werkzeug,
    engineio) follow the same threshold as the structured delve logger.
    Calling it again replaces the handlers rather than stacking duplicates.
    Returns the log file path.
    """
    if level is None:
        level = current_level()
    log_dir = app.instance_path
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "app.log")

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    handlers = (
        RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3),
        logging.StreamHandler(),
    )
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        root.addHandler(handler)
    return log_path
