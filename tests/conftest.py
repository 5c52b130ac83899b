import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve import create_app, socketio  # noqa: E402
from delve.routes import dungeon_api  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True, "SECRET_KEY": "test-secret"})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def socket_client(test_app, client):
    # Flask-SocketIO test client sharing the HTTP client's cookie jar (session)
    sc = socketio.test_client(test_app, namespace="/dungeon", flask_test_client=client)
    yield sc
    if sc.is_connected("/dungeon"):
        sc.disconnect(namespace="/dungeon")


@pytest.fixture(autouse=True)
def _clear_dungeon_cache():
    """Keep cached dungeons from leaking config/seed state between tests."""
    with dungeon_api._dungeon_cache_lock:
        dungeon_api._dungeon_cache.clear()
    yield


@pytest.fixture()
def quiet_logs(monkeypatch):
    """Silence info-level structured logs so stdout holds only command output."""
    monkeypatch.setenv("DELVE_LOG_LEVEL", "warn")


def pytest_configure(config):  # register custom marker
    config.addinivalue_line("markers", "performance: generation time guardrails")
