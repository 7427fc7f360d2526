import json
import os
import random
import sys
import pytest

# Ensure the backend root (containing the `smashlobby` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from smashlobby import create_app, socketio
from smashlobby.services.games import Lobby


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ALLOWED_ORIGINS = '*'
    LOBBY_EXPIRY_SEC = 10
    LOBBY_CODE_LENGTH = 6
    SMASH_WINDOW_SEC = 2
    MIN_PLAYERS = 2
    MAX_PLAYERS = 8
    LOG_LEVEL = 'DEBUG'


class ManualScheduler:
    """Collects timers instead of sleeping; tests fire them explicitly."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run_pending(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()
        return len(pending)


class Outbox:
    """Records what a lobby sends, decoded, per connection."""

    def __init__(self):
        self.sent = []

    def __call__(self, conn, text):
        self.sent.append((conn, json.loads(text)))

    def for_conn(self, conn):
        return [msg for c, msg in self.sent if c is conn]

    def types(self, conn=None):
        return [msg['messageType'] for c, msg in self.sent if conn is None or c is conn]

    def clear(self):
        self.sent = []


class Conn:
    def __init__(self, label):
        self.label = label

    def __repr__(self):
        return f"<Conn {self.label}>"


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def outbox():
    return Outbox()


@pytest.fixture()
def make_lobby(outbox, scheduler):
    def _make(*names, seed=7, **options):
        lobby = Lobby('TEST01', send=outbox, schedule=scheduler, rng=random.Random(seed), **options)
        conns = {}
        for name in names:
            conns[name] = Conn(name)
            lobby.join(conns[name], name)
        outbox.clear()
        return lobby, conns
    return _make


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['lobby_registry']


@pytest.fixture()
def sio_client(flask_app):
    clients = []

    def _connect(lobby_id, name):
        test_client = socketio.test_client(
            flask_app,
            namespace='/ws',
            query_string=f'lobbyID={lobby_id}&playerName={name}',
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass
