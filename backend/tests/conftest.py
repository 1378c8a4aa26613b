import os
import sys

import pytest

# Ensure the backend root (containing the `buzzroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from buzzroom.config import Config
from buzzroom.game.models import Player, Room
from buzzroom.server import create_app, get_registry


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SOCKETIO_ASYNC_MODE = 'threading'
    TRUST_PROXY_HEADERS = False


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def registry(flask_app):
    return get_registry(flask_app)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app, socketio):
    """Factory for connected Socket.IO test clients with the greeting flushed."""
    clients = []

    def _connect():
        sio_client = socketio.test_client(flask_app)
        sio_client.get_received()
        clients.append(sio_client)
        return sio_client

    yield _connect

    for sio_client in clients:
        if sio_client.is_connected():
            sio_client.disconnect()


@pytest.fixture()
def room():
    return Room(code='ABCDEF')


def add_players(room, *names):
    players = []
    for i, name in enumerate(names):
        p = Player(id=f'sid-{name.lower()}-{i}', name=name)
        room.players[p.id] = p
        players.append(p)
    return players


def received(sio_client, name):
    """Payloads of every received event called ``name``, oldest first."""
    return [pkt['args'][0] for pkt in sio_client.get_received() if pkt['name'] == name]
