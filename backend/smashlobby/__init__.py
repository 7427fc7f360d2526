import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from smashlobby.config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, scheduler=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('ALLOWED_ORIGINS', '*')
    CORS(flask_app, origins=allowed_origins, methods=['GET', 'POST'], allow_headers=['Content-Type'])

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    logging.getLogger('smashlobby').setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    from smashlobby.services.games import LobbyRegistry
    from smashlobby.services.games.scheduler import BackgroundScheduler
    from smashlobby.socketio_events import close_connection, register_socketio_handlers, send_text

    flask_app.extensions['lobby_registry'] = LobbyRegistry(
        send=send_text,
        close=close_connection,
        schedule=scheduler or BackgroundScheduler(socketio),
        expiry_sec=float(flask_app.config.get('LOBBY_EXPIRY_SEC', 10)),
        code_length=int(flask_app.config.get('LOBBY_CODE_LENGTH', 6)),
        min_players=int(flask_app.config.get('MIN_PLAYERS', 2)),
        max_players=int(flask_app.config.get('MAX_PLAYERS', 8)),
        smash_window=float(flask_app.config.get('SMASH_WINDOW_SEC', 2)),
    )

    from smashlobby.lobbies import lobbies
    flask_app.register_blueprint(lobbies)

    # Register Socket.IO event handlers
    register_socketio_handlers()

    return flask_app
