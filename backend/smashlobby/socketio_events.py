import logging
from flask import current_app, request
from flask_socketio import ConnectionRefusedError, emit
from smashlobby import socketio
from smashlobby.services.games import JoinRejected
from typing import Dict, Any

NAMESPACE = '/ws'
logger = logging.getLogger(__name__)


class Connection:
    """Handle for one Socket.IO connection.

    Lobbies use it as a seat key and send target. Equality is identity, so
    two handles never alias even if a sid were reused.
    """
    __slots__ = ('sid', 'namespace')

    def __init__(self, sid: str, namespace: str = NAMESPACE):
        self.sid = sid
        self.namespace = namespace

    def __repr__(self):
        return f"<Connection {self.sid}>"


_sid_to_ctx: Dict[str, Dict[str, Any]] = {}


def send_text(conn: Connection, text: str) -> None:
    # socketio.send works outside a request context, e.g. from timer tasks
    socketio.send(text, to=conn.sid, namespace=conn.namespace)


def close_connection(conn: Connection, reason: str = '') -> None:
    logger.info(f"[close] sid={conn.sid} reason={reason}")
    socketio.server.disconnect(conn.sid, namespace=conn.namespace)


def _registry():
    return current_app.extensions['lobby_registry']


def handle_connect(auth=None):
    """Join handshake: the query string carries lobbyID and playerName."""
    lobby_id = request.args.get('lobbyID', '')
    player_name = request.args.get('playerName', '')
    conn = Connection(request.sid, request.namespace)
    try:
        lobby = _registry().join(lobby_id, conn, player_name)
    except JoinRejected as exc:
        current_app.logger.info(f"[join-rejected] lobby={lobby_id} name={player_name} reason={exc.reason}")
        raise ConnectionRefusedError(exc.reason)
    _sid_to_ctx[request.sid] = {'lobby_id': lobby.id, 'conn': conn}


def handle_disconnect(reason=None):
    ctx = _sid_to_ctx.pop(request.sid, None)
    if not ctx:
        return
    _registry().leave(ctx['lobby_id'], ctx['conn'])


def handle_message(data):
    ctx = _sid_to_ctx.get(request.sid)
    if not ctx:
        return
    lobby = _registry().get(ctx['lobby_id'])
    if lobby is None:
        return
    lobby.handle_message(ctx['conn'], data)


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('message', handle_message, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
