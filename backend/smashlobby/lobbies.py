from flask import Blueprint, current_app, jsonify, request

from smashlobby.services.games import JoinRejected

lobbies = Blueprint('lobbies', __name__)


def _registry():
    return current_app.extensions['lobby_registry']


@lobbies.route('/createLobby', methods=['POST'])
def create_lobby():
    """
    Creates an empty lobby and returns its code as plain text.
    The lobby expires if nobody joins it in time.
    """
    lobby = _registry().create()
    current_app.logger.info(f"[create] lobby={lobby.id}")
    return lobby.id


@lobbies.route('/isJoinable', methods=['GET'])
def is_joinable():
    """
    Runs the same checks as the socket handshake without joining.
    """
    lobby_id = request.args.get('lobbyID', '')
    player_name = request.args.get('playerName', '')
    try:
        _registry().check_joinable(lobby_id, player_name)
    except JoinRejected as exc:
        return jsonify({'error': exc.reason}), exc.status_code
    return '1'


@lobbies.route('/lobbies/<string:lobby_id>', methods=['GET'])
def get_lobby_state(lobby_id):
    lobby = _registry().get(lobby_id)
    if lobby is None:
        return jsonify({'error': 'lobby not found'}), 404
    return jsonify(lobby.to_dict())
