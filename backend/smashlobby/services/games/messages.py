import json
from enum import Enum, IntEnum
from typing import Any, Tuple


class Event(IntEnum):
    """Wire event codes. The numbering is shared with existing clients."""
    PLAYER_JOINED = 0
    PLAYER_LEFT = 1
    GAME_START = 2  # client
    GAME_STARTED = 3
    PLAYER_TURN = 4
    PLAY_CARD = 5  # client
    CARD_PLAYED = 6
    HAND_SMASH = 7  # client
    CARDS_AWARDED = 8
    RESHUFFLE = 9
    PLAYER_WIN = 10
    PLAYER_ROSTER = 11


class Phase(str, Enum):
    JOINING = 'joining'
    CARD = 'card'
    SMASH = 'smash'


def encode(event: Event, info: Any = '') -> str:
    return json.dumps({'messageType': int(event), 'info': info})


def decode(raw: Any) -> Tuple[int, Any]:
    """Split an inbound envelope into ``(messageType, info)``.

    Accepts the JSON text clients send as well as an already-parsed dict
    (Socket.IO clients that emit objects). Raises ``ValueError`` for
    anything that is not a well-formed envelope.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"malformed message: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError('message must be an object')
    message_type = raw.get('messageType')
    if isinstance(message_type, bool) or not isinstance(message_type, int):
        raise ValueError('messageType must be an integer')
    return message_type, raw.get('info')
