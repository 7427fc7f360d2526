"""Card game rules: deck, lobby state machine, smash resolution, registry.

Nothing in here imports Flask or Socket.IO. A lobby reaches its players
and timers only through the ``send``/``close``/``schedule`` callables the
registry is built with, so the whole game can run against fakes in tests.
"""

from .errors import JoinRejected, LobbyFull, LobbyNotFound, LobbyStarted, NameTaken
from .lobby import Lobby, Player
from .messages import Event, Phase
from .registry import LobbyRegistry

__all__ = [
    'Event',
    'JoinRejected',
    'Lobby',
    'LobbyFull',
    'LobbyNotFound',
    'LobbyRegistry',
    'LobbyStarted',
    'NameTaken',
    'Phase',
    'Player',
]
