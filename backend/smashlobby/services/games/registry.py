import logging
import random
import string
import threading
import time
from typing import Any, Callable, Dict, Optional

from .errors import LobbyNotFound
from .lobby import Lobby
from .messages import Phase

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


class LobbyRegistry:
    """In-memory table of live lobbies.

    - Generates lobby codes and creates lobbies
    - Expires lobbies nobody joined within ``expiry_sec``
    - Destroys lobbies that emptied out, or that a started game can no
      longer continue in (one player left)

    The registry lock only guards the table itself and is never held while
    waiting on a lobby lock.
    """

    def __init__(
        self,
        send: Callable[[Any, str], None],
        close: Callable[[Any, str], None],
        schedule: Callable[[float, Callable[[], None]], None],
        expiry_sec: float = 10.0,
        code_length: int = 6,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
        **lobby_options,
    ):
        self.expiry_sec = expiry_sec
        self.code_length = code_length
        self._send = send
        self._close = close
        self._schedule = schedule
        self._clock = clock
        self._rng = rng or random.Random()
        self._lobby_options = lobby_options
        self._lobbies: Dict[str, Lobby] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._lobbies)

    def __contains__(self, lobby_id):
        return self.get(lobby_id) is not None

    def _generate_code(self) -> str:
        while True:
            code = ''.join(self._rng.choices(CODE_ALPHABET, k=self.code_length))
            if code not in self._lobbies:
                return code

    def create(self) -> Lobby:
        with self._lock:
            code = self._generate_code()
            lobby = Lobby(
                code,
                send=self._send,
                schedule=self._schedule,
                rng=random.Random(self._rng.random()),
                clock=self._clock,
                **self._lobby_options,
            )
            self._lobbies[code] = lobby
        logger.info(f"[lobby-create] lobby={code} expiry={self.expiry_sec}s")
        self._schedule(self.expiry_sec, lambda: self._expire(code, lobby))
        return lobby

    def get(self, lobby_id: Optional[str]) -> Optional[Lobby]:
        if not lobby_id:
            return None
        with self._lock:
            return self._lobbies.get(lobby_id.upper())

    def check_joinable(self, lobby_id: Optional[str], name: str) -> Lobby:
        lobby = self.get(lobby_id)
        if lobby is None:
            raise LobbyNotFound()
        lobby.check_joinable(name)
        return lobby

    def join(self, lobby_id: Optional[str], conn, name: str) -> Lobby:
        lobby = self.get(lobby_id)
        if lobby is None:
            raise LobbyNotFound()
        lobby.join(conn, name)
        return lobby

    def leave(self, lobby_id: Optional[str], conn) -> None:
        lobby = self.get(lobby_id)
        if lobby is None:
            return
        last_conn = None
        with lobby.lock:
            if lobby.remove_player(conn) is None:
                return
            if not lobby.players:
                self.destroy(lobby.id, lobby)
            elif len(lobby.players) == 1 and lobby.phase != Phase.JOINING:
                last_conn = lobby.players[0].conn
                self.destroy(lobby.id, lobby)
        if last_conn is not None:
            self._close(last_conn, 'not enough players')

    def destroy(self, lobby_id: str, lobby: Optional[Lobby] = None) -> bool:
        """Drop a lobby from the table. With ``lobby`` given, only if it is still that lobby."""
        with self._lock:
            current = self._lobbies.get(lobby_id.upper())
            if current is None or (lobby is not None and current is not lobby):
                return False
            del self._lobbies[current.id]
        current.close()
        logger.info(f"[lobby-destroy] lobby={current.id}")
        return True

    def _expire(self, lobby_id: str, lobby: Lobby) -> None:
        with lobby.lock:
            if lobby.players:
                return
            if self.destroy(lobby_id, lobby):
                logger.info(f"[lobby-expire] lobby={lobby_id} nobody joined")
