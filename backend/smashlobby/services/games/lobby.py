import logging
import math
import random
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from .deck import SYMBOL_COUNT, deal
from .errors import LobbyFull, LobbyNotFound, LobbyStarted, NameTaken
from .messages import Event, Phase, decode, encode
from .smash import choose_recipients

logger = logging.getLogger(__name__)

# Smallest and largest table the deal table supports.
MIN_SEATS = 2
MAX_SEATS = 8


class Player:
    """One seat at the table: name, connection handle, hand and reaction time."""

    def __init__(self, name: str, conn: Any):
        self.name = name
        self.conn = conn
        self.hand: List[int] = []
        self.smash_time = 0.0

    def __repr__(self):
        return f"<Player {self.name!r} cards={len(self.hand)}>"

    def to_dict(self):
        return {
            'name': self.name,
            'cards': len(self.hand),
        }


class Lobby:
    """A single game session and its turn/smash state machine.

    Every operation takes ``self.lock``, so socket events and the smash
    timer never interleave inside a read-decide-mutate sequence. The lobby
    talks to the outside world only through the injected callables:

    - ``send(conn, text)`` delivers one serialized envelope
    - ``schedule(delay, callback)`` runs ``callback`` once after ``delay`` seconds
    """

    def __init__(
        self,
        lobby_id: str,
        send: Callable[[Any, str], None],
        schedule: Callable[[float, Callable[[], None]], None],
        min_players: int = MIN_SEATS,
        max_players: int = MAX_SEATS,
        smash_window: float = 2.0,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        if not MIN_SEATS <= min_players <= max_players <= MAX_SEATS:
            raise ValueError(
                f"player limits must satisfy {MIN_SEATS} <= min <= max <= {MAX_SEATS}, "
                f"got min={min_players} max={max_players}"
            )
        self.id = lobby_id
        self.min_players = min_players
        self.max_players = max_players
        self.smash_window = smash_window
        self.lock = threading.RLock()

        self.players: List[Player] = []
        self.table: List[int] = []
        self.phase = Phase.JOINING
        self.current_player = 0
        self.target = -1
        self.winner: Optional[str] = None
        self.closed = False

        self._send = send
        self._schedule = schedule
        self._rng = rng or random.Random()
        self._clock = clock
        self.created_at = clock()
        # Bumped on every play so a late timer can tell it belongs to an older round.
        self._round = 0

    # ---- membership ----

    def player_for(self, conn) -> Optional[Player]:
        for p in self.players:
            if p.conn is conn:
                return p
        return None

    def check_joinable(self, name: str) -> None:
        with self.lock:
            if self.closed:
                raise LobbyNotFound()
            if self.phase != Phase.JOINING:
                raise LobbyStarted()
            if len(self.players) >= self.max_players:
                raise LobbyFull()
            if any(p.name == name for p in self.players):
                raise NameTaken()

    def join(self, conn, name: str) -> Player:
        """Seat a new player, or return the existing seat for ``conn``."""
        with self.lock:
            existing = self.player_for(conn)
            if existing is not None:
                return existing
            self.check_joinable(name)
            player = Player(name, conn)
            self.players.append(player)
            logger.info(f"[join] lobby={self.id} name={name} seats={len(self.players)}")

            roster = encode(Event.PLAYER_ROSTER, [p.name for p in self.players])
            joined = encode(Event.PLAYER_JOINED, name)
            for p in list(self.players):
                self._deliver(p.conn, roster if p is player else joined)
            return player

    def remove_player(self, conn) -> Optional[Player]:
        with self.lock:
            player = self.player_for(conn)
            if player is None:
                return None
            seat = self.players.index(player)
            self.players.remove(player)
            logger.info(f"[leave] lobby={self.id} name={player.name} seats={len(self.players)}")

            had_turn = seat == self.current_player
            if seat < self.current_player:
                self.current_player -= 1
            elif had_turn and self.players:
                # Step back so the next advance lands on the seat that followed.
                self.current_player = (seat - 1) % len(self.players)
            if not self.players:
                self.current_player = 0

            self._broadcast(Event.PLAYER_LEFT, player.name)

            if (
                had_turn
                and self.phase == Phase.CARD
                and self.winner is None
                and len(self.players) >= MIN_SEATS
            ):
                self._next_turn()
            return player

    # ---- inbound protocol ----

    def handle_message(self, conn, raw) -> None:
        try:
            message_type, info = decode(raw)
        except ValueError as exc:
            logger.debug(f"[drop] lobby={self.id} {exc}")
            return

        if message_type == Event.GAME_START:
            self.start()
        elif message_type == Event.PLAY_CARD:
            self.play_card(conn)
        elif message_type == Event.HAND_SMASH:
            self.smash(conn, info)
        else:
            logger.debug(f"[drop] lobby={self.id} unhandled messageType={message_type}")

    def start(self) -> bool:
        with self.lock:
            if self.phase != Phase.JOINING or len(self.players) < self.min_players:
                logger.debug(f"[drop] lobby={self.id} start phase={self.phase.value} seats={len(self.players)}")
                return False

            deal(self.players, self._rng)
            self._broadcast(Event.GAME_STARTED, '')
            self.current_player = self._rng.randrange(len(self.players))
            logger.info(f"[start] lobby={self.id} seats={len(self.players)}")
            self._next_turn()
            return True

    def play_card(self, conn) -> bool:
        with self.lock:
            if self.phase != Phase.CARD or self.winner is not None or not self.players:
                return False
            player = self.players[self.current_player]
            if player.conn is not conn or not player.hand:
                logger.debug(f"[drop] lobby={self.id} play out of turn")
                return False

            held = len(player.hand)
            card = player.hand.pop(0)
            self.table.append(card)
            self._broadcast(Event.CARD_PLAYED, {
                'name': player.name,
                'card': card,
                'currentMascy': self.target,
                'num': str(held - 1) if held <= 4 else '?',
            })

            self.phase = Phase.SMASH
            self._round += 1
            token = self._round
            self._schedule(self.smash_window, lambda: self.resolve_smash(token))
            return True

    def smash(self, conn, info) -> bool:
        with self.lock:
            if self.phase != Phase.SMASH or self.winner is not None:
                return False
            player = self.player_for(conn)
            if player is None or player.smash_time != 0:
                return False
            try:
                smash_time = float(info)
            except (TypeError, ValueError):
                logger.debug(f"[drop] lobby={self.id} bad smash timestamp {info!r}")
                return False
            # 0 already means "no reaction"; only positive finite times count
            if not math.isfinite(smash_time) or smash_time <= 0:
                return False
            player.smash_time = smash_time
            return True

    # ---- timer ----

    def resolve_smash(self, token: Optional[int] = None) -> None:
        """Close the smash window: hand out the pile, check for a winner, advance."""
        with self.lock:
            if token is None:
                token = self._round
            if self.closed or self.winner is not None or self.phase != Phase.SMASH or token != self._round:
                logger.debug(f"[timer-abort] lobby={self.id} token={token} round={self._round} phase={self.phase.value}")
                return
            if not self.players:
                return

            correct, recipients = choose_recipients(self.players, self.table, self.target)
            if recipients:
                pile = list(self.table)
                for p in recipients:
                    p.hand.extend(pile)
                self.table = []
                self._broadcast(Event.CARDS_AWARDED, [p.name for p in recipients])
            logger.info(
                f"[smash-resolve] lobby={self.id} correct={correct} "
                f"recipients={[p.name for p in recipients]}"
            )

            for p in self.players:
                p.smash_time = 0.0

            if correct and self._check_winner():
                return
            self._next_turn()

    # ---- internals ----

    def _check_winner(self) -> bool:
        for p in self.players:
            if not p.hand:
                self.winner = p.name
                logger.info(f"[win] lobby={self.id} name={p.name}")
                self._broadcast(Event.PLAYER_WIN, p.name)
                return True
        return False

    def _next_turn(self) -> None:
        if not self.players:
            return
        empty_seats = 0
        while True:
            self.current_player = (self.current_player + 1) % len(self.players)
            if self.players[self.current_player].hand:
                break
            empty_seats += 1
            if empty_seats > len(self.players):
                deal(self.players, self._rng)
                logger.info(f"[reshuffle] lobby={self.id}")
                self._broadcast(Event.RESHUFFLE, '')

        self.target = (self.target + 1) % SYMBOL_COUNT
        self._broadcast(Event.PLAYER_TURN, self.players[self.current_player].name)
        self.phase = Phase.CARD

    def _broadcast(self, event: Event, info: Any) -> None:
        text = encode(event, info)
        for p in list(self.players):
            self._deliver(p.conn, text)

    def _deliver(self, conn, text: str) -> None:
        try:
            self._send(conn, text)
        except Exception:
            logger.warning(f"[send-failed] lobby={self.id} conn={conn!r}", exc_info=True)

    # ---- lifecycle ----

    def close(self) -> None:
        with self.lock:
            self.closed = True

    def to_dict(self) -> Dict[str, Any]:
        with self.lock:
            current = None
            if self.phase != Phase.JOINING and self.players:
                current = self.players[self.current_player].name
            return {
                'id': self.id,
                'phase': self.phase.value,
                'players': [p.to_dict() for p in self.players],
                'table_size': len(self.table),
                'current_player': current,
                'target': self.target,
                'winner': self.winner,
                'age_sec': round(self._clock() - self.created_at, 3),
            }
