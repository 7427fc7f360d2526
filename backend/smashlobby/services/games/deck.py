import random
from typing import List, Optional, Sequence

SYMBOL_COUNT = 5
COPIES_PER_SYMBOL = 13
DECK_SIZE = SYMBOL_COUNT * COPIES_PER_SYMBOL

# Cards per player, keyed by seated player count.
_DEAL_COUNTS = {2: 12, 3: 12, 4: 12, 5: 12, 6: 10, 7: 9, 8: 8}


def build_deck() -> List[int]:
    return [symbol for symbol in range(SYMBOL_COUNT) for _ in range(COPIES_PER_SYMBOL)]


def shuffle(deck: List[int], rng: Optional[random.Random] = None) -> List[int]:
    """Shuffle ``deck`` in place and return it."""
    (rng or random).shuffle(deck)
    return deck


def deal_count(player_count: int) -> int:
    try:
        return _DEAL_COUNTS[player_count]
    except KeyError:
        raise ValueError(f"cannot deal to {player_count} players") from None


def deal(players: Sequence, rng: Optional[random.Random] = None) -> None:
    """Give every player a fresh hand from a newly shuffled deck.

    Hands are contiguous slices in seating order. Whatever is left of the
    deck after the last slice is discarded for this deal.
    """
    count = deal_count(len(players))
    cards = shuffle(build_deck(), rng)
    for seat, player in enumerate(players):
        player.hand = cards[seat * count:(seat + 1) * count]
