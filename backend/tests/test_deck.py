import random
from collections import Counter

import pytest

from smashlobby.services.games import Player
from smashlobby.services.games.deck import DECK_SIZE, build_deck, deal, deal_count, shuffle


def test_build_deck_has_thirteen_of_each_symbol():
    deck = build_deck()
    assert len(deck) == DECK_SIZE == 65
    assert Counter(deck) == {symbol: 13 for symbol in range(5)}


def test_shuffle_is_a_permutation():
    deck = build_deck()
    shuffled = shuffle(list(deck), random.Random(3))
    assert sorted(shuffled) == sorted(deck)
    assert shuffled != deck


@pytest.mark.parametrize('players,expected', [
    (2, 12), (3, 12), (4, 12), (5, 12), (6, 10), (7, 9), (8, 8),
])
def test_deal_count_table(players, expected):
    assert deal_count(players) == expected
    assert players * deal_count(players) <= DECK_SIZE


@pytest.mark.parametrize('players', [0, 1, 9])
def test_deal_count_outside_table(players):
    with pytest.raises(ValueError):
        deal_count(players)


def test_deal_replaces_hands_and_discards_remainder():
    seats = [Player(f'p{i}', object()) for i in range(7)]
    seats[0].hand = [4, 4, 4]
    deal(seats, random.Random(1))
    assert all(len(p.hand) == 9 for p in seats)
    dealt = Counter(card for p in seats for card in p.hand)
    # 63 of 65 cards dealt, nothing duplicated beyond the deck
    assert sum(dealt.values()) == 63
    assert all(dealt[symbol] <= 13 for symbol in range(5))
