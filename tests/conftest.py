"""
Shared pytest fixtures for the baccarat table tests.

Stacked shoes deal a known card sequence so every rule branch can be reached
deliberately; `outcomes` builds round histories from a winner string such as
'BBPT' for the road tests.
"""

import pytest

from baccarat_engine import Card, RoundResult, Shoe

# Two-card hands with no pairs and no naturals.
SIX = ('2', '4')
SEVEN = ('3', '4')


def card(rank: str, suit: str = 'spades') -> Card:
    return Card(suit, rank)


def stacked_shoe(*ranks: str, decks: int = 6) -> Shoe:
    """A shoe whose next draws are exactly `ranks`, in order."""
    shoe = Shoe(decks, seed=0)
    shoe.cards = [card(r) for r in reversed(ranks)]
    return shoe


def round_of(player_ranks, banker_ranks) -> RoundResult:
    return RoundResult.from_hands([card(r) for r in player_ranks],
                                  [card(r, 'hearts') for r in banker_ranks])


def outcomes(sequence: str):
    """'B' = banker win, 'P' = player win, 'T' = tie."""
    hands = {
        'B': (SIX, SEVEN),
        'P': (SEVEN, SIX),
        'T': (SIX, SIX),
    }
    return [round_of(*hands[ch]) for ch in sequence]


@pytest.fixture
def stack():
    return stacked_shoe


@pytest.fixture
def hand_round():
    return round_of


@pytest.fixture
def history():
    return outcomes
