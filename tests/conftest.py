"""Pytest fixtures for High-Low tests."""

import pytest
from random import Random

from core.cards import Card, Deck, full_deck
from core.counting import SeenCardLedger
from core.game import HighLowGame, Stack, StackStatus


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def game(rng):
    """A freshly dealt game."""
    g = HighLowGame(rng=rng)
    g.start()
    return g


@pytest.fixture
def ledger():
    """An empty seen-card ledger."""
    return SeenCardLedger()


def arrange(
    game: HighLowGame,
    stacks: list[list[Card]],
    draw_pile: list[Card],
    failed: set[tuple[int, int]] = frozenset(),
) -> None:
    """
    Lay out a started game by hand.

    Args:
        game: A started game
        stacks: Nine card lists (bottom to top), row-major
        draw_pile: Draw pile, top card last
        failed: 1-based positions of stacks to mark failed
    """
    game.stacks = [
        [
            Stack(
                cards=list(stacks[row * 3 + col]),
                status=StackStatus.FAILED if (row + 1, col + 1) in failed else StackStatus.ACTIVE,
            )
            for col in range(3)
        ]
        for row in range(3)
    ]
    game.draw_pile = Deck(draw_pile)
    game.seen = SeenCardLedger(card for pile in stacks for card in pile)


def filler_stacks(exclude: list[Card], count: int = 9) -> list[list[Card]]:
    """Single-card stacks drawn from the full deck, avoiding ``exclude``."""
    pool = [c for c in full_deck() if c not in exclude]
    return [[pool[i]] for i in range(count)]


@pytest.fixture
def arrange_game():
    """The layout helper, as a fixture."""
    return arrange


@pytest.fixture
def filler():
    """The filler-stack helper, as a fixture."""
    return filler_stacks
