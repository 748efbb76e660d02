"""Core High-Low engine - 100% UI-agnostic."""

from core.cards import Card, Deck, Rank, Suit, compare, full_deck, rank_value, shuffle
from core.moves import Move, Prediction

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "compare",
    "full_deck",
    "rank_value",
    "shuffle",
    "Move",
    "Prediction",
]
