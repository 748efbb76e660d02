"""Card model and deck builder - immutable cards, unbiased shuffling, draw pile."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable, Iterator


class Suit(Enum):
    """Card suits. Suit never affects game logic."""

    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks, valued by their position in the High-Low ordering."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]


_RANK_ALIASES = {
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
    "A": Rank.ACE,
}

_SUIT_ALIASES = {
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card. Equality and hashing are structural."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def rank_value(self) -> int:
        """Return the rank value (2-10, J=11, Q=12, K=13, A=14)."""
        return self.rank.value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10d' or 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str not in _RANK_ALIASES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_ALIASES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_ALIASES[rank_str], _SUIT_ALIASES[suit_str])


def rank_value(card: Card) -> int:
    """Return the numeric ordering of a card's rank (2..14)."""
    return card.rank.value


def compare(a: Card, b: Card) -> int:
    """
    Compare two cards by rank only.

    Returns:
        1 if ``a`` outranks ``b``, -1 if ``b`` outranks ``a``, 0 on equal rank
    """
    diff = rank_value(a) - rank_value(b)
    if diff > 0:
        return 1
    if diff < 0:
        return -1
    return 0


def full_deck() -> list[Card]:
    """Return the 52-card population in a fixed, unshuffled order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle(cards: Iterable[Card], rng: Random | None = None) -> list[Card]:
    """
    Return a uniformly shuffled copy of ``cards`` (Fisher-Yates).

    Args:
        cards: Cards to shuffle; the input is left untouched
        rng: Random source, injectable for reproducible deals
    """
    rng = rng or Random()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def deal(cards: list[Card], n: int) -> tuple[list[Card], list[Card]]:
    """
    Take ``n`` cards off the top (end) of ``cards``.

    Returns:
        ``(dealt, remainder)`` where ``dealt[0]`` was the top card
    """
    if n < 0 or n > len(cards):
        raise ValueError(f"Cannot deal {n} cards from a deck of {len(cards)}")
    split = len(cards) - n
    dealt = list(reversed(cards[split:]))
    return dealt, list(cards[:split])


@dataclass(frozen=True, slots=True)
class Drawn:
    """A card successfully taken from (or seen on top of) the draw pile."""

    card: Card


@dataclass(frozen=True, slots=True)
class EmptyDeck:
    """Marker returned instead of a card when the draw pile is exhausted."""


EMPTY_DECK = EmptyDeck()

DrawResult = Drawn | EmptyDeck


class Deck:
    """The draw pile. The top card is the last element."""

    def __init__(self, cards: Iterable[Card] = ()) -> None:
        self._cards: list[Card] = list(cards)

    def draw(self) -> DrawResult:
        """Remove and return the top card, or EMPTY_DECK when exhausted."""
        if not self._cards:
            return EMPTY_DECK
        return Drawn(self._cards.pop())

    def peek(self) -> DrawResult:
        """Return the top card without removing it."""
        if not self._cards:
            return EMPTY_DECK
        return Drawn(self._cards[-1])

    @property
    def cards(self) -> tuple[Card, ...]:
        """Return the cards bottom to top."""
        return tuple(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __repr__(self) -> str:
        return f"Deck(cards_remaining={len(self._cards)})"
