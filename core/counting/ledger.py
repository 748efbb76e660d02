"""Seen-card ledger for card counting."""

from dataclasses import dataclass
from typing import Iterable, Iterator

from core.cards import Card, Rank

CARDS_PER_RANK = 4


@dataclass(frozen=True)
class RankCount:
    """How many cards of one rank have been seen and how many remain."""

    rank: Rank
    seen: int
    total: int = CARDS_PER_RANK

    @property
    def remaining(self) -> int:
        return self.total - self.seen

    @property
    def fraction_remaining(self) -> float:
        """Return the share of this rank still unseen (0.0-1.0)."""
        return self.remaining / self.total


def card_counts(seen_cards: Iterable[Card]) -> list[RankCount]:
    """
    Count seen cards per rank.

    Args:
        seen_cards: Every card placed on a stack so far

    Returns:
        One RankCount per rank, lowest rank first
    """
    seen_by_rank = {rank: 0 for rank in Rank}
    for card in seen_cards:
        seen_by_rank[card.rank] += 1
    return [RankCount(rank=rank, seen=seen_by_rank[rank]) for rank in Rank]


class SeenCardLedger:
    """
    Ordered record of every card placed on any stack.

    This is the only input to probability computation. A 52-card deck never
    repeats a card, so recording the same card twice is an error.
    """

    def __init__(self, cards: Iterable[Card] = ()) -> None:
        """Initialize the ledger, optionally with already-visible cards."""
        self._cards: list[Card] = []
        self._members: set[Card] = set()
        self.record_many(cards)

    def record(self, card: Card) -> None:
        """
        Record a newly placed card.

        Raises:
            ValueError: If the card was already recorded
        """
        if card in self._members:
            raise ValueError(f"Card already seen: {card}")
        self._cards.append(card)
        self._members.add(card)

    def record_many(self, cards: Iterable[Card]) -> None:
        """Record several cards in order."""
        for card in cards:
            self.record(card)

    def remaining_of(self, rank: Rank) -> int:
        """Return how many cards of ``rank`` are still unseen."""
        return CARDS_PER_RANK - sum(1 for card in self._cards if card.rank == rank)

    def rank_counts(self) -> list[RankCount]:
        """Return per-rank seen/remaining counts."""
        return card_counts(self._cards)

    @property
    def cards(self) -> tuple[Card, ...]:
        """Return the seen cards in the order they were recorded."""
        return tuple(self._cards)

    def reset(self) -> None:
        """Forget every recorded card."""
        self._cards.clear()
        self._members.clear()

    def __contains__(self, card: object) -> bool:
        return card in self._members

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(cards_seen={len(self._cards)})"
