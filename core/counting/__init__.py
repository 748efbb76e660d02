"""Card counting: tracking which cards have been seen."""

from core.counting.ledger import CARDS_PER_RANK, RankCount, SeenCardLedger, card_counts

__all__ = [
    "CARDS_PER_RANK",
    "RankCount",
    "SeenCardLedger",
    "card_counts",
]
