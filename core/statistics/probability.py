"""Exact High-Low outcome probabilities from the unseen-card population."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterable, Sequence

from config import GameConfig
from core.cards import Card, compare, full_deck
from core.moves import Prediction

if TYPE_CHECKING:
    from core.game.engine import Stack


class ConfidenceLevel(Enum):
    """How favourable a probability is, for display hints."""

    HIGH = auto()
    MEDIUM = auto()
    LOW = auto()
    VERY_LOW = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").lower()


@dataclass(frozen=True)
class OutcomeProbabilities:
    """
    Outcome counts for one reference card against a remaining population.

    The probabilities are derived from the counts. With an empty population
    every probability is 0 and ``total`` is 0; callers treat that as
    "the game has ended" rather than as real odds.
    """

    higher_count: int
    lower_count: int
    same_count: int

    def __post_init__(self) -> None:
        """Validate counts."""
        if min(self.higher_count, self.lower_count, self.same_count) < 0:
            raise ValueError("Outcome counts cannot be negative")

    @property
    def total(self) -> int:
        return self.higher_count + self.lower_count + self.same_count

    @property
    def higher(self) -> float:
        return self._share(self.higher_count)

    @property
    def lower(self) -> float:
        return self._share(self.lower_count)

    @property
    def same(self) -> float:
        return self._share(self.same_count)

    def _share(self, count: int) -> float:
        total = self.total
        return count / total if total > 0 else 0.0

    def count(self, prediction: Prediction) -> int:
        """Return the number of remaining cards that would make ``prediction`` correct."""
        return {
            Prediction.HIGHER: self.higher_count,
            Prediction.LOWER: self.lower_count,
            Prediction.SAME: self.same_count,
        }[prediction]

    def probability(self, prediction: Prediction) -> float:
        """Return the probability that ``prediction`` is correct."""
        return self._share(self.count(prediction))

    def to_dict(self) -> dict[str, float | int]:
        """Convert to a plain mapping with the probabilities and total."""
        return {
            "higher": self.higher,
            "lower": self.lower,
            "same": self.same,
            "total": self.total,
        }


def remaining_population(seen_cards: Iterable[Card]) -> list[Card]:
    """
    Return the cards not yet seen.

    The population is always derived from the seen cards, never from the
    draw pile, even though the two hold the same cards.

    Args:
        seen_cards: Every card placed on any stack

    Returns:
        The full deck minus the seen cards, in full-deck order
    """
    seen = set(seen_cards)
    return [card for card in full_deck() if card not in seen]


def outcome_probabilities(
    reference_card: Card,
    population: Iterable[Card],
) -> OutcomeProbabilities:
    """
    Count how the population ranks against a reference card.

    Args:
        reference_card: The card the player is guessing against
        population: The cards that could be drawn next

    Returns:
        OutcomeProbabilities for Higher, Lower and Same
    """
    higher = lower = same = 0
    for card in population:
        result = compare(card, reference_card)
        if result > 0:
            higher += 1
        elif result < 0:
            lower += 1
        else:
            same += 1
    return OutcomeProbabilities(higher_count=higher, lower_count=lower, same_count=same)


def compute_probabilities(
    reference_card: Card,
    seen_cards: Iterable[Card],
) -> OutcomeProbabilities:
    """Probabilities for ``reference_card`` given everything seen so far."""
    return outcome_probabilities(reference_card, remaining_population(seen_cards))


def confidence_level(
    probability: float,
    high: float = 0.6,
    medium: float = 0.35,
    low: float = 0.2,
) -> ConfidenceLevel:
    """Grade a probability against the confidence thresholds."""
    if probability >= high:
        return ConfidenceLevel.HIGH
    if probability >= medium:
        return ConfidenceLevel.MEDIUM
    if probability >= low:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.VERY_LOW


def format_probability(probability: float) -> str:
    """Format a probability as a whole percentage, e.g. 0.667 -> '67%'."""
    return f"{round(probability * 100)}%"


class ProbabilityEngine:
    """
    Probability queries bound to a game configuration.

    Wraps the module functions with the configured confidence thresholds
    and adds the per-stack lookup used by presentation layers.
    """

    def __init__(self, game_config: GameConfig | None = None) -> None:
        """
        Initialize the probability engine.

        Args:
            game_config: Game configuration. Defaults to standard thresholds.
        """
        self.config = game_config or GameConfig()

    def confidence(self, probability: float) -> ConfidenceLevel:
        """Grade a probability with the configured thresholds."""
        return confidence_level(
            probability,
            high=self.config.confidence_high,
            medium=self.config.confidence_medium,
            low=self.config.confidence_low,
        )

    def for_card(self, reference_card: Card, seen_cards: Iterable[Card]) -> OutcomeProbabilities:
        """Probabilities for an arbitrary reference card."""
        return compute_probabilities(reference_card, seen_cards)

    def for_stack(
        self,
        stacks: Sequence[Sequence["Stack"]],
        row: int,
        column: int,
    ) -> OutcomeProbabilities | None:
        """
        Probabilities for the top card of one stack.

        Every card on every stack, including buried cards, counts as seen.

        Args:
            stacks: The 3x3 stack grid
            row: 1-based row
            column: 1-based column

        Returns:
            OutcomeProbabilities, or None for an empty or failed stack
        """
        stack = stacks[row - 1][column - 1]
        if not stack.cards or stack.is_failed:
            return None

        visible = [card for stack_row in stacks for s in stack_row for card in s.cards]
        return compute_probabilities(stack.top_card, visible)
