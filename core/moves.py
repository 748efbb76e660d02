"""Player predictions and moves."""

from dataclasses import dataclass
from enum import Enum

from core.cards import Card

GRID_SIZE = 3


class Prediction(Enum):
    """What the player expects the next card to be, relative to a stack's top card."""

    HIGHER = 1
    LOWER = -1
    SAME = 0

    def __str__(self) -> str:
        return self.name.title()

    @property
    def sign(self) -> int:
        """The comparison result this prediction asserts."""
        return self.value

    @classmethod
    def from_string(cls, s: str) -> "Prediction":
        """Parse 'higher'/'high', 'lower'/'low' or 'same'."""
        aliases = {
            "higher": cls.HIGHER,
            "high": cls.HIGHER,
            "lower": cls.LOWER,
            "low": cls.LOWER,
            "same": cls.SAME,
        }
        key = s.strip().lower()
        if key not in aliases:
            raise ValueError(f"Invalid prediction: {s}")
        return aliases[key]


def is_correct(prediction: Prediction, comparison: int) -> bool:
    """
    Check a prediction against a comparison result.

    Args:
        prediction: The player's guess
        comparison: ``compare(drawn, reference)``, one of -1, 0, 1

    Returns:
        True on Higher/>0, Lower/<0 or Same/==0
    """
    return prediction.sign == comparison


@dataclass(frozen=True)
class Move:
    """
    A guess against one stack.

    ``reference_card`` is the top card the player saw when choosing; the
    drawn card is compared against it, not against a re-read of the stack.
    """

    stack_row: int
    stack_column: int
    prediction: Prediction
    reference_card: Card

    def __post_init__(self) -> None:
        if not 1 <= self.stack_row <= GRID_SIZE:
            raise ValueError(f"Stack row must be between 1 and {GRID_SIZE}")
        if not 1 <= self.stack_column <= GRID_SIZE:
            raise ValueError(f"Stack column must be between 1 and {GRID_SIZE}")

    @property
    def position(self) -> tuple[int, int]:
        return (self.stack_row, self.stack_column)

    def __str__(self) -> str:
        return (
            f"{self.prediction} than {self.reference_card} "
            f"on [{self.stack_row},{self.stack_column}]"
        )
