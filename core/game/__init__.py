"""Game engine and state management."""

from core.game.engine import (
    HighLowGame,
    MoveOutcome,
    PeekResult,
    SessionState,
    Stack,
    StackSnapshot,
    StackStatus,
)
from core.game.errors import HighLowError, InvalidMoveError, OutOfCardsError
from core.game.events import EventType, GameEvent
from core.game.state import GameState

__all__ = [
    "EventType",
    "GameEvent",
    "GameState",
    "HighLowError",
    "HighLowGame",
    "InvalidMoveError",
    "MoveOutcome",
    "OutOfCardsError",
    "PeekResult",
    "SessionState",
    "Stack",
    "StackSnapshot",
    "StackStatus",
]
