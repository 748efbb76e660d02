"""Game state enumeration."""

from enum import Enum, auto


class GameState(Enum):
    """
    Game state machine states.

    Flow: NOT_STARTED → ACTIVE → WON | LOST
    Starting a new game returns any state to a fresh ACTIVE.
    """

    # Created, nothing dealt yet
    NOT_STARTED = auto()

    # Nine stacks dealt, moves accepted
    ACTIVE = auto()

    # Draw pile emptied by a correct guess
    WON = auto()

    # Every stack failed
    LOST = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def is_terminal(self) -> bool:
        return self in (GameState.WON, GameState.LOST)


# Valid state transitions
VALID_TRANSITIONS: dict[GameState, list[GameState]] = {
    GameState.NOT_STARTED: [GameState.ACTIVE],
    GameState.ACTIVE: [GameState.ACTIVE, GameState.WON, GameState.LOST],
    GameState.WON: [GameState.ACTIVE],  # New game only
    GameState.LOST: [GameState.ACTIVE],  # New game only
}


def is_valid_transition(from_state: GameState, to_state: GameState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
