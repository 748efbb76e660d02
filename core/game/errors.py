"""Errors raised by the game session."""


class HighLowError(Exception):
    """Base class for game session errors."""


class OutOfCardsError(HighLowError):
    """A draw was attempted against an empty draw pile."""

    def __init__(self, message: str = "No more cards in the deck") -> None:
        super().__init__(message)


class InvalidMoveError(HighLowError):
    """A move targeted a stack that cannot accept it."""

    def __init__(self, message: str, position: tuple[int, int] | None = None) -> None:
        super().__init__(message)
        self.position = position
