"""Game events for the event system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of game events."""

    # Game flow events
    GAME_STARTED = auto()
    GAME_WON = auto()
    GAME_LOST = auto()

    # Move events
    CARD_DRAWN = auto()
    GUESS_CORRECT = auto()
    STACK_FAILED = auto()

    # Error events
    OUT_OF_CARDS = auto()
    INVALID_MOVE = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Presentation layers react to events (animations, messages) instead of
    the engine printing anything itself.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Publishes game events to subscribers.

    Handlers may subscribe to one event type or, with ``None``, to every event.
    Handlers run synchronously in subscription order.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_type: EventType, **data: Any) -> GameEvent:
        """
        Create, record and publish an event.

        Args:
            event_type: Type of event
            **data: Event payload

        Returns:
            The published event
        """
        event = GameEvent(event_type=event_type, data=data)
        self._event_history.append(event)

        for handler in self._handlers.get(event_type, []):
            handler(event)
        for handler in self._handlers.get(None, []):
            handler(event)

        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return self._event_history.copy()

    def clear_history(self) -> None:
        self._event_history.clear()
