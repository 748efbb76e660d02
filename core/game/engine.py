"""High-Low game engine with state machine."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import Callable, Iterable

from transitions import Machine

from config import GameConfig
from core.cards import Card, Deck, EmptyDeck, compare, deal, full_deck, shuffle
from core.counting.ledger import RankCount, SeenCardLedger
from core.game.errors import InvalidMoveError, OutOfCardsError
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import GameState
from core.moves import GRID_SIZE, Move, is_correct
from core.statistics.probability import OutcomeProbabilities, ProbabilityEngine

logger = logging.getLogger(__name__)

STACK_COUNT = GRID_SIZE * GRID_SIZE


class StackStatus(Enum):
    """Whether a stack still accepts guesses."""

    ACTIVE = "active"
    FAILED = "failed"


@dataclass
class Stack:
    """
    One of the nine stacks: an append-only pile of cards.

    A stack that fails stays failed; the card that failed it still goes on top.
    """

    cards: list[Card] = field(default_factory=list)
    status: StackStatus = StackStatus.ACTIVE

    @property
    def top_card(self) -> Card | None:
        """Return the visible card, if any."""
        return self.cards[-1] if self.cards else None

    @property
    def is_failed(self) -> bool:
        return self.status is StackStatus.FAILED

    def place(self, card: Card) -> None:
        """Put a card on top of the stack."""
        self.cards.append(card)

    def fail(self) -> None:
        """Mark the stack as failed."""
        self.status = StackStatus.FAILED

    def snapshot(self) -> "StackSnapshot":
        return StackSnapshot(cards=tuple(self.cards), status=self.status)


@dataclass(frozen=True)
class StackSnapshot:
    """Read-only view of a stack."""

    cards: tuple[Card, ...]
    status: StackStatus

    @property
    def top_card(self) -> Card | None:
        return self.cards[-1] if self.cards else None

    @property
    def is_failed(self) -> bool:
        return self.status is StackStatus.FAILED


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of a game for presentation layers."""

    draw_deck: tuple[Card, ...]
    stacks: tuple[tuple[StackSnapshot, ...], ...]
    won: bool
    lost: bool
    seen_cards: tuple[Card, ...]

    @property
    def draw_count(self) -> int:
        """Return the number of cards left in the draw pile."""
        return len(self.draw_deck)

    def stack(self, row: int, column: int) -> StackSnapshot:
        """Return the stack at a 1-based position."""
        return self.stacks[row - 1][column - 1]

    def top_cards(self) -> list[list[Card | None]]:
        """Return the visible card of every stack as a 3x3 grid."""
        return [[s.top_card for s in row] for row in self.stacks]

    def active_positions(self) -> list[tuple[int, int]]:
        """Return the 1-based positions of stacks that still accept guesses."""
        return [
            (r, c)
            for r, row in enumerate(self.stacks, start=1)
            for c, s in enumerate(row, start=1)
            if not s.is_failed
        ]


@dataclass(frozen=True)
class PeekResult:
    """What a move would draw, and whether the guess would hold."""

    drawn_card: Card
    would_be_correct: bool


@dataclass(frozen=True)
class MoveOutcome:
    """Result of the most recently committed move."""

    move: Move
    drawn_card: Card
    was_correct: bool


def _empty_grid() -> list[list[Stack]]:
    return [[Stack() for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


class HighLowGame:
    """
    High-Low solitaire engine using a state machine.

    This is the core game logic, completely UI-agnostic.
    Communication happens through events and return values only.
    A game is single-writer: callers that share one across tasks must
    serialize ``commit_move`` themselves.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "deal_stacks", "source": "*", "dest": "active"},
        {"trigger": "play_on", "source": "active", "dest": "active"},
        {"trigger": "declare_win", "source": "active", "dest": "won"},
        {"trigger": "declare_loss", "source": "active", "dest": "lost"},
    ]

    def __init__(
        self,
        rng: Random | None = None,
        game_config: GameConfig | None = None,
    ) -> None:
        """
        Initialize a new game. Nothing is dealt until ``start()``.

        Args:
            rng: Random number generator for reproducible games
            game_config: Game configuration (seed, confidence thresholds)
        """
        self.config = game_config or GameConfig()
        self._rng = rng or Random(self.config.seed)
        self.probability = ProbabilityEngine(self.config)
        self.events = EventEmitter()

        self.draw_pile = Deck()
        self.stacks: list[list[Stack]] = _empty_grid()
        self.seen = SeenCardLedger()
        self.last_outcome: MoveOutcome | None = None

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="not_started",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current game state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    @property
    def won(self) -> bool:
        return self.state is GameState.WON

    @property
    def lost(self) -> bool:
        return self.state is GameState.LOST

    @property
    def is_over(self) -> bool:
        """True once no further draw is possible."""
        if self.state is GameState.NOT_STARTED:
            return False
        return self.state.is_terminal or self.draw_pile.is_empty

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def start(self, deck: Iterable[Card] | None = None) -> None:
        """
        Start a new game, replacing any previous one.

        Args:
            deck: Optional pre-ordered 52-card deck (top card last). When
                omitted a full deck is shuffled with the game's RNG.
        """
        if deck is None:
            cards = shuffle(full_deck(), self._rng)
        else:
            cards = list(deck)
            if len(cards) != len(full_deck()) or set(cards) != set(full_deck()):
                raise ValueError("A custom deck must contain each of the 52 cards exactly once")

        dealt, remainder = deal(cards, STACK_COUNT)
        self.stacks = [
            [Stack(cards=[dealt[row * GRID_SIZE + col]]) for col in range(GRID_SIZE)]
            for row in range(GRID_SIZE)
        ]
        self.draw_pile = Deck(remainder)
        self.seen = SeenCardLedger(dealt)
        self.last_outcome = None

        self.deal_stacks()  # Trigger state transition
        self.events.emit(
            EventType.GAME_STARTED,
            stacks=[str(card) for card in dealt],
            cards_remaining=len(self.draw_pile),
        )
        logger.info("New game dealt, %d cards in the draw pile", len(self.draw_pile))

    def stack(self, row: int, column: int) -> Stack:
        """Return the live stack at a 1-based position."""
        if not (1 <= row <= GRID_SIZE and 1 <= column <= GRID_SIZE):
            raise ValueError(f"No stack at [{row},{column}]")
        return self.stacks[row - 1][column - 1]

    def evaluate_move(self, move: Move, drawn_card: Card) -> bool:
        """Check whether ``drawn_card`` satisfies the move's prediction."""
        return is_correct(move.prediction, compare(drawn_card, move.reference_card))

    def peek_move(self, move: Move) -> PeekResult:
        """
        Preview a move without changing anything.

        Raises:
            OutOfCardsError: If the draw pile is empty
            InvalidMoveError: If no game has been started
        """
        self._require_started(move)
        result = self.draw_pile.peek()
        if isinstance(result, EmptyDeck):
            raise OutOfCardsError()
        return PeekResult(
            drawn_card=result.card,
            would_be_correct=self.evaluate_move(move, result.card),
        )

    def commit_move(self, move: Move) -> SessionState:
        """
        Draw the next card onto the chosen stack and resolve the guess.

        Drawing against an empty pile leaves the game unchanged: the move
        that drew the last card already decided the game.

        Raises:
            InvalidMoveError: If the stack has failed or no game has been started

        Returns:
            The updated session snapshot
        """
        self._require_started(move)
        stack = self.stack(move.stack_row, move.stack_column)

        if stack.is_failed:
            message = f"Cannot play on failed stack at position [{move.stack_row},{move.stack_column}]"
            self.events.emit(EventType.INVALID_MOVE, message=message, position=move.position)
            logger.warning(message)
            raise InvalidMoveError(message, position=move.position)

        if stack.top_card != move.reference_card:
            logger.warning(
                "Move references %s but stack [%d,%d] shows %s",
                move.reference_card,
                move.stack_row,
                move.stack_column,
                stack.top_card,
            )

        result = self.draw_pile.draw()
        if isinstance(result, EmptyDeck):
            # Only a winning draw or a missed final draw can empty the pile.
            assert self.won or (
                self.last_outcome is not None and not self.last_outcome.was_correct
            ), "Draw pile is empty but the game was not won"
            self.events.emit(EventType.OUT_OF_CARDS, won=self.won)
            logger.warning("No more cards left in the deck, move ignored")
            return self.get_session()

        drawn_card = result.card
        was_correct = self.evaluate_move(move, drawn_card)
        stack.place(drawn_card)
        self.seen.record(drawn_card)
        self.last_outcome = MoveOutcome(move=move, drawn_card=drawn_card, was_correct=was_correct)

        self.events.emit(
            EventType.CARD_DRAWN,
            card=str(drawn_card),
            position=move.position,
            prediction=move.prediction.name,
            cards_remaining=len(self.draw_pile),
        )
        logger.debug("Drew %s for %s: %s", drawn_card, move, "correct" if was_correct else "wrong")

        if was_correct:
            self.events.emit(EventType.GUESS_CORRECT, position=move.position)
            if self.draw_pile.is_empty:
                self.declare_win()
                self.events.emit(EventType.GAME_WON)
                logger.info("Game won, the draw pile is empty")
            else:
                self.play_on()
        else:
            stack.fail()
            self.events.emit(EventType.STACK_FAILED, position=move.position)
            if all(s.is_failed for row in self.stacks for s in row):
                self.declare_loss()
                self.events.emit(EventType.GAME_LOST, cards_remaining=len(self.draw_pile))
                logger.info("Game lost with %d cards left", len(self.draw_pile))
            else:
                self.play_on()

        return self.get_session()

    def get_session(self) -> SessionState:
        """Return an immutable snapshot of the current game."""
        return SessionState(
            draw_deck=self.draw_pile.cards,
            stacks=tuple(tuple(s.snapshot() for s in row) for row in self.stacks),
            won=self.won,
            lost=self.lost,
            seen_cards=self.seen.cards,
        )

    def compute_probabilities(
        self,
        reference_card: Card,
        seen_cards: Iterable[Card] | None = None,
    ) -> OutcomeProbabilities:
        """
        Probabilities for a reference card.

        Args:
            reference_card: Card to guess against
            seen_cards: Seen cards to derive the population from (defaults to this game's ledger)
        """
        if seen_cards is None:
            seen_cards = self.seen.cards
        return self.probability.for_card(reference_card, seen_cards)

    def stack_probabilities(self, row: int, column: int) -> OutcomeProbabilities | None:
        """Probabilities for a stack's top card, or None for a failed stack."""
        self.stack(row, column)
        return self.probability.for_stack(self.stacks, row, column)

    def card_counts(self) -> list[RankCount]:
        """Per-rank seen/remaining counts."""
        return self.seen.rank_counts()

    def _require_started(self, move: Move) -> None:
        if self.state is GameState.NOT_STARTED:
            raise InvalidMoveError("No game in progress, call start() first", position=move.position)
