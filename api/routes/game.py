"""Game API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, Query

from api.schemas import (
    CardModel,
    GameStateResponse,
    MoveRequest,
    MoveResponse,
    PeekResponse,
    ProbabilityResponse,
    RankCountResponse,
    StackResponse,
)
from api.session import GameSession, extract_session_id, get_session_store
from config import config
from core.cards import Card
from core.game import HighLowGame, InvalidMoveError, OutOfCardsError, SessionState
from core.moves import Move, Prediction
from core.statistics import format_probability

logger = logging.getLogger(__name__)

router = APIRouter()


def _card_response(card: Card) -> CardModel:
    """Convert a Card to CardModel."""
    return CardModel(rank=str(card.rank), suit=str(card.suit), value=card.rank_value)


def _game_state_response(game: HighLowGame) -> GameStateResponse:
    """Convert game state to response."""
    snapshot: SessionState = game.get_session()
    stacks = [
        StackResponse(
            row=r,
            column=c,
            status=stack.status.value,
            top_card=_card_response(stack.top_card) if stack.top_card else None,
            size=len(stack.cards),
            cards=[_card_response(card) for card in stack.cards],
        )
        for r, row in enumerate(snapshot.stacks, start=1)
        for c, stack in enumerate(row, start=1)
    ]
    return GameStateResponse(
        state=game.state.name,
        cards_remaining=snapshot.draw_count,
        stacks=stacks,
        won=snapshot.won,
        lost=snapshot.lost,
        seen_cards=[_card_response(card) for card in snapshot.seen_cards],
    )


def _to_move(request: MoveRequest) -> Move:
    """Build a core Move from a request body."""
    try:
        reference = Card.from_string(request.reference_card)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return Move(
        stack_row=request.row,
        stack_column=request.column,
        prediction=Prediction.from_string(request.prediction),
        reference_card=reference,
    )


def _get_session(token: str) -> GameSession:
    """Resolve a signed session token to its live game."""
    session_id = extract_session_id(token)
    session = get_session_store().get(session_id) if session_id else None
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown or expired session")
    return session


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Create a new game, replacing the session's current game if there is one."""
    store = get_session_store()

    raw_id = extract_session_id(session_id) if session_id else None
    if raw_id is None:
        session_id = store.create_session_id()
        raw_id = extract_session_id(session_id)

    game = HighLowGame(game_config=config.game)
    game.start()
    store.put(raw_id, game)
    logger.info("Started a new game session")

    return {"session_id": session_id}


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    session = _get_session(session_id)
    async with session.lock:
        return _game_state_response(session.game)


@router.post("/peek")
async def peek_move(
    request: MoveRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> PeekResponse:
    """Preview the outcome of a move without drawing."""
    session = _get_session(session_id)
    move = _to_move(request)

    async with session.lock:
        try:
            result = session.game.peek_move(move)
        except OutOfCardsError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        except InvalidMoveError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    return PeekResponse(
        drawn_card=_card_response(result.drawn_card),
        would_be_correct=result.would_be_correct,
    )


@router.post("/move")
async def commit_move(
    request: MoveRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> MoveResponse:
    """Draw a card onto a stack and resolve the guess."""
    session = _get_session(session_id)
    move = _to_move(request)

    async with session.lock:
        game = session.game
        previous = game.last_outcome
        try:
            game.commit_move(move)
        except InvalidMoveError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        outcome = game.last_outcome if game.last_outcome is not previous else None
        return MoveResponse(
            drawn_card=_card_response(outcome.drawn_card) if outcome else None,
            was_correct=outcome.was_correct if outcome else None,
            game=_game_state_response(game),
        )


@router.get("/probabilities")
async def get_probabilities(
    row: Annotated[int, Query(ge=1, le=3)],
    column: Annotated[int, Query(ge=1, le=3)],
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> ProbabilityResponse:
    """Exact Higher/Lower/Same odds for a stack's top card."""
    session = _get_session(session_id)

    async with session.lock:
        game = session.game
        probs = game.stack_probabilities(row, column)
        reference = game.stack(row, column).top_card

    if probs is None or reference is None:
        raise HTTPException(status_code=400, detail=f"Stack [{row},{column}] is not in play")

    return ProbabilityResponse(
        row=row,
        column=column,
        reference_card=_card_response(reference),
        higher=probs.higher,
        lower=probs.lower,
        same=probs.same,
        total=probs.total,
        higher_display=format_probability(probs.higher),
        lower_display=format_probability(probs.lower),
        same_display=format_probability(probs.same),
        confidence={
            "higher": str(game.probability.confidence(probs.higher)),
            "lower": str(game.probability.confidence(probs.lower)),
            "same": str(game.probability.confidence(probs.same)),
        },
    )


@router.get("/counts")
async def get_card_counts(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> list[RankCountResponse]:
    """Seen and remaining cards per rank."""
    session = _get_session(session_id)

    async with session.lock:
        counts = session.game.card_counts()

    return [
        RankCountResponse(
            rank=str(count.rank),
            total=count.total,
            seen=count.seen,
            remaining=count.remaining,
        )
        for count in counts
    ]
