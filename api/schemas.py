"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CardModel(BaseModel):
    """Card representation, e.g. {"rank": "Q", "suit": "♥", "value": 12}."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int = Field(..., ge=2, le=14)


class MoveRequest(BaseModel):
    """A guess against one stack."""

    row: int = Field(..., ge=1, le=3, description="1-based stack row")
    column: int = Field(..., ge=1, le=3, description="1-based stack column")
    prediction: Literal["higher", "lower", "same"]
    reference_card: str = Field(
        ...,
        description="Top card the player saw, in short notation such as 'QH' or '10♦'",
    )


class StackResponse(BaseModel):
    """One stack of the 3x3 grid."""

    row: int
    column: int
    status: Literal["active", "failed"]
    top_card: CardModel | None
    size: int
    cards: list[CardModel]


class GameStateResponse(BaseModel):
    """Current game state."""

    state: str
    cards_remaining: int
    stacks: list[StackResponse]
    won: bool
    lost: bool
    seen_cards: list[CardModel]


class PeekResponse(BaseModel):
    """Outcome preview used to animate a move before committing it."""

    drawn_card: CardModel
    would_be_correct: bool


class MoveResponse(BaseModel):
    """Result of a committed move."""

    drawn_card: CardModel | None
    was_correct: bool | None
    game: GameStateResponse


class ProbabilityResponse(BaseModel):
    """Outcome odds for a stack's top card."""

    row: int
    column: int
    reference_card: CardModel
    higher: float
    lower: float
    same: float
    total: int
    higher_display: str
    lower_display: str
    same_display: str
    confidence: dict[Literal["higher", "lower", "same"], str]


class RankCountResponse(BaseModel):
    """Seen/remaining cards for one rank."""

    rank: str
    total: int
    seen: int
    remaining: int
