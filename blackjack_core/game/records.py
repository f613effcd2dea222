"""Pydantic schemas for the records a game hands to its record store."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from blackjack_core.player import HandWinner
from blackjack_core.strategy.moves import CorrectMove, Move


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """Fields shared by every record."""

    model_config = ConfigDict(frozen=True)

    created_at: datetime = Field(default_factory=_now)
    game_id: str
    dealer_hand: str = Field(..., description="Dealer cards, hole card shown")
    player_hand: str


class MoveRecord(Record):
    """A human move and, when it was wrong, the move that was expected."""

    record_type: Literal["move"] = "move"
    move: Move
    correction: CorrectMove | None = None


class HandResultRecord(Record):
    """The outcome of one of the human player's hands."""

    record_type: Literal["hand-result"] = "hand-result"
    winner: HandWinner
