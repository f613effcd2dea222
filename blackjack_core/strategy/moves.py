"""Player moves and strategy chart codes."""

from dataclasses import dataclass
from enum import Enum


class Move(Enum):
    """Decisions a seat can hand to the game."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SPLIT = "split"
    SURRENDER = "surrender"
    NO_INSURANCE = "no-insurance"
    TAKE_INSURANCE = "ask-insurance"
    NEXT_GAME = "next-game"

    def __str__(self) -> str:
        return self.value


class CorrectMove(Enum):
    """Resolved strategy codes, i.e. what a chart cell becomes once the table
    situation is known."""

    HIT = "H"
    STAND = "S"
    DOUBLE = "D"
    SPLIT = "P"
    SURRENDER = "R"
    NO_INSURANCE = "N"
    TAKE_INSURANCE = "I"

    @property
    def move(self) -> Move:
        """Return the move that carries out this code."""
        return _CORRECT_MOVE_TO_MOVE[self]

    @property
    def hint(self) -> str:
        """Short description used in corrections."""
        return _HINTS[self]


_CORRECT_MOVE_TO_MOVE = {
    CorrectMove.HIT: Move.HIT,
    CorrectMove.STAND: Move.STAND,
    CorrectMove.DOUBLE: Move.DOUBLE,
    CorrectMove.SPLIT: Move.SPLIT,
    CorrectMove.SURRENDER: Move.SURRENDER,
    CorrectMove.NO_INSURANCE: Move.NO_INSURANCE,
    CorrectMove.TAKE_INSURANCE: Move.TAKE_INSURANCE,
}

_HINTS = {
    CorrectMove.HIT: "hit",
    CorrectMove.STAND: "stand",
    CorrectMove.DOUBLE: "double",
    CorrectMove.SPLIT: "split",
    CorrectMove.SURRENDER: "surrender",
    CorrectMove.NO_INSURANCE: "deny insurance",
    CorrectMove.TAKE_INSURANCE: "take insurance",
}

PLAY_MOVES = frozenset(
    {Move.HIT, Move.STAND, Move.DOUBLE, Move.SPLIT, Move.SURRENDER}
)
INSURANCE_MOVES = frozenset({Move.NO_INSURANCE, Move.TAKE_INSURANCE})


@dataclass(frozen=True)
class HintResult:
    """A move that did not match the advisor, with what it should have been."""

    code: CorrectMove
    hint: str

    def __str__(self) -> str:
        return self.hint
