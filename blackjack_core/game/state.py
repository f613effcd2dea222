"""Round steps and the per-session game state."""

from dataclasses import dataclass
from enum import Enum

from blackjack_core.hand import Hand


class GameStep(Enum):
    """
    Round steps kept by the game's state machine.

    Flow: WAITING_FOR_MOVE -> (ASK_INSURANCE -> WAITING_FOR_MOVE) -> GAME_RESULT,
    then back to WAITING_FOR_MOVE when the next round is dealt.
    """

    WAITING_FOR_MOVE = "waiting-for-move"
    ASK_INSURANCE = "ask-insurance"
    GAME_RESULT = "game-result"

    @property
    def machine_state(self) -> str:
        """Return the state name used by the state machine."""
        return self.name.lower()

    @classmethod
    def from_machine_state(cls, name: str) -> "GameStep":
        return cls[name.upper()]

    def __str__(self) -> str:
        return self.value


@dataclass
class GameState:
    """Observable state of the game between rounds and decisions."""

    focused_hand: Hand
    play_correction: str = ""
    session_moves_total: int = 0
    session_moves_correct: int = 0

    @property
    def accuracy(self) -> float:
        """Share of the session's moves that matched the advisors."""
        if not self.session_moves_total:
            return 0.0
        return self.session_moves_correct / self.session_moves_total
