"""Strategy deviations based on the Hi-Lo true count (Illustrious 18, Fab 4)."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol

from blackjack_core.strategy.moves import CorrectMove, HintResult, Move

if TYPE_CHECKING:
    from blackjack_core.game.engine import Game
    from blackjack_core.hand import Hand


@dataclass(frozen=True)
class IndexPlay:
    """
    An index play (strategy deviation based on count).

    When the true count reaches the index, deviate from basic strategy.
    """

    # Hand description (player_total 0 is the insurance play)
    player_total: int
    is_soft: bool
    is_pair: bool
    dealer_upcard: int  # 2-11 (11 = Ace)

    # What basic strategy does, and what to do at/beyond the index
    basic_action: CorrectMove
    deviation_action: CorrectMove

    # True count threshold
    index: float

    # Deviate when TC is >= index ("at_or_above") or <= index ("at_or_below")
    direction: Literal["at_or_above", "at_or_below"] = "at_or_above"

    description: str = ""

    @property
    def is_insurance(self) -> bool:
        return self.player_total == 0

    def should_deviate(self, true_count: float) -> bool:
        """Check if the deviation should be taken at the given true count."""
        if self.direction == "at_or_above":
            return true_count >= self.index
        return true_count <= self.index

    def get_action(self, true_count: float) -> CorrectMove:
        """Get the correct action for the given true count."""
        if self.should_deviate(true_count):
            return self.deviation_action
        return self.basic_action


def _play(total, upcard, basic, deviation, index, direction="at_or_above", is_pair=False, description=""):
    return IndexPlay(
        player_total=total,
        is_soft=False,
        is_pair=is_pair,
        dealer_upcard=upcard,
        basic_action=basic,
        deviation_action=deviation,
        index=index,
        direction=direction,
        description=description,
    )


H = CorrectMove.HIT
S = CorrectMove.STAND
D = CorrectMove.DOUBLE
P = CorrectMove.SPLIT
R = CorrectMove.SURRENDER

# The Illustrious 18, ordered by value (most valuable first).
ILLUSTRIOUS_18: list[IndexPlay] = [
    _play(0, 11, CorrectMove.NO_INSURANCE, CorrectMove.TAKE_INSURANCE, 3.0,
          description="Take insurance at TC +3 or higher"),
    _play(16, 10, H, S, 0.0, description="Stand on 16 vs 10 at TC 0 or higher"),
    _play(15, 10, H, S, 4.0, description="Stand on 15 vs 10 at TC +4 or higher"),
    _play(20, 5, S, P, 5.0, is_pair=True, description="Split 10s vs 5 at TC +5 or higher"),
    _play(20, 6, S, P, 4.0, is_pair=True, description="Split 10s vs 6 at TC +4 or higher"),
    _play(10, 10, H, D, 4.0, description="Double 10 vs 10 at TC +4 or higher"),
    _play(12, 3, H, S, 2.0, description="Stand on 12 vs 3 at TC +2 or higher"),
    _play(12, 2, H, S, 3.0, description="Stand on 12 vs 2 at TC +3 or higher"),
    _play(11, 11, H, D, 1.0, description="Double 11 vs A at TC +1 or higher"),
    _play(9, 2, H, D, 1.0, description="Double 9 vs 2 at TC +1 or higher"),
    _play(10, 11, H, D, 4.0, description="Double 10 vs A at TC +4 or higher"),
    _play(9, 7, H, D, 3.0, description="Double 9 vs 7 at TC +3 or higher"),
    _play(16, 9, H, S, 5.0, description="Stand on 16 vs 9 at TC +5 or higher"),
    _play(13, 2, S, H, -1.0, "at_or_below", description="Hit 13 vs 2 at TC -1 or lower"),
    _play(12, 4, S, H, 0.0, "at_or_below", description="Hit 12 vs 4 at TC 0 or lower"),
    _play(12, 5, S, H, -2.0, "at_or_below", description="Hit 12 vs 5 at TC -2 or lower"),
    _play(12, 6, S, H, -1.0, "at_or_below", description="Hit 12 vs 6 at TC -1 or lower"),
    _play(13, 3, S, H, -2.0, "at_or_below", description="Hit 13 vs 3 at TC -2 or lower"),
]

# The Fab 4 surrender deviations.
FAB_4: list[IndexPlay] = [
    _play(14, 10, H, R, 3.0, description="Surrender 14 vs 10 at TC +3 or higher"),
    _play(15, 9, H, R, 2.0, description="Surrender 15 vs 9 at TC +2 or higher"),
    _play(15, 11, H, R, 1.0, description="Surrender 15 vs A at TC +1 or higher (H17)"),
    _play(14, 11, H, R, 3.0, description="Surrender 14 vs A at TC +3 or higher (H17)"),
]


def top_deviations(count: int = 18, include_surrender: bool = True) -> list[IndexPlay]:
    """Return the `count` most valuable Illustrious 18 plays, plus the Fab 4."""
    plays = ILLUSTRIOUS_18[:count]
    if include_surrender:
        plays = plays + FAB_4
    return plays


class DeviationAdvisor(Protocol):
    """
    A count-aware advisor consulted before basic strategy.

    Both methods return None when the advisor has nothing to say about the
    situation, leaving the decision to basic strategy.
    """

    def suggest(self, game: "Game", hand: "Hand") -> CorrectMove | None:
        ...

    def check(self, game: "Game", hand: "Hand", move: Move) -> Literal[True] | HintResult | None:
        ...


class HiLoDeviationChecker:
    """Suggests and checks index plays against the shoe's Hi-Lo true count."""

    def __init__(self, top_n: int = 18) -> None:
        self.plays = top_deviations(top_n)

    def find_play(self, game: "Game", hand: "Hand") -> IndexPlay | None:
        """Return the index play matching the hand and dealer upcard, if any."""
        upcard = game.dealer.upcard
        if upcard is None:
            return None

        if game.is_asking_insurance:
            return next((play for play in self.plays if play.is_insurance), None)

        if not game.is_waiting_for_move:
            return None

        is_pair = hand.has_pairs and hand.player is not None and hand.player.can_split(hand)
        for play in self.plays:
            if (
                not play.is_insurance
                and play.player_total == hand.card_total
                and play.is_soft == hand.is_soft
                and play.is_pair == is_pair
                and play.dealer_upcard == upcard.value
            ):
                return play
        return None

    def suggest(self, game: "Game", hand: "Hand") -> CorrectMove | None:
        play = self.find_play(game, hand)
        if play is None or not play.should_deviate(game.shoe.true_count):
            return None

        action = play.deviation_action
        if not self._allowed(game, hand, action):
            return None

        # A surrender from the chart beats every non-surrender index play.
        if action != CorrectMove.SURRENDER and not play.is_insurance:
            if game.basic_strategy.suggest(game, hand) == CorrectMove.SURRENDER:
                return None

        return action

    def check(self, game: "Game", hand: "Hand", move: Move) -> Literal[True] | HintResult | None:
        """Return True for a correct deviation, a hint for a missed one, None otherwise."""
        correct_move = self.suggest(game, hand)
        if correct_move is None:
            return None
        if move == correct_move.move:
            return True
        return HintResult(
            code=correct_move,
            hint=f"Illustrious 18: last play should have been {correct_move.hint}!",
        )

    @staticmethod
    def _allowed(game: "Game", hand: "Hand", action: CorrectMove) -> bool:
        if action == CorrectMove.DOUBLE:
            return hand.first_move
        if action == CorrectMove.SPLIT:
            return hand.player is not None and hand.player.can_split(hand)
        if action == CorrectMove.SURRENDER:
            return hand.first_move and game.rules.allow_late_surrender
        return True
