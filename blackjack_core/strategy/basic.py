"""Basic strategy advisor for blackjack."""

from typing import TYPE_CHECKING, Literal

from blackjack_core.strategy.charts import ChartCode, ChartType, StrategyChart, UncommonCells, chart_for, uncommon_hands
from blackjack_core.strategy.moves import CorrectMove, HintResult, Move
from blackjack_core.strategy.rules import RuleSet

if TYPE_CHECKING:
    from blackjack_core.game.engine import Game
    from blackjack_core.hand import Hand


class BasicStrategyChecker:
    """
    Basic strategy lookup and move checking.

    The chart is picked once from the deck count and soft-17 rule; chart
    cells are then resolved against what the hand is allowed to do.
    """

    # Double after split is not read from the table rules yet; splits that
    # depend on it always resolve to a split.
    allow_double_after_split = True

    def __init__(self, rules: RuleSet | None = None) -> None:
        """
        Initialize basic strategy for given rules.

        Args:
            rules: Table rules to pick the chart for. Uses default if None.
        """
        self.rules = rules or RuleSet()
        self.chart: StrategyChart = chart_for(self.rules.deck_count, self.rules.hits_soft_17)

    @staticmethod
    def uncommon_hands(deck_count: int, hits_soft_17: bool = True) -> UncommonCells:
        """Return the chart cells tagged as rare decisions."""
        return uncommon_hands(deck_count, hits_soft_17)

    def suggest(self, game: "Game", hand: "Hand") -> CorrectMove | None:
        """
        Get the basic strategy move for a hand.

        Returns None outside the insurance and play steps.
        """
        if game.is_asking_insurance:
            return CorrectMove.NO_INSURANCE

        if not game.is_waiting_for_move or game.dealer.upcard is None:
            return None

        allow_split = hand.player is not None and hand.player.can_split(hand)
        chart_type = self._chart_type(hand, allow_split)
        player_total = hand.cards[0].value if chart_type == ChartType.SPLITS else hand.card_total

        code = self.chart.lookup(chart_type, player_total, game.dealer.upcard.value)
        return self._resolve_code(code, hand)

    def check(self, game: "Game", hand: "Hand", move: Move) -> Literal[True] | HintResult:
        """
        Check a move against basic strategy.

        Returns True if the move was correct, otherwise a hint naming the
        move that should have been made.
        """
        correct_move = self.suggest(game, hand)
        if correct_move is None or move == correct_move.move:
            return True

        return HintResult(
            code=correct_move,
            hint=f"Basic strategy: last play should have been {correct_move.hint}!",
        )

    def _resolve_code(self, code: ChartCode, hand: "Hand") -> CorrectMove:
        """Resolve a chart cell based on what the hand may do."""
        if code in (ChartCode.DOUBLE_OR_HIT, ChartCode.DOUBLE_OR_STAND):
            if hand.first_move:
                return CorrectMove.DOUBLE
            return CorrectMove.HIT if code == ChartCode.DOUBLE_OR_HIT else CorrectMove.STAND

        if code in (ChartCode.SPLIT_DAS_OR_HIT, ChartCode.SPLIT_DAS_OR_DOUBLE):
            if self.allow_double_after_split:
                return CorrectMove.SPLIT
            return CorrectMove.HIT if code == ChartCode.SPLIT_DAS_OR_HIT else CorrectMove.DOUBLE

        allow_surrender = hand.first_move and self.rules.allow_late_surrender

        if code == ChartCode.SURRENDER_OR_SPLIT:
            if allow_surrender and self.allow_double_after_split:
                return CorrectMove.SURRENDER
            return CorrectMove.SPLIT

        if code in (ChartCode.SURRENDER_OR_HIT, ChartCode.SURRENDER_OR_STAND):
            if allow_surrender:
                return CorrectMove.SURRENDER
            return CorrectMove.HIT if code == ChartCode.SURRENDER_OR_HIT else CorrectMove.STAND

        return {
            ChartCode.HIT: CorrectMove.HIT,
            ChartCode.STAND: CorrectMove.STAND,
            ChartCode.SPLIT: CorrectMove.SPLIT,
        }[code]

    @staticmethod
    def _chart_type(hand: "Hand", allow_split: bool) -> ChartType:
        if hand.has_pairs and allow_split:
            return ChartType.SPLITS
        if hand.is_soft:
            return ChartType.SOFT
        return ChartType.HARD
