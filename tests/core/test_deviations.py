"""Tests for index plays and the Hi-Lo deviation checker."""

import pytest

from blackjack_core.cards import Rank
from blackjack_core.game import GameStep
from blackjack_core.strategy import FAB_4, ILLUSTRIOUS_18, CorrectMove, HiLoDeviationChecker, Move, RuleSet
from blackjack_core.strategy.deviations import top_deviations


class TestIllustrious18:
    """Tests for the index play tables."""

    def test_has_18_plays(self):
        assert len(ILLUSTRIOUS_18) == 18
        assert len(FAB_4) == 4

    def test_insurance_is_most_valuable(self):
        """Test the insurance play comes first."""
        play = ILLUSTRIOUS_18[0]
        assert play.is_insurance
        assert play.get_action(3.0) == CorrectMove.TAKE_INSURANCE
        assert play.get_action(2.9) == CorrectMove.NO_INSURANCE

    def test_at_or_below_direction(self):
        """Test negative indexes deviate at or below the count."""
        play = next(p for p in ILLUSTRIOUS_18 if (p.player_total, p.dealer_upcard) == (13, 2))
        assert play.should_deviate(-1.0)
        assert play.should_deviate(-3.0)
        assert not play.should_deviate(0.0)

    def test_top_deviations(self):
        """Test taking the most valuable plays."""
        plays = top_deviations(5, include_surrender=False)
        assert plays == ILLUSTRIOUS_18[:5]
        assert len(top_deviations(5)) == 9


class TestHiLoDeviationChecker:
    """Tests for count-based suggestions and checks."""

    @pytest.fixture
    def checker(self):
        return HiLoDeviationChecker()

    def test_stand_16_vs_10_at_positive_count(self, situation, checker):
        game, hand = situation([Rank.TEN, Rank.SIX], Rank.TEN, true_count=1.0)
        assert checker.suggest(game, hand) == CorrectMove.STAND

    def test_no_deviation_at_low_count(self, situation, checker):
        """Test basic strategy decides when the count is below the index."""
        game, hand = situation([Rank.TEN, Rank.FIVE], Rank.TEN, true_count=2.0)
        assert checker.suggest(game, hand) is None
        assert checker.check(game, hand, Move.HIT) is None

    def test_no_matching_play(self, situation, checker):
        game, hand = situation([Rank.TEN, Rank.SEVEN], Rank.SIX, true_count=10.0)
        assert checker.suggest(game, hand) is None

    def test_double_needs_first_move(self, situation, checker):
        """Test a double deviation is dropped when doubling is not possible."""
        game, hand = situation([Rank.SIX, Rank.FOUR], Rank.TEN, true_count=5.0)
        assert checker.suggest(game, hand) == CorrectMove.DOUBLE

        game, hand = situation([Rank.FIVE, Rank.THREE, Rank.TWO], Rank.TEN, true_count=5.0)
        assert checker.suggest(game, hand) is None

    def test_split_tens(self, situation, checker):
        """Test splitting tens against a 6 at a high count."""
        game, hand = situation([Rank.TEN, Rank.KING], Rank.SIX, true_count=4.5)
        assert checker.suggest(game, hand) == CorrectMove.SPLIT

    def test_take_insurance_at_high_count(self, situation, checker):
        game, hand = situation(
            [Rank.TEN, Rank.NINE], Rank.ACE, step=GameStep.ASK_INSURANCE, true_count=3.5
        )
        assert checker.suggest(game, hand) == CorrectMove.TAKE_INSURANCE
        assert checker.check(game, hand, Move.TAKE_INSURANCE) is True

    def test_surrender_needs_table_rule(self, situation, checker):
        """Test the Fab 4 surrender only applies with late surrender."""
        game, hand = situation([Rank.TEN, Rank.FOUR], Rank.TEN, true_count=4.0)
        assert checker.suggest(game, hand) is None

        surrender_rules = RuleSet(allow_late_surrender=True)
        game, hand = situation([Rank.TEN, Rank.FOUR], Rank.TEN, true_count=4.0, table_rules=surrender_rules)
        assert checker.suggest(game, hand) == CorrectMove.SURRENDER

    def test_chart_surrender_wins(self, situation, checker):
        """Test a chart surrender beats a non-surrender index play."""
        surrender_rules = RuleSet(allow_late_surrender=True)
        game, hand = situation([Rank.TEN, Rank.SIX], Rank.TEN, true_count=1.0, table_rules=surrender_rules)
        assert checker.suggest(game, hand) is None

    def test_check_wrong_move(self, situation, checker):
        """Test a missed deviation returns a hint."""
        game, hand = situation([Rank.TEN, Rank.SIX], Rank.TEN, true_count=1.0)
        result = checker.check(game, hand, Move.HIT)
        assert result.code == CorrectMove.STAND
        assert result.hint == "Illustrious 18: last play should have been stand!"

    def test_top_n_limits_plays(self, situation):
        """Test only the configured number of plays are checked."""
        checker = HiLoDeviationChecker(top_n=1)
        game, hand = situation([Rank.TEN, Rank.SIX], Rank.TEN, true_count=1.0)
        assert checker.suggest(game, hand) is None
