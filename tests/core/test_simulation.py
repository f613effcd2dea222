"""Tests for the headless simulator."""

import os
from random import Random
from unittest.mock import patch

import pytest

from blackjack_core.settings import GameSettings
from blackjack_core.simulation import SimulationResult, Simulator, main
from blackjack_core.player import PlayerStrategy


@pytest.fixture
def result():
    """A short, seeded simulation at a three-seat table."""
    simulator = Simulator(GameSettings(player_count=3, player_table_position=2), rng=Random(7))
    return simulator.run(hands=50)


class TestSimulator:
    """Tests for Simulator."""

    def test_every_seat_plays_basic_strategy(self):
        simulator = Simulator(GameSettings(player_count=2))
        assert simulator.settings.strategy_for_seat(1) == PlayerStrategy.BASIC_STRATEGY
        assert simulator.settings.strategy_for_seat(2) == PlayerStrategy.BASIC_STRATEGY
        assert simulator.settings.auto_confirm_new_game

    def test_counts_add_up(self, result):
        """Test every settled hand is counted exactly once."""
        assert result.hands_played >= 50
        assert result.hands_won + result.hands_lost + result.hands_pushed == result.hands_played

    def test_amount_wagered(self, result):
        # Splits and doubles only ever add to the minimum stake.
        assert result.amount_wagered >= 50 * 1000

    def test_house_edge(self, result):
        assert result.house_edge == pytest.approx(float(-result.amount_earned / result.amount_wagered))

    def test_same_seed_same_result(self):
        first = Simulator(rng=Random(3)).run(hands=20)
        second = Simulator(rng=Random(3)).run(hands=20)
        assert first.amount_earned == second.amount_earned
        assert first.hands_played == second.hands_played

    def test_result_to_dict(self, result):
        data = result.to_dict()
        assert set(data) == {
            "time_elapsed",
            "amount_earned",
            "amount_earned_variance",
            "amount_wagered",
            "hands_won",
            "hands_lost",
            "hands_pushed",
            "hands_played",
            "house_edge",
        }
        assert data["hands_played"] == result.hands_played

    def test_house_edge_without_wagers(self):
        empty = SimulationResult(0.0, 0, 0.0, 0, 0, 0, 0, 0)
        assert empty.house_edge == 0.0


class TestMain:
    """Tests for the command line entry point."""

    def test_main_prints_results(self, capsys):
        with patch.dict(os.environ, {}, clear=True):
            result = main(["--hands", "5", "--seed", "1"])

        output = capsys.readouterr().out
        assert "house_edge:" in output
        assert f"hands_played: {result.hands_played}" in output
