"""Headless simulator: plays many rounds with every seat on basic strategy."""

import argparse
import logging
import time
from dataclasses import dataclass, replace
from decimal import Decimal
from random import Random
from statistics import pvariance

from blackjack_core.config import TrainerConfig
from blackjack_core.game.engine import Game
from blackjack_core.game.events import EventType, GameEvent
from blackjack_core.player import HandWinner, PlayerStrategy
from blackjack_core.settings import GameSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Totals for the table's human seat over a simulation run. Amounts in cents."""

    time_elapsed: float
    amount_earned: Decimal
    amount_earned_variance: float
    amount_wagered: Decimal
    hands_won: int
    hands_lost: int
    hands_pushed: int
    hands_played: int

    @property
    def house_edge(self) -> float:
        """Share of the amount wagered the house kept."""
        if not self.amount_wagered:
            return 0.0
        return float(-self.amount_earned / self.amount_wagered)

    def to_dict(self) -> dict:
        return {
            "time_elapsed": round(self.time_elapsed, 3),
            "amount_earned": str(self.amount_earned),
            "amount_earned_variance": self.amount_earned_variance,
            "amount_wagered": str(self.amount_wagered),
            "hands_won": self.hands_won,
            "hands_lost": self.hands_lost,
            "hands_pushed": self.hands_pushed,
            "hands_played": self.hands_played,
            "house_edge": self.house_edge,
        }


class Simulator:
    """Runs rounds back to back without any human input."""

    def __init__(self, settings: GameSettings | None = None, rng: Random | None = None) -> None:
        settings = settings or GameSettings()
        self.settings = replace(
            settings,
            player_strategy_override={
                seat: PlayerStrategy.BASIC_STRATEGY for seat in range(1, settings.player_count + 1)
            },
            auto_confirm_new_game=True,
            disable_events=False,
        )
        self._rng = rng

    def run(self, hands: int = 1000, bet_amount: int | None = None) -> SimulationResult:
        """Play `hands` rounds and total up the results of the table's player seat."""
        game = Game(self.settings, rng=self._rng)
        player = game.player
        winners: list[HandWinner] = []
        wagered = Decimal(0)

        def on_hand_winner(event: GameEvent) -> None:
            nonlocal wagered
            if event.data["player_id"] != player.id:
                return
            winners.append(HandWinner(event.data["winner"]))
            wagered += Decimal(event.data["hand"]["bet_amount"])

        game.subscribe(on_hand_winner, EventType.HAND_WINNER)

        earnings: list[Decimal] = []
        start = time.perf_counter()
        for _ in range(hands):
            balance = player.balance
            game.run(bet_amount)
            earnings.append(player.balance - balance)
        elapsed = time.perf_counter() - start

        result = SimulationResult(
            time_elapsed=elapsed,
            amount_earned=sum(earnings, Decimal(0)),
            amount_earned_variance=float(pvariance(earnings)) if earnings else 0.0,
            amount_wagered=wagered,
            hands_won=winners.count(HandWinner.PLAYER),
            hands_lost=winners.count(HandWinner.DEALER),
            hands_pushed=winners.count(HandWinner.PUSH),
            hands_played=len(winners),
        )
        logger.info("Simulated %d rounds in %.2fs, house edge %.4f", hands, elapsed, result.house_edge)
        return result


def main(argv: list[str] | None = None) -> SimulationResult:
    parser = argparse.ArgumentParser(description="Simulate blackjack rounds played with basic strategy.")
    parser.add_argument("--hands", type=int, default=1000, help="number of rounds to play")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible shuffles")
    args = parser.parse_args(argv)

    config = TrainerConfig()
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    simulator = Simulator(config.to_settings(), rng=Random(args.seed))
    result = simulator.run(hands=args.hands)
    for key, value in result.to_dict().items():
        print(f"{key}: {value}")
    return result


if __name__ == "__main__":
    main()
