"""Game settings: table rules plus the trainer's session options."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from blackjack_core.errors import ConfigurationError
from blackjack_core.player import PlayerStrategy
from blackjack_core.strategy.rules import RuleSet


class GameMode(Enum):
    """Training scenarios, selecting how the shoe is shuffled."""

    DEFAULT = "default"
    PAIRS = "guarantee-pairs"
    UNCOMMON = "guarantee-uncommon-hand"
    DEVIATION_TRAINING = "deviation-training"

    @property
    def single_scenario(self) -> bool:
        """Every round needs a freshly biased shuffle."""
        return self != GameMode.DEFAULT


@dataclass(frozen=True)
class GameSettings:
    """Everything a `Game` is configured with. Amounts are in cents."""

    rules: RuleSet = field(default_factory=RuleSet)
    mode: GameMode = GameMode.DEFAULT

    # Seats
    player_count: int = 1
    player_table_position: int = 1  # 1-based seat of the human player
    player_strategy_override: Mapping[int, PlayerStrategy] = field(default_factory=dict)
    player_bankroll: int = 10000 * 100

    # Input shortcuts
    auto_decline_insurance: bool = False
    auto_confirm_new_game: bool = False

    # Deviation checking
    check_deviations: bool = False
    check_top_n_deviations: int = 18

    disable_events: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.mode, GameMode):
            try:
                object.__setattr__(self, "mode", GameMode(self.mode))
            except ValueError as exc:
                raise ConfigurationError(f"Unknown game mode: {self.mode!r}") from exc
        if self.player_count < 1:
            raise ConfigurationError("player_count must be at least 1")
        if not 1 <= self.player_table_position <= self.player_count:
            raise ConfigurationError("player_table_position must be a seat at the table")
        for seat, strategy in self.player_strategy_override.items():
            if not 1 <= seat <= self.player_count:
                raise ConfigurationError(f"Strategy override for unknown seat {seat}")
            if strategy == PlayerStrategy.DEALER:
                raise ConfigurationError("Only the dealer can use the dealer strategy")
        if self.check_top_n_deviations < 0:
            raise ConfigurationError("check_top_n_deviations cannot be negative")

    @property
    def deviations_enabled(self) -> bool:
        """Deviation training always checks deviations."""
        return self.check_deviations or self.mode == GameMode.DEVIATION_TRAINING

    def strategy_for_seat(self, seat: int) -> PlayerStrategy:
        """Return the strategy for a 1-based seat."""
        if seat in self.player_strategy_override:
            return self.player_strategy_override[seat]
        if seat == self.player_table_position:
            return PlayerStrategy.USER_INPUT
        return PlayerStrategy.BASIC_STRATEGY
