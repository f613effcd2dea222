"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field

from blackjack_core.settings import GameMode, GameSettings
from blackjack_core.strategy.rules import RuleSet


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class TableConfig:
    """Table rules, read from BLACKJACK_* variables."""

    deck_count: int = field(default_factory=lambda: int(os.getenv("BLACKJACK_DECK_COUNT", "2")))
    max_hands_allowed: int = field(default_factory=lambda: int(os.getenv("BLACKJACK_MAX_HANDS", "4")))
    min_bet: int = field(default_factory=lambda: int(os.getenv("BLACKJACK_MIN_BET", "1000")))
    max_bet: int = field(default_factory=lambda: int(os.getenv("BLACKJACK_MAX_BET", "100000")))
    blackjack_payout: str = field(default_factory=lambda: os.getenv("BLACKJACK_PAYOUT", "3:2"))
    hits_soft_17: bool = field(default_factory=lambda: _env_flag("BLACKJACK_HIT_SOFT_17", "true"))
    allow_late_surrender: bool = field(default_factory=lambda: _env_flag("BLACKJACK_LATE_SURRENDER"))
    allow_resplit_aces: bool = field(default_factory=lambda: _env_flag("BLACKJACK_RESPLIT_ACES"))

    def to_rules(self) -> RuleSet:
        return RuleSet(
            deck_count=self.deck_count,
            max_hands_allowed=self.max_hands_allowed,
            min_bet=self.min_bet,
            max_bet=self.max_bet,
            blackjack_payout=self.blackjack_payout,
            hits_soft_17=self.hits_soft_17,
            allow_late_surrender=self.allow_late_surrender,
            allow_resplit_aces=self.allow_resplit_aces,
        )


@dataclass(frozen=True)
class TrainerConfig:
    """Trainer configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("BLACKJACK_DEBUG"))
    mode: str = field(default_factory=lambda: os.getenv("BLACKJACK_MODE", GameMode.DEFAULT.value))
    player_count: int = field(default_factory=lambda: int(os.getenv("BLACKJACK_PLAYER_COUNT", "1")))
    player_table_position: int = field(default_factory=lambda: int(os.getenv("BLACKJACK_TABLE_POSITION", "1")))
    check_deviations: bool = field(default_factory=lambda: _env_flag("BLACKJACK_CHECK_DEVIATIONS"))

    table: TableConfig = field(default_factory=TableConfig)

    def to_settings(self, **overrides) -> GameSettings:
        """Build game settings; keyword arguments override individual fields."""
        options = {
            "rules": self.table.to_rules(),
            "mode": self.mode,
            "player_count": self.player_count,
            "player_table_position": self.player_table_position,
            "check_deviations": self.check_deviations,
        }
        options.update(overrides)
        return GameSettings(**options)
