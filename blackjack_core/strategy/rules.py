"""Blackjack table rules."""

from dataclasses import dataclass
from fractions import Fraction

from blackjack_core.errors import ConfigurationError


def parse_ratio(ratio: str) -> Fraction:
    """Parse a payout ratio such as '3:2' or '6:5'."""
    try:
        numerator, denominator = (int(part) for part in ratio.split(":"))
        return Fraction(numerator, denominator)
    except (ValueError, ZeroDivisionError) as exc:
        raise ConfigurationError(f"Invalid payout ratio: {ratio!r}") from exc


@dataclass(frozen=True)
class RuleSet:
    """
    Blackjack table rules configuration.

    Passed explicitly to every component that needs to know a table rule.
    Amounts are in cents.
    """

    # Deck configuration
    deck_count: int = 2

    # Split rules
    max_hands_allowed: int = 4
    allow_resplit_aces: bool = False

    # Betting limits
    min_bet: int = 10 * 100
    max_bet: int = 1000 * 100

    # Payouts
    blackjack_payout: str = "3:2"
    insurance_payout: str = "2:1"

    # Dealer rules
    hits_soft_17: bool = True  # H17 vs S17

    # Surrender rules
    allow_late_surrender: bool = False

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.deck_count < 1:
            raise ConfigurationError("deck_count must be at least 1")
        if self.max_hands_allowed < 1:
            raise ConfigurationError("max_hands_allowed must be at least 1")
        if self.min_bet < 1 or self.min_bet > self.max_bet:
            raise ConfigurationError("min_bet must be positive and not exceed max_bet")
        if self.blackjack_payout_ratio < 1:
            raise ConfigurationError("blackjack_payout must be at least 1:1")
        parse_ratio(self.insurance_payout)

    @property
    def blackjack_payout_ratio(self) -> Fraction:
        """Return the blackjack payout as a fraction (3:2 = 3/2)."""
        return parse_ratio(self.blackjack_payout)

    @property
    def insurance_payout_ratio(self) -> Fraction:
        """Return the insurance payout as a fraction."""
        return parse_ratio(self.insurance_payout)

    @classmethod
    def single_deck(cls) -> "RuleSet":
        """Single deck, dealer hits soft 17, no surrender."""
        return cls(deck_count=1, hits_soft_17=True, allow_late_surrender=False)

    @classmethod
    def six_deck_stands_soft_17(cls) -> "RuleSet":
        """Six deck shoe, dealer stands on soft 17, late surrender."""
        return cls(deck_count=6, hits_soft_17=False, allow_late_surrender=True)
