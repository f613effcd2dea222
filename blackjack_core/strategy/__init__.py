"""Strategy tables, deviations and move checking."""

from blackjack_core.strategy.rules import RuleSet
from blackjack_core.strategy.moves import CorrectMove, HintResult, Move
from blackjack_core.strategy.basic import BasicStrategyChecker
from blackjack_core.strategy.deviations import FAB_4, ILLUSTRIOUS_18, HiLoDeviationChecker, IndexPlay

__all__ = [
    "RuleSet",
    "Move",
    "CorrectMove",
    "HintResult",
    "BasicStrategyChecker",
    "HiLoDeviationChecker",
    "IndexPlay",
    "ILLUSTRIOUS_18",
    "FAB_4",
]
