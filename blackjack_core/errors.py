"""Exceptions raised by the blackjack engine."""


class BlackjackError(Exception):
    """Base class for engine errors."""


class ConfigurationError(BlackjackError, ValueError):
    """Settings the engine cannot run with."""


class InvalidBetError(BlackjackError, ValueError):
    """A bet outside the table limits."""


class InsufficientBalanceError(BlackjackError):
    """A player cannot cover the stake they were asked to put up."""

    def __init__(self, balance, amount) -> None:
        super().__init__(f"Insufficient player balance: {balance} < {amount}")
        self.balance = balance
        self.amount = amount


class ShoeExhaustedError(BlackjackError, IndexError):
    """Drawing from a shoe that has no cards left."""
