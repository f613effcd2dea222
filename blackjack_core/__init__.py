"""Blackjack trainer rules engine - UI-agnostic."""

from blackjack_core.cards import Card, Deck, DiscardTray, Rank, Suit
from blackjack_core.hand import Hand
from blackjack_core.shoe import Shoe

__all__ = [
    "Card",
    "Deck",
    "DiscardTray",
    "Rank",
    "Suit",
    "Hand",
    "Shoe",
]
