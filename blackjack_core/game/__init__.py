"""Game engine and state management."""

from blackjack_core.game.events import EventEmitter, EventType, GameEvent
from blackjack_core.game.state import GameState, GameStep
from blackjack_core.game.engine import AsyncInputReader, DecisionRequest, Game, InputReader

__all__ = [
    "EventEmitter",
    "EventType",
    "GameEvent",
    "GameState",
    "GameStep",
    "AsyncInputReader",
    "DecisionRequest",
    "Game",
    "InputReader",
]
