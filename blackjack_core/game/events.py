"""Game events for the event system."""

from collections import defaultdict, deque
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of game events."""

    # A tracked piece of state changed; data holds `name` and `value`
    CHANGE = auto()

    # Shoe cards were collected and reshuffled
    SHUFFLE = auto()

    # A move or hand-result record is ready to be stored
    CREATE_RECORD = auto()

    # A hand was settled
    HAND_WINNER = auto()

    # The game was rebuilt from its settings
    RESET_STATE = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are the only channel from the engine to observers such as a UI
    or a record store.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Delivers game events to subscribed handlers.

    Handlers subscribe to one event type, or to every event with
    `event_type=None`; typed handlers run first. While `enabled` is False,
    events are dropped without reaching handlers or the history.
    """

    def __init__(self, enabled: bool = True, history_size: int | None = 1000) -> None:
        self.enabled = enabled
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        # The most recent events, oldest first; None keeps everything.
        self._recent: deque[GameEvent] = deque(maxlen=history_size)

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Remove a handler; unknown handlers are ignored."""
        with suppress(ValueError):
            self._handlers[event_type].remove(handler)

    def emit(self, event: GameEvent) -> None:
        if not self.enabled:
            return

        self._recent.append(event)
        # Copy so a handler may unsubscribe itself mid-delivery.
        for handler in [*self._handlers[event.event_type], *self._handlers[None]]:
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data, emit it and return it."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        return list(self._recent)

    def clear_history(self) -> None:
        self._recent.clear()
