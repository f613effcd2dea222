"""Tests for the event emitter."""

from blackjack_core.game import EventEmitter, EventType, GameEvent


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_typed_and_catch_all_handlers(self):
        emitter = EventEmitter()
        shuffles, everything = [], []
        emitter.subscribe(shuffles.append, EventType.SHUFFLE)
        emitter.subscribe(everything.append)

        emitter.emit_new(EventType.SHUFFLE)
        emitter.emit_new(EventType.CHANGE, name="balance", value=100)

        assert [event.event_type for event in shuffles] == [EventType.SHUFFLE]
        assert [event.event_type for event in everything] == [EventType.SHUFFLE, EventType.CHANGE]
        assert everything[1].data == {"name": "balance", "value": 100}

    def test_unsubscribe(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append, EventType.SHUFFLE)
        emitter.unsubscribe(received.append, EventType.SHUFFLE)
        # Unknown handlers are ignored.
        emitter.unsubscribe(print, EventType.CHANGE)

        emitter.emit_new(EventType.SHUFFLE)

        assert received == []

    def test_disabled_emitter_drops_events(self):
        """Test a disabled emitter neither calls handlers nor keeps history."""
        emitter = EventEmitter(enabled=False)
        received = []
        emitter.subscribe(received.append)

        event = emitter.emit_new(EventType.RESET_STATE)

        assert isinstance(event, GameEvent)
        assert received == []
        assert emitter.history == []

    def test_history_is_bounded(self):
        emitter = EventEmitter(history_size=3)
        for value in range(5):
            emitter.emit_new(EventType.CHANGE, name="count", value=value)

        assert [event.data["value"] for event in emitter.history] == [2, 3, 4]

        emitter.clear_history()
        assert emitter.history == []
