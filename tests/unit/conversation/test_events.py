"""Unit tests for the per-orchestrator event emitter."""

from __future__ import annotations

import pytest

from duologue.conversation.events import EventEmitter, EventName, StatusUpdate


class TestEventEmitter:
    """Tests for listener registration and dispatch."""

    def test_listeners_called_in_registration_order(self) -> None:
        """Every listener receives the payload, first registered first."""
        emitter = EventEmitter()
        seen: list[str] = []
        emitter.on(EventName.TURN, lambda payload: seen.append(f"first:{payload}"))
        emitter.on(EventName.TURN, lambda payload: seen.append(f"second:{payload}"))

        emitter.emit(EventName.TURN, 1)

        assert seen == ["first:1", "second:1"]

    def test_only_matching_event(self) -> None:
        """Listeners for other events are not called."""
        emitter = EventEmitter()
        seen: list[object] = []
        emitter.on(EventName.STATUS, seen.append)

        emitter.emit(EventName.TURN, "turn")

        assert seen == []

    def test_accepts_event_values(self) -> None:
        """Events can be named by their string value."""
        emitter = EventEmitter()
        seen: list[object] = []
        emitter.on("status", seen.append)

        update = StatusUpdate(side="provider_a", phase="thinking", message="...")
        emitter.emit(EventName.STATUS, update)

        assert seen == [update]

    def test_unknown_event_name_rejected(self) -> None:
        """Typos fail at registration."""
        with pytest.raises(ValueError):
            EventEmitter().on("turns", print)

    def test_off_removes_listener(self) -> None:
        emitter = EventEmitter()
        seen: list[object] = []
        emitter.on(EventName.CHUNK, seen.append)
        emitter.off(EventName.CHUNK, seen.append)

        emitter.emit(EventName.CHUNK, "text")

        assert seen == []
        assert emitter.listener_count(EventName.CHUNK) == 0

    def test_off_unknown_listener_is_noop(self) -> None:
        EventEmitter().off(EventName.CHUNK, print)

    def test_failing_listener_is_isolated(self) -> None:
        """A raising listener does not stop the others or the emitter."""
        emitter = EventEmitter()
        seen: list[object] = []

        def broken(payload: object) -> None:
            raise RuntimeError("listener bug")

        emitter.on(EventName.TURN, broken)
        emitter.on(EventName.TURN, seen.append)

        emitter.emit(EventName.TURN, "turn")

        assert seen == ["turn"]

    def test_emitters_are_independent(self) -> None:
        """There is no global bus."""
        first, second = EventEmitter(), EventEmitter()
        seen: list[object] = []
        first.on(EventName.TURN, seen.append)

        second.emit(EventName.TURN, "other")

        assert seen == []
