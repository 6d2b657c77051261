"""Per-orchestrator event emitter.

Listeners are registered on one orchestrator instance and called
synchronously, in registration order, from emit(). Because emit() runs on the
same control flow that appends turns, a listener always observes events in
exactly the order they happened.

Listener errors are logged but never propagate: a broken UI listener must not
abort a conversation.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from duologue.core.logging import get_logger


if TYPE_CHECKING:
    from duologue.conversation.models import ProviderResponse


logger = get_logger(__name__)

Listener = Callable[[Any], None]


class EventName(str, Enum):
    """Events emitted by the orchestrator and their payloads."""

    TURN = "turn"              # ConversationTurn
    STATUS = "status"          # StatusUpdate
    CHUNK = "chunk"            # StreamChunk
    COMPLETE = "complete"      # ConversationStats
    ERROR = "error"            # Exception
    SUMMARY = "summary"        # SummaryNotice
    COMPACTED = "compacted"    # CompactionNotice


@dataclass(frozen=True)
class StatusUpdate:
    """Announces the side about to act and what it is doing."""

    side: str
    phase: str
    message: str


@dataclass(frozen=True)
class StreamChunk:
    """One streamed text fragment, forwarded verbatim."""

    side: str
    text: str
    conversation_handle: str | None = None


@dataclass(frozen=True)
class SummaryNotice:
    """Post-conversation summary. Not part of the turn log."""

    content: str
    response: ProviderResponse | None = None


@dataclass(frozen=True)
class CompactionNotice:
    """Older history was replaced by a summary."""

    summary: str
    original_count: int
    kept_count: int


class EventEmitter:
    """Registry of listeners keyed by EventName."""

    def __init__(self) -> None:
        self._listeners: dict[EventName, list[Listener]] = defaultdict(list)

    def on(self, event: EventName | str, listener: Listener) -> None:
        """Register a listener for an event. Can register multiple."""
        self._listeners[EventName(event)].append(listener)

    def off(self, event: EventName | str, listener: Listener) -> None:
        """Remove a previously registered listener. Unknown listeners are ignored."""
        listeners = self._listeners.get(EventName(event), [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: EventName | str) -> int:
        return len(self._listeners.get(EventName(event), []))

    def emit(self, event: EventName, payload: Any) -> None:
        """Call every listener for the event with the payload."""
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(payload)
            except Exception:
                logger.exception("Event listener failed", event_name=event.value)
